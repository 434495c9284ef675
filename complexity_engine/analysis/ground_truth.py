"""
Ground truth database: curated per-problem complexities, the highest
authority in the pipeline.

The bundled dataset is validated into frozen entries on first use and is
read-only afterwards. ``load_database`` caches one instance per extra
dataset path, so every caller shares the same immutable table.
"""

import re
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from complexity_engine.analysis import complexity_class as cc
from complexity_engine.analysis import detection
from complexity_engine.analysis.languages import get_profile
from complexity_engine.analysis.models import (
    Approach,
    ApproachTriple,
    Correction,
    GroundTruthEntry,
    GroundTruthMatch,
    GroundTruthValidation,
)
from complexity_engine.core.config import (
    FINGERPRINT_CONFIDENCE,
    FINGERPRINT_THRESHOLD,
    GROUND_TRUTH_CONFIDENCE,
)
from complexity_engine.core.constants import GROUND_TRUTH_FILENAME
from complexity_engine.core.data_utils import load_json
from complexity_engine.core.exceptions import GroundTruthError, ValidationError
from complexity_engine.core.logging import log_debug, log_info

DATA_DIR = Path(__file__).parent / "data"
BUNDLED_DATASET = DATA_DIR / GROUND_TRUTH_FILENAME

# Salient tokens a code fingerprint is built from
FINGERPRINT_TOKENS = {
    "hash_map": r"\{\s*\}|\bdict\s*\(|new\s+map\b|hashmap|unordered_map|defaultdict|\bcounter\s*\(",
    "hash_set": r"\bset\s*\(|new\s+set\b|hashset|unordered_set",
    "membership": r"\bif\s+\w+\s+in\s+\w+|\.has\s*\(|\.containskey\s*\(|\.contains\s*\(|\.count\s*\(",
    "complement": r"\btarget\s*-\s*\w+",
    "sort": r"\.sort\s*\(|\bsorted\s*\(|arrays\.sort|\bsort\s*\(",
    "two_pointers": r"\bleft\b[^\n]*\bright\b|\blo\b[^\n]*\bhi\b",
    "binary_search": r"\bmid\s*=",
    "memo": r"memo|lru_cache|@cache\b",
    "dp_table": r"\bdp\s*[\[=]",
    "heap": r"heapq|priorityqueue|priority_queue|heappush",
    "stack": r"\bstack\b",
    "queue": r"\bqueue\b|\bdeque\b|popleft",
    "voting": r"\bcandidate\b|\bvotes?\b",
    "counter_reset": r"\bcount\w*\s*===?\s*0",
    "running_max": r"\bmax\s*\([^()\n]*\+",
    "reset_to_zero": r"\b\w*(?:cur|sum)\w*\s*=\s*0\b",
    "fibonacci_step": r"(\w+)\s*,\s*(\w+)\s*=\s*\2\s*,\s*\1\s*\+\s*\2|dp\[i\s*-\s*1\]\s*\+\s*dp\[i\s*-\s*2\]",
    "xor": r"\w\s*\^\s*\w|\^=",
    "xor_fold": r"\^=",
}


def normalize_title(title: Optional[str]) -> str:
    """Lower-case alphanumeric key of a problem title."""
    if not title:
        return ""
    return re.sub(r"[^a-z0-9]", "", re.sub(r"[-_\s]+", "", title.lower().strip()))


# Loading and validation


def _approach(raw: Any, entry_id: str, field: str) -> Optional[Approach]:
    if raw is None:
        return None
    try:
        return Approach.from_dict(raw)
    except ValidationError as e:
        raise GroundTruthError(f"Ground truth entry '{entry_id}', field '{field}': {e}") from e


def _strings(raw: Any, entry_id: str, field: str) -> Tuple[str, ...]:
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise GroundTruthError(
            f"Ground truth entry '{entry_id}', field '{field}': expected a list of strings"
        )
    return tuple(raw)


def parse_entry(raw: Any, index: int = 0) -> GroundTruthEntry:
    """Validate one raw dataset record into a GroundTruthEntry."""
    if not isinstance(raw, dict):
        raise GroundTruthError(f"Ground truth entry #{index} must be an object")
    entry_id = raw.get("id")
    if not isinstance(entry_id, str) or not entry_id:
        raise GroundTruthError(f"Ground truth entry #{index}, field 'id': missing or empty")

    optimal = _approach(raw.get("optimal"), entry_id, "optimal")
    if optimal is None:
        raise GroundTruthError(f"Ground truth entry '{entry_id}', field 'optimal': required")

    ladder = raw.get("has_optimization_ladder", True)
    if not isinstance(ladder, bool):
        raise GroundTruthError(
            f"Ground truth entry '{entry_id}', field 'has_optimization_ladder': expected a boolean"
        )
    note = raw.get("note", "")
    if not isinstance(note, str):
        raise GroundTruthError(f"Ground truth entry '{entry_id}', field 'note': expected a string")

    return GroundTruthEntry(
        id=entry_id,
        patterns=_strings(raw.get("patterns", []), entry_id, "patterns"),
        fingerprint=_strings(raw.get("fingerprint", []), entry_id, "fingerprint"),
        brute_force=_approach(raw.get("brute_force"), entry_id, "brute_force"),
        better=_approach(raw.get("better"), entry_id, "better"),
        optimal=optimal,
        has_optimization_ladder=ladder,
        note=note,
    )


def parse_dataset(data: Any, source: str = "dataset") -> List[GroundTruthEntry]:
    if not isinstance(data, dict) or not isinstance(data.get("problems"), list):
        raise GroundTruthError(f"Ground truth {source} has no 'problems' list")
    return [parse_entry(raw, index) for index, raw in enumerate(data["problems"])]


class GroundTruthDatabase:
    """Read-only table of ground truth entries."""

    def __init__(self, entries: Iterable[GroundTruthEntry]):
        self._entries = tuple(entries)
        self._by_id = MappingProxyType({entry.id: entry for entry in self._entries})

    @property
    def entries(self) -> Tuple[GroundTruthEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: str) -> Optional[GroundTruthEntry]:
        return self._by_id.get(entry_id)

    def find_by_title(self, title: Optional[str]) -> Optional[GroundTruthEntry]:
        """Exact key match first, then pattern containment either way."""
        key = normalize_title(title)
        if not key:
            return None
        if key in self._by_id:
            return self._by_id[key]
        for entry in self._entries:
            for pattern in entry.patterns:
                normalized = normalize_title(pattern)
                if normalized and (normalized in key or key in normalized):
                    return entry
        return None

    def find_by_fingerprint(
        self, tokens: Set[str], threshold: float = FINGERPRINT_THRESHOLD
    ) -> Optional[Tuple[GroundTruthEntry, float]]:
        """Entry with the highest overlap at or above threshold."""
        if not tokens:
            return None
        best = None
        for entry in self._entries:
            if not entry.fingerprint:
                continue
            expected = set(entry.fingerprint)
            score = len(tokens & expected) / max(len(tokens), len(expected))
            if score >= threshold and (best is None or score > best[1]):
                best = (entry, score)
        return best


def _merge(bundled: List[GroundTruthEntry], extra: List[GroundTruthEntry]) -> List[GroundTruthEntry]:
    overrides = {entry.id: entry for entry in extra}
    merged = [overrides.pop(entry.id, entry) for entry in bundled]
    # entries only the extra dataset knows come first so their patterns win
    new = [entry for entry in extra if entry.id in overrides]
    return new + merged


@lru_cache(maxsize=None)
def load_database(extra_dataset: Optional[str] = None) -> GroundTruthDatabase:
    """Load, validate and cache the ground truth table."""
    entries = parse_dataset(load_json(str(BUNDLED_DATASET)), source=str(BUNDLED_DATASET))
    if extra_dataset:
        extra = parse_dataset(load_json(extra_dataset), source=extra_dataset)
        entries = _merge(entries, extra)
    log_debug(f"Loaded {len(entries)} ground truth entries", layer="groundTruth")
    return GroundTruthDatabase(entries)


# Lookup


def compute_fingerprint(code: str, language: str = "javascript") -> Set[str]:
    """Salient structural tokens of a code sample."""
    if not code or not code.strip():
        return set()
    scan = detection.build_scan(code, get_profile(language))
    text = scan.code
    tokens = {
        name
        for name, pattern in FINGERPRINT_TOKENS.items()
        if detection.isolated(f"fingerprint.{name}", detection.search, pattern, text, re.IGNORECASE)
    }
    depth = max((block.depth for block in scan.blocks), default=0)
    if depth >= 2:
        tokens.add("nested_loops")
    elif depth == 1:
        tokens.add("loop")
    if any(detection.calls(name, body) for name, body in scan.functions.items()):
        tokens.add("recursion")
    return tokens


def lookup(
    code: Optional[str] = None,
    title: Optional[str] = None,
    language: str = "javascript",
    database: Optional[GroundTruthDatabase] = None,
    fingerprint_threshold: float = FINGERPRINT_THRESHOLD,
    fingerprint_confidence: float = FINGERPRINT_CONFIDENCE,
) -> Optional[GroundTruthMatch]:
    """Match by title (confidence 1.0), then by code fingerprint."""
    database = database if database is not None else load_database()

    entry = database.find_by_title(title)
    if entry is not None:
        log_info(f"Ground truth title match: {entry.id}", layer="groundTruth")
        return GroundTruthMatch(entry=entry, confidence=GROUND_TRUTH_CONFIDENCE, matched_by="title")

    if code:
        found = database.find_by_fingerprint(compute_fingerprint(code, language), fingerprint_threshold)
        if found is not None:
            entry, score = found
            log_info(
                f"Ground truth fingerprint match: {entry.id} (overlap {score:.2f})",
                layer="groundTruth",
            )
            return GroundTruthMatch(entry=entry, confidence=fingerprint_confidence, matched_by="fingerprint")
    return None


def _ladderless(entry: GroundTruthEntry) -> bool:
    return entry.better is None or not entry.has_optimization_ladder


def validate_against_ground_truth(
    title: str,
    claimed: ApproachTriple,
    database: Optional[GroundTruthDatabase] = None,
) -> GroundTruthValidation:
    """Compare a claimed triple with the ground truth for a problem title."""
    database = database if database is not None else load_database()
    entry = database.find_by_title(title)
    if entry is None:
        return GroundTruthValidation(found=False)

    corrections: List[Correction] = []
    for name in ("brute_force", "optimal"):
        truth, claim = entry.get(name), claimed.get(name)
        if truth and claim and not cc.same_complexity(truth.tc, claim.tc):
            corrections.append(
                Correction(name, "time_complexity", claim.tc, truth.tc, f"Ground truth: {truth.algorithm or truth.name}")
            )

    if _ladderless(entry) and claimed.better is not None:
        reason = (
            "This problem does not have an optimization ladder."
            if not entry.has_optimization_ladder
            else entry.note or "No intermediate approach exists for this problem"
        )
        corrections.append(Correction("better", "existence", "exists", "should be null", reason))
    elif entry.better is not None and entry.has_optimization_ladder and claimed.better is None:
        corrections.append(
            Correction(
                "better",
                "existence",
                "null",
                "should exist",
                f"Missing better approach: {entry.better.algorithm or entry.better.name}",
            )
        )

    return GroundTruthValidation(
        found=True,
        entry=entry,
        corrections=corrections,
        needs_correction=bool(corrections),
    )


def _reason(approach: Approach, kind: str) -> str:
    custom = approach.tc_reason if kind == "time" else approach.sc_reason
    if custom:
        return custom
    value = approach.tc if kind == "time" else approach.sc
    return f"The {approach.name} approach determines the {kind} complexity of {value}."


def _from_entry(truth: Approach, claimed: Optional[Approach]) -> Approach:
    return Approach(
        tc=truth.tc,
        sc=truth.sc,
        name=truth.name,
        algorithm=truth.algorithm or (claimed.algorithm if claimed else None),
        tc_reason=_reason(truth, "time"),
        sc_reason=_reason(truth, "space"),
    )


def apply_ground_truth_corrections(triple: ApproachTriple, entry: GroundTruthEntry) -> ApproachTriple:
    """Overwrite a triple with the entry's values; ladder-less entries lose ``better``."""
    corrected = triple
    if entry.brute_force:
        corrected = corrected.with_approach(
            "brute_force", _from_entry(entry.brute_force, triple.brute_force)
        )
    if _ladderless(entry):
        corrected = corrected.with_approach("better", None)
    elif triple.better is not None:
        corrected = corrected.with_approach("better", _from_entry(entry.better, triple.better))
    if triple.optimal is not None:
        corrected = corrected.with_approach("optimal", _from_entry(entry.optimal, triple.optimal))
    if entry.note:
        corrected = ApproachTriple(
            brute_force=corrected.brute_force,
            better=corrected.better,
            optimal=corrected.optimal,
            note=entry.note,
        )
    return corrected


def entry_as_triple(entry: GroundTruthEntry) -> ApproachTriple:
    """The full triple an entry declares, with generated reasons."""
    return apply_ground_truth_corrections(
        ApproachTriple(
            brute_force=entry.brute_force,
            better=entry.better,
            optimal=entry.optimal,
        ),
        entry,
    )


def entry_summary(entry: GroundTruthEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "patterns": list(entry.patterns),
        "has_optimization_ladder": entry.has_optimization_ladder,
        "note": entry.note,
        **entry_as_triple(entry).to_dict(),
    }
