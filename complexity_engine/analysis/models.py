"""
Data model shared by every stage of the analysis pipeline.
"""

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, List, Optional, Set, Tuple

from complexity_engine.core.constants import APPROACHES
from complexity_engine.core.exceptions import ValidationError


@dataclass(frozen=True)
class CodeSample:
    """Immutable analysis input."""

    text: str
    language: str


@dataclass
class LoopFeatures:
    single_loops: int = 0
    nested_loops: int = 0
    max_nesting_depth: int = 0
    growth_type: str = "linear"  # linear, logarithmic or sqrt
    bounds: Set[str] = field(default_factory=set)
    early_exit: bool = False
    for_loops: int = 0
    while_loops: int = 0


@dataclass
class PointerFeatures:
    two_pointers: bool = False
    sliding_window: bool = False
    left_right: bool = False
    slow_fast: bool = False


@dataclass
class DataStructureFeatures:
    hash_map: bool = False
    hash_set: bool = False
    array: bool = False
    heap: bool = False
    stack: bool = False
    queue: bool = False
    tree: bool = False
    graph: bool = False
    linked_list: bool = False
    trie: bool = False
    union_find: bool = False
    string_builder: bool = False


@dataclass
class AlgorithmFeatures:
    sorting: bool = False
    binary_search: bool = False
    recursion: bool = False
    memoization: bool = False
    dp: bool = False
    backtracking: bool = False
    bfs: bool = False
    dfs: bool = False
    divide_conquer: bool = False
    monotonic_stack: bool = False
    sieve: bool = False
    gcd: bool = False
    is_permutation: bool = False
    accumulates_results: bool = False
    sorting_inside_loop: bool = False
    search_inside_loop: bool = False
    recursion_inside_loop: bool = False
    string_concat_loop: bool = False
    has_recursive_call: bool = False


@dataclass
class SpaceUsage:
    aux_arrays: int = 0
    aux_maps: int = 0
    in_place: bool = True
    hidden_allocations: bool = False


@dataclass
class Metrics:
    recursion_branching: int = 0
    dp_dimensions: int = 0
    recursion_args: str = "linear"  # linear, divide or step
    is_amortized: bool = False
    dominant_pattern: str = "constant"
    amortized_pattern: Optional[str] = None
    line_count: int = 0


@dataclass
class FeatureSet:
    """Structural features extracted from one code sample."""

    loops: LoopFeatures = field(default_factory=LoopFeatures)
    pointers: PointerFeatures = field(default_factory=PointerFeatures)
    data_structures: DataStructureFeatures = field(
        default_factory=DataStructureFeatures
    )
    algorithms: AlgorithmFeatures = field(default_factory=AlgorithmFeatures)
    space_usage: SpaceUsage = field(default_factory=SpaceUsage)
    metrics: Metrics = field(default_factory=Metrics)

    def has_any_feature(self) -> bool:
        """True when at least one detector fired."""
        groups = (self.pointers, self.data_structures, self.algorithms)
        if self.loops.single_loops or self.loops.early_exit:
            return True
        if any(value for group in groups for value in asdict(group).values()):
            return True
        usage = self.space_usage
        return bool(usage.aux_arrays or usage.aux_maps or usage.hidden_allocations)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["loops"]["bounds"] = sorted(self.loops.bounds)
        return data


@dataclass(frozen=True)
class SpaceMetrics:
    peak: str = "O(1)"
    total: str = "O(1)"


@dataclass(frozen=True)
class Correction:
    """One overwritten value and why it was overwritten."""

    approach: Optional[str]
    field: str
    old_value: Any
    new_value: Any
    reason: str


@dataclass
class TimeEstimate:
    complexity: str
    explanation: str
    source: str = "constant"
    candidates: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class SpaceEstimate:
    complexity: str
    explanation: str
    metrics: SpaceMetrics = field(default_factory=SpaceMetrics)


@dataclass
class ComplexityResult:
    """Exactly one time and one space verdict for a code sample."""

    time_complexity: str
    time_complexity_reason: str
    space_complexity: str
    space_complexity_reason: str
    space_metrics: SpaceMetrics = field(default_factory=SpaceMetrics)
    pattern: str = "constant"
    confidence: float = 1.0
    source: str = "ruleEngine"
    corrections_applied: List[Correction] = field(default_factory=list)
    approach: Optional[str] = None
    note: Optional[str] = None

    def with_correction(self, correction: Correction, **changes) -> "ComplexityResult":
        """Copy of this result with changes applied and the correction recorded."""
        return replace(
            self,
            corrections_applied=[*self.corrections_applied, correction],
            **changes,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AmortizedResult:
    amortized: bool
    pattern: str
    time_complexity: str
    space_complexity: str
    reason: str


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class Approach:
    """One brute/better/optimal approach with its complexities."""

    tc: str
    sc: str
    name: Optional[str] = None
    algorithm: Optional[str] = None
    tc_reason: Optional[str] = None
    sc_reason: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Approach":
        if not isinstance(data, dict):
            raise ValidationError(f"Approach must be an object, got {type(data).__name__}")
        tc = _pick(data, "tc", "time_complexity", "timeComplexity", "time")
        sc = _pick(data, "sc", "space_complexity", "spaceComplexity", "space")
        if not tc or not sc:
            raise ValidationError("Approach needs both a time and a space complexity")
        return cls(
            tc=str(tc),
            sc=str(sc),
            name=_pick(data, "name"),
            algorithm=_pick(data, "algorithm", "algorithm_name", "algorithmName"),
            tc_reason=_pick(data, "tc_reason", "time_complexity_reason", "timeComplexityReason"),
            sc_reason=_pick(data, "sc_reason", "space_complexity_reason", "spaceComplexityReason"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


_APPROACH_KEYS = {
    "brute_force": ("brute_force", "bruteForce", "brute"),
    "better": ("better",),
    "optimal": ("optimal",),
}


@dataclass
class ApproachTriple:
    brute_force: Optional[Approach] = None
    better: Optional[Approach] = None
    optimal: Optional[Approach] = None
    note: Optional[str] = None

    def get(self, name: str) -> Optional[Approach]:
        return getattr(self, name)

    def with_approach(self, name: str, approach: Optional[Approach]) -> "ApproachTriple":
        if name not in APPROACHES:
            raise ValidationError(f"Unknown approach '{name}'")
        return replace(self, **{name: approach})

    def present(self) -> List[str]:
        return [name for name in APPROACHES if self.get(name) is not None]

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ApproachTriple":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValidationError("Triple must be an object")
        values = {}
        for name, keys in _APPROACH_KEYS.items():
            raw = _pick(data, *keys)
            values[name] = Approach.from_dict(raw) if raw is not None else None
        return cls(note=_pick(data, "note"), **values)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            name: (self.get(name).to_dict() if self.get(name) else None)
            for name in APPROACHES
        }
        if self.note:
            data["note"] = self.note
        return data


@dataclass(frozen=True)
class CodeTriple:
    """Source code for each approach of a triple, any of which may be absent."""

    brute_force: Optional[str] = None
    better: Optional[str] = None
    optimal: Optional[str] = None

    def get(self, name: str) -> Optional[str]:
        return getattr(self, name)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CodeTriple":
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValidationError("Code triple must be an object")
        return cls(**{name: _pick(data, *keys) for name, keys in _APPROACH_KEYS.items()})


@dataclass(frozen=True)
class GroundTruthEntry:
    id: str
    patterns: Tuple[str, ...]
    fingerprint: Tuple[str, ...]
    brute_force: Optional[Approach]
    better: Optional[Approach]
    optimal: Optional[Approach]
    has_optimization_ladder: bool = True
    note: str = ""

    def get(self, name: str) -> Optional[Approach]:
        return getattr(self, name)


@dataclass
class GroundTruthMatch:
    entry: GroundTruthEntry
    confidence: float
    matched_by: str  # title or fingerprint


@dataclass
class GroundTruthValidation:
    found: bool
    entry: Optional[GroundTruthEntry] = None
    corrections: List[Correction] = field(default_factory=list)
    needs_correction: bool = False


@dataclass
class ClaimValidation:
    valid: bool
    time_match: bool
    space_match: bool
    critical_errors: List[str]
    claimed: Approach
    corrected_result: ComplexityResult
    should_override: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PatternDetection:
    name: str
    confidence: float
    time_complexity: str
    space_complexity: str
    reason: str


@dataclass
class PatternInference:
    time_complexity: str
    space_complexity: str
    confidence: float
    patterns: List[str]
    reason: str


@dataclass
class ValidationLayer:
    name: str
    priority: int
    confidence: float
    candidate: ApproachTriple
    corrections: List[Correction] = field(default_factory=list)


@dataclass
class ConsensusResult:
    validated: bool
    source: str
    confidence: float
    solution: ApproachTriple
    corrections: List[Correction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "validated": self.validated,
            "source": self.source,
            "confidence": self.confidence,
            "solution": self.solution.to_dict(),
            "corrections": [asdict(c) for c in self.corrections],
        }
