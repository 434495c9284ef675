"""
Entry points of the complexity engine.

``analyze`` runs the single-snippet pipeline:

    hazards -> features -> time/space rules -> safety -> ground truth

``validate_against_claim`` reconciles an external claim with that verdict
and ``validate_triple`` hands a brute/better/optimal triple to the
consensus builder.
"""

from typing import List, Optional, Tuple

from complexity_engine.analysis import complexity_class as cc
from complexity_engine.analysis import consensus
from complexity_engine.analysis.features import extract
from complexity_engine.analysis.ground_truth import entry_as_triple, load_database, lookup
from complexity_engine.analysis.hazards import match_hazard
from complexity_engine.analysis.languages import resolve_language
from complexity_engine.analysis.models import (
    Approach,
    ApproachTriple,
    ClaimValidation,
    CodeSample,
    CodeTriple,
    ComplexityResult,
    ConsensusResult,
    Correction,
    FeatureSet,
    GroundTruthMatch,
    SpaceMetrics,
)
from complexity_engine.analysis.safety import verify
from complexity_engine.analysis.space_rules import derive_space
from complexity_engine.analysis.time_rules import confidence, derive_time
from complexity_engine.core.config import EngineConfig, get_config
from complexity_engine.core.constants import (
    HAZARD_SOURCE_PREFIX,
    SOURCE_CLAIM,
    SOURCE_DEFAULT,
    SOURCE_GROUND_TRUTH,
    SOURCE_RULE_ENGINE,
)
from complexity_engine.core.logging import log_context, log_debug, log_info, logged_operation

DEFAULT_CONFIDENCE = 0.5

# Patterns whose rule-engine verdict is trusted over a disagreeing claim
DETERMINISTIC_PATTERNS = frozenset(
    {"sorting", "sliding_window", "two_pointers", "nested_loops", "binary_search", "heap"}
)


def _default_result() -> ComplexityResult:
    return ComplexityResult(
        time_complexity=cc.O_N,
        time_complexity_reason=(
            "No recognizable structure was detected; assuming a single linear pass over the input."
        ),
        space_complexity=cc.O_1,
        space_complexity_reason="No auxiliary storage was detected.",
        space_metrics=SpaceMetrics(peak=cc.O_1, total=cc.O_1),
        pattern="constant",
        confidence=DEFAULT_CONFIDENCE,
        source=SOURCE_DEFAULT,
    )


def _rule_engine(features: FeatureSet, config: EngineConfig) -> ComplexityResult:
    time = derive_time(features)
    space = derive_space(features)
    log_debug(f"Dominant time source: {time.source} ({time.complexity})", layer="ruleEngine")
    result = ComplexityResult(
        time_complexity=time.complexity,
        time_complexity_reason=time.explanation,
        space_complexity=space.complexity,
        space_complexity_reason=space.explanation,
        space_metrics=space.metrics,
        pattern=features.metrics.dominant_pattern,
        confidence=confidence(features),
        source=SOURCE_RULE_ENGINE,
    )
    if config.analysis.safety_enabled:
        result = verify(result, features)
    return result


def _ground_truth_result(match: GroundTruthMatch, engine: ComplexityResult) -> ComplexityResult:
    """
    Replace the engine verdict with the entry's approach that the code
    implements: the one whose time matches the engine, else the optimal one.
    """
    triple = entry_as_triple(match.entry)
    name = next(
        (
            candidate
            for candidate in triple.present()
            if cc.same_complexity(triple.get(candidate).tc, engine.time_complexity)
        ),
        "optimal",
    )
    truth = triple.get(name)
    reason = f"Ground truth: {truth.algorithm or truth.name or match.entry.id}"

    corrections: List[Correction] = list(engine.corrections_applied)
    if not cc.same_complexity(truth.tc, engine.time_complexity):
        corrections.append(Correction(name, "time_complexity", engine.time_complexity, truth.tc, reason))
    if not cc.same_complexity(truth.sc, engine.space_complexity):
        corrections.append(Correction(name, "space_complexity", engine.space_complexity, truth.sc, reason))
    for correction in corrections[len(engine.corrections_applied):]:
        log_info(
            f"Ground truth override {correction.field}: {correction.old_value} -> {correction.new_value}",
            layer="groundTruth",
        )

    return ComplexityResult(
        time_complexity=truth.tc,
        time_complexity_reason=truth.tc_reason,
        space_complexity=truth.sc,
        space_complexity_reason=truth.sc_reason,
        space_metrics=SpaceMetrics(peak=truth.sc, total=truth.sc),
        pattern=engine.pattern,
        confidence=match.confidence,
        source=SOURCE_GROUND_TRUTH,
        corrections_applied=corrections,
        approach=name,
        note=match.entry.note or None,
    )


def _run(
    sample: CodeSample, problem_title: Optional[str], config: EngineConfig
) -> Tuple[ComplexityResult, Optional[FeatureSet]]:
    """The pipeline; features are None when a hazard short-circuited it."""
    features = None
    result = match_hazard(sample.text) if config.analysis.hazards_enabled else None

    if result is None:
        features = extract(sample.text, sample.language, config.analysis.amortized_feedback)
        if features.has_any_feature():
            result = _rule_engine(features, config)
        else:
            log_debug("No features detected, using the conservative default", layer="ruleEngine")
            result = _default_result()

    if config.ground_truth.enabled:
        settings = config.ground_truth
        match = lookup(
            # a hazard hit is only overridden by an explicit title match
            code=sample.text if features is not None else None,
            title=problem_title,
            language=sample.language,
            database=load_database(settings.extra_dataset),
            fingerprint_threshold=settings.fingerprint_threshold,
            fingerprint_confidence=settings.fingerprint_confidence,
        )
        if match is not None:
            result = _ground_truth_result(match, result)

    log_debug(f"Verdict {result.time_complexity} / {result.space_complexity} from {result.source}")
    return result, features


@logged_operation("analyze")
def analyze(
    code: str,
    language: str = "javascript",
    problem_title: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> ComplexityResult:
    """
    Analyze one code snippet and return exactly one time and one space verdict.

    Never raises for any code input; unrecognizable or empty code degrades
    to O(n) time and O(1) space.
    """
    config = config or get_config()
    sample = CodeSample(text=code or "", language=resolve_language(language))
    with log_context(language=sample.language, problem=problem_title):
        result, _ = _run(sample, problem_title, config)
    return result


def _critical_errors(
    result: ComplexityResult, features: FeatureSet, claimed_time: str, claimed_space: str
) -> List[str]:
    claim_tc, claim_sc = cc.normalize(claimed_time), cc.normalize(claimed_space)
    errors = []
    if result.pattern == "sliding_window" and "n²" in claim_tc:
        errors.append("Sliding window incorrectly marked as O(n²)")
    if result.pattern == "two_pointers" and "n²" in claim_tc:
        errors.append("Two pointers incorrectly marked as O(n²)")
    if features.algorithms.sorting and "log" not in claim_tc:
        errors.append("Sorting operation ignored in complexity")

    ds, usage = features.data_structures, features.space_usage
    uses_space = (
        ds.stack
        or ds.queue
        or features.algorithms.recursion
        or usage.aux_arrays > 0
        or usage.aux_maps > 0
        or features.algorithms.string_concat_loop
    )
    if claim_sc in ("o(1)", "o(0)") and uses_space and not cc.same_complexity(result.space_complexity, cc.O_1):
        errors.append("Auxiliary space usage ignored (Stack/Queue/Recursion/Map detected)")
    return errors


def _claim_result(claimed: Approach, engine: ComplexityResult) -> ComplexityResult:
    return ComplexityResult(
        time_complexity=claimed.tc,
        time_complexity_reason=claimed.tc_reason or "As claimed.",
        space_complexity=claimed.sc,
        space_complexity_reason=claimed.sc_reason or "As claimed.",
        space_metrics=SpaceMetrics(peak=claimed.sc, total=claimed.sc),
        pattern=engine.pattern,
        confidence=engine.confidence,
        source=SOURCE_CLAIM,
    )


def _overridden(result: ComplexityResult, claimed: Approach, reason: str) -> ComplexityResult:
    for field, old, new in (
        ("time_complexity", claimed.tc, result.time_complexity),
        ("space_complexity", claimed.sc, result.space_complexity),
    ):
        if not cc.same_complexity(old, new):
            log_info(f"Claim override {field}: {old} -> {new} ({reason})", layer="claim")
            result = result.with_correction(Correction(result.approach, field, old, new, reason))
    return result


@logged_operation("validate_against_claim")
def validate_against_claim(
    code: str,
    language: str = "javascript",
    claimed_time: Optional[str] = None,
    claimed_space: Optional[str] = None,
    config: Optional[EngineConfig] = None,
    problem_title: Optional[str] = None,
) -> ClaimValidation:
    """
    Reconcile an external complexity claim with the engine's own analysis.

    The engine wins when the claim contains a critical error, when the
    detected pattern is deterministic and the values differ, or when the
    verdict comes from a hazard recognizer or ground truth.
    """
    config = config or get_config()
    sample = CodeSample(text=code or "", language=resolve_language(language))
    claimed = Approach(tc=claimed_time or "", sc=claimed_space or "")

    with log_context(language=sample.language, problem=problem_title):
        result, features = _run(sample, problem_title, config)
        if features is None:
            features = extract(sample.text, sample.language, config.analysis.amortized_feedback)

        time_match = cc.same_complexity(claimed.tc, result.time_complexity)
        space_match = cc.same_complexity(claimed.sc, result.space_complexity)
        errors = _critical_errors(result, features, claimed.tc, claimed.sc)

        authoritative = result.source == SOURCE_GROUND_TRUTH or result.source.startswith(HAZARD_SOURCE_PREFIX)
        differs = not (time_match and space_match)
        should_override = bool(errors) or (
            differs and (result.pattern in DETERMINISTIC_PATTERNS or authoritative)
        )

        if should_override:
            reason = errors[0] if errors else f"Engine analysis ({result.pattern})"
            corrected = _overridden(result, claimed, reason)
        else:
            corrected = _claim_result(claimed, result)

    return ClaimValidation(
        valid=time_match and space_match and not errors,
        time_match=time_match,
        space_match=space_match,
        critical_errors=errors,
        claimed=claimed,
        corrected_result=corrected,
        should_override=should_override,
    )


@logged_operation("validate_triple")
def validate_triple(
    problem_title: Optional[str],
    code: CodeTriple,
    claimed: ApproachTriple,
    language: str = "javascript",
    config: Optional[EngineConfig] = None,
) -> ConsensusResult:
    """Validate a brute/better/optimal triple through every consensus layer."""
    config = config or get_config()
    with log_context(language=resolve_language(language), problem=problem_title):
        return consensus.validate(
            problem_title,
            code,
            claimed,
            language=resolve_language(language),
            config=config,
            claim_validator=validate_against_claim,
        )
