"""
Consensus builder: reconciles ground truth, the engine, the pattern
detector and an external claim for a brute/better/optimal triple.

Layers are visited in priority order. A layer is applied only when its
confidence beats every layer applied before it, and it never touches an
approach a stronger layer already corrected. Afterwards the cross-approach
rules run: ``better`` must sit strictly between the other two and
``optimal`` must not rank worse than ``brute_force``.
"""

from dataclasses import replace
from typing import Callable, List, Optional, Set, Tuple

from complexity_engine.analysis import complexity_class as cc
from complexity_engine.analysis.ground_truth import (
    apply_ground_truth_corrections,
    load_database,
    validate_against_ground_truth,
)
from complexity_engine.analysis.models import (
    Approach,
    ApproachTriple,
    ClaimValidation,
    CodeTriple,
    ConsensusResult,
    Correction,
    ValidationLayer,
)
from complexity_engine.analysis.patterns import analyze_patterns
from complexity_engine.core.config import EngineConfig, get_config
from complexity_engine.core.constants import (
    APPROACHES,
    LAYER_CLAIM,
    LAYER_ENGINE,
    LAYER_GROUND_TRUTH,
    LAYER_PATTERN,
    LAYER_PRIORITIES,
)
from complexity_engine.core.logging import log_debug, log_info

BRUTE_IS_OPTIMAL = "Brute force is already optimal for this problem"

ClaimValidator = Callable[..., ClaimValidation]


def _changed(layer: ValidationLayer) -> Set[str]:
    return {c.approach for c in layer.corrections if c.approach in APPROACHES}


# Layers


def ground_truth_layer(
    problem_title: Optional[str], claimed: ApproachTriple, config: EngineConfig
) -> Optional[ValidationLayer]:
    if not problem_title or not config.ground_truth.enabled:
        return None
    validation = validate_against_ground_truth(
        problem_title, claimed, load_database(config.ground_truth.extra_dataset)
    )
    if not validation.found:
        log_debug("Problem not found in ground truth", layer=LAYER_GROUND_TRUTH)
        return None
    candidate = claimed
    if validation.needs_correction:
        candidate = apply_ground_truth_corrections(claimed, validation.entry)
    return ValidationLayer(
        name=LAYER_GROUND_TRUTH,
        priority=LAYER_PRIORITIES[LAYER_GROUND_TRUTH],
        confidence=config.consensus.ground_truth_confidence,
        candidate=candidate,
        corrections=validation.corrections,
    )


def engine_layer(
    code: CodeTriple,
    claimed: ApproachTriple,
    language: str,
    config: EngineConfig,
    claim_validator: ClaimValidator,
) -> Optional[ValidationLayer]:
    """Run claim validation per approach; present only if something changed."""
    candidate = claimed
    corrections: List[Correction] = []
    for name in claimed.present():
        source = code.get(name)
        if not source:
            continue
        approach = claimed.get(name)
        validation = claim_validator(source, language, approach.tc, approach.sc, config=config)
        if not validation.should_override:
            continue
        result = validation.corrected_result
        candidate = candidate.with_approach(
            name,
            Approach(
                tc=result.time_complexity,
                sc=result.space_complexity,
                name=approach.name,
                algorithm=approach.algorithm,
                tc_reason=result.time_complexity_reason,
                sc_reason=result.space_complexity_reason,
            ),
        )
        corrections.extend(
            Correction(name, c.field, c.old_value, c.new_value, c.reason) for c in result.corrections_applied
        )
    if not corrections:
        log_debug("Engine agrees with the claim", layer=LAYER_ENGINE)
        return None
    return ValidationLayer(
        name=LAYER_ENGINE,
        priority=LAYER_PRIORITIES[LAYER_ENGINE],
        confidence=config.consensus.engine_confidence,
        candidate=candidate,
        corrections=corrections,
    )


def pattern_layer(
    code: CodeTriple, claimed: ApproachTriple, language: str, config: EngineConfig
) -> Optional[ValidationLayer]:
    """Pattern inferences for brute force and optimal code."""
    inferences = {
        name: analyze_patterns(code.get(name), language)
        for name in ("brute_force", "optimal")
        if code.get(name)
    }
    if not inferences:
        return None

    candidate = claimed
    corrections: List[Correction] = []
    for name, inference in inferences.items():
        approach = claimed.get(name)
        if approach is None or inference.confidence <= config.consensus.pattern_threshold:
            continue
        if cc.same_complexity(approach.tc, inference.time_complexity):
            continue
        reason = f"Pattern detection: {inference.reason}"
        corrections.append(Correction(name, "time_complexity", approach.tc, inference.time_complexity, reason))
        if not cc.same_complexity(approach.sc, inference.space_complexity):
            corrections.append(
                Correction(name, "space_complexity", approach.sc, inference.space_complexity, reason)
            )
        candidate = candidate.with_approach(
            name,
            Approach(
                tc=inference.time_complexity,
                sc=inference.space_complexity,
                name=approach.name,
                algorithm=approach.algorithm,
                tc_reason=reason,
                sc_reason=reason,
            ),
        )

    return ValidationLayer(
        name=LAYER_PATTERN,
        priority=LAYER_PRIORITIES[LAYER_PATTERN],
        confidence=max(i.confidence for i in inferences.values()),
        candidate=candidate,
        corrections=corrections,
    )


def claim_layer(claimed: ApproachTriple, config: EngineConfig) -> ValidationLayer:
    return ValidationLayer(
        name=LAYER_CLAIM,
        priority=LAYER_PRIORITIES[LAYER_CLAIM],
        confidence=config.consensus.claim_confidence,
        candidate=claimed,
    )


# Cross-approach rules


def _null_better(solution: ApproachTriple, reason: str) -> Tuple[ApproachTriple, Correction]:
    log_info(f"Removing better approach: {reason}", layer="consensus")
    return solution.with_approach("better", None), Correction("better", "existence", "exists", None, reason)


def _identical(a: Approach, b: Approach) -> bool:
    return cc.same_complexity(a.tc, b.tc) and cc.same_complexity(a.sc, b.sc)


def validate_better_approach(solution: ApproachTriple) -> Tuple[ApproachTriple, List[Correction]]:
    """Null ``better`` unless it is a meaningful intermediate approach."""
    brute, better, optimal = solution.brute_force, solution.better, solution.optimal
    if better is None or optimal is None:
        return solution, []

    if brute is not None and _identical(brute, optimal):
        solution, correction = _null_better(solution, "Brute and optimal have same complexity")
        return solution, [correction]

    if _identical(better, optimal):
        solution, correction = _null_better(
            solution, "Better and optimal have identical complexity; no meaningful intermediate approach"
        )
        return solution, [correction]

    if brute is not None and all(cc.is_known(a.tc) for a in (brute, better, optimal)):
        if not cc.rank(optimal.tc) < cc.rank(better.tc) < cc.rank(brute.tc):
            solution, correction = _null_better(solution, "Not a valid intermediate complexity")
            return solution, [correction]

    return solution, []


def ensure_proper_progression(solution: ApproachTriple) -> Tuple[ApproachTriple, List[Correction]]:
    """Fill a missing optimal from brute force and keep optimal no worse than brute."""
    brute, optimal = solution.brute_force, solution.optimal

    if brute is not None and optimal is None:
        solution = replace(solution, optimal=brute, note=BRUTE_IS_OPTIMAL)
        return solution, [Correction("optimal", "existence", None, brute.tc, BRUTE_IS_OPTIMAL)]

    if brute is None or optimal is None:
        return solution, []

    if cc.is_known(brute.tc) and cc.is_known(optimal.tc) and cc.rank(optimal.tc) > cc.rank(brute.tc):
        log_info(f"Swapping brute force ({brute.tc}) and optimal ({optimal.tc})", layer="consensus")
        swapped = solution.with_approach("brute_force", optimal).with_approach("optimal", brute)
        return swapped, [
            Correction(
                "both",
                "order",
                "brute worse than optimal",
                "corrected order",
                "Optimal must be better than or equal to brute",
            )
        ]
    return solution, []


# Consensus


def build_consensus(layers: List[ValidationLayer], claimed: ApproachTriple) -> ConsensusResult:
    solution = claimed
    corrections: List[Correction] = []
    corrected: Set[str] = set()
    highest = 0.0
    source = LAYER_CLAIM

    for layer in sorted(layers, key=lambda l: l.priority):
        if layer.confidence <= highest:
            log_debug(f"Skipping layer {layer.name} ({layer.confidence:.2f})", layer="consensus")
            continue
        highest, source = layer.confidence, layer.name

        if layer.name == LAYER_GROUND_TRUTH:
            solution = layer.candidate
            corrections.extend(layer.corrections)
            corrected.update(APPROACHES)
            continue

        for name in sorted(_changed(layer) - corrected):
            solution = solution.with_approach(name, layer.candidate.get(name))
        corrections.extend(c for c in layer.corrections if c.approach not in corrected)
        corrected.update(_changed(layer))

    for rule in (validate_better_approach, ensure_proper_progression):
        solution, found = rule(solution)
        corrections.extend(found)

    log_info(f"Consensus from {source} at {highest:.2f} with {len(corrections)} corrections", layer="consensus")
    return ConsensusResult(
        validated=True,
        source=source,
        confidence=highest,
        solution=solution,
        corrections=corrections,
    )


def validate(
    problem_title: Optional[str],
    code: CodeTriple,
    claimed: ApproachTriple,
    language: str = "javascript",
    config: Optional[EngineConfig] = None,
    claim_validator: Optional[ClaimValidator] = None,
) -> ConsensusResult:
    """Collect every available layer for a triple and build the consensus."""
    config = config or get_config()
    layers = [
        ground_truth_layer(problem_title, claimed, config),
        engine_layer(code, claimed, language, config, claim_validator) if claim_validator else None,
        pattern_layer(code, claimed, language, config),
        claim_layer(claimed, config),
    ]
    available = [layer for layer in layers if layer is not None]
    for layer in available:
        log_debug(f"Layer {layer.name} available at {layer.confidence:.2f}", layer="consensus")
    return build_consensus(available, claimed)
