from complexity_engine.analysis import validate_triple
from complexity_engine.analysis.consensus import (
    BRUTE_IS_OPTIMAL,
    build_consensus,
    ensure_proper_progression,
    validate_better_approach,
)
from complexity_engine.analysis.models import (
    Approach,
    ApproachTriple,
    CodeTriple,
    Correction,
    ValidationLayer,
)

PAIRS = """
def has_duplicate(nums):
    for i in range(len(nums)):
        for j in range(i + 1, len(nums)):
            if nums[i] == nums[j]:
                return True
    return False
"""

SEARCH = """
def find(nums, target):
    lo, hi = 0, len(nums) - 1
    while lo <= hi:
        mid = (lo + hi) // 2
        if nums[mid] == target:
            return mid
        if nums[mid] < target:
            lo = mid + 1
        else:
            hi = mid - 1
    return -1
"""


def _triple(brute=None, better=None, optimal=None):
    def approach(pair):
        return Approach(*pair) if pair else None

    return ApproachTriple(approach(brute), approach(better), approach(optimal))


# Cross-approach rules


def test_better_identical_to_optimal_is_removed():
    solution, corrections = validate_better_approach(
        _triple(("O(n²)", "O(1)"), ("O(n)", "O(1)"), ("O(n)", "O(1)"))
    )
    assert solution.better is None
    assert corrections[0].approach == "better"
    assert corrections[0].field == "existence"
    assert corrections[0].reason.startswith("Better and optimal have identical complexity")


def test_better_removed_when_brute_equals_optimal():
    solution, corrections = validate_better_approach(
        _triple(("O(n)", "O(1)"), ("O(n log n)", "O(1)"), ("O(n)", "O(1)"))
    )
    assert solution.better is None
    assert corrections[0].reason == "Brute and optimal have same complexity"


def test_better_must_be_strictly_between():
    solution, corrections = validate_better_approach(
        _triple(("O(n²)", "O(1)"), ("O(n³)", "O(1)"), ("O(n)", "O(1)"))
    )
    assert solution.better is None
    assert corrections[0].reason == "Not a valid intermediate complexity"


def test_valid_ladder_untouched():
    triple = _triple(("O(n²)", "O(1)"), ("O(n log n)", "O(1)"), ("O(n)", "O(n)"))
    solution, corrections = validate_better_approach(triple)
    assert solution == triple
    assert corrections == []


def test_brute_only_becomes_optimal():
    solution, corrections = ensure_proper_progression(_triple(("O(n)", "O(1)")))
    assert solution.optimal == solution.brute_force
    assert solution.note == BRUTE_IS_OPTIMAL
    assert corrections == [Correction("optimal", "existence", None, "O(n)", BRUTE_IS_OPTIMAL)]


def test_inverted_order_is_swapped():
    solution, corrections = ensure_proper_progression(
        _triple(("O(n)", "O(1)"), None, ("O(n²)", "O(1)"))
    )
    assert solution.brute_force.tc == "O(n²)"
    assert solution.optimal.tc == "O(n)"
    assert corrections[0].approach == "both"
    assert corrections[0].field == "order"


# Layer selection


def test_weaker_layer_is_skipped():
    claimed = _triple(("O(n²)", "O(1)"), None, ("O(n)", "O(1)"))
    engine = ValidationLayer(
        "complexityEngine",
        2,
        0.9,
        claimed.with_approach("optimal", Approach("O(n log n)", "O(1)")),
        [Correction("optimal", "time_complexity", "O(n)", "O(n log n)", "engine")],
    )
    pattern = ValidationLayer(
        "patternDetection",
        3,
        0.85,
        claimed.with_approach("optimal", Approach("O(log n)", "O(1)")),
        [Correction("optimal", "time_complexity", "O(n)", "O(log n)", "pattern")],
    )
    result = build_consensus([pattern, engine], claimed)
    assert result.source == "complexityEngine"
    assert result.confidence == 0.9
    assert result.solution.optimal.tc == "O(n log n)"
    assert [c.reason for c in result.corrections] == ["engine"]


def test_corrected_approach_not_touched_by_later_layer():
    claimed = _triple(("O(n²)", "O(1)"), None, ("O(n)", "O(1)"))
    engine = ValidationLayer(
        "complexityEngine",
        2,
        0.9,
        claimed.with_approach("optimal", Approach("O(n log n)", "O(1)")),
        [Correction("optimal", "time_complexity", "O(n)", "O(n log n)", "engine")],
    )
    pattern = ValidationLayer(
        "patternDetection",
        3,
        0.95,
        claimed.with_approach("optimal", Approach("O(log n)", "O(1)")).with_approach(
            "brute_force", Approach("O(n³)", "O(1)")
        ),
        [
            Correction("optimal", "time_complexity", "O(n)", "O(log n)", "pattern"),
            Correction("brute_force", "time_complexity", "O(n²)", "O(n³)", "pattern"),
        ],
    )
    result = build_consensus([engine, pattern], claimed)
    assert result.source == "patternDetection"
    assert result.solution.optimal.tc == "O(n log n)"
    assert result.solution.brute_force.tc == "O(n³)"
    assert [c.approach for c in result.corrections] == ["optimal", "brute_force"]


# End to end


def test_claim_only():
    result = validate_triple(
        None,
        CodeTriple(),
        _triple(("O(n²)", "O(1)"), ("O(n)", "O(1)"), ("O(n)", "O(1)")),
    )
    assert result.validated
    assert result.source == "claim"
    assert result.confidence == 0.7
    assert result.solution.better is None
    assert len(result.corrections) == 1


def test_ground_truth_replaces_solution():
    claimed = _triple(("O(n^2)", "O(1)"), ("O(n log n)", "O(1)"), ("O(n log n)", "O(n)"))
    result = validate_triple("Two Sum", CodeTriple(), claimed)
    assert result.source == "groundTruth"
    assert result.confidence == 1.0
    assert result.solution.better is None
    assert result.solution.optimal.tc == "O(n)"
    assert result.solution.optimal.sc == "O(n)"
    assert result.solution.note.startswith("No intermediate approach")
    assert {c.approach for c in result.corrections} == {"optimal", "better"}


def test_ground_truth_agreement_keeps_claim():
    claimed = _triple(("O(n²)", "O(1)"), None, ("O(n)", "O(n)"))
    result = validate_triple("Two Sum", CodeTriple(), claimed)
    assert result.source == "groundTruth"
    assert result.solution == claimed
    assert result.corrections == []


def test_engine_corrects_claim_from_code():
    claimed = _triple(("O(n²)", "O(1)"), None, ("O(n)", "O(1)"))
    result = validate_triple(None, CodeTriple(optimal=PAIRS), claimed, language="python")
    assert result.source == "complexityEngine"
    assert result.confidence == 0.9
    assert result.solution.optimal.tc == "O(n²)"
    assert result.corrections[0].approach == "optimal"
    assert result.corrections[0].new_value == "O(n²)"


def test_pattern_layer_respects_engine_corrections():
    claimed = _triple(("O(n²)", "O(1)"), None, ("O(n)", "O(1)"))
    result = validate_triple(None, CodeTriple(optimal=SEARCH), claimed, language="python")
    # pattern detection is more confident but optimal was already corrected
    assert result.source == "patternDetection"
    assert result.confidence == 0.97
    assert result.solution.optimal.tc == "O(log n)"
    assert [c.field for c in result.corrections] == ["time_complexity"]
