from complexity_engine.analysis import complexity_class as cc
from complexity_engine.analysis.models import ComplexityResult, FeatureSet
from complexity_engine.analysis.safety import verify


def _result(time_complexity):
    return ComplexityResult(
        time_complexity=time_complexity,
        time_complexity_reason="From the rule engine.",
        space_complexity=cc.O_1,
        space_complexity_reason="Constant.",
    )


def test_sorting_is_never_exponential():
    features = FeatureSet()
    features.algorithms.sorting = True
    result = verify(_result(cc.O_2_N), features)
    assert result.time_complexity == cc.O_N_LOG_N
    assert len(result.corrections_applied) == 1
    correction = result.corrections_applied[0]
    assert correction.old_value == cc.O_2_N
    assert correction.new_value == cc.O_N_LOG_N
    assert result.time_complexity_reason.startswith("Correction: Sorting")


def test_exponential_without_backtracking_structure():
    result = verify(_result(cc.O_2_N), FeatureSet())
    assert result.time_complexity == cc.O_N2


def test_valid_backtracking_is_kept():
    features = FeatureSet()
    features.algorithms.backtracking = True
    result = verify(_result(cc.O_2_N), features)
    assert result.time_complexity == cc.O_2_N
    assert result.corrections_applied == []


def test_two_pointers_are_linear():
    features = FeatureSet()
    features.pointers.two_pointers = True
    features.pointers.left_right = True
    result = verify(_result(cc.O_N2), features)
    assert result.time_complexity == cc.O_N


def test_two_pointers_after_sorting_are_linear():
    features = FeatureSet()
    features.pointers.two_pointers = True
    features.pointers.left_right = True
    features.algorithms.sorting = True
    result = verify(_result(cc.O_N_LOG_N), features)
    assert result.time_complexity == cc.O_N
    assert result.corrections_applied[0].reason.startswith("Correction: Two Pointers")


def test_sliding_window_is_always_linear():
    features = FeatureSet()
    features.pointers.sliding_window = True
    features.algorithms.sorting = True
    result = verify(_result(cc.O_N2), features)
    assert result.time_complexity == cc.O_N
    assert result.corrections_applied[0].reason.startswith("Correction: Sliding Window")


def test_backward_two_pointers_not_clamped():
    features = FeatureSet()
    features.pointers.two_pointers = True
    assert verify(_result(cc.O_N2), features).time_complexity == cc.O_N2


def test_graph_traversal():
    features = FeatureSet()
    features.algorithms.dfs = True
    features.data_structures.graph = True
    assert verify(_result(cc.O_N_FACT), features).time_complexity == cc.O_V_E


def test_idempotent():
    features = FeatureSet()
    features.algorithms.dp = True
    features.metrics.dp_dimensions = 2
    once = verify(_result(cc.O_2_N), features)
    twice = verify(once, features)
    assert once.time_complexity == cc.O_N2
    assert twice == once
