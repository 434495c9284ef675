from complexity_engine.analysis import complexity_class as cc
from complexity_engine.analysis.models import FeatureSet
from complexity_engine.analysis.time_rules import (
    Candidate,
    confidence,
    derive_time,
    select_dominant,
)


def _loops(single=1, nested=0, depth=1):
    features = FeatureSet()
    features.loops.single_loops = single
    features.loops.nested_loops = nested
    features.loops.max_nesting_depth = depth
    return features


def test_no_features_is_constant():
    assert derive_time(FeatureSet()).complexity == cc.O_1


def test_single_loop_fallback():
    estimate = derive_time(_loops())
    assert estimate.complexity == cc.O_N
    assert estimate.source == "single_loop"


def test_nested_depths():
    assert derive_time(_loops(2, 1, 2)).complexity == cc.O_N2
    assert derive_time(_loops(3, 1, 3)).complexity == cc.O_N3


def test_independent_bounds_are_symbolic():
    features = _loops(2, 1, 2)
    features.loops.bounds = {"n", "m"}
    assert derive_time(features).complexity == "O(m * n)"


def test_logarithmic_growth():
    features = _loops()
    features.loops.growth_type = "logarithmic"
    assert derive_time(features).complexity == cc.O_LOG_N

    nested = _loops(2, 1, 2)
    nested.loops.growth_type = "logarithmic"
    assert derive_time(nested).complexity == cc.O_N_LOG_N


def test_sorting_inside_loop():
    features = _loops()
    features.algorithms.sorting_inside_loop = True
    assert derive_time(features).complexity == cc.O_N2_LOG_N


def test_sieve():
    features = _loops(2, 1, 2)
    features.algorithms.sieve = True
    assert derive_time(features).complexity == cc.O_N_LOG_LOG_N


def test_heap_with_loop():
    features = _loops()
    features.data_structures.heap = True
    assert derive_time(features).complexity == cc.O_N_LOG_N


def test_binary_search_in_loop():
    features = _loops(2, 0, 1)
    features.loops.for_loops = 1
    features.loops.while_loops = 1
    features.algorithms.binary_search = True
    assert derive_time(features).complexity == cc.O_N_LOG_N


def test_priority_source_beats_generic():
    nested = Candidate(cc.O_N2, "nested", "nested_loops")
    sorting = Candidate(cc.O_N_LOG_N, "sorting", "sorting")
    assert select_dominant([nested, sorting]) is sorting


def test_highest_rank_wins_without_priority():
    nested = Candidate(cc.O_N2, "nested", "nested_loops")
    single = Candidate(cc.O_N, "single", "single_loop")
    assert select_dominant([single, nested]) is nested


def test_explanation_mentions_dominated_factors():
    features = _loops()
    features.algorithms.sorting = True
    features.data_structures.hash_map = True
    estimate = derive_time(features)
    assert estimate.complexity == cc.O_N_LOG_N
    assert "dominated by sorting" in estimate.explanation


def test_confidence():
    assert confidence(FeatureSet()) == 1.0

    searching = FeatureSet()
    searching.algorithms.binary_search = True
    assert confidence(searching) == 0.95

    divide = FeatureSet()
    divide.algorithms.recursion = True
    divide.metrics.recursion_args = "divide"
    assert confidence(divide) == 0.85

    deep = _loops(4, 1, 4)
    assert confidence(deep) == 0.8


def test_search_call_inside_loop():
    features = _loops()
    features.loops.for_loops = 1
    features.algorithms.binary_search = True
    features.algorithms.search_inside_loop = True
    estimate = derive_time(features)
    assert estimate.complexity == cc.O_N_LOG_N
    assert estimate.source == "binary_search_in_loop"


def test_linear_pass_kept_beside_other_candidates():
    features = _loops()
    features.algorithms.recursion = True
    features.algorithms.gcd = True
    estimate = derive_time(features)
    assert ("single_loop", cc.O_N) in estimate.candidates
    assert estimate.complexity == cc.O_LOG_N


def test_early_exit_drops_linear_pass():
    features = _loops()
    features.loops.early_exit = True
    estimate = derive_time(features)
    assert estimate.complexity == cc.O_1
    assert estimate.source == "early_exit"
