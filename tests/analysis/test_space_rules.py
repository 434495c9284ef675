from complexity_engine.analysis import complexity_class as cc
from complexity_engine.analysis.models import FeatureSet
from complexity_engine.analysis.space_rules import derive_space


def test_constant_space():
    estimate = derive_space(FeatureSet())
    assert estimate.complexity == cc.O_1
    assert estimate.metrics.peak == cc.O_1


def test_hash_map():
    features = FeatureSet()
    features.data_structures.hash_map = True
    assert derive_space(features).complexity == cc.O_N


def test_two_dimensional_dp():
    features = FeatureSet()
    features.algorithms.dp = True
    features.metrics.dp_dimensions = 2
    assert derive_space(features).complexity == cc.O_N2


def test_divide_and_conquer_stack():
    features = FeatureSet()
    features.algorithms.recursion = True
    features.metrics.recursion_args = "divide"
    assert derive_space(features).complexity == cc.O_LOG_N


def test_string_concatenation_total_exceeds_peak():
    features = FeatureSet()
    features.algorithms.string_concat_loop = True
    estimate = derive_space(features)
    assert estimate.complexity == cc.O_N
    assert estimate.metrics.total == cc.O_N2


def test_window_over_hashed_keys():
    features = FeatureSet()
    features.pointers.sliding_window = True
    features.data_structures.hash_set = True
    features.space_usage.aux_arrays = 1
    estimate = derive_space(features)
    assert estimate.complexity == "O(k)"
    assert "distinct keys" in estimate.explanation


def test_enumeration_reports_output_size():
    features = FeatureSet()
    features.algorithms.accumulates_results = True
    features.algorithms.is_permutation = True
    estimate = derive_space(features)
    assert estimate.complexity == "O(n · n!)"
    assert estimate.metrics.peak == cc.O_N
