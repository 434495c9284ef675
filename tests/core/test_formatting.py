from complexity_engine.core.formatting import (
    format_confidence,
    format_pattern,
    format_source,
    format_time,
)


def test_format_time_ns():
    assert format_time(0.0000001) == "100.00 ns"


def test_format_time_us():
    assert format_time(0.0001) == "100.00 μs"


def test_format_time_ms():
    assert format_time(0.1) == "100.00 ms"


def test_format_time_s():
    assert format_time(2) == "2.000000 s"


def test_format_confidence():
    assert format_confidence(0.95) == "95%"
    assert format_confidence(1.0) == "100%"
    assert format_confidence(0.5) == "50%"


def test_format_source_hazard():
    assert format_source("hazard:merge_sort") == "Known algorithm (merge sort)"


def test_format_source_known_and_unknown():
    assert format_source("groundTruth") == "Ground truth"
    assert format_source("ruleEngine") == "Rule engine"
    assert format_source("somethingElse") == "somethingElse"


def test_format_pattern():
    assert format_pattern("two_pointers") == "Two Pointers"
    assert format_pattern("") == "-"
