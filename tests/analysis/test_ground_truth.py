import json

import pytest

from complexity_engine.analysis.ground_truth import (
    apply_ground_truth_corrections,
    compute_fingerprint,
    entry_as_triple,
    entry_summary,
    load_database,
    lookup,
    normalize_title,
    parse_entry,
    validate_against_ground_truth,
)
from complexity_engine.analysis.models import Approach, ApproachTriple
from complexity_engine.core.exceptions import GroundTruthError

PAIR_INDICES = """
def pair_indices(nums, target):
    seen = {}
    for i, x in enumerate(nums):
        if target - x in seen:
            return [seen[target - x], i]
        seen[x] = i
    return []
"""


def test_normalize_title():
    assert normalize_title("Two-Sum") == "twosum"
    assert normalize_title("  Binary Search ") == "binarysearch"
    assert normalize_title(None) == ""


def test_bundled_database():
    database = load_database()
    assert len(database) == 113
    assert database.get("twosum").optimal.tc == "O(n)"
    assert load_database() is database


def test_find_by_title():
    database = load_database()
    assert database.find_by_title("Two Sum").id == "twosum"
    assert database.find_by_title("2sum").id == "twosum"
    assert database.find_by_title("Binary Search").id == "binarysearch"
    assert database.find_by_title("Zyxwv Qqq") is None
    assert database.find_by_title("") is None


def test_lookup_by_title():
    match = lookup(title="Two Sum")
    assert match.entry.id == "twosum"
    assert match.confidence == 1.0
    assert match.matched_by == "title"


def test_lookup_by_fingerprint():
    assert compute_fingerprint(PAIR_INDICES, "python") == {"hash_map", "complement", "loop"}
    match = lookup(code=PAIR_INDICES, language="python")
    assert match.entry.id == "twosum"
    assert match.confidence == 0.95
    assert match.matched_by == "fingerprint"


def test_lookup_without_match():
    assert lookup(title="Zyxwv Qqq") is None
    assert lookup(code="def f(x):\n    return x\n", language="python") is None


def test_validate_against_ground_truth():
    claimed = ApproachTriple(
        brute_force=Approach("O(n^2)", "O(1)"),
        better=Approach("O(n log n)", "O(1)"),
        optimal=Approach("O(n log n)", "O(n)"),
    )
    validation = validate_against_ground_truth("Two Sum", claimed)
    assert validation.found
    assert validation.needs_correction
    fields = {(c.approach, c.field) for c in validation.corrections}
    assert fields == {("optimal", "time_complexity"), ("better", "existence")}

    corrected = apply_ground_truth_corrections(claimed, validation.entry)
    assert corrected.better is None
    assert corrected.optimal.tc == "O(n)"
    assert corrected.optimal.sc == "O(n)"
    assert corrected.note.startswith("No intermediate approach exists")


def test_validate_unknown_problem():
    assert not validate_against_ground_truth("Zyxwv Qqq", ApproachTriple()).found


def test_entry_as_triple_generates_reasons():
    triple = entry_as_triple(load_database().get("binarysearch"))
    assert triple.brute_force.tc == "O(n)"
    assert triple.optimal.tc == "O(log n)"
    assert triple.optimal.tc_reason == "The Binary Search approach determines the time complexity of O(log n)."


def test_entry_summary():
    summary = entry_summary(load_database().get("twosum"))
    assert summary["id"] == "twosum"
    assert summary["better"] is None
    assert summary["optimal"]["tc"] == "O(n)"
    assert not summary["has_optimization_ladder"]


def test_parse_entry_errors():
    with pytest.raises(GroundTruthError):
        parse_entry("not an object")
    with pytest.raises(GroundTruthError):
        parse_entry({"id": "noopt", "patterns": []})
    with pytest.raises(GroundTruthError):
        parse_entry({"id": "badtc", "optimal": {"sc": "O(1)"}})
    with pytest.raises(GroundTruthError):
        parse_entry({"id": "badpatterns", "patterns": "two sum", "optimal": {"tc": "O(1)", "sc": "O(1)"}})


def test_extra_dataset_overrides_and_extends(tmp_path):
    path = tmp_path / "extra.json"
    path.write_text(
        json.dumps(
            {
                "problems": [
                    {"id": "twosum", "patterns": ["two sum"], "optimal": {"tc": "O(1)", "sc": "O(1)"}},
                    {
                        "id": "widgetcount",
                        "patterns": ["widget count"],
                        "optimal": {"tc": "O(n)", "sc": "O(1)", "name": "Single Pass"},
                    },
                ]
            }
        )
    )
    database = load_database(str(path))
    assert len(database) == 114
    assert database.find_by_title("Two Sum").optimal.tc == "O(1)"
    assert database.find_by_title("Widget Count").id == "widgetcount"
    # the bundled table is untouched
    assert load_database().get("twosum").optimal.tc == "O(n)"


def test_invalid_extra_dataset(tmp_path):
    path = tmp_path / "extra.json"
    path.write_text(json.dumps({"entries": []}))
    with pytest.raises(GroundTruthError):
        load_database(str(path))
