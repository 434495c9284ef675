import json

import pytest
from typer.testing import CliRunner

from complexity_engine.cli.app import app
from complexity_engine.core.logging import reset_logger

runner = CliRunner()

SUM = """
def total(nums):
    s = 0
    for x in nums:
        s += x
    return s
"""

PAIRS = """
def has_duplicate(nums):
    for i in range(len(nums)):
        for j in range(i + 1, len(nums)):
            if nums[i] == nums[j]:
                return True
    return False
"""


@pytest.fixture(autouse=True)
def fresh_logger():
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def sum_file(tmp_path):
    path = tmp_path / "total.py"
    path.write_text(SUM)
    return path


def test_analyze_json(sum_file):
    result = runner.invoke(app, ["analyze", str(sum_file), "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["time_complexity"] == "O(n)"
    assert data["space_complexity"] == "O(1)"
    assert data["source"] == "ruleEngine"


def test_analyze_table(sum_file):
    result = runner.invoke(app, ["analyze", str(sum_file), "-l", "py"])
    assert result.exit_code == 0
    assert "O(n)" in result.stdout


def test_analyze_saves_output(sum_file, tmp_path):
    out = tmp_path / "result.json"
    result = runner.invoke(app, ["analyze", str(sum_file), "-o", str(out)])
    assert result.exit_code == 0
    assert json.loads(out.read_text())["time_complexity"] == "O(n)"


def test_analyze_missing_file(tmp_path):
    result = runner.invoke(app, ["analyze", str(tmp_path / "nope.py")])
    assert result.exit_code == 1


def test_analyze_unknown_language(sum_file):
    result = runner.invoke(app, ["analyze", str(sum_file), "-l", "cobol"])
    assert result.exit_code == 1


def test_validate_exit_codes(tmp_path, sum_file):
    ok = runner.invoke(app, ["validate", str(sum_file), "--time", "O(n)", "--space", "O(1)"])
    assert ok.exit_code == 0

    pairs = tmp_path / "pairs.py"
    pairs.write_text(PAIRS)
    bad = runner.invoke(app, ["validate", str(pairs), "--time", "O(n)", "--space", "O(1)", "--json"])
    assert bad.exit_code == 1
    data = json.loads(bad.stdout)
    assert data["should_override"]
    assert data["corrected_result"]["time_complexity"] == "O(n²)"


def test_triple(tmp_path):
    path = tmp_path / "triple.json"
    path.write_text(
        json.dumps(
            {
                "title": "Two Sum",
                "claimed": {
                    "brute_force": {"tc": "O(n^2)", "sc": "O(1)"},
                    "better": {"tc": "O(n log n)", "sc": "O(1)"},
                    "optimal": {"tc": "O(n log n)", "sc": "O(n)"},
                },
            }
        )
    )
    result = runner.invoke(app, ["triple", str(path), "--json"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["source"] == "groundTruth"
    assert data["solution"]["better"] is None
    assert data["solution"]["optimal"]["tc"] == "O(n)"


def test_triple_needs_claim(tmp_path):
    path = tmp_path / "triple.json"
    path.write_text(json.dumps({"code": {}}))
    result = runner.invoke(app, ["triple", str(path)])
    assert result.exit_code == 1


def test_lookup():
    found = runner.invoke(app, ["lookup", "Two Sum", "--json"])
    assert found.exit_code == 0
    assert json.loads(found.stdout)["id"] == "twosum"

    missing = runner.invoke(app, ["lookup", "Zyxwv Qqq"])
    assert missing.exit_code == 1


def test_languages():
    result = runner.invoke(app, ["languages"])
    assert result.exit_code == 0
    assert "python" in result.stdout
    assert "javascript" in result.stdout
