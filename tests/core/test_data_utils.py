import json

from complexity_engine.core.data_utils import load_json, read_source, save_json


def test_load_json_missing_file(tmp_path):
    assert load_json(str(tmp_path / "missing.json")) == {}
    assert load_json(str(tmp_path / "missing.json"), default=[]) == []


def test_load_json_invalid_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_json(str(path), default={"fallback": True}) == {"fallback": True}


def test_save_and_load_json(tmp_path):
    path = tmp_path / "result.json"
    data = {"time_complexity": "O(n²)", "confidence": 0.95}
    save_json(str(path), data)

    assert load_json(str(path)) == data
    # non-ascii labels are written as-is
    assert "O(n²)" in path.read_text(encoding="utf-8")
    assert json.loads(path.read_text(encoding="utf-8")) == data


def test_read_source_replaces_bad_bytes(tmp_path):
    path = tmp_path / "snippet.py"
    path.write_bytes(b"x = 1\n\xff\n")
    text = read_source(str(path))
    assert text.startswith("x = 1")
    assert "�" in text
