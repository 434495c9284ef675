import json

from complexity_engine.core.config import (
    EngineConfig,
    GroundTruthConfig,
    get_config,
    load_config_file,
    set_config,
)


def test_defaults():
    config = EngineConfig()
    assert config.analysis.default_language == "python"
    assert config.analysis.hazards_enabled
    assert config.consensus.ground_truth_confidence == 1.0
    assert config.consensus.engine_confidence == 0.9
    assert config.consensus.claim_confidence == 0.7
    assert config.ground_truth.enabled
    assert config.ground_truth.fingerprint_threshold == 0.5


def test_from_dict_flat_keys():
    config = EngineConfig.from_dict(
        {
            "default_language": "go",
            "hazards_enabled": False,
            "ground_truth_path": "extra.json",
            "engine_confidence": 0.8,
            "debug": True,
        }
    )
    assert config.analysis.default_language == "go"
    assert not config.analysis.hazards_enabled
    assert config.ground_truth.extra_dataset == "extra.json"
    assert config.consensus.engine_confidence == 0.8
    assert config.debug


def test_from_dict_nested_and_bool_ground_truth():
    config = EngineConfig.from_dict({"analysis": {"safety_enabled": False}, "ground_truth": False})
    assert not config.analysis.safety_enabled
    assert config.ground_truth == GroundTruthConfig(enabled=False)


def test_save_and_reload(tmp_path):
    path = tmp_path / "config.json"
    original = EngineConfig.from_dict({"default_language": "java", "verbose": True})
    original.save(path)

    assert json.loads(path.read_text())["analysis"]["default_language"] == "java"
    assert EngineConfig.from_file(path) == original


def test_load_config_file_skips_unreadable(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    path = tmp_path / "broken.json"
    path.write_text("{oops")
    assert load_config_file(path) == {}


def test_global_config():
    set_config(None)
    assert get_config() == EngineConfig()

    custom = EngineConfig.from_dict({"default_language": "cpp"})
    set_config(custom)
    assert get_config() is custom
    set_config(None)
