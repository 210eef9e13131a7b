import json

import pytest

import asset_config as config_module
from asset_config import PipelineConfig
from asset_errors import ConfigurationError


def test_unset_config_matches_nothing():
    config = PipelineConfig()
    assert not config.is_passthrough_extension("image.png")
    assert not config.is_mangle_exempt("app.js")
    assert config.passthrough_extensions == ()
    assert config.mangle_exemptions == ()


def test_passthrough_extension_is_suffix_match():
    config = PipelineConfig.create([".png", ".tar.gz"])
    assert config.is_passthrough_extension("logo.png")
    assert config.is_passthrough_extension("bundle.tar.gz")
    assert not config.is_passthrough_extension("logo.png.bak")
    assert not config.is_passthrough_extension("logo.PNG")


def test_mangle_exemption_is_exact_match():
    config = PipelineConfig.create(no_mangle=["legacy.js"])
    assert config.is_mangle_exempt("legacy.js")
    assert not config.is_mangle_exempt("old-legacy.js")
    assert not config.is_mangle_exempt("legacy.js.map")


def test_empty_list_leaves_field_unset():
    config = PipelineConfig()
    config.set_passthrough_extensions([])
    config.set_mangle_exemptions([])
    config.set_passthrough_extensions([".bin"])
    config.set_mangle_exemptions(["a.js"])
    assert config.passthrough_extensions == (".bin",)
    assert config.mangle_exemptions == ("a.js",)


def test_double_initialization_fails():
    config = PipelineConfig.create([".bin"], ["a.js"])
    with pytest.raises(ConfigurationError, match="already initialized"):
        config.set_passthrough_extensions([".png"])
    with pytest.raises(ConfigurationError, match="already initialized"):
        config.set_mangle_exemptions(["b.js"])
    assert config.passthrough_extensions == (".bin",)
    assert config.mangle_exemptions == ("a.js",)


def test_empty_list_after_initialization_is_noop():
    config = PipelineConfig.create([".bin"])
    config.set_passthrough_extensions([])
    assert config.passthrough_extensions == (".bin",)


def test_empty_entries_are_rejected():
    config = PipelineConfig()
    with pytest.raises(ConfigurationError, match="non-empty"):
        config.set_passthrough_extensions([".bin", ""])
    with pytest.raises(ConfigurationError, match="non-empty"):
        config.set_mangle_exemptions([""])
    assert not config.is_passthrough_extension("anything.txt")


def test_jsmin_fallback_defaults_off():
    assert PipelineConfig().jsmin_fallback is False
    assert PipelineConfig.create(jsmin_fallback=True).jsmin_fallback is True


def test_stored_lists_are_copies():
    extensions = [".bin"]
    config = PipelineConfig.create(extensions)
    extensions.append(".png")
    assert not config.is_passthrough_extension("logo.png")


def test_load_config_defaults(tmp_path, monkeypatch):
    monkeypatch.setattr(config_module, "CONFIG_FILE", str(tmp_path / "missing.json"))
    cfg = config_module.load_config()
    assert cfg == config_module.DEFAULT_CONFIG
    assert cfg is not config_module.DEFAULT_CONFIG


def test_load_config_file(tmp_path, monkeypatch):
    temp_file = tmp_path / "assets.json"
    with open(temp_file, "w") as fh:
        json.dump({"source": "web", "passthrough_extensions": [".woff2"]}, fh)
    monkeypatch.setattr(config_module, "CONFIG_FILE", str(temp_file))
    cfg = config_module.load_config()
    assert cfg["source"] == "web"
    assert cfg["passthrough_extensions"] == [".woff2"]
    assert cfg["no_mangle"] == []


def test_load_config_explicit_missing_path(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        config_module.load_config(str(tmp_path / "nope.json"))


def test_load_config_invalid_json(tmp_path):
    temp_file = tmp_path / "assets.json"
    temp_file.write_text("{not json")
    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        config_module.load_config(str(temp_file))


def test_load_config_invalid_types(tmp_path):
    temp_file = tmp_path / "assets.json"
    with open(temp_file, "w") as fh:
        json.dump({"no_mangle": "app.js"}, fh)
    with pytest.raises(ConfigurationError, match="Invalid configuration"):
        config_module.load_config(str(temp_file))


def test_validate_config_rejects_empty_entries():
    cfg = {**config_module.DEFAULT_CONFIG, "passthrough_extensions": [".bin", ""]}
    assert not config_module.validate_config(cfg)


def test_validate_config_rejects_non_bool_fallback():
    cfg = {**config_module.DEFAULT_CONFIG, "jsmin_fallback": "yes"}
    assert not config_module.validate_config(cfg)


def test_validate_config_missing_key():
    cfg = dict(config_module.DEFAULT_CONFIG)
    cfg.pop("source")
    assert not config_module.validate_config(cfg)


def test_get_out_dir_env(monkeypatch):
    monkeypatch.setenv("OUT_DIR", "/tmp/build-out")
    assert config_module.get_out_dir() == "/tmp/build-out"
    assert config_module.get_out_dir("/explicit") == "/explicit"


def test_get_out_dir_missing(monkeypatch):
    monkeypatch.delenv("OUT_DIR", raising=False)
    with pytest.raises(ConfigurationError, match="OUT_DIR"):
        config_module.get_out_dir()


def test_get_log_level(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    assert config_module.get_log_level() == "INFO"
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert config_module.get_log_level() == "DEBUG"
