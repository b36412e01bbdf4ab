from pathlib import Path

import yaml

from reqtui.config import DEFAULT_CONFIG, Settings, ensure_config, load_settings


def test_missing_config_uses_defaults(tmp_path):
    assert load_settings(tmp_path / "config.yaml") == Settings()


def test_ensure_config_writes_defaults_once(tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    ensure_config(path)
    assert yaml.safe_load(path.read_text(encoding="utf-8")) == DEFAULT_CONFIG
    path.write_text("http:\n  timeout: 5\n", encoding="utf-8")
    ensure_config(path)
    assert load_settings(path).timeout == 5.0


def test_values_are_read(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "http": {"timeout": 12},
                "storage": {"requests_dir": "saved"},
                "log": {"file": None, "level": "debug"},
            }
        ),
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings.timeout == 12.0
    assert settings.requests_dir == Path("saved")
    assert settings.log_file is None
    assert settings.log_level == "DEBUG"


def test_bad_values_fall_back(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("http:\n  timeout: -1\nstorage: nope\n", encoding="utf-8")
    assert load_settings(path) == Settings()


def test_malformed_yaml_falls_back(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("http: [unclosed\n", encoding="utf-8")
    assert load_settings(path) == Settings()
