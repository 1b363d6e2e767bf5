import pytest

from selftime import ConfigValidationError, ProfilerConfig, load_config, validate_config


def test_defaults():
    cfg = load_config(environ={})
    assert cfg == ProfilerConfig()


def test_yaml_file(tmp_path):
    path = tmp_path / "selftime.yaml"
    path.write_text("profiler:\n  ascii_units: true\n  table_title: nightly\n", encoding="utf-8")
    cfg = load_config(path, environ={})
    assert cfg.ascii_units is True
    assert cfg.table_title == "nightly"
    assert cfg.strict_clock is False


def test_flat_yaml_file(tmp_path):
    path = tmp_path / "flat.yaml"
    path.write_text("strict_clock: yes\n", encoding="utf-8")
    assert load_config(path, environ={}).strict_clock is True


def test_env_then_overrides_precedence(tmp_path):
    path = tmp_path / "selftime.yaml"
    path.write_text("log_scopes: false\ncheck_thread: true\n", encoding="utf-8")
    env = {"SELFTIME_LOG_SCOPES": "1", "SELFTIME_CHECK_THREAD": "false"}
    cfg = load_config(path, overrides=["check_thread=true"], environ=env)
    assert cfg.log_scopes is True
    assert cfg.check_thread is True


def test_unknown_key_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("colour: red\n", encoding="utf-8")
    with pytest.raises(ConfigValidationError):
        load_config(path, environ={})


def test_bad_value_rejected():
    with pytest.raises(ConfigValidationError):
        load_config(overrides=["strict_clock=maybe"], environ={})


def test_non_mapping_yaml_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigValidationError):
        load_config(path, environ={})


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config("does/not/exist.yaml", environ={})


def test_validate_config_round_trip():
    cfg = ProfilerConfig(ascii_units=True)
    assert validate_config(cfg.to_dict()) == cfg


def test_shipped_defaults_file_matches_dataclass():
    from pathlib import Path

    shipped = Path(__file__).resolve().parents[2] / "configs" / "selftime.yaml"
    assert load_config(shipped, environ={}) == ProfilerConfig()
