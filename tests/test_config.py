"""Tests for layered configuration loading and validation."""
import pytest

from apex_harness.config import (
    config_defaults,
    load_config,
    validate_config_dict,
    validate_config_file,
)
from apex_harness.core import ConfigError


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = load_config(environ={})
    assert config == config_defaults()
    assert config["scoring"]["strategy"] == "binary"
    assert config["browser"]["launcher"] is None


def test_yaml_file_overrides_defaults(tmp_path):
    path = tmp_path / "harness.yaml"
    path.write_text(
        "scoring:\n"
        "  strategy: partial\n"
        "report:\n"
        "  dir: out/reports\n"
        "vision:\n"
        "  threshold: 0.8\n"
    )
    config = load_config(path, environ={})
    assert config["scoring"]["strategy"] == "partial"
    assert config["report"]["dir"] == "out/reports"
    assert config["report"]["latest_link"] is True
    assert config["vision"]["threshold"] == 0.8
    assert config["vision"]["model"] == "gpt-4o"


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "harness.yaml"
    path.write_text("app:\n  frontend_url: http://from-file\n")
    config = load_config(path, environ={
        "FRONTEND_URL": "http://from-env",
        "BACKEND_URL": "http://api",
        "HEADLESS": "false",
        "SLOW_MO": "250",
        "TIMEOUT": "5000",
        "OPENAI_API_KEY": "sk-test",
        "APEX_REPORT_DIR": "/tmp/reports",
    })
    assert config["app"] == {"frontend_url": "http://from-env", "backend_url": "http://api"}
    assert config["browser"]["headless"] is False
    assert config["browser"]["slow_mo"] == 250
    assert config["browser"]["timeout"] == 5000
    assert config["vision"]["api_key"] == "sk-test"
    assert config["report"]["dir"] == "/tmp/reports"


def test_headless_defaults_to_true_for_other_values(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config(environ={"HEADLESS": "yes"})["browser"]["headless"] is True


def test_bad_numeric_env_var(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ConfigError):
        load_config(environ={"SLOW_MO": "slow"})


def test_explicit_missing_file_is_an_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml", environ={})


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("scoring: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_config(path, environ={})


def test_invalid_values_are_collected(tmp_path):
    path = tmp_path / "harness.yaml"
    path.write_text("scoring:\n  strategy: curved\nbogus: 1\n")
    with pytest.raises(ConfigError) as exc:
        load_config(path, environ={})
    assert "Unknown config key: bogus" in exc.value.errors
    assert "scoring.strategy must be 'binary' or 'partial'" in exc.value.errors


@pytest.mark.parametrize("data, message", [
    ({"report": {"dirr": "x"}}, "Unknown report key: dirr"),
    ({"report": "x"}, "report must be an object"),
    ({"execution": {"output_mode": "loud"}}, "execution.output_mode must be 'quiet', 'normal' or 'debug'"),
    ({"vision": {"threshold": 1.5}}, "vision.threshold must be a number between 0 and 1"),
    ({"vision": {"threshold": True}}, "vision.threshold must be a number between 0 and 1"),
    ({"browser": {"slow_mo": -1}}, "browser.slow_mo must be a non-negative integer"),
    ({"browser": {"timeout": "30s"}}, "browser.timeout must be a non-negative integer"),
])
def test_validate_config_dict_errors(data, message):
    assert message in validate_config_dict(data)


def test_validate_config_dict_accepts_example_shape():
    assert validate_config_dict({
        "specs": {"node_specs": "a.json", "scoring_config": "b.json"},
        "execution": {"fail_on_unschedulable": True, "output_mode": "quiet"},
        "browser": {"launcher": "pkg.mod:make", "headless": False, "slow_mo": 0, "timeout": 1000},
    }) == []
    assert validate_config_dict([]) == ["Config must be a mapping/object"]


def test_validate_config_file(tmp_path):
    assert validate_config_file(tmp_path / "missing.yaml") == []
    bad = tmp_path / "bad.yaml"
    bad.write_text("scoring:\n  strategy: curved\n")
    assert validate_config_file(bad) == ["scoring.strategy must be 'binary' or 'partial'"]
