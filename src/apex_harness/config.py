"""Configuration helpers for apex-harness."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from . import settings
from .core.errors import ConfigError

LOCAL_CONFIG_PATH = Path("config.local.yaml")

DEFAULT_CONFIG = {
    "specs": {
        "node_specs": settings.node_specs_path,
        "scoring_config": settings.scoring_config_path,
    },
    "report": {
        "dir": settings.report_dir,
        "latest_link": True,
    },
    "scoring": {
        "strategy": "binary",
    },
    "execution": {
        "fail_on_unschedulable": False,
        "output_mode": "normal",
    },
    "app": {
        "frontend_url": settings.frontend_url,
        "backend_url": settings.backend_url,
    },
    "browser": {
        # Passed to the launcher factory; the harness itself reads only "launcher"
        "launcher": None,  # "package.module:factory" returning a BrowserLauncher
        "headless": True,
        "slow_mo": 0,
        "timeout": settings.browser_timeout_ms,
    },
    "vision": {
        "model": settings.vision_model,
        "base_url": settings.vision_base_url,
        "api_key": None,
        "threshold": settings.vision_threshold,
        "max_tokens": 500,
        "temperature": 0.3,
    },
    "verification": {
        "screenshot_dir": settings.screenshot_dir,
    },
}

# Allowed keys per section
_SECTIONS = {section: set(values) for section, values in DEFAULT_CONFIG.items()}

_ENV_OVERRIDES = {
    "FRONTEND_URL": ("app", "frontend_url", str),
    "BACKEND_URL": ("app", "backend_url", str),
    "HEADLESS": ("browser", "headless", lambda v: v.lower() != "false"),
    "SLOW_MO": ("browser", "slow_mo", int),
    "TIMEOUT": ("browser", "timeout", int),
    "OPENAI_API_KEY": ("vision", "api_key", str),
    "APEX_REPORT_DIR": ("report", "dir", str),
}


def config_defaults() -> dict:
    """Return default configuration values."""
    return copy.deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict, update: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_config_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"Could not read config file {path}: {e}", path=path, cause=e) from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping", path=path)
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict:
    overrides: dict[str, dict[str, Any]] = {}
    for var, (section, key, parse) in _ENV_OVERRIDES.items():
        raw = environ.get(var)
        if raw is None or raw == "":
            continue
        try:
            value = parse(raw)
        except ValueError as e:
            raise ConfigError(f"Invalid value for {var}: {raw!r}", cause=e) from e
        overrides.setdefault(section, {})[key] = value
    return overrides


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> dict:
    """
    Load resolved configuration.

    Defaults, then the YAML config file, then environment variables.

    Raises:
        ConfigError: If the file is unreadable or the result is invalid
    """
    path = config_path or LOCAL_CONFIG_PATH
    if config_path is not None and not path.exists():
        raise ConfigError(f"Config file not found: {path}", path=path)

    file_config = _load_config_file(path)
    errors = validate_config_dict(file_config)
    if errors:
        raise ConfigError(f"Invalid config file {path}", path=path, errors=errors)

    merged = _deep_merge(config_defaults(), file_config)
    env = os.environ if environ is None else environ
    return _deep_merge(merged, _env_overrides(env))


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config_dict(data: Any) -> list[str]:
    """Validate a config dict against the known sections and keys."""
    errors: list[str] = []
    if not isinstance(data, dict):
        return ["Config must be a mapping/object"]

    for key, value in data.items():
        if key not in _SECTIONS:
            errors.append(f"Unknown config key: {key}")
            continue
        if not isinstance(value, dict):
            errors.append(f"{key} must be an object")
            continue
        for sub_key in value:
            if sub_key not in _SECTIONS[key]:
                errors.append(f"Unknown {key} key: {sub_key}")

    strategy = data.get("scoring", {}).get("strategy") if isinstance(data.get("scoring"), dict) else None
    if strategy is not None and strategy not in ("binary", "partial"):
        errors.append("scoring.strategy must be 'binary' or 'partial'")

    execution = data.get("execution") if isinstance(data.get("execution"), dict) else {}
    mode = execution.get("output_mode")
    if mode is not None and mode not in ("quiet", "normal", "debug"):
        errors.append("execution.output_mode must be 'quiet', 'normal' or 'debug'")

    vision = data.get("vision") if isinstance(data.get("vision"), dict) else {}
    threshold = vision.get("threshold")
    if threshold is not None and (not _is_number(threshold) or not 0 <= threshold <= 1):
        errors.append("vision.threshold must be a number between 0 and 1")

    browser = data.get("browser") if isinstance(data.get("browser"), dict) else {}
    for key in ("slow_mo", "timeout"):
        value = browser.get(key)
        if value is not None and (not _is_int(value) or value < 0):
            errors.append(f"browser.{key} must be a non-negative integer")

    return errors


def validate_config_file(config_path: Optional[Path] = None) -> list[str]:
    """Validate the config file. Returns list of errors (empty = valid)."""
    path = config_path or LOCAL_CONFIG_PATH
    if not path.exists():
        return []
    try:
        data = _load_config_file(path)
    except ConfigError as e:
        return [str(e)]
    return validate_config_dict(data)
