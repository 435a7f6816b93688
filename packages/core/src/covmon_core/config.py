import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

import yaml

from covmon_core.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "comment": True,
    "check": True,
    "clover_file": None,
    "original_clover_file": None,
    "threshold_alert": 90,
    "threshold_warning": 50,
    "status_context": "Coverage Report",
    "comment_context": "Coverage Report",
    "comment_mode": "replace",
    "baseline_store": "local",  # "local" reads original_clover_file from disk, "gist" reads a Gist file
    "gist_id": None,
}

REQUIRED_KEYS = ("clover_file", "original_clover_file")
COMMENT_MODES = ("replace", "update", "insert")
BASELINE_STORES = ("local", "gist")

_BOOL_KEYS = ("comment", "check")
_INT_KEYS = ("threshold_alert", "threshold_warning")
_TOKEN_VARS = ("GITHUB_TOKEN", "INPUT_GITHUB_TOKEN")


def _action_inputs() -> dict:
    """GitHub Actions exposes `with:` inputs as INPUT_<NAME> environment variables."""
    inputs = {}
    for key in DEFAULT_CONFIG:
        value = os.environ.get(f"INPUT_{key.upper()}")
        if value:
            inputs[key] = value
    return inputs


def _to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def _to_int(key: str, value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be an integer, got {value!r}")


def _normalize(config: dict) -> dict:
    for key in _BOOL_KEYS:
        config[key] = _to_bool(config[key])
    for key in _INT_KEYS:
        if config[key] in (None, ""):
            config[key] = DEFAULT_CONFIG[key]
        config[key] = _to_int(key, config[key])
    for key in ("status_context", "comment_context"):
        if not config[key]:
            config[key] = DEFAULT_CONFIG[key]
    if config["comment_mode"] not in COMMENT_MODES:
        config["comment_mode"] = "replace"
    return config


def load_config(config_path: str = ".covmon.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .covmon.yml in the current directory
      3. GitHub Action inputs (INPUT_* environment variables)
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    config.update(_action_inputs())

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return _normalize(config)


def validate_config(config: dict) -> None:
    """Raise ConfigError when a key required for a monitor run is missing."""
    missing = [key for key in REQUIRED_KEYS if not config.get(key)]
    if missing:
        raise ConfigError(f"Missing required configuration: {', '.join(missing)}")
    if config.get("baseline_store", "local") not in BASELINE_STORES:
        raise ConfigError(f"baseline_store must be one of {', '.join(BASELINE_STORES)}")
    if config.get("baseline_store") == "gist" and not config.get("gist_id"):
        raise ConfigError("baseline_store 'gist' requires gist_id")


def _gh_session_token() -> Optional[str]:
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_github_token() -> Optional[str]:
    """GitHub token from GITHUB_TOKEN, the Action's github_token input, or `gh auth token`.

    Returns None when no source has one; whether that is an error depends on
    the command.
    """
    for var in _TOKEN_VARS:
        if os.environ.get(var):
            return os.environ[var]
    token = _gh_session_token()
    if token:
        logger.debug("Resolved GitHub token via gh CLI session.")
    return token
