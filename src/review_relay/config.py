"""Configuration loading.

Values are resolved in order: defaults from ``constants``, then an optional
JSON file, then environment variables.
"""
import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from review_relay.constants import (
    API_TIMEOUT_SECONDS,
    DEFAULT_HOST,
    DEFAULT_MODEL,
    DEFAULT_PORT,
    DEFAULT_RATE_LIMIT,
    KEY_COOLDOWN_SECONDS,
    KEY_ERROR_WINDOW_SECONDS,
    MAX_KEY_ERROR_COUNT,
    MAX_WAIT_CYCLES,
    WAIT_BASE_SECONDS,
    WAIT_STEP_SECONDS,
)
from review_relay.errors import ConfigurationError
from review_relay.validation import validate_non_negative, validate_port, validate_positive

DEFAULT_CONFIG_FILE = ".review-relay.json"

# Checked in order; the first one that is set wins
API_KEY_ENV_VARS = ("REVIEW_RELAY_API_KEYS", "ANTHROPIC_API_KEYS", "ANTHROPIC_API_KEY")

ENV_VARS = {
    "model": "REVIEW_RELAY_MODEL",
    "host": "HOST",
    "port": "PORT",
    "rate_limit": "REVIEW_RELAY_RATE_LIMIT",
    "cors_origins": "REVIEW_RELAY_CORS_ORIGINS",
    "cooldown_seconds": "REVIEW_RELAY_COOLDOWN_SECONDS",
    "max_error_count": "REVIEW_RELAY_MAX_ERROR_COUNT",
    "error_window_seconds": "REVIEW_RELAY_ERROR_WINDOW_SECONDS",
    "max_wait_cycles": "REVIEW_RELAY_MAX_WAIT_CYCLES",
    "wait_base_seconds": "REVIEW_RELAY_WAIT_BASE_SECONDS",
    "wait_step_seconds": "REVIEW_RELAY_WAIT_STEP_SECONDS",
    "request_timeout": "REVIEW_RELAY_REQUEST_TIMEOUT",
}


@dataclass
class Config:
    """Service configuration."""
    api_keys: list[str] = field(default_factory=list)
    model: str = DEFAULT_MODEL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    rate_limit: str = DEFAULT_RATE_LIMIT
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    cooldown_seconds: float = KEY_COOLDOWN_SECONDS
    max_error_count: int = MAX_KEY_ERROR_COUNT
    error_window_seconds: float = KEY_ERROR_WINDOW_SECONDS
    max_wait_cycles: int = MAX_WAIT_CYCLES
    wait_base_seconds: float = WAIT_BASE_SECONDS
    wait_step_seconds: float = WAIT_STEP_SECONDS
    request_timeout: float = API_TIMEOUT_SECONDS


def _split_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item).strip() for item in value if str(item).strip()]


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw file or environment value to the field's type."""
    if name in ("api_keys", "cors_origins"):
        return _split_list(value)
    if name in ("port", "max_error_count", "max_wait_cycles"):
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{name} must be an integer, got: {value!r}") from None
    if name in (
        "cooldown_seconds",
        "error_window_seconds",
        "wait_base_seconds",
        "wait_step_seconds",
        "request_timeout",
    ):
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{name} must be a number, got: {value!r}") from None
    return str(value)


def _read_config_file(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a JSON object")

    known = {f.name for f in fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")
    return data


def _validate(config: Config) -> None:
    validate_port(config.port)
    validate_non_negative("cooldown_seconds", config.cooldown_seconds)
    validate_positive("max_error_count", config.max_error_count)
    validate_positive("error_window_seconds", config.error_window_seconds)
    validate_non_negative("max_wait_cycles", config.max_wait_cycles)
    validate_non_negative("wait_base_seconds", config.wait_base_seconds)
    validate_non_negative("wait_step_seconds", config.wait_step_seconds)
    validate_positive("request_timeout", config.request_timeout)


def load_config(
    config_path: Path | None = None, environ: Mapping[str, str] | None = None
) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Optional JSON config file; skipped if it does not exist
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Config object

    Raises:
        ConfigurationError: If a value is malformed or out of range
    """
    if environ is None:
        environ = os.environ

    values: dict[str, Any] = {}

    if config_path is not None and config_path.exists():
        for name, raw in _read_config_file(config_path).items():
            values[name] = _coerce(name, raw)

    for var in API_KEY_ENV_VARS:
        if environ.get(var):
            values["api_keys"] = _coerce("api_keys", environ[var])
            break

    for name, var in ENV_VARS.items():
        raw = environ.get(var)
        if raw is not None and raw != "":
            values[name] = _coerce(name, raw)

    config = Config(**values)
    _validate(config)
    return config
