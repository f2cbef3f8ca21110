"""Configuration loading utilities for slugomatic."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Mapping

from slugomatic.errors import ConfigError

_ENV_PREFIX = "SLUGOMATIC_"
_DEFAULT_CONFIG = Path("~/.slugomatic/config.toml").expanduser()

# Used when neither the slug nor the source field declares a length.
DEFAULT_SLUG_LENGTH = 50


_DEFAULT_SETTINGS: dict[str, Any] = {
    "default_length": DEFAULT_SLUG_LENGTH,
    "max_save_retries": 3,
    "sqlite_path": "~/.slugomatic/slugs.db",
    "verbose_logging": False,
}


def _coerce_env_value(key: str, value: str) -> Any:
    default = _DEFAULT_SETTINGS.get(key)
    if isinstance(default, bool):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            return default
    return value


def _resolve_config_path(options: Mapping[str, Any] | None) -> Path:
    options = dict(options or {})
    raw_config_path = options.get("config_path")
    return Path(raw_config_path).expanduser() if raw_config_path else _DEFAULT_CONFIG


def _load_file_config(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid config file: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read config file: {path}") from exc


def _load_env_config() -> dict[str, Any]:
    config: dict[str, Any] = {}
    for env_key, raw_value in os.environ.items():
        if env_key.startswith(_ENV_PREFIX):
            normalized = env_key[len(_ENV_PREFIX) :].lower()
            config[normalized] = _coerce_env_value(normalized, raw_value)
    return config


def _validate(settings: Mapping[str, Any]) -> None:
    for key in ("default_length", "max_save_retries"):
        value = settings.get(key)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer, got {value!r}")
    if settings["default_length"] <= 0:
        raise ConfigError("`default_length` must be positive")
    if settings["max_save_retries"] < 0:
        raise ConfigError("`max_save_retries` must not be negative")


def get_config(options: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Merge defaults, config file, environment and explicit options."""

    options = dict(options or {})
    config_path = _resolve_config_path(options)

    file_config = _load_file_config(config_path)
    env_config = _load_env_config()
    explicit_config = {
        key: value
        for key, value in options.items()
        if value is not None and key != "config_path"
    }

    merged: dict[str, Any] = dict(_DEFAULT_SETTINGS)
    merged.update(file_config)
    merged.update(env_config)
    merged.update(explicit_config)
    _validate(merged)

    merged["config_path"] = str(config_path)
    return merged
