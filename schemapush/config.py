"""Configuration for the push command.

Values are merged from, lowest to highest precedence: built-in defaults,
a YAML config file, ``SCHEMAPUSH_*`` environment variables. Command-line
options are applied on top of the result by the CLI.
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass, fields
from pathlib import Path

import httpx
import yaml

from schemapush.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".schemapush.yaml"
DEFAULT_TIMEOUT = 30.0

# Environment variable -> config field
ENV_VARS = {
    "SCHEMAPUSH_REGISTRY_ROOT": "registry_root",
    "SCHEMAPUSH_API_KEY": "api_key",
    "SCHEMAPUSH_TIMEOUT": "timeout",
}


@dataclass
class PushConfig:
    """Settings for one push session."""

    registry_root: str = ""
    api_key: str = ""
    public: bool = False
    legacy: bool = False
    timeout: float = DEFAULT_TIMEOUT


def load_config(config_path: str | Path | None = None) -> PushConfig:
    """Build a :class:`PushConfig` from a YAML file and the environment.

    When *config_path* is None, ``.schemapush.yaml`` in the working
    directory is used if present. An explicit path that does not exist
    is an error.
    """
    config = PushConfig()

    if config_path is not None:
        path = Path(config_path)
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        _apply(config, _load_yaml(path), source=str(path))
    elif Path(DEFAULT_CONFIG_FILE).is_file():
        _apply(config, _load_yaml(Path(DEFAULT_CONFIG_FILE)), source=DEFAULT_CONFIG_FILE)

    env_values = {
        name: os.environ[var] for var, name in ENV_VARS.items() if os.environ.get(var)
    }
    _apply(config, env_values, source="environment")

    return config


def normalize_registry_root(url: str) -> str:
    """Validate a registry root URL and strip any trailing ``/`` or ``/api``."""
    if not url:
        raise ConfigError("Registry root URL is required")
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigError(f"Invalid registry root URL '{url}'", cause=e) from e

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigError(f"Registry root must be an http(s) URL, got '{url}'")

    root = url.rstrip("/")
    if root.endswith("/api"):
        root = root[: -len("/api")]
    return root


def parse_api_key(value: str | uuid.UUID) -> uuid.UUID:
    """Return *value* as a UUID, the format registry API keys use."""
    if isinstance(value, uuid.UUID):
        return value
    if not value:
        raise ConfigError("API key is required")
    try:
        return uuid.UUID(str(value).strip())
    except ValueError as e:
        raise ConfigError(f"API key must be a UUID, got '{value}'", cause=e) from e


def _load_yaml(path: Path) -> dict:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}", cause=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def _apply(config: PushConfig, values: dict, source: str) -> None:
    known = {f.name for f in fields(PushConfig)}
    for key, value in values.items():
        name = key.replace("-", "_")
        if name not in known:
            logger.warning("Ignoring unknown config key '%s' from %s", key, source)
            continue
        setattr(config, name, _coerce(name, value, source))


def _coerce(name: str, value, source: str):
    if name == "timeout":
        try:
            timeout = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{source}: timeout must be a number, got '{value}'", cause=e) from e
        if timeout <= 0:
            raise ConfigError(f"{source}: timeout must be positive, got {timeout}")
        return timeout
    if name in ("public", "legacy"):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "yes", "1", "false", "no", "0"):
            return value.lower() in ("true", "yes", "1")
        raise ConfigError(f"{source}: {name} must be a boolean, got '{value}'")
    return str(value)
