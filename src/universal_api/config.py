"""Settings for the universal-api CLI and services.

Precedence (high to low):
    1. Environment variables (``UNIVERSAL_API_<FIELD>``, e.g.
       ``UNIVERSAL_API_FETCH_TIMEOUT=10``)
    2. Config file -- the ``path`` argument, else ``$UNIVERSAL_API_CONFIG``
       (JSON or YAML)
    3. Defaults declared on :class:`Settings`

CLI flags are applied on top by :mod:`universal_api.cli`.
"""

import json
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from universal_api.exceptions import ConfigError
from universal_api.fetcher import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT

ENV_PREFIX = "UNIVERSAL_API_"
CONFIG_ENV_VAR = "UNIVERSAL_API_CONFIG"


class Settings(BaseModel):
    """Effective runtime settings."""

    fetch_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    user_agent: str = DEFAULT_USER_AGENT
    rate_limit_requests: int = Field(default=1, ge=1)
    rate_limit_window: float = Field(default=5.0, ge=0)
    store_dir: Path = Field(default_factory=lambda: Path.home() / ".universal-api" / "docs")
    log_level: str = "WARNING"
    fallback_to_html: bool = False


def load_settings(path: Path | None = None) -> Settings:
    """Resolve settings from the config file and the environment.

    Raises:
        ConfigError: If the config file is unreadable or a value is invalid.
    """
    if path is None and os.environ.get(CONFIG_ENV_VAR):
        path = Path(os.environ[CONFIG_ENV_VAR])

    data: dict = {}
    if path is not None:
        data.update(_read_config_file(Path(path)))

    for name in Settings.model_fields:
        value = os.environ.get(ENV_PREFIX + name.upper())
        if value is not None:
            data[name] = value

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc


def _read_config_file(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text) or {}
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config at {path} must be a mapping")
    return data
