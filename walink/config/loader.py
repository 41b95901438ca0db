from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from dotenv import load_dotenv
from jsonschema.exceptions import ValidationError

from ..models.settings import Settings

"""Settings loader / saver.

Responsibilities:
- Load YAML settings (default location config/settings.yml)
- Validate against settings_schema.json (every key optional)
- Apply defaults from Settings for absent keys
- Apply WALINK_* environment overrides (.env loaded first, overriding)
- Save a Settings snapshot back to YAML
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_settings",
    "save_settings",
    "settings_from_dict",
    "apply_env_overrides",
    "load_env_file",
]

DEFAULT_CONFIG_PATH = Path("config/settings.yml")
SCHEMA_PATH = Path(__file__).parent / "settings_schema.json"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigError(Exception):
    pass


def _validate_settings_schema(data: dict[str, Any]) -> None:
    """Validate settings data against the JSON schema.

    Raises:
        ConfigError: schema file missing / unreadable, or data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"settings schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def settings_from_dict(data: dict[str, Any]) -> Settings:
    """Build Settings from already parsed data (validated first)."""
    _validate_settings_schema(data)
    defaults = Settings()
    return Settings(
        country_code=str(data.get("country_code", defaults.country_code)),
        template=data.get("template") or "",
        dedupe_by_phone=data.get("dedupe_by_phone", defaults.dedupe_by_phone),
        auto_detect_country=data.get("auto_detect_country", defaults.auto_detect_country),
        phone_strategy=data.get("phone_strategy", defaults.phone_strategy),
        column_mapping=dict(data.get("column_mapping") or {}),
        strict_required_columns=data.get("strict_required_columns", defaults.strict_required_columns),
    )


def _env_bool(name: str, value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigError(f"invalid boolean for {name}: {value!r}")


def apply_env_overrides(settings: Settings, environ: dict[str, str] | None = None) -> Settings:
    """Apply WALINK_* environment variables on top of ``settings``."""
    env = os.environ if environ is None else environ
    changes: dict[str, Any] = {}
    if env.get("WALINK_COUNTRY_CODE"):
        changes["country_code"] = env["WALINK_COUNTRY_CODE"]
    if env.get("WALINK_PHONE_STRATEGY"):
        strategy = env["WALINK_PHONE_STRATEGY"].strip().lower()
        if strategy not in ("heuristic", "strict"):
            raise ConfigError(f"invalid WALINK_PHONE_STRATEGY: {strategy!r}")
        changes["phone_strategy"] = strategy
    if env.get("WALINK_DEDUPE"):
        changes["dedupe_by_phone"] = _env_bool("WALINK_DEDUPE", env["WALINK_DEDUPE"])
    if env.get("WALINK_AUTO_DETECT"):
        changes["auto_detect_country"] = _env_bool("WALINK_AUTO_DETECT", env["WALINK_AUTO_DETECT"])
    return settings.replace(**changes) if changes else settings


def load_env_file(path: Path = Path(".env"), override: bool = True) -> bool:
    """Load ``path`` with python-dotenv; values override the process env."""
    if not path.exists():
        return False
    return load_dotenv(dotenv_path=path, override=override)


def load_settings(path: Path = DEFAULT_CONFIG_PATH, use_env: bool = True) -> Settings:
    """Load settings from YAML.

    A missing file is not an error (first run): defaults are used.
    """
    data: dict[str, Any] = {}
    if path.exists():
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"config validation failed: top level must be a mapping, got {type(loaded).__name__}")
        data = loaded
    settings = settings_from_dict(data)
    if use_env:
        settings = apply_env_overrides(settings)
    return settings


def save_settings(path: Path, settings: Settings) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    text = yaml.safe_dump(settings.to_dict(), allow_unicode=True, sort_keys=False)
    path.write_text(text, encoding="utf-8")
    return path
