from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema.exceptions import ValidationError

from ..config.loader import ConfigError, settings_from_dict
from ..models.settings import Settings

"""Project bundle: settings + column mapping + raw rows as one JSON file.

Format::

    {"version": 1,
     "settings": {...Settings without column_mapping...},
     "column_mapping": {"Name": "Candidate Name", ...},
     "rows": [{"<raw header>": "<value>", ...}, ...]}

Rows are stored raw (before canonicalization) so a reloaded project can be
re-run with a different mapping.
"""

__all__ = [
    "ProjectBundleError",
    "PROJECT_VERSION",
    "PROJECT_SCHEMA_PATH",
    "save_project",
    "load_project",
]

PROJECT_VERSION = 1
PROJECT_SCHEMA_PATH = Path(__file__).parent.parent / "config" / "project_schema.json"


class ProjectBundleError(Exception):
    pass


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    return str(value)


def save_project(path: Path, settings: Settings, rows: Sequence[Mapping[Any, Any]]) -> Path:
    data = settings.to_dict()
    column_mapping = data.pop("column_mapping")
    bundle = {
        "version": PROJECT_VERSION,
        "settings": data,
        "column_mapping": column_mapping,
        "rows": [{str(k): _jsonable(v) for k, v in row.items()} for row in rows],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(bundle, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


def load_project(path: Path) -> tuple[Settings, list[dict[str, Any]]]:
    """Load a bundle written by save_project.

    Raises:
        ProjectBundleError: missing file, invalid JSON, schema or settings violation
    """
    if not path.exists():
        raise ProjectBundleError(f"project file not found: {path}")
    try:
        bundle = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ProjectBundleError(f"invalid project json: {e}") from e

    schema = json.loads(PROJECT_SCHEMA_PATH.read_text(encoding="utf-8"))
    try:
        jsonschema.validate(bundle, schema)
    except ValidationError as e:
        raise ProjectBundleError(f"project validation failed: {e.message}") from e

    settings_data = dict(bundle["settings"])
    settings_data["column_mapping"] = bundle.get("column_mapping") or {}
    try:
        settings = settings_from_dict(settings_data)
    except ConfigError as e:
        raise ProjectBundleError(f"project settings: {e}") from e
    return settings, [dict(r) for r in bundle["rows"]]
