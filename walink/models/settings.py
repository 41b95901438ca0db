from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any

"""Settings snapshot threaded explicitly into every pipeline run.

A run never mutates its Settings; the CLI builds a new snapshot with
``Settings.replace`` when command-line overrides are applied.
"""

__all__ = [
    "Settings",
    "PHONE_STRATEGIES",
    "DEFAULT_COUNTRY_CODE",
]

DEFAULT_COUNTRY_CODE = "91"
PHONE_STRATEGIES = ("heuristic", "strict")


@dataclass(frozen=True)
class Settings:
    """Read-only configuration for one classification run.

    ``template`` left empty means the built-in default message is used.
    ``column_mapping`` maps a canonical key to the source header chosen by
    the operator (takes precedence over the alias table).
    """
    country_code: str = DEFAULT_COUNTRY_CODE
    template: str = ""
    dedupe_by_phone: bool = True
    auto_detect_country: bool = True
    phone_strategy: str = "heuristic"  # heuristic | strict
    column_mapping: dict[str, str] = field(default_factory=dict)
    strict_required_columns: bool = False  # check every row, not only the first

    def replace(self, **changes: Any) -> Settings:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["column_mapping"] = dict(self.column_mapping)
        return data
