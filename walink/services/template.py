from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from ..models.fields import (
    CURRENT_ROLE,
    JD_LINK,
    KEY_SKILLS,
    NAME,
    PHONE,
    PROFILE_SUMMARY,
    REQUIRED_COLUMNS,
)

"""Message template engine.

Placeholders are replaced by literal substitution of every occurrence (no
regex semantics in the values). Supported names:

- short forms: {NAME} {ROLE} {JD_LINK} {PHONE} {KEY_SKILLS} {PROFILE_SUMMARY}
- one per canonical field, named after the field: {Name} {Current Role} ...

Unknown placeholders stay as literal text. Missing values render as "".
"""

__all__ = [
    "DEFAULT_TEMPLATE",
    "PLACEHOLDERS",
    "render_message",
    "placeholders_in",
    "unknown_placeholders",
]

DEFAULT_TEMPLATE = "\n".join([
    "Dear *{NAME}*,",
    "I am *Vani, Recruiter at I Knowledge Factory Pvt. Ltd.* - a full-service *digital branding and marketing agency*.",
    "",
    "We reviewed your profile on *Naukri Portal* and found it suitable for the role of *{ROLE}*.",
    "",
    "If you are open to exploring opportunities with us, please review the *Job Description on our website and apply here*: {JD_LINK}",
    "",
    "Once done, I will connect with you to schedule the *screening round*.",
    "",
    "Best regards,",
    "*Vani Jha*",
    "Talent Acquisition Specialist",
    "*+91 9665079317*",
    "*www.ikf.co.in*",
])

_SHORT_FORMS: dict[str, str] = {
    "{NAME}": NAME,
    "{ROLE}": CURRENT_ROLE,
    "{JD_LINK}": JD_LINK,
    "{PHONE}": PHONE,
    "{KEY_SKILLS}": KEY_SKILLS,
    "{PROFILE_SUMMARY}": PROFILE_SUMMARY,
}

# placeholder -> canonical field
PLACEHOLDERS: dict[str, str] = {
    **_SHORT_FORMS,
    **{f"{{{key}}}": key for key in REQUIRED_COLUMNS},
}

_PLACEHOLDER_RE = re.compile(r"\{[^{}\n]+\}")


def _value(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    if value is None:
        return ""
    return str(value).strip()


def render_message(row: Mapping[str, Any], template: str | None = None) -> str:
    """Fill ``template`` (or DEFAULT_TEMPLATE when empty) from a canonical row."""
    text = template or DEFAULT_TEMPLATE

    def _substitute(m: re.Match[str]) -> str:
        key = PLACEHOLDERS.get(m.group(0))
        return m.group(0) if key is None else _value(row, key)

    # single pass: substituted values are never re-scanned for placeholders
    return _PLACEHOLDER_RE.sub(_substitute, text)


def placeholders_in(template: str | None) -> list[str]:
    """Placeholders appearing in ``template`` in first-seen order."""
    seen: dict[str, None] = {}
    for m in _PLACEHOLDER_RE.finditer(template or DEFAULT_TEMPLATE):
        seen.setdefault(m.group(0), None)
    return list(seen)


def unknown_placeholders(template: str | None) -> list[str]:
    return [p for p in placeholders_in(template) if p not in PLACEHOLDERS]
