from __future__ import annotations

"""Canonical field names shared by every stage of the pipeline."""

__all__ = [
    "NAME",
    "PHONE",
    "CURRENT_ROLE",
    "KEY_SKILLS",
    "PROFILE_SUMMARY",
    "JD_LINK",
    "REQUIRED_COLUMNS",
    "EXPORT_COLUMNS",
    "MESSAGE_LINK",
]

NAME = "Name"
PHONE = "Phone"
CURRENT_ROLE = "Current Role"
KEY_SKILLS = "Key Skills"
PROFILE_SUMMARY = "Profile Summary"
JD_LINK = "JD Link"  # secondary link

REQUIRED_COLUMNS: tuple[str, ...] = (
    NAME,
    PHONE,
    CURRENT_ROLE,
    KEY_SKILLS,
    PROFILE_SUMMARY,
    JD_LINK,
)

MESSAGE_LINK = "WhatsApp_Link"

# Column order of every exported bucket
EXPORT_COLUMNS: tuple[str, ...] = (NAME, CURRENT_ROLE, PHONE, JD_LINK, MESSAGE_LINK)
