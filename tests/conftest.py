# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from walink.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        for var in ("WALINK_COUNTRY_CODE", "WALINK_PHONE_STRATEGY", "WALINK_DEDUPE", "WALINK_AUTO_DETECT"):
            monkeypatch.delenv(var, raising=False)
        yield p


@pytest.fixture()
def sample_settings_yaml() -> str:
    return """country_code: "91"
template: "Hi {NAME}, role {ROLE} {JD_LINK}"
dedupe_by_phone: true
auto_detect_country: true
phone_strategy: heuristic
column_mapping:
  Name: Applicant
strict_required_columns: false
"""


@pytest.fixture()
def write_settings(temp_workdir: Path, sample_settings_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "settings.yml"
    cfg.write_text(sample_settings_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def candidates_csv(temp_workdir: Path) -> Path:
    p = temp_workdir / "data" / "candidates.csv"
    p.write_text(
        "Name,Phone,Current Role,Key Skills,Profile Summary,JD Link\n"
        "John Doe,+91 98765 43210,Senior Designer,\"Figma, UX\",7 yrs,\n"
        "Riya Sharma,9876501234,UX Designer,Figma,5 yrs,ikf.co.in/careers/ux\n"
        "Bad Number,123,Intern,,,\n"
        "John Again,9876543210,Designer,,,https://x.example/jd\n",
        encoding="utf-8",
    )
    return p


@pytest.fixture()
def fresh_logging():
    reset_logging()
    yield
    reset_logging()
