from __future__ import annotations

import json

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from walink.config.loader import SCHEMA_PATH
from walink.export.project import PROJECT_SCHEMA_PATH

"""Settings / project bundle schema contract."""


def _schema(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_settings_schema_valid_example():
    config = {
        "country_code": "91",
        "template": "Hi {NAME}",
        "dedupe_by_phone": True,
        "auto_detect_country": False,
        "phone_strategy": "strict",
        "column_mapping": {"Name": "Applicant", "JD Link": "Job URL"},
        "strict_required_columns": True,
    }
    jsonschema.validate(config, _schema(SCHEMA_PATH))


def test_settings_schema_validates_from_sample_yaml(sample_settings_yaml: str):
    jsonschema.validate(yaml.safe_load(sample_settings_yaml), _schema(SCHEMA_PATH))


def test_settings_schema_integer_country_code():
    jsonschema.validate({"country_code": 44}, _schema(SCHEMA_PATH))


@pytest.mark.parametrize(
    "config",
    [
        {"extra_field": "not allowed"},
        {"phone_strategy": "fuzzy"},
        {"dedupe_by_phone": "yes"},
        {"column_mapping": {"Email": "E-mail"}},
    ],
)
def test_settings_schema_rejects(config):
    with pytest.raises(ValidationError):
        jsonschema.validate(config, _schema(SCHEMA_PATH))


def test_project_schema_valid_example():
    bundle = {
        "version": 1,
        "settings": {"country_code": "91"},
        "column_mapping": {"Name": "Applicant"},
        "rows": [{"Applicant": "Ava", "Phone": 9876543210, "JD Link": None}],
    }
    jsonschema.validate(bundle, _schema(PROJECT_SCHEMA_PATH))


@pytest.mark.parametrize(
    "bundle",
    [
        {"settings": {}, "rows": []},
        {"version": 2, "settings": {}, "rows": []},
        {"version": 1, "settings": {}, "rows": [{"Name": ["a"]}]},
        {"version": 1, "settings": {}, "rows": [], "extra": 1},
    ],
)
def test_project_schema_rejects(bundle):
    with pytest.raises(ValidationError):
        jsonschema.validate(bundle, _schema(PROJECT_SCHEMA_PATH))
