from __future__ import annotations

import io
import json
from pathlib import Path

import pandas as pd

from walink.cli import main as cli_main

"""End-to-end CLI runs: inputs -> exports, SUMMARY line and exit codes."""


def test_cli_csv_run_exports_and_summary(candidates_csv: Path, temp_workdir: Path, fresh_logging, capsys):
    code = cli_main([str(candidates_csv), "--out-dir", "out"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY sources=1/1 rows=4 usable=2 missing_link=2 invalid_phone=1 duplicates=1" in out

    usable = pd.read_csv(temp_workdir / "out" / "whatsapp_links.csv", dtype=str, keep_default_na=False)
    assert usable["Phone"].tolist() == ["919876543210", "919876501234"]
    assert (temp_workdir / "out" / "missing_jd_links.csv").exists()
    assert (temp_workdir / "out" / "invalid_phone_rows.csv").exists()
    links = (temp_workdir / "out" / "whatsapp_links.txt").read_text(encoding="utf-8").splitlines()
    assert len(links) == 2
    assert links[0].startswith("https://wa.me/919876543210?text=Dear%20*John%20Doe*%2C%0A")

    logs = list((temp_workdir / "logs").glob("issues-*.log"))
    assert len(logs) == 1
    types = [json.loads(l)["issue_type"] for l in logs[0].read_text(encoding="utf-8").splitlines()]
    assert types == ["INVALID_PHONE", "DUPLICATE_PHONE"]


def test_cli_uses_settings_file(write_settings: Path, temp_workdir: Path, fresh_logging, capsys):
    data = temp_workdir / "data" / "c.csv"
    data.write_text(
        "Applicant,Phone,Role,Skills,Summary,JD\nAva,9876543210,Engineer,Py,5y,jobs.example/1\n",
        encoding="utf-8",
    )
    code = cli_main([str(data), "--print-links"])
    out = capsys.readouterr().out
    assert code == 0
    assert "https://wa.me/919876543210?text=Hi%20Ava%2C%20role%20Engineer%20https%3A%2F%2Fjobs.example%2F1" in out


def test_cli_overrides(candidates_csv: Path, temp_workdir: Path, fresh_logging, capsys):
    template = temp_workdir / "t.txt"
    template.write_text("Hello {NAME}", encoding="utf-8")
    code = cli_main([
        str(candidates_csv),
        "--no-dedupe",
        "--no-auto-detect",
        "--country-code", "+44",
        "--template-file", str(template),
        "--query", "john",
        "--print-links",
    ])
    out = capsys.readouterr().out
    assert code == 0
    assert "https://wa.me/449876543210?text=Hello%20John%20Doe" in out
    assert "https://wa.me/449876543210?text=Hello%20John%20Again" in out
    assert "Riya" not in out
    assert "duplicates=0" in out


def test_cli_missing_columns_partial_exit(temp_workdir: Path, fresh_logging, capsys):
    data = temp_workdir / "data" / "thin.csv"
    data.write_text("Name,Phone\nAva,9876543210\n", encoding="utf-8")
    code = cli_main([str(data)])
    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR thin.csv: Missing required columns: Current Role, Key Skills, Profile Summary, JD Link" in out
    assert "usable=1" in out


def test_cli_map_option_fixes_missing_column(temp_workdir: Path, fresh_logging, capsys):
    data = temp_workdir / "data" / "c.csv"
    data.write_text(
        "Applicant,Cell,Role,Skills,Summary,JD\nAva,9876543210,Engineer,Py,5y,\n",
        encoding="utf-8",
    )
    code = cli_main([str(data), "--map", "Name=Applicant", "--map", "Phone=Cell"])
    assert code == 0
    assert "usable=1" in capsys.readouterr().out


def test_cli_invalid_map_is_fatal(temp_workdir: Path, fresh_logging, capsys):
    code = cli_main(["--sample", "--map", "Email=Mail"])
    assert code == 1
    assert "ERROR config: invalid --map" in capsys.readouterr().out


def test_cli_unreadable_input_partial_exit(temp_workdir: Path, fresh_logging, capsys):
    code = cli_main([str(temp_workdir / "data" / "absent.xlsx"), "--sample"])
    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR read: file not found" in out
    assert "SUMMARY sources=1/2" in out


def test_cli_no_input_is_fatal(temp_workdir: Path, fresh_logging, capsys):
    assert cli_main([]) == 1
    assert "ERROR no input" in capsys.readouterr().out


def test_cli_bad_config_is_fatal(temp_workdir: Path, fresh_logging, capsys):
    (temp_workdir / "config" / "settings.yml").write_text("bogus: 1\n", encoding="utf-8")
    assert cli_main(["--sample"]) == 1
    assert "ERROR config: config validation failed" in capsys.readouterr().out


def test_cli_stdin_paste(temp_workdir: Path, fresh_logging, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("Name\tPhone\tCurrent Role\tKey Skills\tProfile Summary\tJD Link\nAva\t9876543210\tEngineer\t\t\t\n"))
    code = cli_main(["-", "--print-links"])
    out = capsys.readouterr().out
    assert code == 0
    assert "https://wa.me/919876543210?text=Dear%20*Ava*" in out


def test_cli_write_template(temp_workdir: Path, fresh_logging, capsys):
    assert cli_main(["--write-template", "candidate_template.csv"]) == 0
    df = pd.read_csv(temp_workdir / "candidate_template.csv", dtype=str, keep_default_na=False)
    assert df.iloc[0]["Name"] == "John Doe"


def test_cli_project_save_and_reload(temp_workdir: Path, fresh_logging, capsys):
    assert cli_main(["--sample", "--country-code", "44", "--no-auto-detect", "--project-out", "p.json"]) == 0
    bundle = json.loads((temp_workdir / "p.json").read_text(encoding="utf-8"))
    assert bundle["settings"]["country_code"] == "44"
    assert len(bundle["rows"]) == 2
    capsys.readouterr()

    assert cli_main(["--project-in", "p.json", "--print-links", "--out-dir", "again"]) == 0
    out = capsys.readouterr().out
    assert "https://wa.me/449876543210?text=" in out
    assert "https://wa.me/449876501234?text=" in out


def test_cli_save_settings(temp_workdir: Path, fresh_logging, capsys):
    assert cli_main(["--sample", "--country-code", "971", "--strict-phone", "--save-settings"]) == 0
    saved = (temp_workdir / "config" / "settings.yml").read_text(encoding="utf-8")
    assert "country_code: '971'" in saved
    assert "phone_strategy: strict" in saved


def test_cli_inspect_data(candidates_csv: Path, temp_workdir: Path, fresh_logging, capsys):
    code = cli_main([str(candidates_csv), "--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SOURCE: candidates.csv" in out
    assert "'Current Role': 'Current Role'" in out
    assert not (temp_workdir / "output").exists()


def test_cli_rerun_replaces_previous_exports(candidates_csv: Path, temp_workdir: Path, fresh_logging, capsys):
    out_dir = temp_workdir / "out"
    assert cli_main([str(candidates_csv), "--out-dir", "out"]) == 0
    assert (out_dir / "invalid_phone_rows.csv").exists()
    assert (out_dir / "missing_jd_links.csv").exists()

    clean = temp_workdir / "data" / "clean.csv"
    clean.write_text(
        "Name,Phone,Current Role,Key Skills,Profile Summary,JD Link\n"
        "Ava,9876543210,Engineer,Py,5y,jobs.example/eng\n",
        encoding="utf-8",
    )
    assert cli_main([str(clean), "--out-dir", "out"]) == 0
    capsys.readouterr()
    assert sorted(p.name for p in out_dir.iterdir()) == ["whatsapp_links.csv", "whatsapp_links.txt"]
    links = (out_dir / "whatsapp_links.txt").read_text(encoding="utf-8").splitlines()
    assert len(links) == 1
    assert links[0].startswith("https://wa.me/919876543210?text=")
