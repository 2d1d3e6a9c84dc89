from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from xlsx2resx.cli import main as cli_main
from xlsx2resx.errors import WriteFailed

"""Error log contract: JSON Lines under ./logs, fixed key set."""

FIELDS = {"timestamp", "file", "sheet", "locale", "error_type", "message"}


def _read_log(temp_workdir: Path) -> list[dict]:
    logs = sorted((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    return [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]


def test_no_log_file_on_success(temp_workdir: Path, make_excel):
    src = make_excel(
        temp_workdir / "data" / "ok.xlsx",
        {"S": [["identifier", "description", "neutral"], ["K", "", "v"]]},
    )
    assert cli_main(["--input", str(src), "--output", "out"]) == 0
    assert not (temp_workdir / "logs").exists()


def test_run_level_failure_record(temp_workdir: Path, capsys):
    bad = temp_workdir / "data" / "bad.xlsx"
    bad.write_bytes(b"junk")
    cli_main(["--input", str(bad), "--output", "out"])

    records = _read_log(temp_workdir)
    assert len(records) == 1
    rec = records[0]
    assert set(rec) == FIELDS
    assert rec["file"] == "bad.xlsx"
    assert rec["locale"] is None
    assert rec["error_type"] == "MALFORMED_DOCUMENT"
    assert rec["timestamp"].endswith("Z")
    assert "INFO error log:" in capsys.readouterr().out


def test_locale_level_failure_record(temp_workdir: Path, make_excel):
    src = make_excel(
        temp_workdir / "data" / "book.xlsx",
        {"S": [["identifier", "description", "neutral", "fr"], ["K", "", "v", "fv"]]},
    )

    def refuse_fr(path: Path, items):
        raise WriteFailed(path, "permission denied")

    with patch("xlsx2resx.services.forward.write_document", side_effect=refuse_fr):
        cli_main(["--input", str(src), "--output", "out"])

    records = _read_log(temp_workdir)
    assert [(r["sheet"], r["locale"], r["error_type"]) for r in records] == [
        ("S", "neutral", "WRITE_FAILED"),
        ("S", "fr", "WRITE_FAILED"),
    ]
    assert all(set(r) == FIELDS for r in records)


def test_log_dir_from_config(temp_workdir: Path):
    (temp_workdir / "config").mkdir()
    (temp_workdir / "config" / "xlsx2resx.yml").write_text("log_dir: ./var/log\n", encoding="utf-8")
    bad = temp_workdir / "data" / "bad.xlsx"
    bad.write_bytes(b"junk")
    cli_main(["--input", str(bad), "--output", "out"])
    assert len(list((temp_workdir / "var" / "log").glob("errors-*.log"))) == 1
