# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from xlsx2resx.logging.init import reset_logging

CANONICAL_RESX = """<?xml version="1.0" encoding="utf-8"?>
<root>
  <resheader name="resmimetype">
    <value>text/microsoft-resx</value>
  </resheader>
  <resheader name="version">
    <value>2.0</value>
  </resheader>
  <data name="A" xml:space="preserve">
    <value>Hello</value>
    <comment>greeting</comment>
  </data>
  <data name="B" xml:space="preserve">
    <value>World</value>
  </data>
</root>
"""

FR_RESX = """<?xml version="1.0" encoding="utf-8"?>
<root>
  <data name="A" xml:space="preserve">
    <value>Bonjour</value>
  </data>
  <data name="C" xml:space="preserve">
    <value>Bonus</value>
  </data>
</root>
"""


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "data").mkdir()
    (tmp_path / "out").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("XLSX2RESX_INPUT", raising=False)
    monkeypatch.delenv("XLSX2RESX_OUTPUT", raising=False)
    return tmp_path


@pytest.fixture()
def make_excel() -> Callable[[Path, dict[str, list[list[object]]]], Path]:
    """Write a header-less workbook: sheet name -> list of rows."""
    def _make(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def resx_family(temp_workdir: Path) -> Path:
    """Resources.resx (A, B) + Resources.fr.resx (A, C); returns the canonical path."""
    resx_dir = temp_workdir / "data" / "Resx"
    resx_dir.mkdir()
    canonical = resx_dir / "Resources.resx"
    canonical.write_text(CANONICAL_RESX, encoding="utf-8")
    (resx_dir / "Resources.fr.resx").write_text(FR_RESX, encoding="utf-8")
    return canonical


@pytest.fixture()
def read_sheet() -> Callable[[Path, str], list[list[str]]]:
    """Read a sheet back as rows of strings."""
    def _read(path: Path, sheet: str) -> list[list[str]]:
        df = pd.read_excel(path, sheet_name=sheet, header=None, dtype=str, na_filter=False)
        return df.values.tolist()
    return _read
