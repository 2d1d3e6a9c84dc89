from __future__ import annotations

import zipfile
from pathlib import Path

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from ..errors import MalformedDocument
from ..models.tabular import SKIP_IDENTIFIER, TabularModel

"""Excel reader: workbook -> TabularModel (one per worksheet).

Sheet layout:
  1行目: identifier, description, <locale label>...
  2行目以降: データ行

All cells are read as text. pandas' NaN conversion is disabled so strings
such as "NA" or "null" survive as translations, and empty cells become "".
"""

__all__ = [
    "read_excel_file",
    "normalize_sheet",
    "read_workbook",
]

# identifier / description の 2 列
LEADING_COLUMNS = 2


def read_excel_file(path: Path) -> dict[str, pd.DataFrame]:
    """Read an Excel file returning raw string DataFrames keyed by sheet name.

    Raises:
        MalformedDocument: the file is missing, not a workbook, or corrupt
    """
    try:
        xls = pd.ExcelFile(path, engine="openpyxl")
    except (OSError, ValueError, KeyError, zipfile.BadZipFile, InvalidFileException) as e:
        raise MalformedDocument(path, f"cannot open workbook: {e}") from e

    dfs: dict[str, pd.DataFrame] = {}
    with xls:
        for name in xls.sheet_names:
            try:
                # ヘッダなしで生読み, NA 変換なし
                df = xls.parse(name, header=None, dtype=str, na_filter=False)
            except (ValueError, KeyError) as e:
                raise MalformedDocument(path, f"cannot read sheet '{name}': {e}") from e
            dfs[str(name)] = df
    return dfs


def _cell(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def normalize_sheet(df: pd.DataFrame, sheet_name: str) -> TabularModel:
    """Build a TabularModel from a raw header-less DataFrame.

    Steps:
    1. Row 0 is the header; its first two cells are skipped, every later
       non-empty cell is a locale label (repeats collapse to one bucket)
    2. Rows whose identifier is empty or "-" are skipped entirely
    3. Description: first non-empty value wins
    4. Cells at index >= 2 go to the label of their header column
    """
    model = TabularModel(sheet_name=sheet_name.strip(" "))
    if df.shape[0] == 0:
        return model

    records = df.values.tolist()
    header = [_cell(c) for c in records[0]]

    column_labels: dict[int, str] = {}
    for index, text in enumerate(header):
        if index < LEADING_COLUMNS or text == "":
            continue
        column_labels[index] = text
        model.add_locale(text)

    for raw in records[1:]:
        row = [_cell(c) for c in raw]
        identifier = row[0] if row else ""
        if identifier == "" or identifier == SKIP_IDENTIFIER:
            continue
        description = row[1] if len(row) > 1 else ""
        model.set_description(identifier, description)
        for index, text in enumerate(row[LEADING_COLUMNS:], start=LEADING_COLUMNS):
            label = column_labels.get(index)
            if label is None:
                # ヘッダより右側 / 空ヘッダ列のセルは無視
                continue
            model.set_value(label, identifier, text)
    return model


def read_workbook(path: Path) -> list[TabularModel]:
    """Read every worksheet of ``path`` into a TabularModel, in workbook order."""
    raw = read_excel_file(path)
    return [normalize_sheet(df, name) for name, df in raw.items()]
