from __future__ import annotations

import zipfile
from datetime import datetime
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import IllegalCharacterError, InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet
from openpyxl.writer.excel import ExcelWriter

from ..errors import WriteFailed
from ..models.tabular import TabularModel

"""Excel writer: TabularModel -> workbook sheet.

The target sheet is keyed by ``model.sheet_name``. If the workbook already
exists only that sheet is rebuilt (other sheets are kept, the sheet keeps its
position); otherwise a new workbook is created.

Output requirements:
- every cell is a plain string cell: text starting with ``=`` is never a
  formula, ``#N/A`` is never an error value, ``007`` stays ``007``
- re-running with the same model gives a byte-identical file
  (document properties and zip entry times are pinned)
"""

__all__ = [
    "write_workbook",
    "workbook_bytes",
]

# docProps/core.xml の created / modified (UTC 扱い)
PINNED_TIMESTAMP = datetime(2000, 1, 1)
# zip の最小日付
ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def _normalize_archive(data: bytes) -> bytes:
    """Repack an xlsx archive with fixed entry times, keeping entry order."""
    out = BytesIO()
    with zipfile.ZipFile(BytesIO(data)) as src, zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as dst:
        for info in src.infolist():
            entry = zipfile.ZipInfo(info.filename, date_time=ZIP_DATE_TIME)
            entry.compress_type = zipfile.ZIP_DEFLATED
            entry.external_attr = 0o600 << 16
            dst.writestr(entry, src.read(info.filename))
    return out.getvalue()


def workbook_bytes(wb: Workbook) -> bytes:
    """Serialize ``wb`` deterministically.

    ``Workbook.save`` stamps the current time into the document properties,
    so the archive is written through openpyxl's ExcelWriter directly.
    """
    wb.properties.created = PINNED_TIMESTAMP
    wb.properties.modified = PINNED_TIMESTAMP
    buffer = BytesIO()
    archive = zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED, allowZip64=True)
    ExcelWriter(wb, archive).save()
    return _normalize_archive(buffer.getvalue())


def _open_workbook(path: Path, sheet_name: str) -> Workbook:
    if path.exists():
        return load_workbook(path)
    # 新規ブックも一度保存して読み直し, 既存ブック上書きと同じ経路にそろえる
    wb = Workbook()
    wb.active.title = sheet_name
    return load_workbook(BytesIO(workbook_bytes(wb)))


def _replace_sheet(wb: Workbook, sheet_name: str) -> Worksheet:
    """Drop ``sheet_name`` (if present) and recreate it empty at the same position."""
    if sheet_name in wb.sheetnames:
        index = wb.sheetnames.index(sheet_name)
        wb.remove(wb[sheet_name])
        return wb.create_sheet(sheet_name, index)
    return wb.create_sheet(sheet_name)


def _write_rows(ws: Worksheet, rows: list[list[str]]) -> None:
    for r, row in enumerate(rows, start=1):
        for c, text in enumerate(row, start=1):
            if not text:
                continue
            cell = ws.cell(row=r, column=c, value=text)
            # openpyxl は "=..." を数式, "#N/A" 等をエラー値として解釈する
            cell.data_type = "s"


def write_workbook(path: Path, model: TabularModel) -> int:
    """Write ``model`` to ``path``; returns the number of data rows written.

    Args:
        path: target workbook (created when missing)
        model: sheet to write; its ``sheet_name`` selects the sheet to replace

    Raises:
        WriteFailed: the workbook could not be opened, built or saved
    """
    try:
        wb = _open_workbook(path, model.sheet_name)
        ws = _replace_sheet(wb, model.sheet_name)
        _write_rows(ws, [model.header_row(), *model.rows()])
        path.write_bytes(workbook_bytes(wb))
    except (
        OSError,
        ValueError,
        KeyError,
        zipfile.BadZipFile,
        InvalidFileException,
        IllegalCharacterError,
    ) as e:
        raise WriteFailed(path, e) from e
    return len(model.identifiers)
