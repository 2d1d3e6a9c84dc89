"""Workbook I/O built on pandas + openpyxl."""

from .reader import normalize_sheet, read_excel_file, read_workbook
from .writer import write_workbook

__all__ = [
    "normalize_sheet",
    "read_excel_file",
    "read_workbook",
    "write_workbook",
]
