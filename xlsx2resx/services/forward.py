from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..errors import InputNotFound, WriteFailed
from ..excel.reader import read_workbook
from ..logging.error_log import ErrorLogBuffer
from ..models.conversion_result import ConversionResult, Direction, OutputFile, OutputStatus
from ..models.error_record import ErrorRecord
from ..models.tabular import NEUTRAL_LOCALE, TabularModel
from ..resx.document import ResxData, serialize_resx
from .progress import ProgressTracker

"""Forward conversion: workbook -> per-locale .resx documents.

Each worksheet is processed independently and produces its own family of
documents named after the worksheet::

    <output>/<sheet>.resx          ("neutral" column)
    <output>/<sheet>.<locale>.resx (every other locale column)

A failed write of one locale document is logged and recorded; the remaining
locales are still written.
"""

__all__ = [
    "RESX_EXTENSION",
    "is_workbook_path",
    "scan_workbooks",
    "partition_sheet",
    "output_filename",
    "write_document",
    "convert_sheet",
    "convert_workbook",
]

logger = logging.getLogger(__name__)

RESX_EXTENSION = ".resx"
WORKBOOK_SUFFIX = ".xlsx"
LOCK_FILE_PREFIX = "~$"


def is_workbook_path(path: Path) -> bool:
    """``.xlsx`` files, excluding Office lock files (``~$name.xlsx``)."""
    return path.suffix == WORKBOOK_SUFFIX and not path.name.startswith(LOCK_FILE_PREFIX)


def scan_workbooks(directory: Path) -> list[Path]:
    """Scan directory for workbooks (non-recursive, sorted).

    Raises:
        InputNotFound: the directory does not exist
    """
    if not directory.is_dir():
        raise InputNotFound(f"directory not found: {directory}")
    return sorted(p for p in directory.iterdir() if p.is_file() and is_workbook_path(p))


def _resource_name(identifier: str) -> str:
    return identifier.replace(" ", "_")


def partition_sheet(model: TabularModel) -> dict[str, list[ResxData]]:
    """Split a sheet into one list of data triples per locale column.

    Identifiers with empty text for a locale produce no entry for it.
    """
    buckets: dict[str, list[ResxData]] = {}
    for locale in model.locale_columns:
        values = model.values_by_locale[locale]
        items: list[ResxData] = []
        for identifier in model.identifiers:
            text = values.get(identifier, "")
            if not text:
                continue
            items.append(
                ResxData(
                    name=_resource_name(identifier),
                    value=text,
                    comment=model.descriptions.get(identifier, ""),
                )
            )
        buckets[locale] = items
    return buckets


def output_filename(sheet_name: str, locale: str) -> str:
    sheet = sheet_name.strip(" ")
    if locale == NEUTRAL_LOCALE:
        return f"{sheet}{RESX_EXTENSION}"
    return f"{sheet}.{locale}{RESX_EXTENSION}"


def write_document(path: Path, items: list[ResxData]) -> None:
    """Serialize and write one .resx document.

    Raises:
        WriteFailed: the file could not be written
    """
    content = serialize_resx(items)
    try:
        path.write_bytes(content)
    except OSError as e:
        raise WriteFailed(path, e) from e


def convert_sheet(
    model: TabularModel,
    output_dir: Path,
    source: Path,
    error_log: ErrorLogBuffer | None = None,
) -> list[OutputFile]:
    """Write every locale document of one worksheet (partial success)."""
    outputs: list[OutputFile] = []
    for locale, items in partition_sheet(model).items():
        path = output_dir / output_filename(model.sheet_name, locale)
        try:
            write_document(path, items)
        except WriteFailed as e:
            logger.error("%s", e)
            if error_log is not None:
                error_log.append(
                    ErrorRecord.create(
                        file=source.name,
                        sheet=model.sheet_name,
                        locale=locale,
                        error_type=e.error_type,
                        message=e.reason,
                    )
                )
            outputs.append(
                OutputFile(
                    path=path,
                    sheet=model.sheet_name,
                    locale=locale,
                    status=OutputStatus.FAILED,
                    error=e.reason,
                )
            )
            continue
        logger.info("written filename: %s", path)
        outputs.append(
            OutputFile(path=path, sheet=model.sheet_name, locale=locale, entries=len(items))
        )
    return outputs


def convert_workbook(
    input_path: Path,
    output_dir: Path,
    error_log: ErrorLogBuffer | None = None,
) -> ConversionResult:
    """Convert every worksheet of ``input_path`` into .resx documents.

    Raises:
        MalformedDocument: the workbook cannot be read
    """
    result = ConversionResult(
        direction=Direction.FORWARD, source=input_path, start_time=datetime.now(UTC)
    )
    sheets = read_workbook(input_path)

    with ProgressTracker(len(sheets), description="Converting sheets") as progress:
        for model in sheets:
            progress.start_sheet(model.sheet_name)
            if not model.locale_columns:
                message = f"sheet '{model.sheet_name}' has no locale columns, nothing to write"
                logger.warning(message)
                result.warnings.append(message)
                progress.finish_sheet()
                continue
            logger.debug(
                "sheet=%s locales=%s identifiers=%d",
                model.sheet_name,
                model.locale_columns,
                len(model.identifiers),
            )
            outputs = convert_sheet(model, output_dir, input_path, error_log)
            result.sheets.append(model.sheet_name)
            result.outputs.extend(outputs)
            progress.set_postfix(
                written=result.files_written,
                failed=result.failed_writes,
            )
            progress.finish_sheet()

    return result.finish(datetime.now(UTC))
