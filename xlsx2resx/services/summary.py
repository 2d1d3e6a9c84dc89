from __future__ import annotations

from ..models.conversion_result import ConversionResult

"""SUMMARY line rendering.

Format::

    SUMMARY direction=<forward|inverse> sheets=<n> written=<n> failed=<n>
    warnings=<n> elapsed_sec=<seconds>
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: ConversionResult) -> str:
    """Render the SUMMARY line for one conversion run.

    >>> from datetime import datetime, timezone
    >>> from pathlib import Path
    >>> from xlsx2resx.models.conversion_result import Direction
    >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
    >>> r = ConversionResult(Direction.INVERSE, Path("a.resx"), start, end, sheets=["a"])
    >>> render_summary_line(r)
    'SUMMARY direction=inverse sheets=1 written=0 failed=0 warnings=0 elapsed_sec=2'
    """
    return (
        f"SUMMARY direction={result.direction.value} "
        f"sheets={len(result.sheets)} "
        f"written={result.files_written} "
        f"failed={result.failed_writes} "
        f"warnings={len(result.warnings)} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
