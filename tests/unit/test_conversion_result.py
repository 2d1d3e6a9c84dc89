from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

from xlsx2resx.models.conversion_result import (
    ConversionResult,
    Direction,
    OutputFile,
    OutputStatus,
)


def test_counts_by_status():
    start = datetime(2024, 5, 1, tzinfo=timezone.utc)
    result = ConversionResult(Direction.FORWARD, Path("book.xlsx"), start)
    result.outputs.append(OutputFile(Path("S.resx"), "S", "neutral", entries=2))
    result.outputs.append(OutputFile(Path("S.fr.resx"), "S", "fr", OutputStatus.FAILED, error="x"))
    result.outputs.append(OutputFile(Path("S.de.resx"), "S", "de"))

    assert result.files_written == 2
    assert result.failed_writes == 1
    assert result.elapsed_seconds == 0.0

    assert result.finish(start + timedelta(milliseconds=250)) is result
    assert result.elapsed_seconds == 0.25


def test_direction_values():
    assert [d.value for d in Direction] == ["forward", "inverse"]
    assert OutputFile(Path("a"), "a", None).status is OutputStatus.WRITTEN
