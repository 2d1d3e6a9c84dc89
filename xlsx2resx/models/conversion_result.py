from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

"""Conversion result models.

ConversionResult aggregates one run of either converter: which sheets were
processed, the status of every output file, and the warnings raised while
reconciling keys. It feeds the SUMMARY line and the CLI exit code.
"""

__all__ = [
    "Direction",
    "OutputStatus",
    "OutputFile",
    "ConversionResult",
]


class Direction(Enum):
    """Conversion direction.

    - FORWARD: workbook -> per-locale .resx documents
    - INVERSE: .resx document family -> workbook
    """
    FORWARD = "forward"
    INVERSE = "inverse"


class OutputStatus(Enum):
    WRITTEN = "written"
    FAILED = "failed"


@dataclass(frozen=True)
class OutputFile:
    """One output file produced (or attempted) by a conversion."""
    path: Path
    sheet: str
    locale: str | None  # None for the workbook written by the inverse direction
    status: OutputStatus = OutputStatus.WRITTEN
    entries: int = 0  # data elements / data rows written
    error: str | None = None


@dataclass
class ConversionResult:
    direction: Direction
    source: Path
    start_time: datetime
    end_time: datetime | None = None
    sheets: list[str] = field(default_factory=list)
    outputs: list[OutputFile] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def files_written(self) -> int:
        return sum(1 for o in self.outputs if o.status is OutputStatus.WRITTEN)

    @property
    def failed_writes(self) -> int:
        return sum(1 for o in self.outputs if o.status is OutputStatus.FAILED)

    @property
    def elapsed_seconds(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    def finish(self, end_time: datetime) -> ConversionResult:
        self.end_time = end_time
        return self
