from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display service with tqdm (TTY only).

This module provides progress tracking for the forward conversion:
- one tqdm instance per workbook, one step per worksheet
- 非 TTY (CI, watch mode under a service manager) では無効化し, ANSI 制御
  シーケンスをログに混ぜない
- TTY detection using sys.stdout.isatty()

The bar shows the worksheet being converted and, as postfix, the running
count of written / failed .resx files.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress tracker using tqdm for worksheet conversion.

    In non-TTY environments the bar is disabled; the sheet counter is still
    maintained so callers do not need to branch.
    """

    def __init__(self, total_sheets: int, *, description: str = "Converting sheets") -> None:
        """Initialize progress tracker.

        Args:
            total_sheets: Number of worksheets in the workbook
            description: Description for the progress bar
        """
        self.total_sheets = total_sheets
        self.description = description
        self.current_sheet = 0

        # Create tqdm instance only if TTY is enabled
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_sheets,
                desc=description,
                unit="sheet",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def start_sheet(self, sheet_name: str) -> None:
        """Start converting a worksheet.

        Args:
            sheet_name: Name of the worksheet, shown next to the description
        """
        self.current_sheet += 1
        if self.enabled and self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({sheet_name})")

    def finish_sheet(self) -> None:
        """Advance the bar by one worksheet and restore the base description."""
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_description(self.description)

    def set_postfix(self, **kwargs: Any) -> None:
        """Set postfix information (stats) on the progress bar.

        Args:
            **kwargs: Key-value pairs to show as postfix (e.g. written=3, failed=0)
        """
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        """Close the progress bar (safe to call more than once)."""
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
