from __future__ import annotations

"""Error taxonomy shared by both conversion directions.

- InputNotFound / OutputPathNotFound: pre-flight checks in the CLI (fatal)
- MalformedDocument: unparseable .resx or unreadable workbook
- DiscoveryFailed: glob error while looking for locale variants
- WriteFailed: an output file could not be written
"""

__all__ = [
    "ConversionError",
    "InputNotFound",
    "OutputPathNotFound",
    "MalformedDocument",
    "DiscoveryFailed",
    "WriteFailed",
]


class ConversionError(Exception):
    """Base exception for conversion errors."""

    # error_type column of the JSON Lines error log
    error_type = "CONVERSION_ERROR"


class InputNotFound(ConversionError):
    """Raised when the input workbook / document / directory does not exist."""

    error_type = "INPUT_NOT_FOUND"


class OutputPathNotFound(ConversionError):
    """Raised when the output directory does not exist."""

    error_type = "OUTPUT_PATH_NOT_FOUND"


class MalformedDocument(ConversionError):
    """Raised when a resource document or workbook cannot be read or parsed."""

    error_type = "MALFORMED_DOCUMENT"

    def __init__(self, path: object, reason: object) -> None:
        self.path = str(path)
        self.reason = str(reason)
        super().__init__(f"{self.path}: {self.reason}")


class DiscoveryFailed(ConversionError):
    """Raised when locale variant discovery fails."""

    error_type = "DISCOVERY_FAILED"


class WriteFailed(ConversionError):
    """Raised when an output file cannot be written."""

    error_type = "WRITE_FAILED"

    def __init__(self, path: object, reason: object) -> None:
        self.path = str(path)
        self.reason = str(reason)
        super().__init__(f"error writing {self.path}: {self.reason}")
