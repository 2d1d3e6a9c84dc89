"""Domain models for the workbook <-> .resx converter.

This package contains the data model shared by both conversion directions.
"""

from .conversion_result import ConversionResult, Direction, OutputFile, OutputStatus
from .error_record import ErrorRecord
from .resource import ResourceEntry, ResourceSet
from .tabular import TabularModel

__all__ = [
    # Resource side
    "ResourceEntry",
    "ResourceSet",
    # Sheet side
    "TabularModel",
    # Results
    "ConversionResult",
    "Direction",
    "OutputFile",
    "OutputStatus",
    "ErrorRecord",
]
