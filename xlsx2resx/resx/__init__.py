"""ResX resource documents: codec and locale variant discovery."""

from .document import RESX_HEADERS, ResxData, parse_resx, read_resx, serialize_resx
from .locator import discover_locale_files, get_path_info

__all__ = [
    "RESX_HEADERS",
    "ResxData",
    "parse_resx",
    "read_resx",
    "serialize_resx",
    "discover_locale_files",
    "get_path_info",
]
