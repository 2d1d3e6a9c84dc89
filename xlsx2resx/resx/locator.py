from __future__ import annotations

import glob
import logging
import os
from pathlib import Path

from ..errors import DiscoveryFailed
from ..logging.init import TRACE_LEVEL

"""LocaleFileLocator: discover sibling locale variants of a .resx document.

Naming convention::

    Resources.resx        canonical / neutral document
    Resources.fr.resx     locale "fr"
    Resources.se.resx     locale "se"
"""

__all__ = [
    "get_path_info",
    "locale_code_for",
    "discover_locale_files",
]

logger = logging.getLogger(__name__)


def get_path_info(path: str, separator: str = os.sep) -> tuple[str, str]:
    """Split a document path into ``(base_dir, base_name)``.

    ``base_dir`` keeps its trailing separator; ``base_name`` is the file name
    without extension. The separator is explicit so that Windows paths can be
    handled on any host.

    >>> get_path_info("./Resx/Translations.resx", "/")
    ('./Resx/', 'Translations')
    """
    cut = path.rfind(separator)
    base_dir = path[: cut + 1] if cut >= 0 else ""
    file_name = path[cut + 1 :]
    stem, dot, _ext = file_name.rpartition(".")
    base_name = stem if dot else file_name
    return base_dir, base_name


def locale_code_for(match: str, base_dir: str, base_name: str, ext: str) -> str:
    """Derive the locale code from a matched variant path.

    ./Resx/Resources.se.resx -> Resources.se.resx -> se.resx -> se
    """
    code = match.removeprefix(base_dir)
    code = code.removeprefix(base_name + ".")
    return code.removesuffix(ext)


def discover_locale_files(path: Path) -> list[tuple[str, Path]]:
    """Find ``<base_name>.<locale><ext>`` siblings of ``path`` (sorted).

    Raises:
        DiscoveryFailed: the directory could not be scanned
    """
    ext = path.suffix
    base_dir, base_name = get_path_info(str(path))
    pattern = glob.escape(base_dir + base_name) + ".*" + glob.escape(ext)
    logger.log(TRACE_LEVEL, "base dir=%s base name=%s pattern=%s", base_dir, base_name, pattern)
    try:
        matches = sorted(glob.glob(pattern))
    except OSError as e:
        raise DiscoveryFailed(f"locale discovery failed for {path}: {e}") from e

    found: list[tuple[str, Path]] = []
    for match in matches:
        code = locale_code_for(match, base_dir, base_name, ext)
        logger.debug("found locale file: %s culture code: %s", match, code)
        found.append((code, Path(match)))
    return found
