from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..excel.writer import write_workbook
from ..logging.init import TRACE_LEVEL
from ..models.conversion_result import ConversionResult, Direction, OutputFile
from ..models.resource import ResourceEntry, ResourceSet
from ..models.tabular import NEUTRAL_LOCALE, TabularModel
from ..resx.document import ResxData, read_resx
from ..resx.locator import discover_locale_files, get_path_info

"""Inverse conversion: .resx document family -> workbook.

1. canonical document seeds the key set
2. every discovered locale variant is merged in; keys only present in a
   variant get a synthetic MISSING / WARNING entry
3. keys are de-duplicated and sorted
4. the reconciled set becomes one sheet: identifier, description, neutral,
   <locale codes in discovery order>
5. the sheet is written to ``<output>/<base name>.xlsx`` (sheet-keyed overwrite)

All-or-nothing: one unreadable variant aborts the whole run.
"""

__all__ = [
    "WORKBOOK_EXTENSION",
    "build_resource_set",
    "to_tabular",
    "invert_documents",
]

logger = logging.getLogger(__name__)

WORKBOOK_EXTENSION = ".xlsx"


def build_resource_set(
    sheet_name: str,
    canonical: Iterable[ResxData],
    variants: Iterable[tuple[str, Iterable[ResxData]]],
) -> tuple[ResourceSet, list[str]]:
    """Reconcile the canonical triples with every locale variant.

    Returns:
        (resource set, warnings) - one warning per key that exists in a
        locale document but not in the canonical one
    """
    resources = ResourceSet(sheet_name=sheet_name)
    warnings: list[str] = []

    for item in canonical:
        resources.ordered_keys.append(item.name)
        resources.entries[item.name] = ResourceEntry(
            key=item.name, comment=item.comment, neutral_value=item.value
        )

    for code, items in variants:
        resources.add_locale(code)
        for item in items:
            logger.log(
                TRACE_LEVEL,
                "\\ found translation for: %s value: %s",
                item.name,
                item.value.replace("\n", " "),
            )
            resources.ordered_keys.append(item.name)
            entry = resources.entries.get(item.name)
            if entry is None:
                message = f"{item.name} does not exist in neutral language"
                logger.warning(message)
                warnings.append(message)
                entry = ResourceEntry.missing(item.name)
                resources.entries[item.name] = entry
            entry.translations[code] = item.value

    resources.finalize_keys()
    return resources, warnings


def to_tabular(resources: ResourceSet) -> TabularModel:
    """Project a ResourceSet onto the sheet layout (rows in sorted key order)."""
    model = TabularModel(sheet_name=resources.sheet_name)
    model.add_locale(NEUTRAL_LOCALE)
    for code in resources.locale_codes:
        model.add_locale(code)

    for key in resources.ordered_keys:
        entry = resources.entries[key]
        model.set_description(key, entry.comment)
        model.set_value(NEUTRAL_LOCALE, key, entry.neutral_value)
        for code, text in entry.translations.items():
            model.set_value(code, key, text)
    return model


def invert_documents(resx_path: Path, output_dir: Path) -> ConversionResult:
    """Aggregate ``resx_path`` and its locale variants into one workbook.

    Raises:
        MalformedDocument: the canonical document or any variant is unreadable
        DiscoveryFailed: locale variants could not be discovered
        WriteFailed: the output workbook could not be written
    """
    result = ConversionResult(
        direction=Direction.INVERSE, source=resx_path, start_time=datetime.now(UTC)
    )
    canonical = read_resx(resx_path)
    _, base_name = get_path_info(str(resx_path))

    variants: list[tuple[str, list[ResxData]]] = []
    for code, path in discover_locale_files(resx_path):
        variants.append((code, read_resx(path)))

    resources, warnings = build_resource_set(base_name, canonical, variants)
    result.warnings.extend(warnings)
    model = to_tabular(resources)

    target = output_dir / f"{base_name}{WORKBOOK_EXTENSION}"
    rows = write_workbook(target, model)
    logger.info("written filename: %s", target)

    result.sheets.append(model.sheet_name)
    result.outputs.append(OutputFile(path=target, sheet=model.sheet_name, locale=None, entries=rows))
    return result.finish(datetime.now(UTC))
