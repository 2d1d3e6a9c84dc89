from __future__ import annotations

from dataclasses import dataclass, field

"""TabularModel: the sheet-side view of one worksheet.

Header row: ``identifier, description, <locale labels...>``. The first two
header columns are fixed; locale labels follow in discovery order. One label,
``neutral``, names the canonical (suffix-less) resource document.
"""

__all__ = [
    "TabularModel",
    "IDENTIFIER_HEADER",
    "DESCRIPTION_HEADER",
    "NEUTRAL_LOCALE",
    "SKIP_IDENTIFIER",
]

IDENTIFIER_HEADER = "identifier"
DESCRIPTION_HEADER = "description"
NEUTRAL_LOCALE = "neutral"
SKIP_IDENTIFIER = "-"


@dataclass
class TabularModel:
    sheet_name: str
    locale_columns: list[str] = field(default_factory=list)
    identifiers: list[str] = field(default_factory=list)  # row order
    descriptions: dict[str, str] = field(default_factory=dict)
    values_by_locale: dict[str, dict[str, str]] = field(default_factory=dict)

    def add_locale(self, label: str) -> None:
        # 重複ラベルは最初の出現位置に集約
        if label not in self.values_by_locale:
            self.locale_columns.append(label)
            self.values_by_locale[label] = {}

    def add_identifier(self, identifier: str) -> None:
        if identifier not in self.descriptions:
            self.identifiers.append(identifier)
            self.descriptions[identifier] = ""

    def set_description(self, identifier: str, description: str) -> None:
        """Record a description; the first non-empty one wins."""
        self.add_identifier(identifier)
        if description and not self.descriptions[identifier]:
            self.descriptions[identifier] = description

    def set_value(self, locale: str, identifier: str, text: str) -> None:
        self.add_locale(locale)
        self.values_by_locale[locale][identifier] = text

    def header_row(self) -> list[str]:
        return [IDENTIFIER_HEADER, DESCRIPTION_HEADER, *self.locale_columns]

    def rows(self) -> list[list[str]]:
        """Data rows in ``identifiers`` order, cells aligned with ``header_row``."""
        out: list[list[str]] = []
        for identifier in self.identifiers:
            row = [identifier, self.descriptions.get(identifier, "")]
            for locale in self.locale_columns:
                row.append(self.values_by_locale[locale].get(identifier, ""))
            out.append(row)
        return out
