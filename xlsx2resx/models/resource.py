from __future__ import annotations

from dataclasses import dataclass, field

"""ResourceEntry / ResourceSet domain models.

A ResourceSet is the reconciled collection for one base resource name, built
fresh for each inversion run from the canonical .resx document and all of its
discovered locale variants. It is discarded once the output sheet is written.
"""

__all__ = [
    "ResourceEntry",
    "ResourceSet",
    "MISSING_NEUTRAL",
    "MISSING_COMMENT",
]

# 正規ドキュメントに存在しないキー (翻訳のみ存在) の目印
MISSING_NEUTRAL = "MISSING"
MISSING_COMMENT = "WARNING"


@dataclass
class ResourceEntry:
    """One localizable string with its per-locale translations."""
    key: str  # unique within a ResourceSet
    comment: str = ""
    neutral_value: str = ""
    translations: dict[str, str] = field(default_factory=dict)  # locale code -> text

    @classmethod
    def missing(cls, key: str) -> ResourceEntry:
        """Synthetic entry for a key that only exists in a locale document."""
        return cls(key=key, comment=MISSING_COMMENT, neutral_value=MISSING_NEUTRAL)


@dataclass
class ResourceSet:
    """Reconciled collection of entries for one base resource name.

    Invariants:
        - every key in ``ordered_keys`` appears once and has an entry
        - every code in ``locale_codes`` comes from a discovered file
    """
    sheet_name: str
    locale_codes: list[str] = field(default_factory=list)
    ordered_keys: list[str] = field(default_factory=list)
    entries: dict[str, ResourceEntry] = field(default_factory=dict)

    def add_locale(self, code: str) -> None:
        if code not in self.locale_codes:
            self.locale_codes.append(code)

    def finalize_keys(self) -> None:
        """De-duplicate (first occurrence wins) and sort keys ascending."""
        unique = list(dict.fromkeys(self.ordered_keys))
        self.ordered_keys = sorted(unique)
