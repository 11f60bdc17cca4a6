# menu_ingest/models.py
"""
Menu ingestion data model.

Parsed values (MenuItem / OptionGroup) flow out of the text parsers; the
resolved values (ResolvedOption / ImageMatch) are what the reconciler writes
into the catalog store. Prices on MenuItem are major-unit amounts (VND);
ResolvedOption prices are already converted to minor units.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


DEFAULT_CATEGORY = "Khác"
STANDALONE_GROUP = "Tùy chọn"


class OptionType:
    SIZE = "SIZE"
    SAUCE = "SAUCE"
    OTHER = "OTHER"


@dataclass(frozen=True)
class OptionGroup:
    """A labelled cluster of option choices for one menu item."""
    group: str
    items: Tuple[str, ...] = ()


@dataclass
class MenuItem:
    """One sellable row of the source document."""
    name: str
    description: str = ""
    category: str = DEFAULT_CATEGORY
    price: float = 0.0
    options: List[OptionGroup] = field(default_factory=list)

    @property
    def option_count(self) -> int:
        return sum(len(g.items) for g in self.options)


@dataclass(frozen=True)
class ResolvedOption:
    name: str
    description: str
    price: int  # minor units
    type: str = OptionType.OTHER
    order: int = 0
    is_required: bool = False
    is_available: bool = True

    def to_row(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "type": self.type,
            "is_required": int(self.is_required),
            "is_available": int(self.is_available),
            "sort_order": self.order,
        }


@dataclass(frozen=True)
class ImageMatch:
    file: str
    score: float  # 0-100


@dataclass
class ImportSummary:
    """Per-run tallies printed at the end of every import."""
    success: int = 0
    skipped: int = 0
    errors: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "success": self.success,
            "skipped": self.skipped,
            "errors": self.errors,
        }
