# menu_ingest/parsers/menu_markdown.py
"""
Markdown Menu Parser: section scanner + row decoder

Recognizes the conventions of the restaurant menu document only:

    ## 2. Gà giòn vui vẻ
    | Tên Món | Mô Tả | Tùy Chọn | Giá |
    |---|---|---|---|
    | **2 MIẾNG GÀ** | 2 Miếng Gà | **Chọn Gà:**<br>+ Gà Giòn / Gà Sốt Cay | 66.000 |
    ...
    ### ℹ️ Bảng giá Upsize        <- scanning stops here

Scanner states:
  SEEKING_TABLE  outside any table (start, or right after a section header)
  IN_TABLE       header row seen; pipe rows are menu rows

``step(state, line)`` is pure: it returns the next state and at most one
event. ``parse_markdown_menu`` drives it and assembles MenuItems.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import re

from menu_ingest.errors import SourceNotFoundError
from menu_ingest.models import DEFAULT_CATEGORY, MenuItem
from menu_ingest.parsers.option_parser import parse_option_block
from menu_ingest.parsers.price_parser import parse_price


SECTION_RE = re.compile(r"^## \d+\.\s*(.+)")
SEPARATOR_RE = re.compile(r"^\|[\s:|-]*-[\s:|-]*$")
TERMINATORS: Tuple[str, ...] = ("Bảng giá Upsize", "ℹ️")
TABLE_HEADER_MARKER = "Tên Món"

# Header substrings per logical column (substring containment, first header wins)
NAME_MARKERS: Tuple[str, ...] = ("Tên",)
DESCRIPTION_MARKERS: Tuple[str, ...] = ("Mô Tả", "Tả")
OPTION_MARKERS: Tuple[str, ...] = ("Tùy Chọn", "Chọn")
PRICE_MARKERS: Tuple[str, ...] = ("Giá",)


class ScanState:
    SEEKING_TABLE = "SEEKING_TABLE"
    IN_TABLE = "IN_TABLE"
    DONE = "DONE"


# ── Row decoding ─────────────────────────────────────

def split_cells(line: str) -> List[str]:
    """Split a pipe row; cells are trimmed and empty cells dropped."""
    return [c.strip() for c in line.split("|") if c.strip()]


def _find_column(headers: Sequence[str], markers: Sequence[str]) -> Optional[int]:
    for idx, header in enumerate(headers):
        if any(m in header for m in markers):
            return idx
    return None


@dataclass(frozen=True)
class ColumnMap:
    name: Optional[int] = None
    description: Optional[int] = None
    options: Optional[int] = None
    price: Optional[int] = None

    @classmethod
    def from_headers(cls, headers: Sequence[str]) -> "ColumnMap":
        return cls(
            name=_find_column(headers, NAME_MARKERS),
            description=_find_column(headers, DESCRIPTION_MARKERS),
            options=_find_column(headers, OPTION_MARKERS),
            price=_find_column(headers, PRICE_MARKERS),
        )


@dataclass(frozen=True)
class DecodedRow:
    name: str
    description: str
    options_text: str
    price_text: str


def _cell(cells: Sequence[str], idx: Optional[int]) -> str:
    if idx is None or idx >= len(cells):
        return ""
    return cells[idx]


def strip_bold(text: str) -> str:
    return text.replace("**", "").strip()


def decode_row(line: str, columns: ColumnMap) -> Optional[DecodedRow]:
    """Map one pipe row to logical fields; None when the row is not an item."""
    cells = split_cells(line)
    if len(cells) < 2:
        return None
    row = DecodedRow(
        name=strip_bold(_cell(cells, columns.name)),
        description=strip_bold(_cell(cells, columns.description)),
        options_text=_cell(cells, columns.options),
        price_text=_cell(cells, columns.price),
    )
    if not row.name or not row.price_text:
        return None
    return row


# ── Scanner ──────────────────────────────────────────

@dataclass(frozen=True)
class Scanner:
    state: str = ScanState.SEEKING_TABLE
    category: str = ""
    columns: ColumnMap = field(default_factory=ColumnMap)


def is_separator(line: str) -> bool:
    return bool(SEPARATOR_RE.match(line))


def step(scanner: Scanner, line: str) -> Tuple[Scanner, Optional[DecodedRow]]:
    """Advance the scanner by one trimmed line."""
    if scanner.state == ScanState.DONE:
        return scanner, None

    m = SECTION_RE.match(line)
    if m:
        return Scanner(ScanState.SEEKING_TABLE, m.group(1).strip(), ColumnMap()), None

    if any(t in line for t in TERMINATORS):
        return Scanner(ScanState.DONE, scanner.category, scanner.columns), None

    if line.startswith("|") and TABLE_HEADER_MARKER in line:
        columns = ColumnMap.from_headers(split_cells(line))
        return Scanner(ScanState.IN_TABLE, scanner.category, columns), None

    if is_separator(line):
        return scanner, None

    if scanner.state == ScanState.IN_TABLE and line.startswith("|"):
        return scanner, decode_row(line, scanner.columns)

    return scanner, None


def scan_rows(text: str) -> List[Tuple[str, DecodedRow]]:
    """Return (category, row) pairs in document order."""
    rows: List[Tuple[str, DecodedRow]] = []
    scanner = Scanner()
    for raw in (text or "").split("\n"):
        scanner, row = step(scanner, raw.strip())
        if scanner.state == ScanState.DONE:
            break
        if row is not None:
            rows.append((scanner.category, row))
    return rows


# ── Public API ───────────────────────────────────────

def row_to_menu_item(category: str, row: DecodedRow) -> Optional[MenuItem]:
    """Build a MenuItem; rows without a positive price are dropped silently."""
    price = parse_price(row.price_text)
    if not row.name or price <= 0:
        return None
    return MenuItem(
        name=row.name,
        description=row.description,
        category=category or DEFAULT_CATEGORY,
        price=price,
        options=parse_option_block(row.options_text),
    )


def parse_markdown_menu(text: str) -> List[MenuItem]:
    items: List[MenuItem] = []
    for category, row in scan_rows(text):
        item = row_to_menu_item(category, row)
        if item is not None:
            items.append(item)
    return items


def load_markdown_menu(path: Path) -> List[MenuItem]:
    path = Path(path)
    if not path.exists():
        raise SourceNotFoundError(f"Menu markdown not found at: {path}")
    return parse_markdown_menu(path.read_text(encoding="utf-8"))
