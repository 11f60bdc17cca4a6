# menu_ingest/parsers/option_parser.py
"""
Option Block Parser

Turns the free-text options cell of one menu row into option groups.

Cell conventions:
  - line breaks are usually written inline as <br> tags
  - "**Chọn Gà:**" opens a group labelled "Chọn Gà"
  - item lines may carry a "+" bullet
  - "7Up / Pepsi" lists alternatives; the "/" inside parentheses does not
  - "7Up / Pepsi (Thường/Up)" is the drink grid: every drink in every variant
  - lines before the first group label are standalone options

The parse is a fold over lines: each step returns a new _GroupFold and
closing a group is an explicit step, so no OptionGroup is mutated once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple
import re

from menu_ingest.models import OptionGroup, STANDALONE_GROUP


BREAK_TAG_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
GROUP_LABEL_RE = re.compile(r"\*\*(.+?):\*\*")
COMPOUND_DRINK_RE = re.compile(r"^(.+?)\s*/\s*(.+?)\s*\((.+?)/(.+?)\)$")


# ── Line helpers ─────────────────────────────────────

def split_option_lines(text: str) -> List[str]:
    """Normalize <br> tags to newlines and return trimmed, non-empty lines."""
    cleaned = BREAK_TAG_RE.sub("\n", text or "")
    return [ln.strip() for ln in cleaned.split("\n") if ln.strip()]


def strip_bullet(line: str) -> str:
    return re.sub(r"^\+", "", line).strip()


def split_outside_parens(line: str) -> List[str]:
    """Split on "/" only at parenthesis depth 0.

        "7Up / Pepsi"               -> ["7Up", "Pepsi"]
        "Pepsi (Thường/Up)"         -> ["Pepsi (Thường/Up)"]
        "7Up / Pepsi (Thường/Up)"   -> ["7Up", "Pepsi (Thường/Up)"]
    """
    parts: List[str] = []
    buf: List[str] = []
    depth = 0
    for ch in line:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif ch == "/" and depth == 0:
            piece = "".join(buf).strip()
            if piece:
                parts.append(piece)
            buf = []
            continue
        buf.append(ch)
    piece = "".join(buf).strip()
    if piece:
        parts.append(piece)
    return parts


def expand_option_line(line: str) -> List[str]:
    """Concrete option names for one item line (bullet already removed)."""
    m = COMPOUND_DRINK_RE.match(line)
    if m:
        first, second, var_a, var_b = (g.strip() for g in m.groups())
        return [
            f"{first} ({var_a})",
            f"{first} ({var_b})",
            f"{second} ({var_a})",
            f"{second} ({var_b})",
        ]
    return split_outside_parens(line)


# ── Fold ─────────────────────────────────────────────

@dataclass(frozen=True)
class _GroupFold:
    closed: Tuple[OptionGroup, ...] = ()
    current: Optional[OptionGroup] = None


def _close_group(fold: _GroupFold) -> _GroupFold:
    """Move the open group into the closed list; empty groups are dropped."""
    if fold.current is None:
        return fold
    closed = fold.closed + (fold.current,) if fold.current.items else fold.closed
    return _GroupFold(closed=closed, current=None)


def _step(fold: _GroupFold, line: str) -> _GroupFold:
    label = GROUP_LABEL_RE.search(line)
    if label:
        closed = _close_group(fold).closed
        return _GroupFold(closed=closed, current=OptionGroup(label.group(1).strip()))

    if fold.current is not None:
        clean = strip_bullet(line)
        if not clean:
            return fold
        items = fold.current.items + tuple(expand_option_line(clean))
        return _GroupFold(
            closed=fold.closed,
            current=OptionGroup(fold.current.group, items),
        )

    if line.startswith("|"):
        return fold

    clean = strip_bullet(line)
    if not clean:
        return fold
    # Each standalone line is its own single-item group.
    return _GroupFold(
        closed=fold.closed + (OptionGroup(STANDALONE_GROUP, (clean,)),),
        current=None,
    )


def parse_option_block(text: str) -> List[OptionGroup]:
    """Parse an options cell into OptionGroups ("-" or empty -> [])."""
    if not text or text.strip() == "-":
        return []
    fold = _GroupFold()
    for line in split_option_lines(text):
        fold = _step(fold, line)
    return list(_close_group(fold).closed)
