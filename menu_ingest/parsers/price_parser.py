# menu_ingest/parsers/price_parser.py
"""
Price Parser
Extracts a VND amount from a menu price cell.

Menu prices use dot thousands separators and an optional decimal comma:
    "235.000"    -> 235000.0
    "1.250,5"    -> 1250.5
    "45.000đ"    -> 45000.0
    "Liên hệ"    -> 0.0   (no number; the owning item is dropped upstream)

Only the first token is read. An ungrouped cell such as "235000" yields 235;
a warning is logged so the cell can be fixed in the source document.
"""

from __future__ import annotations

import logging
import re

log = logging.getLogger(__name__)

PRICE_TOKEN_RE = re.compile(r"(\d{1,3}(?:\.\d{3})*(?:,\d+)?)")


def parse_price(text: str) -> float:
    """Return the first price amount found in ``text``, or 0.0."""
    if not text:
        return 0.0
    m = PRICE_TOKEN_RE.search(text)
    if not m:
        return 0.0
    token = m.group(1)

    end = m.end(1)
    if end < len(text) and text[end].isdigit():
        log.warning("Ungrouped price cell %r read as %s", text, token)

    try:
        return float(token.replace(".", "").replace(",", "."))
    except ValueError:
        return 0.0


def to_minor_units(amount: float) -> int:
    """Major-unit amount -> stored integer amount (x100)."""
    return int(round(float(amount) * 100))


def format_price(amount: float) -> str:
    """Format an amount back into menu notation (inverse of parse_price)."""
    text = ("%.6f" % float(amount)).rstrip("0").rstrip(".")
    whole, _, frac = text.partition(".")
    grouped = f"{int(whole):,}".replace(",", ".")
    return f"{grouped},{frac}" if frac else grouped
