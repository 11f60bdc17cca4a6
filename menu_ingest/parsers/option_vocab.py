# menu_ingest/parsers/option_vocab.py
"""
Option Vocabulary

Single source of truth for option pricing and option typing keywords.
Every table here is an ordered list of (predicate, result) rules evaluated
first-match-wins, so priority is the list order and nothing else.

Pricing (major units, VND):
  1. Soft drinks ("7up", "pepsi") are priced on their own: an upsize marker
     ("up" / "lớn") as a separate word gives BEVERAGE_UPSIZE_PRICE, anything
     else is free. The generic table is never consulted for drinks.
  2. Everything else walks UPSIZE_TABLE top to bottom.

Typing: size words before sauce words, else OTHER.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Sequence, Tuple, TypeVar
import re

from menu_ingest.models import OptionGroup, OptionType, ResolvedOption
from menu_ingest.parsers.price_parser import to_minor_units

T = TypeVar("T")
Predicate = Callable[[str], bool]
Rule = Tuple[Predicate, T]


def first_match(rules: Sequence[Tuple[Predicate, T]], text: str, default: T) -> T:
    for predicate, result in rules:
        if predicate(text):
            return result
    return default


def contains_any(tokens: Iterable[str]) -> Predicate:
    toks = tuple(tokens)
    return lambda text: any(t in text for t in toks)


# ---------------------------------------------------------------------------
# Beverage rule
# ---------------------------------------------------------------------------

BEVERAGE_TOKENS: Tuple[str, ...] = ("7up", "pepsi")
BEVERAGE_UPSIZE_MARKERS = frozenset({"up", "lớn"})
BEVERAGE_UPSIZE_PRICE = 5000

_WORD_RE = re.compile(r"\w+")


def is_beverage(name: str) -> bool:
    return contains_any(BEVERAGE_TOKENS)(name.lower())


def has_upsize_marker(name: str) -> bool:
    """True when an upsize marker appears as its own word.

    Parentheses are unwrapped rather than dropped so the variant written by
    the drink grid ("Pepsi (Up)") still counts, while the "up" inside the
    brand "7Up" does not.
    """
    unwrapped = name.replace("(", " ").replace(")", " ").lower()
    return any(w in BEVERAGE_UPSIZE_MARKERS for w in _WORD_RE.findall(unwrapped))


# ---------------------------------------------------------------------------
# Generic upsize table
# ---------------------------------------------------------------------------

# (keyword, extra price, also match " keyword" as a separate word)
UPSIZE_TABLE: List[Tuple[str, int, bool]] = [
    ("Upsize", 10000, False),
    ("Mỳ lớn", 5000, False),
    ("Mỳ sốt cay vừa", 15000, False),
    ("Mỳ sốt cay lớn", 20000, False),
    ("Up", 5000, True),      # 7Up Up, Pepsi Up
    ("Lớn", 5000, True),     # Khoai tây lớn, Nước lớn
]


def upsize_predicate(keyword: str, word_suffix: bool = False) -> Predicate:
    kw = keyword.lower()

    def _match(lower_name: str) -> bool:
        if lower_name == kw or kw in lower_name:
            return True
        if word_suffix:
            spaced = " " + kw
            return spaced in lower_name or lower_name.endswith(spaced)
        return False

    return _match


UPSIZE_RULES: List[Rule[int]] = [
    (upsize_predicate(kw, suffix), price) for kw, price, suffix in UPSIZE_TABLE
]


def resolve_option_price(name: str) -> int:
    """Extra price (major units) for one concrete option name."""
    lower = name.strip().lower()
    if is_beverage(lower):
        return BEVERAGE_UPSIZE_PRICE if has_upsize_marker(name) else 0
    return first_match(UPSIZE_RULES, lower, 0)


# ---------------------------------------------------------------------------
# Option type
# ---------------------------------------------------------------------------

SIZE_TOKENS: Tuple[str, ...] = ("up", "lớn", "vừa")
SAUCE_TOKENS: Tuple[str, ...] = ("cay", "sốt", "sauce")

TYPE_RULES: List[Rule[str]] = [
    (contains_any(SIZE_TOKENS), OptionType.SIZE),
    (contains_any(SAUCE_TOKENS), OptionType.SAUCE),
]


def classify_option_type(name: str) -> str:
    return first_match(TYPE_RULES, name.strip().lower(), OptionType.OTHER)


# ---------------------------------------------------------------------------
# Groups -> catalog options
# ---------------------------------------------------------------------------

def resolve_options(groups: Sequence[OptionGroup]) -> List[ResolvedOption]:
    """Flatten option groups into priced, typed, ordered catalog options.

    ``order`` runs across all groups of the product; it is not reset per group.
    """
    resolved: List[ResolvedOption] = []
    order = 0
    for group in groups:
        for raw in group.items:
            name = raw.strip()
            if not name:
                continue
            resolved.append(ResolvedOption(
                name=name,
                description=f"{group.group}: {name}",
                price=to_minor_units(resolve_option_price(name)),
                type=classify_option_type(name),
                order=order,
            ))
            order += 1
    return resolved
