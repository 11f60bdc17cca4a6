# menu_ingest/image_resolver.py
"""
Product image resolution against the asset directory.

Two strategies, first hit wins:

1. Fuzzy filename match: product name and every asset filename are
   normalized to ascii slugs ("Gà Giòn" -> "ga-gion") and scored:
       100  exact slug match
        80  filename contains the product slug
        70  product slug contains the filename
     <=60  share of significant product words found in the filename
   The best candidate (strictly greater score wins, so ties keep the first
   file seen) is accepted at score >= 50.

2. Keyword fallback: PRODUCT_IMAGE_KEYWORDS (longest key first), then
   CATEGORY_IMAGE_KEYWORDS, each accepted only when the asset exists on disk
   under one of IMAGE_EXTENSIONS.

``resolve`` returns None when nothing matches; callers keep the image the
product already had.
"""

from __future__ import annotations

import logging
import os
import re
import unicodedata
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from menu_ingest.models import ImageMatch

log = logging.getLogger(__name__)

IMAGE_EXTENSIONS: Sequence[str] = (".webp", ".png", ".jpg", ".jpeg")
MIN_MATCH_SCORE = 50
STOP_WORDS = frozenset({"1", "2", "3", "4", "5", "6", "mot", "hai", "ba", "bon", "nam", "sau"})


# Keyword -> asset basename (no extension). Longer keys are tried first.
PRODUCT_IMAGE_KEYWORDS: Dict[str, str] = {
    # Combo
    "combo một mình ăn ngon": "combo-1-minh-an-ngon",
    "combo một mình": "combo-1-minh-an-ngon",
    "cặp đôi ăn ý": "cap-doi-an-y",
    "cặp đôi": "cap-doi-an-y",
    "cả nhà no nê": "combo-ca-nha-no-ne",
    "cả nhà": "combo-ca-nha-no-ne",
    "combo": "combo-1-minh-an-ngon",

    # Gà
    "4 miếng gà": "6-mieng-ga-gion-vui-ve",
    "4 miếng": "6-mieng-ga-gion-vui-ve",
    "6 miếng gà": "6-mieng-ga-gion-vui-ve",
    "2 miếng gà": "2-mieng-ga-gion-vui-ve",
    "2 gà giòn vui vẻ + 1 khoai tây chiên vừa + 1 nước ngọt": "2-ga-gion-vui-ve-1-khoai-tay-chien-vua-1-nuoc-ngot",
    "1 gà giòn vui vẻ + 1 khoai tây chiên vừa + 1 nước ngọt": "1-ga-gion-vui-ve-1-khoai-tay-chien-vua-1-nuoc-ngot",
    "gà giòn": "2-mieng-ga-gion-vui-ve",
    "gà rán": "2-mieng-ga-gion-vui-ve",
    "gà sốt cay": "spicy-chicken-wings",
    "miếng gà": "2-mieng-ga-gion-vui-ve",
    "cánh gà": "spicy-chicken-wings",

    # Mì Ý
    "1 mì ý sốt cay vừa + 1 gà giòn vui vẻ + 1 nước ngọt": "1-ga-gion-vui-ve-1-my-y-jolly-1-nuoc-ngot",
    "1 mì ý sốt cay vừa + 1 nước": "1-my-y-jolly-1-nuoc-ngot",
    "mì ý sốt cay vừa": "1-my-y-jolly",
    "mì ý": "1-my-y-jolly",
    "mỳ ý": "1-my-y-jolly",
    "carbonara": "classic-carbonara",
    "bolognese": "bolognese-pasta",

    # Burger
    "1 burger tôm + 1 khoai tây chiên vừa + 1 nước ngọt": "1-burger-tom-1-khoai-tay-chien-vua-1-nuoc-ngot",
    "1 burger tôm + 1 nước ngọt": "1-burger-tom-1-nuoc-ngot",
    "1 burger tôm": "1-burger-tom",
    "burger tôm": "1-burger-tom",
    "burger": "1-burger-tom",
    "burger bò": "classic-burger",
    "burger phô mai": "cheese-burger",
    "burger gà": "cheese-burger",

    # Khoai tây
    "khoai tây chiên lắc bbq lớn": "khoai-tay-lac-vi-bbq-lon",
    "khoai tây chiên lắc bbq vừa": "khoai-tay-lac-vi-bbq-vua",
    "khoai tây chiên lớn": "khoai-tay-chien-lon",
    "khoai tây chiên vừa": "khoai-tay-chien-vua",
    "khoai tây": "khoai-tay-chien-vua",
    "khoai": "khoai-tay-chien-vua",

    # Nước uống
    "pepsi lớn": "pepsi-lon",
    "pepsi vừa": "pepsi-vua",
    "7up lớn": "7up-lon",
    "7up vừa": "7up-vua",
    "pepsi": "pepsi-vua",
    "7up": "7up-vua",
    "nước ngọt": "7up-vua",
    "trà chanh hạt chia": "tra-chanh-hat-chia",
    "trà chanh": "tra-chanh-hat-chia",

    # Tráng miệng
    "kem sundae dâu": "kem-sundae-dau",
    "kem socola (cúp)": "kem-socola-cup",
    "kem vani (cúp)": "kem-sua-tuoi-cup",
    "kem socola": "kem-socola-cup",
    "kem vani": "kem-sua-tuoi-cup",
    "sundae": "kem-sundae-dau",
    "kem": "kem-sua-tuoi-cup",
}

# Checked in table order against the category name.
CATEGORY_IMAGE_KEYWORDS: Dict[str, str] = {
    "món ngon phải thử": "combo-1-minh-an-ngon",
    "gà giòn vui vẻ": "2-mieng-ga-gion-vui-ve",
    "mỳ ý": "1-my-y-jolly",
    "burger": "1-burger-tom",
    "phần ăn phụ": "khoai-tay-chien-vua",
    "tráng miệng": "kem-sua-tuoi-cup",
    "thức uống": "7up-vua",
}


# ------------------------------------------------------------
# Normalization + scoring
# ------------------------------------------------------------
def normalize_name(text: str) -> str:
    """Lowercase ascii slug: diacritics stripped, words joined by '-'."""
    s = unicodedata.normalize("NFD", (text or "").lower())
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = re.sub(r"[^a-z0-9\s-]", "", s)
    s = re.sub(r"\s+", "-", s)
    s = re.sub(r"-+", "-", s)
    return s.strip("-")


def significant_words(normalized: str) -> List[str]:
    return [w for w in normalized.split("-") if len(w) > 2 and w not in STOP_WORDS]


def score_candidate(normalized_name: str, normalized_file: str,
                    name_words: Optional[Sequence[str]] = None) -> float:
    """Confidence (0-100) that an asset file depicts the product."""
    if name_words is None:
        name_words = significant_words(normalized_name)
    if normalized_file == normalized_name:
        return 100
    if normalized_name in normalized_file:
        return 80
    # An empty file slug (e.g. "đ.webp") is contained in every name and scores 70.
    if normalized_file in normalized_name:
        return 70
    matched = sum(1 for w in name_words if w in normalized_file)
    if matched > 0:
        return (matched / len(name_words)) * 60
    return 0


def _list_assets(assets_dir: Path) -> List[str]:
    if not assets_dir.is_dir():
        return []
    return sorted(os.listdir(assets_dir))


def best_image_match(product_name: str, filenames: Sequence[str]) -> Optional[ImageMatch]:
    """Best-scoring image filename; ties keep the first candidate seen."""
    normalized = normalize_name(product_name)
    if not normalized:
        return None
    words = significant_words(normalized)
    best: Optional[ImageMatch] = None
    for filename in filenames:
        stem, ext = os.path.splitext(filename)
        if ext.lower() not in IMAGE_EXTENSIONS:
            continue
        score = score_candidate(normalized, normalize_name(stem), words)
        if score > 0 and (best is None or score > best.score):
            best = ImageMatch(file=filename, score=score)
    return best


# ------------------------------------------------------------
# Resolver
# ------------------------------------------------------------
class ImageResolver:
    """Resolves product images inside one asset directory.

    Paths are returned as ``<url_prefix>/<filename>`` ("/assets/pepsi-vua.webp").
    """

    def __init__(self, assets_dir: Path, url_prefix: str = "/assets") -> None:
        self.assets_dir = Path(assets_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def _url(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    def find_image_by_name(self, product_name: str) -> Optional[str]:
        match = best_image_match(product_name, _list_assets(self.assets_dir))
        if match is not None and match.score >= MIN_MATCH_SCORE:
            log.debug("image %s for %r (score %.0f)", match.file, product_name, match.score)
            return self._url(match.file)
        return None

    def _existing_asset(self, basename: str) -> Optional[str]:
        for ext in IMAGE_EXTENSIONS:
            if (self.assets_dir / f"{basename}{ext}").exists():
                return self._url(f"{basename}{ext}")
        return None

    def find_image_by_keyword(self, product_name: str, category: str) -> Optional[str]:
        name = (product_name or "").lower().strip()
        for keyword in sorted(PRODUCT_IMAGE_KEYWORDS, key=len, reverse=True):
            if keyword in name:
                found = self._existing_asset(PRODUCT_IMAGE_KEYWORDS[keyword])
                if found:
                    return found

        cat = (category or "").lower().strip()
        for keyword, basename in CATEGORY_IMAGE_KEYWORDS.items():
            if keyword in cat:
                found = self._existing_asset(basename)
                if found:
                    return found
        return None

    def resolve(self, product_name: str, category: str) -> Optional[str]:
        return (
            self.find_image_by_name(product_name)
            or self.find_image_by_keyword(product_name, category)
        )
