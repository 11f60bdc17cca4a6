# menu_ingest/reconciler.py
"""
Catalog Reconciler

Writes parsed MenuItems into the catalog store, one item at a time:

  1. category: case-insensitive "name contains" lookup, created when missing
  2. product code: "<CATEGORY_CODE>-<name-slug>" (deterministic, so a re-run
     lands on the same product)
  3. product: updated in place when the code exists (options deleted first,
     previous image kept when no new image resolves), created otherwise
  4. options: recreated from scratch in group/item order

Running the same document twice converges to the same catalog state. A
failure on one item is logged and counted; the batch carries on.

The store is any object with the CatalogStore operation set.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from menu_ingest.errors import NoBranchError, SourceNotFoundError
from menu_ingest.image_resolver import ImageResolver
from menu_ingest.models import DEFAULT_CATEGORY, ImportSummary, MenuItem
from menu_ingest.parsers.menu_markdown import load_markdown_menu
from menu_ingest.parsers.option_vocab import resolve_options
from menu_ingest.parsers.price_parser import format_price, to_minor_units

log = logging.getLogger(__name__)

# Defaults for newly created products
DEFAULT_COST_PRICE = 0
DEFAULT_QUANTITY = 100
DEFAULT_PREP_TIME = 10

CATEGORY_CODE_MAX = 20
SLUG_MAX = 30
PRODUCT_CODE_MAX = 50


# ------------------------------------------------------------
# Codes
# ------------------------------------------------------------
def category_code(label: str) -> str:
    """ "Burger" -> "BURGER", "Phần ăn phụ" -> "PH_N__N_PH_" """
    return re.sub(r"[^A-Z0-9]", "_", (label or "").upper())[:CATEGORY_CODE_MAX]


def slugify(text: str, max_len: int = SLUG_MAX) -> str:
    """ascii-only slug; non [a-z0-9] characters (accented ones too) are dropped."""
    s = re.sub(r"[^a-z0-9\s]", "", (text or "").lower())
    s = re.sub(r"\s+", "-", s)
    return s[:max_len]


def product_code(cat_code: str, name: str) -> str:
    return f"{cat_code}-{slugify(name)}"[:PRODUCT_CODE_MAX]


# ------------------------------------------------------------
# Per-item steps
# ------------------------------------------------------------
def ensure_category(store: Any, label: str) -> Dict[str, Any]:
    category = store.find_category_by_name_contains(label)
    if category:
        return category
    category = store.create_category(
        category_code(label),
        label,
        description=f"Danh mục {label}",
        is_active=True,
    )
    log.info("Created category: %s", label)
    return category


def reconcile_item(
    item: MenuItem,
    store: Any,
    resolver: Optional[ImageResolver],
    branch: Dict[str, Any],
) -> str:
    """Create or update one product and replace its options.

    Returns "created" or "updated".
    """
    category = ensure_category(store, item.category)
    code = product_code(category["code"], item.name)
    image = resolver.resolve(item.name, item.category) if resolver else None

    existing = store.find_product_by_code(code)
    if existing:
        if existing.get("options"):
            store.delete_options_for_product(existing["id"])
        product = store.update_product(code, {
            "name": item.name,
            "description": item.description,
            "price": to_minor_units(item.price),
            "category_id": category["id"],
            "image": image or existing.get("image"),
        })
        action = "updated"
    else:
        product = store.create_product({
            "code": code,
            "name": item.name,
            "description": item.description,
            "price": to_minor_units(item.price),
            "cost_price": DEFAULT_COST_PRICE,
            "quantity": DEFAULT_QUANTITY,
            "prep_time": DEFAULT_PREP_TIME,
            "category_id": category["id"],
            "branch_id": branch["id"],
            "is_available": True,
            "image": image,
        })
        action = "created"

    options = resolve_options(item.options)
    for option in options:
        store.create_option(product["id"], option)

    log.info(
        "%s product: %s [%s] %s%s",
        action.capitalize(), item.name, code, format_price(item.price),
        f" (image: {image})" if image else "",
    )
    if options:
        log.info("   └─ %d options", len(options))
    return action


# ------------------------------------------------------------
# Batch entry points
# ------------------------------------------------------------
def require_source(path: Path, label: str) -> Path:
    path = Path(path)
    if not path.exists():
        raise SourceNotFoundError(f"{label} not found at: {path}")
    return path


def require_branch(store: Any) -> Dict[str, Any]:
    branch = store.find_first_branch()
    if not branch:
        raise NoBranchError("No branch found. Create one first (python -m menu_ingest.init_db --branch-name ...)")
    return branch


def reconcile_menu(
    items: Sequence[MenuItem],
    store: Any,
    resolver: Optional[ImageResolver] = None,
    *,
    branch: Optional[Dict[str, Any]] = None,
) -> ImportSummary:
    branch = branch or require_branch(store)
    log.info("Using branch: %s (%s)", branch.get("name"), branch.get("code"))

    summary = ImportSummary()
    for idx, item in enumerate(items, start=1):
        try:
            reconcile_item(item, store, resolver, branch)
            summary.success += 1
        except Exception as e:
            log.error('Item %d: Error processing "%s" - %s', idx, item.name, e)
            summary.errors += 1
    return summary


def run_markdown_import(
    source_path: Path,
    store: Any,
    resolver: Optional[ImageResolver] = None,
) -> ImportSummary:
    """Parse the markdown menu and reconcile it.

    Both fatal preconditions (source document, branch) are checked before
    the first catalog write.
    """
    source_path = require_source(source_path, "Menu markdown")
    branch = require_branch(store)

    items = load_markdown_menu(source_path)
    log.info("Found %d menu items in %s", len(items), source_path.name)
    return reconcile_menu(items, store, resolver, branch=branch)


def refresh_product_images(store: Any, resolver: ImageResolver) -> ImportSummary:
    """Re-resolve the image of every product already in the catalog."""
    summary = ImportSummary()
    for product in store.list_products():
        try:
            category_name = product.get("category_name") or DEFAULT_CATEGORY
            image = resolver.resolve(product["name"], category_name)
            if not image:
                log.warning("No image found for: %s", product["name"])
                summary.skipped += 1
            elif image == product.get("image"):
                log.info("Skipped (same image): %s", product["name"])
                summary.skipped += 1
            else:
                store.update_product(product["code"], {"image": image})
                log.info("Updated: %s -> %s", product["name"], image)
                summary.success += 1
        except Exception as e:
            log.error("Error updating %s: %s", product.get("name"), e)
            summary.errors += 1
    return summary
