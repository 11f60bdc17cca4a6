#!/usr/bin/env python3
"""
Import the markdown menu document into the catalog.

- Parses categories, products and option groups from the menu tables
- Resolves product images from the asset directory
- Creates or updates products by code and replaces their options

Safe to re-run: the same document always converges to the same catalog.
"""

import argparse
import dataclasses
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from menu_ingest.catalog_store import open_catalog
from menu_ingest.config import load_settings, setup_logging
from menu_ingest.errors import IngestError
from menu_ingest.image_resolver import ImageResolver
from menu_ingest.parsers.menu_markdown import load_markdown_menu
from menu_ingest.parsers.price_parser import format_price
from menu_ingest.reconciler import require_source, run_markdown_import


def print_items(items) -> None:
    for item in items:
        print(f"[{item.category}] {item.name}  {format_price(item.price)}")
        for group in item.options:
            print(f"    {group.group}: {', '.join(group.items)}")


def main(argv=None) -> int:
    settings = load_settings()
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--source", type=Path, default=settings.source_path)
    parser.add_argument("--db", type=Path, default=settings.db_path)
    parser.add_argument("--assets-dir", type=Path, default=settings.assets_dir)
    parser.add_argument("--dry-run", action="store_true",
                        help="parse and print items without touching the catalog")
    args = parser.parse_args(argv)

    settings = dataclasses.replace(
        settings, source_path=args.source, db_path=args.db, assets_dir=args.assets_dir,
    )
    setup_logging(settings.log_level)

    try:
        if args.dry_run:
            items = load_markdown_menu(settings.source_path)
            print_items(items)
            print(f"[menu-ingest] Parsed {len(items)} menu items (dry run)")
            return 0

        require_source(settings.source_path, "Menu markdown")
        store = open_catalog(settings.db_path)
        resolver = ImageResolver(settings.assets_dir, settings.assets_url)
        summary = run_markdown_import(settings.source_path, store, resolver)
    except IngestError as e:
        print(f"[menu-ingest] {e}")
        return 1

    print("[menu-ingest] Import summary:")
    print(f"[menu-ingest]   Success: {summary.success}")
    print(f"[menu-ingest]   Skipped: {summary.skipped}")
    print(f"[menu-ingest]   Errors:  {summary.errors}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
