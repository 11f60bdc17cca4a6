#!/usr/bin/env python3
"""
Import a flat Excel menu sheet into the catalog.

- One product per row ("Items" or "Items - Option")
- Categories must already exist (matched by CategoryID or CategoryName)
- Existing products are updated in place by code
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from menu_ingest.catalog_store import open_catalog
from menu_ingest.config import load_settings, setup_logging
from menu_ingest.errors import IngestError
from menu_ingest.excel_import import run_excel_import
from menu_ingest.image_resolver import ImageResolver
from menu_ingest.reconciler import require_source


def main(argv=None) -> int:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Import a flat Excel menu sheet.")
    parser.add_argument("--xlsx", type=Path, default=settings.xlsx_path)
    parser.add_argument("--db", type=Path, default=settings.db_path)
    parser.add_argument("--assets-dir", type=Path, default=settings.assets_dir)
    args = parser.parse_args(argv)
    setup_logging(settings.log_level)

    try:
        require_source(args.xlsx, "Excel file")
        store = open_catalog(args.db)
        resolver = ImageResolver(args.assets_dir, settings.assets_url)
        summary = run_excel_import(args.xlsx, store, resolver)
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
