#!/usr/bin/env python3
"""
Re-resolve images for every product already in the catalog.

Only products whose resolved image differs from the stored one are written.
"""

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from menu_ingest.catalog_store import open_catalog
from menu_ingest.config import load_settings, setup_logging
from menu_ingest.image_resolver import ImageResolver
from menu_ingest.reconciler import refresh_product_images


def main(argv=None) -> int:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Refresh product images.")
    parser.add_argument("--db", type=Path, default=settings.db_path)
    parser.add_argument("--assets-dir", type=Path, default=settings.assets_dir)
    args = parser.parse_args(argv)
    setup_logging(settings.log_level)

    summary = refresh_product_images(
        open_catalog(args.db),
        ImageResolver(args.assets_dir, settings.assets_url),
    )

    print("[menu-ingest] Update summary:")
    print(f"[menu-ingest]   Updated: {summary.success}")
    print(f"[menu-ingest]   Skipped: {summary.skipped}")
    print(f"[menu-ingest]   Errors:  {summary.errors}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
