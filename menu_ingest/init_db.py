# menu_ingest/init_db.py
import argparse
from pathlib import Path
from typing import List, Optional

from menu_ingest.catalog_store import CatalogStore, ensure_schema
from menu_ingest.config import load_settings

# ----------------------------
# Utilities
# ----------------------------

def ensure_folders(db_path: Path, assets_dir: Path) -> None:
    """Create required folders (safe if they already exist)."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    assets_dir.mkdir(parents=True, exist_ok=True)


def seed_branch(store: CatalogStore, code: str, name: str) -> None:
    existing = store.find_first_branch()
    if existing:
        print(f"[menu-ingest] Branch already present: {existing['name']} ({existing['code']})")
        return
    branch = store.create_branch(code, name)
    print(f"[menu-ingest] Created branch: {branch['name']} ({branch['code']})")

# ----------------------------
# CLI entry
# ----------------------------

def main(argv: Optional[List[str]] = None) -> None:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Create the catalog DB and schema.")
    parser.add_argument("--db", type=Path, default=settings.db_path)
    parser.add_argument("--branch-name", help="seed a branch if none exists")
    parser.add_argument("--branch-code", default="BR001")
    args = parser.parse_args(argv)

    ensure_folders(args.db, settings.assets_dir)
    fresh = not args.db.exists()
    ensure_schema(args.db)
    print(f"[menu-ingest] {'Created' if fresh else 'Checked'} DB: {args.db}")

    if args.branch_name:
        seed_branch(CatalogStore(args.db), args.branch_code, args.branch_name)

    print(f"[menu-ingest] Assets: {settings.assets_dir}")

if __name__ == "__main__":
    main()
