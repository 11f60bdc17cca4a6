# menu_ingest/catalog_store.py
"""
Catalog persistence: branches, categories, products and product options.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from menu_ingest.config import load_settings
from menu_ingest.models import ResolvedOption


# ------------------------------------------------------------
# Paths / DB
# ------------------------------------------------------------
DB_PATH = load_settings().db_path

PRODUCT_COLUMNS = frozenset({
    "code", "name", "description", "price", "cost_price", "quantity",
    "prep_time", "category_id", "branch_id", "is_available", "image",
})


def db_connect(db_path: Optional[Path] = None) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path or DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def _now() -> str:
    return datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S")


def _row_to_dict(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return {k: row[k] for k in row.keys()}


# ------------------------------------------------------------
# Schema (idempotent; safe to call repeatedly)
# ------------------------------------------------------------
def ensure_schema(db_path: Optional[Path] = None) -> None:
    with db_connect(db_path) as conn:
        cur = conn.cursor()
        cur.execute("""
            CREATE TABLE IF NOT EXISTS branches (
              id         INTEGER PRIMARY KEY AUTOINCREMENT,
              code       TEXT NOT NULL UNIQUE,
              name       TEXT NOT NULL,
              created_at TEXT NOT NULL
            )
        """)
        cur.execute("""
            CREATE TABLE IF NOT EXISTS categories (
              id          INTEGER PRIMARY KEY AUTOINCREMENT,
              code        TEXT NOT NULL UNIQUE,
              name        TEXT NOT NULL,
              description TEXT,
              is_active   INTEGER NOT NULL DEFAULT 1,
              created_at  TEXT NOT NULL
            )
        """)
        cur.execute("""
            CREATE TABLE IF NOT EXISTS products (
              id           INTEGER PRIMARY KEY AUTOINCREMENT,
              code         TEXT NOT NULL UNIQUE,
              name         TEXT NOT NULL,
              description  TEXT,
              price        INTEGER NOT NULL DEFAULT 0,
              cost_price   INTEGER NOT NULL DEFAULT 0,
              quantity     INTEGER NOT NULL DEFAULT 0,
              prep_time    INTEGER NOT NULL DEFAULT 0,
              category_id  INTEGER NOT NULL,
              branch_id    INTEGER NOT NULL,
              is_available INTEGER NOT NULL DEFAULT 1,
              image        TEXT,
              created_at   TEXT NOT NULL,
              updated_at   TEXT NOT NULL,
              FOREIGN KEY (category_id) REFERENCES categories(id),
              FOREIGN KEY (branch_id) REFERENCES branches(id)
            )
        """)
        cur.execute("""
            CREATE TABLE IF NOT EXISTS product_options (
              id           INTEGER PRIMARY KEY AUTOINCREMENT,
              product_id   INTEGER NOT NULL,
              name         TEXT NOT NULL,
              description  TEXT,
              price        INTEGER NOT NULL DEFAULT 0,
              type         TEXT NOT NULL DEFAULT 'OTHER',
              is_required  INTEGER NOT NULL DEFAULT 0,
              is_available INTEGER NOT NULL DEFAULT 1,
              sort_order   INTEGER NOT NULL DEFAULT 0,
              created_at   TEXT NOT NULL,
              FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE CASCADE
            )
        """)
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_products_category "
            "ON products(category_id)"
        )
        cur.execute(
            "CREATE INDEX IF NOT EXISTS idx_options_product "
            "ON product_options(product_id, sort_order)"
        )
        conn.commit()


def open_catalog(db_path: Optional[Path] = None) -> "CatalogStore":
    """Create the DB folder and schema if needed and return a store on it."""
    Path(db_path or DB_PATH).parent.mkdir(parents=True, exist_ok=True)
    ensure_schema(db_path)
    return CatalogStore(db_path)


# ====================================================================
# Store
# ====================================================================

class CatalogStore:
    """The catalog operations the importers need, backed by SQLite.

    Every call is its own round trip and commits immediately; there is no
    batching and no retry.
    """

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        return db_connect(self.db_path)

    # -- Branches ----------------------------------------------------
    def find_first_branch(self) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM branches ORDER BY id ASC LIMIT 1"
            ).fetchone()
            return _row_to_dict(row)

    def create_branch(self, code: str, name: str) -> Dict[str, Any]:
        now = _now()
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO branches (code, name, created_at) VALUES (?, ?, ?)",
                (code, name, now),
            )
            conn.commit()
            return {"id": int(cur.lastrowid), "code": code, "name": name, "created_at": now}

    # -- Categories --------------------------------------------------
    def find_category_by_name_contains(self, name: str) -> Optional[Dict[str, Any]]:
        """First category (by id) whose name contains ``name``, case-insensitive.

        Matching happens in Python because SQLite's lower()/LIKE only fold ASCII.
        """
        needle = (name or "").casefold()
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM categories ORDER BY id ASC").fetchall()
        for row in rows:
            if needle in (row["name"] or "").casefold():
                return _row_to_dict(row)
        return None

    def find_category_by_code(self, code: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM categories WHERE code = ?", (code,)
            ).fetchone()
            return _row_to_dict(row)

    def create_category(
        self,
        code: str,
        name: str,
        *,
        description: Optional[str] = None,
        is_active: bool = True,
    ) -> Dict[str, Any]:
        now = _now()
        with self._connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO categories (code, name, description, is_active, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (code, name, description, int(is_active), now),
            )
            conn.commit()
            category_id = int(cur.lastrowid)
        return {
            "id": category_id,
            "code": code,
            "name": name,
            "description": description,
            "is_active": int(is_active),
            "created_at": now,
        }

    # -- Products ----------------------------------------------------
    def find_product_by_code(self, code: str) -> Optional[Dict[str, Any]]:
        """Product dict with its current ``options`` list, or None."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM products WHERE code = ?", (code,)
            ).fetchone()
            if row is None:
                return None
            product = _row_to_dict(row)
            opts = conn.execute(
                "SELECT * FROM product_options WHERE product_id = ? "
                "ORDER BY sort_order ASC, id ASC",
                (product["id"],),
            ).fetchall()
            product["options"] = [_row_to_dict(o) for o in opts]
            return product

    def create_product(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        data = {k: v for k, v in fields.items() if k in PRODUCT_COLUMNS}
        now = _now()
        data["created_at"] = now
        data["updated_at"] = now
        cols = ", ".join(data)
        marks = ", ".join("?" for _ in data)
        with self._connect() as conn:
            cur = conn.execute(
                f"INSERT INTO products ({cols}) VALUES ({marks})",
                tuple(data.values()),
            )
            conn.commit()
            data["id"] = int(cur.lastrowid)
        return data

    def update_product(self, code: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        data = {k: v for k, v in fields.items() if k in PRODUCT_COLUMNS and k != "code"}
        data["updated_at"] = _now()
        assignments = ", ".join(f"{k} = ?" for k in data)
        with self._connect() as conn:
            conn.execute(
                f"UPDATE products SET {assignments} WHERE code = ?",
                (*data.values(), code),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM products WHERE code = ?", (code,)
            ).fetchone()
            return _row_to_dict(row)

    def list_products(self) -> List[Dict[str, Any]]:
        """All products with their category name (``category_name``)."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT p.*, c.name AS category_name
                FROM products p
                LEFT JOIN categories c ON c.id = p.category_id
                ORDER BY p.id ASC
                """
            ).fetchall()
            return [_row_to_dict(r) for r in rows]

    # -- Options -----------------------------------------------------
    def delete_options_for_product(self, product_id: int) -> int:
        with self._connect() as conn:
            cur = conn.execute(
                "DELETE FROM product_options WHERE product_id = ?", (product_id,)
            )
            conn.commit()
            return cur.rowcount

    def create_option(self, product_id: int, option: ResolvedOption) -> Dict[str, Any]:
        row = option.to_row()
        row["product_id"] = product_id
        row["created_at"] = _now()
        cols = ", ".join(row)
        marks = ", ".join("?" for _ in row)
        with self._connect() as conn:
            cur = conn.execute(
                f"INSERT INTO product_options ({cols}) VALUES ({marks})",
                tuple(row.values()),
            )
            conn.commit()
            row["id"] = int(cur.lastrowid)
        return row

    def list_options(self, product_id: int) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM product_options WHERE product_id = ? "
                "ORDER BY sort_order ASC, id ASC",
                (product_id,),
            ).fetchall()
            return [_row_to_dict(r) for r in rows]
