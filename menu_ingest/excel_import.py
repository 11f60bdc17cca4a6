# menu_ingest/excel_import.py
"""
Flat Excel menu import (first worksheet, header row first).

Expected columns:
    CategoryID    category code (optional if CategoryName is given)
    CategoryName  category name, "contains" match
    Items         product name
    Description   optional
    Option        optional variant; product name becomes "Items - Option"
    Giá           price, already in stored units

Unlike the markdown import this never creates categories: a row whose
category cannot be found is skipped. Each row is one product; options are
not touched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import openpyxl

from menu_ingest.image_resolver import ImageResolver
from menu_ingest.models import ImportSummary
from menu_ingest.reconciler import (
    DEFAULT_COST_PRICE,
    DEFAULT_PREP_TIME,
    DEFAULT_QUANTITY,
    PRODUCT_CODE_MAX,
    require_branch,
    require_source,
    slugify,
)

log = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("Items", "Giá")


@dataclass
class ExcelRow:
    row_number: int  # 1-based sheet row, header is row 1
    items: str
    price_raw: Any
    category_id: str = ""
    category_name: str = ""
    description: str = ""
    option: str = ""

    @property
    def product_name(self) -> str:
        return f"{self.items} - {self.option}" if self.option else self.items

    @property
    def code(self) -> str:
        base = slugify(self.items, 20)
        suffix = f"-{slugify(self.option, 10)}" if self.option else ""
        return f"{self.category_id or 'PROD'}-{base}{suffix}"[:PRODUCT_CODE_MAX]

    @property
    def price(self) -> Optional[int]:
        if isinstance(self.price_raw, (int, float)):
            value = int(round(self.price_raw))
        else:
            # "35.000", "35,000 đ" -> 35000
            digits = re.sub(r"[^\d]", "", _text(self.price_raw))
            if not digits:
                return None
            value = int(digits)
        return value if value > 0 else None


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def read_menu_rows(xlsx_path: Path) -> List[ExcelRow]:
    """Rows that carry both Items and Giá."""
    xlsx_path = require_source(xlsx_path, "Excel file")

    wb = openpyxl.load_workbook(xlsx_path, data_only=True, read_only=True)
    try:
        if not wb.worksheets:
            raise ValueError(f"No worksheet found in {xlsx_path}")
        rows_iter = wb.worksheets[0].iter_rows(values_only=True)
        try:
            header_row = next(rows_iter)
        except StopIteration:
            return []
        headers = [_text(h) for h in header_row]
        log.info("Headers found: %s", ", ".join(h for h in headers if h))

        rows: List[ExcelRow] = []
        for row_number, values in enumerate(rows_iter, start=2):
            if values is None:
                continue
            raw: Dict[str, Any] = {}
            for idx, value in enumerate(values):
                if idx < len(headers) and headers[idx]:
                    raw[headers[idx]] = value
            if not all(raw.get(col) not in (None, "") for col in REQUIRED_COLUMNS):
                continue
            rows.append(ExcelRow(
                row_number=row_number,
                items=_text(raw.get("Items")),
                price_raw=raw.get("Giá"),
                category_id=_text(raw.get("CategoryID")),
                category_name=_text(raw.get("CategoryName")),
                description=_text(raw.get("Description")),
                option=_text(raw.get("Option")),
            ))
        return rows
    finally:
        wb.close()


def find_row_category(store: Any, row: ExcelRow) -> Optional[Dict[str, Any]]:
    if row.category_id:
        category = store.find_category_by_code(row.category_id)
        if category:
            return category
    if row.category_name:
        return store.find_category_by_name_contains(row.category_name)
    return None


def import_excel_rows(
    rows: List[ExcelRow],
    store: Any,
    resolver: Optional[ImageResolver] = None,
    *,
    branch: Optional[Dict[str, Any]] = None,
) -> ImportSummary:
    branch = branch or require_branch(store)
    summary = ImportSummary()

    for row in rows:
        name = row.product_name
        try:
            price = row.price
            if price is None:
                log.warning("Row %d: Invalid price for %s, skipping...", row.row_number, name)
                summary.skipped += 1
                continue

            category = find_row_category(store, row)
            if not category:
                log.warning("Row %d: Category not found for %s, skipping...", row.row_number, name)
                summary.skipped += 1
                continue

            code = row.code
            image = resolver.resolve(name, category["name"]) if resolver else None
            fields = {
                "name": name,
                "price": price,
                "cost_price": DEFAULT_COST_PRICE,
                "quantity": DEFAULT_QUANTITY,
                "prep_time": DEFAULT_PREP_TIME,
                "category_id": category["id"],
                "is_available": True,
            }

            existing = store.find_product_by_code(code)
            if existing:
                fields["description"] = row.description or existing.get("description")
                fields["image"] = image or existing.get("image")
                store.update_product(code, fields)
                log.info("Updated product: %s (%s)", name, code)
            else:
                fields.update({
                    "code": code,
                    "description": row.description,
                    "branch_id": branch["id"],
                    "image": image,
                })
                store.create_product(fields)
                log.info("Created product: %s (%s)", name, code)
            summary.success += 1
        except Exception as e:
            log.error("Row %d: Error processing - %s", row.row_number, e)
            summary.errors += 1
    return summary


def run_excel_import(
    xlsx_path: Path,
    store: Any,
    resolver: Optional[ImageResolver] = None,
) -> ImportSummary:
    rows = read_menu_rows(xlsx_path)
    branch = require_branch(store)
    log.info("Found %d data rows in %s", len(rows), Path(xlsx_path).name)
    return import_excel_rows(rows, store, resolver, branch=branch)
