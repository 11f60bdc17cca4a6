"""
Markdown menu scanning and row decoding.

Covers:
  Scanner:
  - section header sets the category and waits for a table header
  - separator rows ignored
  - pipe rows before any table header ignored
  - scanning stops at the upsize price table / info marker
  Column map:
  - header substrings locate columns in any order
  - missing price column -> rows dropped
  Rows:
  - bold markup stripped from name and description
  - rows with fewer than 2 cells / no name / no price ignored
  - zero or unparseable price -> item dropped
  - rows before any section header land in the default category
  Loading:
  - missing file -> SourceNotFoundError
"""

from __future__ import annotations

import pytest

from menu_ingest.errors import SourceNotFoundError
from menu_ingest.models import DEFAULT_CATEGORY, OptionGroup
from menu_ingest.parsers.menu_markdown import (
    ColumnMap,
    ScanState,
    Scanner,
    decode_row,
    is_separator,
    load_markdown_menu,
    parse_markdown_menu,
    scan_rows,
    step,
)


MENU_DOC = """\
# Thực đơn

## 1. Món ngon phải thử
| Tên Món | Mô Tả | Tùy Chọn | Giá |
|---|---|---|---|
| **COMBO MỘT MÌNH ĂN NGON** | 1 Gà Giòn Vui Vẻ + 1 Mì Ý | **Chọn Gà:**<br>+ Gà Giòn / Gà Sốt Cay<br>**Nước Ngọt:**<br>+ 7Up / Pepsi (Thường/Up) | 78.000 |
| **Món chưa có giá** | Đang cập nhật | - | Liên hệ |

## 2. Gà giòn vui vẻ
| Tên Món | Mô Tả | Tùy Chọn | Giá |
|---|---|---|---|
| 2 MIẾNG GÀ | 2 Miếng Gà + 2 Tương Ớt | - | 66.000 |

### ℹ️ Bảng giá Upsize
| Tên Món | Mô Tả | Tùy Chọn | Giá |
|---|---|---|---|
| Upsize | Nước lớn | - | 10.000 |

## 3. Burger
| Tên Món | Mô Tả | Tùy Chọn | Giá |
| Burger Tôm | Tôm giòn | - | 45.000 |
"""

HEADERS = ColumnMap.from_headers(["Tên Món", "Mô Tả", "Tùy Chọn", "Giá"])


# ===========================================================================
# SECTION 1: Scanner
# ===========================================================================
class TestStep:
    def test_section_header(self):
        scanner, row = step(Scanner(), "## 3. Burger")
        assert scanner.state == ScanState.SEEKING_TABLE
        assert scanner.category == "Burger"
        assert row is None

    def test_table_header_enters_table(self):
        scanner, _ = step(Scanner(category="Burger"), "| Tên Món | Mô Tả | Tùy Chọn | Giá |")
        assert scanner.state == ScanState.IN_TABLE
        assert scanner.columns == HEADERS
        assert scanner.category == "Burger"

    def test_separator_keeps_state(self):
        start = Scanner(ScanState.IN_TABLE, "Burger", HEADERS)
        scanner, row = step(start, "|---|---|---|---|")
        assert scanner == start
        assert row is None

    def test_row_in_table(self):
        scanner, row = step(Scanner(ScanState.IN_TABLE, "Burger", HEADERS), "| Burger Tôm | Tôm | - | 45.000 |")
        assert row.name == "Burger Tôm"
        assert row.price_text == "45.000"

    def test_row_outside_table_ignored(self):
        _, row = step(Scanner(category="Burger"), "| Burger Tôm | Tôm | - | 45.000 |")
        assert row is None

    def test_terminator(self):
        scanner, _ = step(Scanner(ScanState.IN_TABLE, "Gà", HEADERS), "### ℹ️ Bảng giá Upsize")
        assert scanner.state == ScanState.DONE

    def test_done_is_final(self):
        done = Scanner(ScanState.DONE, "Gà", HEADERS)
        scanner, row = step(done, "## 3. Burger")
        assert scanner == done
        assert row is None

    def test_new_section_leaves_table(self):
        scanner, _ = step(Scanner(ScanState.IN_TABLE, "Gà", HEADERS), "## 3. Burger")
        assert scanner.state == ScanState.SEEKING_TABLE
        assert scanner.columns == ColumnMap()


class TestIsSeparator:
    @pytest.mark.parametrize("line", ["|---|---|", "| :--- | ---: |", "|-|"])
    def test_separators(self, line):
        assert is_separator(line)

    @pytest.mark.parametrize("line", ["| a | b |", "| Tên Món | Giá |", "---"])
    def test_not_separators(self, line):
        assert not is_separator(line)


class TestScanRows:
    def test_categories_and_stop(self):
        rows = scan_rows(MENU_DOC)
        assert [(cat, row.name) for cat, row in rows] == [
            ("Món ngon phải thử", "COMBO MỘT MÌNH ĂN NGON"),
            ("Món ngon phải thử", "Món chưa có giá"),
            ("Gà giòn vui vẻ", "2 MIẾNG GÀ"),
        ]

    def test_rows_without_header_ignored(self):
        assert scan_rows("## 1. Gà\n| 2 MIẾNG GÀ | x | - | 66.000 |") == []

    def test_empty(self):
        assert scan_rows("") == []


# ===========================================================================
# SECTION 2: Column map / rows
# ===========================================================================
class TestColumnMap:
    def test_standard_headers(self):
        assert HEADERS == ColumnMap(name=0, description=1, options=2, price=3)

    def test_reordered_and_decorated_headers(self):
        cols = ColumnMap.from_headers(["Giá (VNĐ)", "Tên Món Ăn", "Chọn thêm", "Mô Tả Chi Tiết"])
        assert cols == ColumnMap(name=1, description=3, options=2, price=0)

    def test_missing_price_column(self):
        cols = ColumnMap.from_headers(["Tên Món", "Mô Tả"])
        assert cols.price is None
        assert decode_row("| Burger | Tôm |", cols) is None


class TestDecodeRow:
    def test_bold_stripped(self):
        row = decode_row("| **Burger Tôm** | **Tôm** giòn | - | 45.000 |", HEADERS)
        assert row.name == "Burger Tôm"
        assert row.description == "Tôm giòn"
        assert row.options_text == "-"

    def test_single_cell(self):
        assert decode_row("| Burger |", HEADERS) is None

    def test_missing_price_cell(self):
        assert decode_row("| Burger | Tôm |", HEADERS) is None


# ===========================================================================
# SECTION 3: Items
# ===========================================================================
class TestParseMarkdownMenu:
    def test_items(self):
        items = parse_markdown_menu(MENU_DOC)
        assert [i.name for i in items] == ["COMBO MỘT MÌNH ĂN NGON", "2 MIẾNG GÀ"]

    def test_combo_fields(self):
        combo = parse_markdown_menu(MENU_DOC)[0]
        assert combo.category == "Món ngon phải thử"
        assert combo.description == "1 Gà Giòn Vui Vẻ + 1 Mì Ý"
        assert combo.price == 78000
        assert combo.options == [
            OptionGroup("Chọn Gà", ("Gà Giòn", "Gà Sốt Cay")),
            OptionGroup("Nước Ngọt", ("7Up (Thường)", "7Up (Up)", "Pepsi (Thường)", "Pepsi (Up)")),
        ]
        assert combo.option_count == 6

    def test_no_options(self):
        chicken = parse_markdown_menu(MENU_DOC)[1]
        assert chicken.options == []
        assert chicken.price == 66000

    def test_zero_price_dropped(self):
        doc = (
            "## 1. Gà\n"
            "| Tên Món | Mô Tả | Tùy Chọn | Giá |\n"
            "| Gà tặng | Quà | - | 0 |\n"
        )
        assert parse_markdown_menu(doc) == []

    def test_default_category(self):
        doc = (
            "| Tên Món | Mô Tả | Tùy Chọn | Giá |\n"
            "|---|---|---|---|\n"
            "| Trà đá | Mát | - | 5.000 |\n"
        )
        items = parse_markdown_menu(doc)
        assert items[0].category == DEFAULT_CATEGORY


class TestLoadMarkdownMenu:
    def test_reads_file(self, tmp_path):
        path = tmp_path / "menu.md"
        path.write_text(MENU_DOC, encoding="utf-8")
        assert len(load_markdown_menu(path)) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceNotFoundError):
            load_markdown_menu(tmp_path / "missing.md")
