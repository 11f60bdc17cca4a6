"""
Settings and catalog bootstrap.

Covers:
  - defaults relative to the repo root
  - env overrides (absolute and relative paths, log level upper-cased)
  - init_db creates the schema and seeds a branch once
"""

from __future__ import annotations

import sqlite3

from menu_ingest import config, init_db
from menu_ingest.catalog_store import CatalogStore


ENV_VARS = (
    "MENU_INGEST_DB", "MENU_SOURCE_PATH", "MENU_XLSX_PATH",
    "MENU_ASSETS_DIR", "MENU_ASSETS_URL", "MENU_INGEST_LOG_LEVEL",
)


def _clear_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults(self, monkeypatch):
        _clear_env(monkeypatch)
        settings = config.load_settings()
        assert settings.db_path == config.STORAGE / "catalog.db"
        assert settings.assets_dir == config.ROOT / "assets"
        assert settings.assets_url == "/assets"
        assert settings.log_level == "INFO"

    def test_absolute_override(self, monkeypatch, tmp_path):
        _clear_env(monkeypatch)
        monkeypatch.setenv("MENU_INGEST_DB", str(tmp_path / "x.db"))
        assert config.load_settings().db_path == tmp_path / "x.db"

    def test_relative_override(self, monkeypatch):
        _clear_env(monkeypatch)
        monkeypatch.setenv("MENU_SOURCE_PATH", "docs/menu.md")
        assert config.load_settings().source_path == config.ROOT / "docs" / "menu.md"

    def test_log_level_and_url(self, monkeypatch):
        _clear_env(monkeypatch)
        monkeypatch.setenv("MENU_INGEST_LOG_LEVEL", "debug")
        monkeypatch.setenv("MENU_ASSETS_URL", "/static/img")
        settings = config.load_settings()
        assert settings.log_level == "DEBUG"
        assert settings.assets_url == "/static/img"


class TestInitDb:
    def test_creates_schema_and_branch(self, tmp_path, monkeypatch, capsys):
        _clear_env(monkeypatch)
        monkeypatch.setenv("MENU_ASSETS_DIR", str(tmp_path / "assets"))
        db = tmp_path / "data" / "catalog.db"

        init_db.main(["--db", str(db), "--branch-name", "Chi nhánh Quận 1"])

        conn = sqlite3.connect(db)
        tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        conn.close()
        assert {"branches", "categories", "products", "product_options"} <= tables
        assert (tmp_path / "assets").is_dir()
        assert CatalogStore(db).find_first_branch()["code"] == "BR001"
        assert "Created branch" in capsys.readouterr().out

    def test_branch_seeded_once(self, tmp_path, monkeypatch, capsys):
        _clear_env(monkeypatch)
        monkeypatch.setenv("MENU_ASSETS_DIR", str(tmp_path / "assets"))
        db = tmp_path / "catalog.db"

        init_db.main(["--db", str(db), "--branch-name", "One"])
        init_db.main(["--db", str(db), "--branch-name", "Two", "--branch-code", "BR002"])

        assert CatalogStore(db).find_first_branch()["name"] == "One"
        assert "Branch already present" in capsys.readouterr().out
