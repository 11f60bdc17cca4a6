# menu_ingest/config.py
"""
Runtime settings for the ingestion scripts.

Values come from the environment (a repo-root .env is loaded first), with
defaults relative to the repo root. CLI flags override single fields via
``dataclasses.replace``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# --- Paths ---
ROOT = Path(__file__).resolve().parents[1]      # repo root
STORAGE = ROOT / "storage"

load_dotenv(ROOT / ".env")


def _path_from_env(name: str, default: Path) -> Path:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    p = Path(raw).expanduser()
    return p if p.is_absolute() else ROOT / p


@dataclass(frozen=True)
class IngestSettings:
    db_path: Path
    source_path: Path
    xlsx_path: Path
    assets_dir: Path
    assets_url: str = "/assets"
    log_level: str = "INFO"


def load_settings() -> IngestSettings:
    return IngestSettings(
        db_path=_path_from_env("MENU_INGEST_DB", STORAGE / "catalog.db"),
        source_path=_path_from_env("MENU_SOURCE_PATH", ROOT / "archive" / "newdata.md"),
        xlsx_path=_path_from_env("MENU_XLSX_PATH", ROOT / "menu.xlsx"),
        assets_dir=_path_from_env("MENU_ASSETS_DIR", ROOT / "assets"),
        assets_url=os.getenv("MENU_ASSETS_URL") or "/assets",
        log_level=(os.getenv("MENU_INGEST_LOG_LEVEL") or "INFO").upper(),
    )


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
