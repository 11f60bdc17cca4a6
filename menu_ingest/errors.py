# menu_ingest/errors.py
from __future__ import annotations


class IngestError(Exception):
    """Fatal ingestion error (aborts the run before the catalog is touched)."""


class SourceNotFoundError(IngestError):
    """The menu document or workbook does not exist."""


class NoBranchError(IngestError):
    """No branch exists to attach imported products to."""
