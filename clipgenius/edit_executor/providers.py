"""Providers for edit executor service."""

from functools import cache

from clipgenius.edit_executor.service import ExportService


@cache
def export_service() -> ExportService:
    """Provide a cached instance of the ExportService."""
    return ExportService()
