"""Output module - Export payload shaping and export sinks."""

from sp_readiness.output.exporter import DashboardExporter, DirectorySink, safe_filename
from sp_readiness.output.protocols import ExportSink, RenderService
from sp_readiness.output.writers import (
    SITE_EXPORT_COLUMNS,
    SITE_SUMMARY_COLUMNS,
    format_cell,
    format_export_date,
    records_to_csv,
    records_to_json,
    site_export_records,
    site_summary_records,
    sites_dataframe,
)

__all__ = [
    "DashboardExporter",
    "DirectorySink",
    "ExportSink",
    "RenderService",
    "SITE_EXPORT_COLUMNS",
    "SITE_SUMMARY_COLUMNS",
    "format_cell",
    "format_export_date",
    "records_to_csv",
    "records_to_json",
    "safe_filename",
    "site_export_records",
    "site_summary_records",
    "sites_dataframe",
]
