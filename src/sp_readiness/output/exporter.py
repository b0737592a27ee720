"""Dashboard exports: shape payloads and hand the bytes to an ExportSink."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from sp_readiness.analysis.sites import SiteAggregate
from sp_readiness.core.constants import (
    EXPORT_DASHBOARD_JSON,
    EXPORT_FILTERED_SITES_CSV,
    EXPORT_PDF,
    EXPORT_SITE_SUMMARY_JSON,
    MIME_TYPES,
)
from sp_readiness.core.exceptions import OutputError
from sp_readiness.output.protocols import ExportSink, RenderService
from sp_readiness.output.writers import (
    records_to_csv,
    records_to_json,
    site_export_records,
    site_summary_records,
)

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def safe_filename(name: str, fallback: str = "export") -> str:
    """Replace path separators and characters invalid on common filesystems with "_"."""
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", name).strip().strip(".")
    return cleaned or fallback


class DirectorySink:
    """ExportSink that writes each export into a local directory."""

    def __init__(self, output_dir: str | Path = "."):
        self.output_dir = Path(output_dir)

    def save(self, filename: str, data: bytes, mime_type: str) -> str:
        """Write bytes to output_dir/filename, creating the directory if needed.

        Raises:
            OutputError: If the directory or file cannot be written
        """
        path = self.output_dir / safe_filename(filename)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except PermissionError as e:
            logger.error(f"Permission denied creating {path}: {e}")
            logger.error("Check write permissions for the output directory")
            raise OutputError(
                "Permission denied writing export",
                output_path=str(path),
                output_format=mime_type,
                original_error=e,
            ) from e
        except OSError as e:
            logger.error(f"OS error creating {path}: {e}")
            logger.error("Check disk space and path validity")
            raise OutputError(
                "Cannot write export",
                output_path=str(path),
                output_format=mime_type,
                details=str(e),
                original_error=e,
            ) from e

        logger.info(f"✓ Export created: {path}")
        return str(path)


class DashboardExporter:
    """
    Builds the dashboard's download payloads.

    Args:
        sink: Where exported bytes go
        renderer: Optional visual report renderer used by export_pdf
    """

    def __init__(self, sink: ExportSink, renderer: RenderService | None = None):
        self.sink = sink
        self.renderer = renderer

    def _save_text(self, filename: str, text: str, fmt: str) -> str:
        return self.sink.save(filename, text.encode("utf-8"), MIME_TYPES[fmt])

    def _save_csv(self, filename: str, records: list[Mapping[str, Any]]) -> str | None:
        if not records:
            logger.info(f"Nothing to export for {filename}; skipped")
            return None
        return self._save_text(filename, records_to_csv(records), "csv")

    def export_filtered_sites_csv(self, sites: Iterable[SiteAggregate]) -> str | None:
        """Export the current site aggregates as CSV (None when there are no sites)."""
        return self._save_csv(EXPORT_FILTERED_SITES_CSV, site_export_records(sites))

    def export_site_summary_json(self, sites: Iterable[SiteAggregate]) -> str:
        return self._save_text(EXPORT_SITE_SUMMARY_JSON, records_to_json(site_summary_records(sites)), "json")

    def export_site_rows(self, site: SiteAggregate, fmt: str = "csv") -> str | None:
        """Export one site's member rows as "<site>_rows.csv" or "<site>_rows.json".

        Raises:
            OutputError: If fmt is neither csv nor json
        """
        filename = f"{site.site_name}_rows.{fmt}"
        if fmt == "csv":
            return self._save_csv(filename, list(site.raw_rows))
        if fmt == "json":
            return self._save_text(filename, records_to_json(list(site.raw_rows)), "json")
        raise OutputError(
            f"Unsupported site rows format: {fmt}", output_format=fmt, details="expected csv or json"
        )

    def export_summary_json(self, snapshot: Mapping[str, Any], filename: str = EXPORT_DASHBOARD_JSON) -> str:
        """Export a full dashboard snapshot (DashboardPipeline.snapshot()) as JSON."""
        return self._save_text(filename, records_to_json(dict(snapshot)), "json")

    def export_pdf(self) -> str:
        """Render the current view through the injected RenderService and save it.

        Raises:
            OutputError: If no renderer is configured or rendering fails
        """
        if self.renderer is None:
            raise OutputError("No render service configured", output_format="pdf")
        try:
            document = self.renderer.render()
        except Exception as e:
            logger.error(f"Report rendering failed: {e}")
            raise OutputError(
                "Report rendering failed", output_format="pdf", details=str(e), original_error=e
            ) from e
        return self.sink.save(EXPORT_PDF, document, MIME_TYPES["pdf"])


__all__ = ["DashboardExporter", "DirectorySink", "safe_filename"]
