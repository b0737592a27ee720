"""CLI argument parsing for SharePoint Readiness."""

from __future__ import annotations

import argparse
import os

from sp_readiness.core.constants import (
    CONTENT_CATEGORIES,
    DEFAULT_STALE_PERIOD,
    FILTER_ALL,
    GRAVITY_METRICS,
    OUTPUT_FORMATS,
    RISK_PROFILES,
    SHARING_FILTER_ALL,
    SHARING_LEVELS,
    SORT_DIRECTIONS,
    SORT_KEYS,
    STALE_PERIODS,
)
from sp_readiness.core.version import __version__


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments"""
    parser = argparse.ArgumentParser(
        prog="sp-readiness",
        description="SharePoint Readiness - Summarize SharePoint site inventory CSV exports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Console summary of one inventory export
  sp-readiness inventory.csv

  # Several exports (progress bar, continues past failures)
  sp-readiness tenant_a.csv tenant_b.csv

  # Only critical-risk business documents
  sp-readiness inventory.csv --risk Critical --category Business

  # Files untouched for two years, largest sites first
  sp-readiness inventory.csv --stale-period 2years --gravity size

  # Export filtered sites (CSV) and summaries (JSON)
  sp-readiness inventory.csv --format all --output-dir ./reports

  # JSON structured logging
  sp-readiness inventory.csv --log-format json

Environment:
  LOG_LEVEL                   Default for --log-level
  SP_READINESS_STALE_PERIOD   Default for --stale-period
  SP_READINESS_GRAVITY        Default for --gravity
  SP_READINESS_OUTPUT_DIR     Default for --output-dir
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}", help="Show program version and exit"
    )

    parser.add_argument("files", nargs="+", metavar="FILE", help="SharePoint inventory CSV file(s)")

    filters = parser.add_argument_group("Filters", "Row selections applied before site aggregation")
    filters.add_argument(
        "--file-type", type=str, default=FILTER_ALL, help='Only rows with this extension, e.g. "pdf" (default: All)'
    )
    filters.add_argument(
        "--risk", type=str, default=FILTER_ALL, choices=[FILTER_ALL, *RISK_PROFILES], help="Risk profile filter"
    )
    filters.add_argument(
        "--category",
        type=str,
        default=FILTER_ALL,
        choices=[FILTER_ALL, *CONTENT_CATEGORIES],
        help="Content category filter",
    )

    table = parser.add_argument_group("Site table", "Search and sort of the site table")
    table.add_argument("--search", type=str, default="", help="Case-insensitive site name search")
    table.add_argument(
        "--sharing",
        type=str,
        default=SHARING_FILTER_ALL,
        choices=[SHARING_FILTER_ALL, *SHARING_LEVELS],
        help="Only sites with this sharing level",
    )
    table.add_argument("--sort", type=str, default="files", choices=list(SORT_KEYS), help="Sort key (default: files)")
    table.add_argument("--sort-dir", type=str, default="desc", choices=SORT_DIRECTIONS, help="Sort direction")

    views = parser.add_argument_group("Views")
    views.add_argument(
        "--stale-period",
        type=str,
        default=os.environ.get("SP_READINESS_STALE_PERIOD", DEFAULT_STALE_PERIOD),
        choices=list(STALE_PERIODS),
        help="Staleness lookback (default: 6months, or SP_READINESS_STALE_PERIOD env var)",
    )
    views.add_argument(
        "--gravity",
        type=str,
        default=os.environ.get("SP_READINESS_GRAVITY", "files"),
        choices=GRAVITY_METRICS,
        help="Top sites ranking metric (default: files, or SP_READINESS_GRAVITY env var)",
    )

    output = parser.add_argument_group("Output")
    output.add_argument(
        "--format",
        type=str,
        default="console",
        choices=OUTPUT_FORMATS,
        help="console (default) prints a summary; json/csv write export files; all does everything",
    )
    output.add_argument(
        "--output-dir",
        type=str,
        default=os.environ.get("SP_READINESS_OUTPUT_DIR", "."),
        help="Output directory for exported files (default: current directory, or SP_READINESS_OUTPUT_DIR env var)",
    )
    output.add_argument(
        "--quiet", "-q", action="store_true", help="Quiet mode - suppress all output except errors and final summary"
    )
    output.add_argument(
        "--show-timings", action="store_true", help="Display performance timing breakdown after processing"
    )

    logging_group = parser.add_argument_group("Logging")
    logging_group.add_argument(
        "--log-level",
        type=str,
        default=os.environ.get("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, or LOG_LEVEL environment variable)",
    )
    logging_group.add_argument(
        "--log-format",
        type=str,
        default="text",
        choices=["text", "json"],
        help='Log output format: "text" (default) for human-readable, "json" for structured logging',
    )
    logging_group.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help='Directory for rotating log files (default: logs); "" disables file logging',
    )

    return parser.parse_args(argv)


__all__ = ["parse_arguments"]
