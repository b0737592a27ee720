"""
Export payload shaping.

Serializes record lists to quoted CSV text or indented JSON and builds the
fixed column sets of the site exports. Nothing here touches the filesystem.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

import pandas as pd

from sp_readiness.analysis.sites import SiteAggregate

SITE_EXPORT_COLUMNS = ["SiteName", "Files", "TotalKB", "TotalMB", "SharingLevel", "LastModified"]
SITE_SUMMARY_COLUMNS = ["siteName", "files", "totalKB", "sharingLevel"]


def format_export_date(value: datetime | None) -> str:
    """ISO-8601 UTC with millisecond precision and a "Z" suffix ("" when missing)."""
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S") + f".{value.microsecond // 1000:03d}Z"


def format_cell(value: Any) -> str:
    """Render one value as CSV cell text.

    Integral floats drop their ".0" (3.0 -> "3") and booleans are lowercase,
    matching what a spreadsheet-oriented consumer expects.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, datetime):
        return format_export_date(value)
    return str(value)


def _quote(value: Any) -> str:
    return '"' + format_cell(value).replace('"', '""') + '"'


def records_to_csv(records: Sequence[Mapping[str, Any]]) -> str:
    """Serialize records to CSV text.

    Columns come from the keys of the first record; the header line is not
    quoted, every value is. Lines are joined with "\\n".

    Returns:
        CSV text, or "" for an empty record list
    """
    if not records:
        return ""
    keys = list(records[0].keys())
    lines = [",".join(keys)]
    for record in records:
        lines.append(",".join(_quote(record.get(key)) for key in keys))
    return "\n".join(lines)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def records_to_json(payload: Any) -> str:
    """Serialize records (or any JSON-compatible payload) with 2-space indentation."""
    return json.dumps(payload, indent=2, ensure_ascii=False, default=_json_default)


def site_export_records(sites: Iterable[SiteAggregate]) -> list[dict[str, Any]]:
    """Rows of the filtered-sites CSV export."""
    return [
        {
            "SiteName": site.site_name,
            "Files": site.files,
            "TotalKB": site.total_kb,
            "TotalMB": f"{site.total_mb:.2f}",
            "SharingLevel": site.sharing_level,
            "LastModified": format_export_date(site.last_modified),
        }
        for site in sites
    ]


def site_summary_records(sites: Iterable[SiteAggregate]) -> list[dict[str, Any]]:
    """Rows of the site summary JSON export."""
    return [
        {
            "siteName": site.site_name,
            "files": site.files,
            "totalKB": site.total_kb,
            "sharingLevel": site.sharing_level,
        }
        for site in sites
    ]


def sites_dataframe(sites: Iterable[SiteAggregate]) -> pd.DataFrame:
    """Get the filtered-sites export as a DataFrame (one row per site)."""
    records = site_export_records(sites)
    if not records:
        return pd.DataFrame(columns=SITE_EXPORT_COLUMNS)
    return pd.DataFrame(records, columns=SITE_EXPORT_COLUMNS)


__all__ = [
    "SITE_EXPORT_COLUMNS",
    "SITE_SUMMARY_COLUMNS",
    "format_cell",
    "format_export_date",
    "records_to_csv",
    "records_to_json",
    "site_export_records",
    "site_summary_records",
    "sites_dataframe",
]
