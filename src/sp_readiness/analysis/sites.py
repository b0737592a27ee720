"""
Site Aggregator

Groups filtered inventory rows by site identity and computes per-site
storage, file counts, recency and sharing exposure.

Sharing exposure is classified once over the concatenated text of every
field of every row belonging to a site, so a guest grant mentioned in any
column of any row attributes to the whole site.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pandas as pd

from sp_readiness.analysis.classifiers import (
    classify_sharing,
    is_visible_everyone,
    is_visible_external,
    parse_date,
    parse_number,
    row_text,
)
from sp_readiness.core.constants import UNKNOWN_SITE
from sp_readiness.ingest.columns import HeaderRoles
from sp_readiness.ingest.parser import Row

logger = logging.getLogger(__name__)


@dataclass
class SiteAggregate:
    """Aggregated metrics for a single site."""

    site_name: str
    files: int | float
    total_kb: int | float
    last_modified: datetime | None
    sharing_level: str
    sharing_rank: int
    visible_everyone: bool
    visible_external: bool
    raw_rows: list[Row] = field(default_factory=list)

    @property
    def total_mb(self) -> float:
        return self.total_kb / 1024

    @property
    def total_gb(self) -> float:
        return self.total_kb / 1024 / 1024

    @property
    def row_count(self) -> int:
        return len(self.raw_rows)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a display record (without member rows)."""
        return {
            "siteName": self.site_name,
            "files": self.files,
            "totalKB": self.total_kb,
            "totalMB": self.total_mb,
            "totalGB": self.total_gb,
            "lastModified": self.last_modified.isoformat() if self.last_modified else None,
            "sharingLevel": self.sharing_level,
            "sharingRank": self.sharing_rank,
            "visibleEveryone": self.visible_everyone,
            "visibleExternal": self.visible_external,
            "rowCount": self.row_count,
        }

    def rows_dataframe(self, headers: Sequence[str] | None = None) -> pd.DataFrame:
        """Get the site's member rows as a DataFrame (columns in header order when given)."""
        columns = list(dict.fromkeys(headers)) if headers else None
        if not self.raw_rows:
            return pd.DataFrame(columns=columns or [])
        return pd.DataFrame(self.raw_rows, columns=columns)


def site_key(row: Row, roles: HeaderRoles) -> str:
    """Trimmed site value of a row; empty or missing collapses to "(unknown)"."""
    value = row.get(roles.site, "") if roles.site else ""
    return (value or "").strip() or UNKNOWN_SITE


def _build_site(site_name: str, site_rows: list[Row], roles: HeaderRoles) -> SiteAggregate:
    combined_text = " ".join(row_text(r) for r in site_rows)
    sharing = classify_sharing(combined_text)

    # Without a file count column every row is one file/item
    if roles.file_count:
        files = sum(parse_number(r.get(roles.file_count)) for r in site_rows)
    else:
        files = len(site_rows)

    total_kb = sum(parse_number(r.get(roles.file_size)) for r in site_rows) if roles.file_size else 0

    last_modified = None
    if roles.last_modified:
        dates = [d for d in (parse_date(r.get(roles.last_modified)) for r in site_rows) if d is not None]
        last_modified = max(dates) if dates else None

    return SiteAggregate(
        site_name=site_name,
        files=files,
        total_kb=total_kb,
        last_modified=last_modified,
        sharing_level=sharing.level,
        sharing_rank=sharing.rank,
        visible_everyone=is_visible_everyone(combined_text),
        visible_external=is_visible_external(combined_text),
        raw_rows=site_rows,
    )


def aggregate_sites(rows: Iterable[Row], roles: HeaderRoles) -> list[SiteAggregate]:
    """Group rows by site and compute one SiteAggregate per distinct site.

    Every input row lands in exactly one aggregate. Missing columns fall back
    to defaults (row count for files, 0 storage, no last-modified date).

    Args:
        rows: Filtered rows
        roles: Header role map

    Returns:
        Site aggregates sorted by file count, descending
    """
    if roles.site is None:
        return []

    groups: dict[str, list[Row]] = {}
    for row in rows:
        groups.setdefault(site_key(row, roles), []).append(row)

    if not groups:
        return []

    sites = [_build_site(name, site_rows, roles) for name, site_rows in groups.items()]
    sites.sort(key=lambda s: s.files, reverse=True)

    logger.debug(f"Aggregated {sum(s.row_count for s in sites)} rows into {len(sites)} sites")
    return sites


__all__ = ["SiteAggregate", "aggregate_sites", "site_key"]
