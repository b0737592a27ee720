"""
Summary & derived views.

Dashboard-wide metrics, staleness lists, "data gravity" rankings, the
searchable site table and the file-type distribution. Every function here is
a pure function of site aggregates / rows plus caller selections.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from sp_readiness.analysis.classifiers import get_file_extension, parse_date, parse_number
from sp_readiness.analysis.sites import SiteAggregate
from sp_readiness.core.colors import hr_bytes
from sp_readiness.core.constants import (
    DEFAULT_STALE_PERIOD,
    FILE_TYPE_TOP_N,
    GRAVITY_RISK_DEFAULT,
    GRAVITY_RISK_THRESHOLDS,
    OTHER_BUCKET,
    SHARING_ANONYMOUS,
    SHARING_FILTER_ALL,
    SORT_KEYS,
    STALE_PERIOD_LABELS,
    STALE_PERIODS,
    TOP_SITES_LIMIT,
)
from sp_readiness.ingest.columns import HeaderRoles
from sp_readiness.ingest.parser import Row

logger = logging.getLogger(__name__)

# Missing last-modified dates sort as the earliest possible value
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _percent(part: int, total: int) -> float:
    """Percentage rounded half-up to 2 decimals; 0 when total is 0."""
    if not total:
        return 0
    return math.floor(part / total * 10000 + 0.5) / 100


# ==================== DASHBOARD SUMMARY ====================


@dataclass
class DashboardSummary:
    """Headline metrics across all site aggregates."""

    total_sites: int = 0
    public_sites: int = 0
    public_pct: float = 0
    everyone_sites: int = 0
    everyone_pct: float = 0
    total_kb: int | float = 0
    total_files: int | float = 0

    @property
    def total_mb(self) -> float:
        return self.total_kb / 1024

    @property
    def total_gb(self) -> float:
        return self.total_kb / 1024 / 1024

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSites": self.total_sites,
            "publicSites": self.public_sites,
            "publicPct": self.public_pct,
            "everyoneSites": self.everyone_sites,
            "everyonePct": self.everyone_pct,
            "totalKB": self.total_kb,
            "totalMB": self.total_mb,
            "totalGB": self.total_gb,
            "totalFiles": self.total_files,
            "displaySize": hr_bytes(self.total_kb),
        }


def summarize(sites: Sequence[SiteAggregate]) -> DashboardSummary:
    """Compute dashboard-wide metrics.

    A site is public when it is anonymously shared or mentions external/guest
    access anywhere; it is org-wide visible when it mentions "everyone" or is public.
    """
    total_sites = len(sites)
    public_sites = sum(1 for s in sites if s.sharing_level == SHARING_ANONYMOUS or s.visible_external)
    everyone_sites = sum(1 for s in sites if s.visible_everyone or s.visible_external)
    return DashboardSummary(
        total_sites=total_sites,
        public_sites=public_sites,
        public_pct=_percent(public_sites, total_sites),
        everyone_sites=everyone_sites,
        everyone_pct=_percent(everyone_sites, total_sites),
        total_kb=sum(s.total_kb or 0 for s in sites),
        total_files=sum(s.files or 0 for s in sites),
    )


# ==================== STALENESS ====================


def _months_back(now: datetime, months: int) -> datetime:
    # Keep the day of month; days past the end of the target month roll forward
    total = now.year * 12 + now.month - 1 - months
    year, month = divmod(total, 12)
    return now.replace(year=year, month=month + 1, day=1) + timedelta(days=now.day - 1)


def stale_threshold(period: str = DEFAULT_STALE_PERIOD, now: datetime | None = None) -> datetime:
    """Return "now minus the period" using calendar arithmetic.

    Months and years are subtracted on the calendar, not as fixed day counts.
    A day that does not exist in the target month rolls over into the next
    one (31 Aug - 6 months = 2 Mar in a leap year, 29 Feb - 12 months =
    1 Mar). Unknown periods fall back to 6 months.
    """
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    offset = STALE_PERIODS.get(period, STALE_PERIODS[DEFAULT_STALE_PERIOD])
    return _months_back(now, offset.get("years", 0) * 12 + offset.get("months", 0))


def stale_period_label(period: str) -> str:
    return STALE_PERIOD_LABELS.get(period, STALE_PERIOD_LABELS[DEFAULT_STALE_PERIOD])


@dataclass
class StaleSiteView:
    """The stale subset of one site's rows."""

    site: SiteAggregate
    stale_rows: list[Row] = field(default_factory=list)
    stale_kb: int | float = 0
    oldest_modified: datetime | None = None

    @property
    def site_name(self) -> str:
        return self.site.site_name

    @property
    def stale_file_count(self) -> int:
        return len(self.stale_rows)

    def to_dict(self) -> dict[str, Any]:
        return {
            "siteName": self.site_name,
            "staleFileCount": self.stale_file_count,
            "staleKB": self.stale_kb,
            "displaySize": hr_bytes(self.stale_kb),
            "oldestModified": self.oldest_modified.isoformat() if self.oldest_modified else None,
            "sharingLevel": self.site.sharing_level,
        }


def stale_sites(sites: Iterable[SiteAggregate], roles: HeaderRoles, threshold: datetime) -> list[StaleSiteView]:
    """Collect, per site, the rows last modified strictly before the threshold.

    Rows without a parseable date are never stale. Sites with no stale rows
    are omitted; the whole list is empty when no last-modified column exists.

    Returns:
        Stale views sorted by oldest stale date, most overdue first
    """
    if not roles.last_modified:
        return []

    views: list[StaleSiteView] = []
    for site in sites:
        stale: list[tuple[Row, datetime]] = []
        for row in site.raw_rows:
            modified = parse_date(row.get(roles.last_modified))
            if modified is not None and modified < threshold:
                stale.append((row, modified))
        if not stale:
            continue
        views.append(
            StaleSiteView(
                site=site,
                stale_rows=[row for row, _ in stale],
                stale_kb=sum(parse_number(row.get(roles.file_size)) for row, _ in stale) if roles.file_size else 0,
                oldest_modified=min(modified for _, modified in stale),
            )
        )

    views.sort(key=lambda v: v.oldest_modified)
    return views


# ==================== DATA GRAVITY ====================


def gravity_risk(files: int | float) -> str:
    """Severity label from file count (exclusive lower bounds, first match wins)."""
    for threshold, label in GRAVITY_RISK_THRESHOLDS:
        if files > threshold:
            return label
    return GRAVITY_RISK_DEFAULT


@dataclass
class TopSite:
    """One entry of the top-N "data gravity" ranking."""

    name: str
    files: int | float
    size_mb: float
    display_size: str
    risk: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "files": self.files,
            "sizeMB": self.size_mb,
            "displaySize": self.display_size,
            "risk": self.risk,
        }


def top_sites(sites: Iterable[SiteAggregate], metric: str = "files", limit: int = TOP_SITES_LIMIT) -> list[TopSite]:
    """Rank sites by file count ("files") or storage ("size") and keep the first `limit`."""
    if metric == "size":
        ranked = sorted(sites, key=lambda s: s.total_kb, reverse=True)
    else:
        ranked = sorted(sites, key=lambda s: s.files, reverse=True)

    return [
        TopSite(
            name=s.site_name,
            files=s.files,
            size_mb=round(s.total_mb, 2),
            display_size=hr_bytes(s.total_kb),
            risk=gravity_risk(s.files),
        )
        for s in ranked[:limit]
    ]


# ==================== SITE TABLE ====================


def _table_sort_key(canonical: str):
    if canonical == "name":
        return lambda s: (s.site_name.casefold(), s.site_name)
    if canonical == "files":
        return lambda s: s.files
    if canonical == "kb":
        return lambda s: s.total_kb
    if canonical == "last":
        return lambda s: s.last_modified or _EPOCH
    return None


def table_view(
    sites: Iterable[SiteAggregate],
    search: str = "",
    sharing: str = SHARING_FILTER_ALL,
    sort_key: str = "files",
    sort_dir: str = "desc",
) -> list[SiteAggregate]:
    """Filter and sort site aggregates for the site table.

    Args:
        sites: Site aggregates
        search: Case-insensitive substring matched against site names
        sharing: Exact sharing level, or "all"
        sort_key: name, files, kb/storage or last/last_modified
        sort_dir: "asc" or "desc"

    Returns:
        New list; unknown sort keys keep the incoming order
    """
    rows = list(sites)
    if sharing and sharing != SHARING_FILTER_ALL:
        rows = [s for s in rows if s.sharing_level == sharing]

    query = (search or "").strip().lower()
    if query:
        rows = [s for s in rows if query in s.site_name.lower()]

    key = _table_sort_key(SORT_KEYS.get(sort_key, ""))
    if key is not None:
        rows.sort(key=key, reverse=sort_dir != "asc")
    return rows


# ==================== FILE TYPE DISTRIBUTION ====================


@dataclass
class FileTypeDistribution:
    """Chart slices for the filtered rows plus the full extension domain."""

    slices: list[tuple[str, int]] = field(default_factory=list)
    all_types: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "slices": [{"name": name, "value": value} for name, value in self.slices],
            "allTypes": list(self.all_types),
        }


def file_type_distribution(
    filtered_rows: Iterable[Row],
    all_rows: Iterable[Row],
    roles: HeaderRoles,
    top_n: int = FILE_TYPE_TOP_N,
) -> FileTypeDistribution:
    """Count filtered rows per extension.

    The top `top_n` extensions are kept (ties in first-seen order) and the
    rest are rolled into a single "Other" slice. `all_types` lists every
    extension seen in the unfiltered rows, sorted, for use as filter options.
    """
    all_rows = list(all_rows)
    if not all_rows:
        return FileTypeDistribution()

    counts = Counter(get_file_extension(r, roles) for r in filtered_rows)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)

    slices = ranked[:top_n]
    others = sum(value for _, value in ranked[top_n:])
    if others > 0:
        slices.append((OTHER_BUCKET, others))

    all_types = sorted({get_file_extension(r, roles) for r in all_rows})
    return FileTypeDistribution(slices=slices, all_types=all_types)


__all__ = [
    "DashboardSummary",
    "FileTypeDistribution",
    "StaleSiteView",
    "TopSite",
    "file_type_distribution",
    "gravity_risk",
    "stale_period_label",
    "stale_sites",
    "stale_threshold",
    "summarize",
    "table_view",
    "top_sites",
]
