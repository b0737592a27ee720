"""
Analysis Modules

Everything computed from a loaded Dataset:
- Row classifiers (sharing, risk, category, extension)
- Row filtering
- Site aggregation
- Summary, staleness, gravity, table and distribution views
- The memoised DashboardPipeline tying them together
"""

from __future__ import annotations

from sp_readiness.analysis.classifiers import (
    SharingClassification,
    classify_sharing,
    get_content_category,
    get_file_extension,
    get_risk_profile,
    is_visible_everyone,
    is_visible_external,
    normalize_extension,
    parse_date,
    parse_number,
    row_text,
)
from sp_readiness.analysis.filters import RowFilter, filter_rows
from sp_readiness.analysis.pipeline import DashboardPipeline, DatasetListener
from sp_readiness.analysis.sites import SiteAggregate, aggregate_sites, site_key
from sp_readiness.analysis.views import (
    DashboardSummary,
    FileTypeDistribution,
    StaleSiteView,
    TopSite,
    file_type_distribution,
    gravity_risk,
    stale_period_label,
    stale_sites,
    stale_threshold,
    summarize,
    table_view,
    top_sites,
)

__all__ = [
    "DashboardPipeline",
    "DashboardSummary",
    "DatasetListener",
    "FileTypeDistribution",
    "RowFilter",
    "SharingClassification",
    "SiteAggregate",
    "StaleSiteView",
    "TopSite",
    "aggregate_sites",
    "classify_sharing",
    "file_type_distribution",
    "filter_rows",
    "get_content_category",
    "get_file_extension",
    "get_risk_profile",
    "gravity_risk",
    "is_visible_everyone",
    "is_visible_external",
    "normalize_extension",
    "parse_date",
    "parse_number",
    "row_text",
    "site_key",
    "stale_period_label",
    "stale_sites",
    "stale_threshold",
    "summarize",
    "table_view",
    "top_sites",
]
