"""
Row filter engine.

Applies the dashboard-wide file type / risk profile / content category
selections to the full row set. Every downstream view (site aggregates,
staleness, rankings, distribution slices) is computed from the result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sp_readiness.analysis.classifiers import (
    get_content_category,
    get_file_extension,
    get_risk_profile,
    row_text,
)
from sp_readiness.core.config import DashboardConfig
from sp_readiness.core.config_validation import validate_category, validate_risk
from sp_readiness.core.constants import FILTER_ALL
from sp_readiness.ingest.columns import HeaderRoles
from sp_readiness.ingest.parser import Row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowFilter:
    """Active row selections. "All" passes every row.

    Raises:
        ConfigurationError: If risk or category is outside its vocabulary
    """

    file_type: str = FILTER_ALL
    risk: str = FILTER_ALL
    category: str = FILTER_ALL

    def __post_init__(self):
        validate_risk(self.risk)
        validate_category(self.category)

    @property
    def is_passthrough(self) -> bool:
        return self.file_type == FILTER_ALL and self.risk == FILTER_ALL and self.category == FILTER_ALL

    @classmethod
    def from_config(cls, config: DashboardConfig) -> RowFilter:
        return cls(file_type=config.file_type, risk=config.risk, category=config.category)

    def matches(self, row: Row, roles: HeaderRoles) -> bool:
        """True when the row passes all three selections."""
        if self.file_type != FILTER_ALL and get_file_extension(row, roles) != self.file_type:
            return False
        # Risk keywords may sit in any column (Description, Name, ...), so scan the full row
        if self.risk != FILTER_ALL and get_risk_profile(row_text(row)) != self.risk:
            return False
        if self.category != FILTER_ALL and get_content_category(get_file_extension(row, roles)) != self.category:
            return False
        return True


def filter_rows(rows: Iterable[Row], roles: HeaderRoles, row_filter: RowFilter | None = None) -> list[Row]:
    """Return the rows passing the filter, in input order.

    Args:
        rows: Full row set
        roles: Header role map used for extension extraction
        row_filter: Active selections (None = pass-through)

    Returns:
        New list of the passing rows (the input is never modified)
    """
    rows = list(rows)
    if row_filter is None or row_filter.is_passthrough:
        return rows

    filtered = [row for row in rows if row_filter.matches(row, roles)]
    logger.debug(
        f"Row filter file_type={row_filter.file_type} risk={row_filter.risk} "
        f"category={row_filter.category}: {len(filtered)}/{len(rows)} rows kept"
    )
    return filtered


__all__ = ["RowFilter", "filter_rows"]
