"""
Reactive dashboard pipeline.

Holds the current Dataset snapshot plus the caller's selections and exposes
every derived view as a lazily computed, memoised property:

    dataset ──> filtered_rows ──> sites ──┬─> summary
                     │                    ├─> stale_sites (+ stale_threshold)
                     │                    ├─> top_sites
                     │                    └─> table
                     └──────────────────────> file_type_distribution

A stage is recomputed only when the dataset version or one of the config
fields it depends on has changed since it was last computed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from datetime import datetime
from pathlib import Path
from typing import Any

from sp_readiness.analysis.filters import RowFilter, filter_rows
from sp_readiness.analysis.sites import SiteAggregate, aggregate_sites
from sp_readiness.analysis.views import (
    DashboardSummary,
    FileTypeDistribution,
    StaleSiteView,
    TopSite,
    file_type_distribution,
    stale_period_label,
    stale_sites,
    stale_threshold,
    summarize,
    table_view,
    top_sites,
)
from sp_readiness.core.colors import hr_bytes
from sp_readiness.core.config import DashboardConfig
from sp_readiness.core.config_validation import validate_dashboard_config
from sp_readiness.ingest.columns import HeaderRoles
from sp_readiness.ingest.loader import Dataset, decode_csv_bytes, load_csv_text, read_csv_file
from sp_readiness.ingest.parser import Row

logger = logging.getLogger(__name__)

DatasetListener = Callable[[int, list[str]], None]


class _StageCache:
    """Single-entry memo per pipeline stage, keyed by the stage's inputs."""

    def __init__(self):
        self._entries: dict[str, tuple[Hashable, Any]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, stage: str, key: Hashable, compute: Callable[[], Any]) -> Any:
        entry = self._entries.get(stage)
        if entry is not None and entry[0] == key:
            self.hits += 1
            return entry[1]
        self.misses += 1
        value = compute()
        self._entries[stage] = (key, value)
        logger.debug(f"Recomputed pipeline stage '{stage}'")
        return value

    def clear(self) -> None:
        self._entries.clear()

    def get_statistics(self) -> dict[str, int]:
        return {"hits": self.hits, "misses": self.misses, "stages": len(self._entries)}


class DashboardPipeline:
    """
    Owns the loaded dataset and computes every dashboard view from it.

    Example:
        pipeline = DashboardPipeline()
        pipeline.load_file("inventory.csv")
        pipeline.set_filter(risk="Critical")
        print(pipeline.summary.public_pct)
    """

    def __init__(self, config: DashboardConfig | None = None, dataset: Dataset | None = None):
        """
        Args:
            config: Initial selections (validated)
            dataset: Initial dataset (default: empty)

        Raises:
            ConfigurationError: If a selection is outside its vocabulary
        """
        self._config = validate_dashboard_config(config or DashboardConfig())
        self._row_filter = RowFilter.from_config(self._config)
        self._dataset = dataset or Dataset()
        self._version = 0
        self._listeners: list[DatasetListener] = []
        self._cache = _StageCache()

    # ==================== DATASET ====================

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def config(self) -> DashboardConfig:
        return self._config

    @property
    def headers(self) -> list[str]:
        return list(self._dataset.headers)

    @property
    def roles(self) -> HeaderRoles:
        return self._dataset.roles

    @property
    def rows(self) -> list[Row]:
        return list(self._dataset.rows)

    def on_dataset_change(self, callback: DatasetListener) -> None:
        """Register a callback receiving (row_count, headers) after every load."""
        self._listeners.append(callback)

    def replace_dataset(self, dataset: Dataset) -> Dataset:
        """Swap in a new dataset snapshot and notify listeners."""
        self._dataset = dataset
        self._version += 1
        self._cache.clear()
        logger.info(
            f"Loaded {dataset.row_count} rows"
            + (f" from {dataset.source}" if dataset.source else "")
            + (f" (missing columns: {', '.join(dataset.roles.missing)})" if dataset.roles.missing else "")
        )
        for listener in list(self._listeners):
            listener(dataset.row_count, list(dataset.headers))
        return dataset

    def load_text(self, text: str, source: str = "") -> Dataset:
        return self.replace_dataset(load_csv_text(text, source=source))

    def load_bytes(self, data: bytes, encoding: str = "utf-8", source: str | None = None) -> Dataset:
        """Decode and load uploaded bytes.

        Raises:
            IngestionError: If the bytes are not text; the current dataset is kept
        """
        text = decode_csv_bytes(data, encoding=encoding, source=source)
        return self.load_text(text, source=source or "")

    def load_file(self, path: str | Path, encoding: str = "utf-8") -> Dataset:
        """Read and load a CSV file.

        Raises:
            IngestionError: If the file cannot be read; the current dataset is kept
        """
        text = read_csv_file(path, encoding=encoding)
        return self.load_text(text, source=str(path))

    # ==================== SELECTIONS ====================

    def _update_config(self, **changes: Any) -> DashboardConfig:
        self._config = validate_dashboard_config(self._config.evolve(**changes))
        return self._config

    def set_filter(self, file_type: str | None = None, risk: str | None = None, category: str | None = None) -> None:
        """Update the row filter; None leaves a selection unchanged."""
        changes = {
            k: v for k, v in {"file_type": file_type, "risk": risk, "category": category}.items() if v is not None
        }
        config = self._update_config(**changes)
        self._row_filter = RowFilter.from_config(config)

    def set_table_view(
        self,
        search: str | None = None,
        sharing: str | None = None,
        sort_key: str | None = None,
        sort_dir: str | None = None,
    ) -> None:
        """Update the site table selections; None leaves a selection unchanged."""
        changes = {
            k: v
            for k, v in {"search": search, "sharing": sharing, "sort_key": sort_key, "sort_dir": sort_dir}.items()
            if v is not None
        }
        self._update_config(**changes)

    def set_stale_period(self, period: str) -> None:
        self._update_config(stale_period=period)

    def set_gravity_metric(self, metric: str) -> None:
        self._update_config(gravity_metric=metric)

    def set_now(self, now: datetime | None) -> None:
        """Pin the staleness reference time (None = current time when the stale view is computed)."""
        self._update_config(now=now)

    # ==================== DERIVED VIEWS ====================

    @property
    def filtered_rows(self) -> list[Row]:
        return self._cache.get(
            "filtered_rows",
            (self._version, self._row_filter),
            lambda: filter_rows(self._dataset.rows, self.roles, self._row_filter),
        )

    @property
    def sites(self) -> list[SiteAggregate]:
        return self._cache.get(
            "sites",
            (self._version, self._row_filter),
            lambda: aggregate_sites(self.filtered_rows, self.roles),
        )

    @property
    def summary(self) -> DashboardSummary:
        return self._cache.get("summary", (self._version, self._row_filter), lambda: summarize(self.sites))

    def _stale_stage(self) -> tuple[datetime, list[StaleSiteView]]:
        c = self._config

        def compute() -> tuple[datetime, list[StaleSiteView]]:
            threshold = stale_threshold(c.stale_period, c.now)
            return threshold, stale_sites(self.sites, self.roles, threshold)

        # The threshold is resolved once per computation and kept with its views
        return self._cache.get("stale_sites", (self._version, self._row_filter, c.stale_period, c.now), compute)

    @property
    def stale_threshold(self) -> datetime:
        return self._stale_stage()[0]

    @property
    def stale_sites(self) -> list[StaleSiteView]:
        return self._stale_stage()[1]

    @property
    def top_sites(self) -> list[TopSite]:
        metric = self._config.gravity_metric
        return self._cache.get(
            "top_sites",
            (self._version, self._row_filter, metric),
            lambda: top_sites(self.sites, metric),
        )

    @property
    def table(self) -> list[SiteAggregate]:
        c = self._config
        return self._cache.get(
            "table",
            (self._version, self._row_filter, c.search, c.sharing, c.sort_key, c.sort_dir),
            lambda: table_view(self.sites, c.search, c.sharing, c.sort_key, c.sort_dir),
        )

    @property
    def file_type_distribution(self) -> FileTypeDistribution:
        return self._cache.get(
            "file_type_distribution",
            (self._version, self._row_filter),
            lambda: file_type_distribution(self.filtered_rows, self._dataset.rows, self.roles),
        )

    def get_cache_statistics(self) -> dict[str, int]:
        return self._cache.get_statistics()

    def snapshot(self) -> dict[str, Any]:
        """Every view as plain data, ready for display or JSON export."""
        threshold, stale = self._stale_stage()
        stale_kb = sum(view.stale_kb for view in stale)
        return {
            "source": self._dataset.source,
            "rowCount": self._dataset.row_count,
            "filteredRowCount": len(self.filtered_rows),
            "headers": list(self._dataset.headers),
            "roles": self.roles.to_dict(),
            "selections": self._config.to_dict(),
            "summary": self.summary.to_dict(),
            "stale": {
                "period": self._config.stale_period,
                "label": stale_period_label(self._config.stale_period),
                "threshold": threshold.isoformat(),
                "sites": [view.to_dict() for view in stale],
                "totalStaleKB": stale_kb,
                "displaySize": hr_bytes(stale_kb),
            },
            "topSites": {
                "metric": self._config.gravity_metric,
                "sites": [site.to_dict() for site in self.top_sites],
            },
            "table": [site.to_dict() for site in self.table],
            "fileTypes": self.file_type_distribution.to_dict(),
        }


__all__ = ["DashboardPipeline", "DatasetListener"]
