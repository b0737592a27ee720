"""Configuration dataclasses for SharePoint Readiness.

These dataclasses centralize the selections that drive every derived view
(filters, table sort, staleness period, gravity metric) plus logging options.
They can be created from command-line arguments or used directly in code.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from sp_readiness.core.constants import LOG_FILE_BACKUP_COUNT, LOG_FILE_MAX_BYTES


@dataclass
class LogConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level string (default: "INFO")
        log_format: "text" or "json" (default: "text")
        file_max_bytes: Maximum size per log file (default: 10MB)
        file_backup_count: Number of backup log files (default: 5)
    """

    level: str = "INFO"
    log_format: str = "text"
    file_max_bytes: int = LOG_FILE_MAX_BYTES
    file_backup_count: int = LOG_FILE_BACKUP_COUNT


@dataclass(frozen=True)
class DashboardConfig:
    """Every caller-selected input of the derived views.

    Attributes:
        file_type: Extension filter, or "All"
        risk: Risk profile filter (Critical/Medium/Low), or "All"
        category: Content category filter (Business/System/Media/Other), or "All"
        search: Case-insensitive substring matched against site names
        sharing: Exact sharing level for the site table, or "all"
        sort_key: Site table sort key (name, files, kb, last)
        sort_dir: "asc" or "desc"
        stale_period: Staleness lookback (6months, 12months, 2years, 5years)
        gravity_metric: Top-N ranking metric ("files" or "size")
        now: Fixed reference time for staleness; current UTC time when None
    """

    file_type: str = "All"
    risk: str = "All"
    category: str = "All"
    search: str = ""
    sharing: str = "all"
    sort_key: str = "files"
    sort_dir: str = "desc"
    stale_period: str = "6months"
    gravity_metric: str = "files"
    now: datetime | None = None

    def evolve(self, **changes: Any) -> DashboardConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_type": self.file_type,
            "risk": self.risk,
            "category": self.category,
            "search": self.search,
            "sharing": self.sharing,
            "sort_key": self.sort_key,
            "sort_dir": self.sort_dir,
            "stale_period": self.stale_period,
            "gravity_metric": self.gravity_metric,
            "now": self.now.isoformat() if self.now else None,
        }

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> DashboardConfig:
        """Create configuration from parsed command-line arguments."""
        return cls(
            file_type=getattr(args, "file_type", "All"),
            risk=getattr(args, "risk", "All"),
            category=getattr(args, "category", "All"),
            search=getattr(args, "search", ""),
            sharing=getattr(args, "sharing", "all"),
            sort_key=getattr(args, "sort", "files"),
            sort_dir=getattr(args, "sort_dir", "desc"),
            stale_period=getattr(args, "stale_period", "6months"),
            gravity_metric=getattr(args, "gravity", "files"),
        )


@dataclass
class RunConfig:
    """Master configuration for a CLI run.

    Attributes:
        dashboard: View selections applied to every input file
        log: Logging configuration
        output_format: console, json, csv or all
        output_dir: Directory for exported files
        quiet: Suppress non-error output
        show_timings: Print per-stage timings after each file
    """

    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    log: LogConfig = field(default_factory=LogConfig)
    output_format: str = "console"
    output_dir: str = "."
    quiet: bool = False
    show_timings: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> RunConfig:
        """Create configuration from parsed command-line arguments."""
        return cls(
            dashboard=DashboardConfig.from_args(args),
            log=LogConfig(
                level=getattr(args, "log_level", "INFO"),
                log_format=getattr(args, "log_format", "text"),
            ),
            output_format=getattr(args, "format", "console"),
            output_dir=getattr(args, "output_dir", "."),
            quiet=getattr(args, "quiet", False),
            show_timings=getattr(args, "show_timings", False),
        )
