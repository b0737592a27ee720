"""
SharePoint Readiness - Site inventory dashboard core

Turns a CSV export of SharePoint site inventory into per-site aggregates,
sharing exposure, staleness lists and storage rankings.
"""

from sp_readiness.analysis.pipeline import DashboardPipeline
from sp_readiness.cli.main import main
from sp_readiness.core.version import __version__

__all__ = ["DashboardPipeline", "__version__", "main"]
