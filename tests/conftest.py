"""Pytest configuration and fixtures for SharePoint Readiness tests"""

import logging
from datetime import UTC, datetime

import pytest

from sp_readiness.analysis.pipeline import DashboardPipeline
from sp_readiness.core.colors import ConsoleColors
from sp_readiness.core.config import DashboardConfig
from sp_readiness.ingest.loader import load_csv_text

# Three sites: Finance (private, 2 rows), HR (org-wide), Marketing (anonymous link)
SAMPLE_CSV = """SiteName,FileName,FileSize,LastModified,Permissions
Finance,https://x/finance/budget.xlsx,100,2023-01-01,Finance Members
Finance,https://x/finance/plan.docx,50,2023-06-01,Finance Owners
HR,https://x/hr/photo.JPG,2048,2020-03-15,Everyone
Marketing,https://x/mkt/deck.pptx?web=1,300,2024-05-01,Anyone with the link
Marketing,https://x/mkt/notes,10,,Marketing Visitors
"""

FIXED_NOW = datetime(2024, 7, 1, tzinfo=UTC)


@pytest.fixture
def sample_csv_text():
    """Inventory CSV covering every sharing level except External (New & Existing)"""
    return SAMPLE_CSV


@pytest.fixture
def sample_dataset(sample_csv_text):
    return load_csv_text(sample_csv_text, source="sample.csv")


@pytest.fixture
def sample_roles(sample_dataset):
    return sample_dataset.roles


@pytest.fixture
def sample_rows(sample_dataset):
    return list(sample_dataset.rows)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def pipeline(sample_csv_text):
    """Pipeline loaded with the sample inventory and a pinned reference time"""
    p = DashboardPipeline(DashboardConfig(now=FIXED_NOW))
    p.load_text(sample_csv_text, source="sample.csv")
    return p


@pytest.fixture
def sample_csv_file(tmp_path, sample_csv_text):
    path = tmp_path / "inventory.csv"
    path.write_text(sample_csv_text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _restore_logging():
    """setup_logging replaces root handlers; put the originals back after each test"""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _no_colors():
    """Keep console output free of ANSI codes regardless of the terminal"""
    previous = ConsoleColors.is_enabled()
    ConsoleColors.set_enabled(False)
    yield
    ConsoleColors.set_enabled(previous)
