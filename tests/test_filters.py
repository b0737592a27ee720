"""
Tests for the row filter engine.
"""

import pytest

from sp_readiness.analysis.filters import RowFilter, filter_rows
from sp_readiness.core.config import DashboardConfig
from sp_readiness.core.exceptions import ConfigurationError
from sp_readiness.ingest.loader import load_csv_text


class TestRowFilter:
    """Tests for RowFilter construction."""

    def test_default_is_passthrough(self):
        assert RowFilter().is_passthrough

    def test_invalid_risk_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            RowFilter(risk="Severe")
        assert exc_info.value.field == "risk"

    def test_invalid_category_rejected(self):
        with pytest.raises(ConfigurationError):
            RowFilter(category="Documents")

    def test_from_config(self):
        row_filter = RowFilter.from_config(DashboardConfig(file_type="pdf", risk="Low"))
        assert row_filter == RowFilter(file_type="pdf", risk="Low", category="All")


class TestFilterRows:
    """Tests for filter_rows function."""

    def test_passthrough_returns_copy(self, sample_rows, sample_roles):
        result = filter_rows(sample_rows, sample_roles, RowFilter())
        assert result == sample_rows
        assert result is not sample_rows

    def test_none_filter(self, sample_rows, sample_roles):
        assert filter_rows(sample_rows, sample_roles) == sample_rows

    def test_file_type(self, sample_rows, sample_roles):
        result = filter_rows(sample_rows, sample_roles, RowFilter(file_type="jpg"))
        assert [r["SiteName"] for r in result] == ["HR"]

    def test_unknown_file_type(self, sample_rows, sample_roles):
        result = filter_rows(sample_rows, sample_roles, RowFilter(file_type="unknown"))
        assert [r["FileName"] for r in result] == ["https://x/mkt/notes"]

    def test_risk_low(self, sample_rows, sample_roles):
        result = filter_rows(sample_rows, sample_roles, RowFilter(risk="Low"))
        assert [r["SiteName"] for r in result] == ["Finance", "Finance"]

    def test_risk_medium(self, sample_rows, sample_roles):
        result = filter_rows(sample_rows, sample_roles, RowFilter(risk="Medium"))
        assert [r["Permissions"] for r in result] == ["Marketing Visitors"]

    def test_risk_unknown_is_an_exact_match(self, sample_rows, sample_roles):
        result = filter_rows(sample_rows, sample_roles, RowFilter(risk="Unknown"))
        assert [r["Permissions"] for r in result] == ["Anyone with the link"]

    def test_category(self, sample_rows, sample_roles):
        result = filter_rows(sample_rows, sample_roles, RowFilter(category="Business"))
        assert len(result) == 3
        media = filter_rows(sample_rows, sample_roles, RowFilter(category="Media"))
        assert [r["SiteName"] for r in media] == ["HR"]

    def test_selections_combine(self, sample_rows, sample_roles):
        result = filter_rows(sample_rows, sample_roles, RowFilter(file_type="docx", risk="Low", category="Business"))
        assert [r["FileName"] for r in result] == ["https://x/finance/plan.docx"]

    def test_no_match(self, sample_rows, sample_roles):
        assert filter_rows(sample_rows, sample_roles, RowFilter(file_type="zip")) == []

    def test_input_not_modified(self, sample_rows, sample_roles):
        before = [dict(r) for r in sample_rows]
        filter_rows(sample_rows, sample_roles, RowFilter(risk="Critical"))
        assert sample_rows == before

    def test_critical_from_description_column(self):
        # Risk keywords are found in any column, not only a permissions column
        dataset = load_csv_text("Site,Description\nA,Shared with Everyone\nB,Team workspace")
        result = filter_rows(dataset.rows, dataset.roles, RowFilter(risk="Critical"))
        assert [r["Site"] for r in result] == ["A"]
