"""
Tests for export shaping, exporters and sinks.
"""

import json
import logging
from datetime import UTC, datetime, timedelta, timezone

import pytest

from sp_readiness.analysis.sites import aggregate_sites
from sp_readiness.core.exceptions import OutputError
from sp_readiness.ingest.parser import parse_csv
from sp_readiness.output import (
    DashboardExporter,
    DirectorySink,
    ExportSink,
    RenderService,
    format_cell,
    format_export_date,
    records_to_csv,
    records_to_json,
    safe_filename,
    site_export_records,
    site_summary_records,
    sites_dataframe,
)


class MemorySink:
    """ExportSink keeping exports in a dict"""

    def __init__(self):
        self.files = {}
        self.mime_types = {}

    def save(self, filename, data, mime_type):
        self.files[filename] = data
        self.mime_types[filename] = mime_type
        return filename


class StaticRenderer:
    def render(self):
        return b"%PDF-1.7 fake"


class FailingRenderer:
    def render(self):
        raise RuntimeError("headless browser crashed")


@pytest.fixture
def sample_sites(sample_rows, sample_roles):
    return aggregate_sites(sample_rows, sample_roles)


class TestFormatting:
    """Tests for cell and date formatting."""

    @pytest.mark.parametrize(
        "value,expected",
        [(None, ""), (3, "3"), (3.0, "3"), (2.5, "2.5"), (True, "true"), (False, "false"), ("x", "x")],
    )
    def test_format_cell(self, value, expected):
        assert format_cell(value) == expected

    def test_export_date(self):
        value = datetime(2023, 6, 1, 12, 30, 5, 123456, tzinfo=UTC)
        assert format_export_date(value) == "2023-06-01T12:30:05.123Z"

    def test_export_date_converts_to_utc(self):
        value = datetime(2023, 6, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
        assert format_export_date(value) == "2023-06-01T00:00:00.000Z"

    def test_export_date_missing(self):
        assert format_export_date(None) == ""


class TestRecordsToCsv:
    """Tests for records_to_csv function."""

    def test_empty(self):
        assert records_to_csv([]) == ""

    def test_header_unquoted_values_quoted(self):
        assert records_to_csv([{"a": 1, "b": "x"}]) == 'a,b\n"1","x"'

    def test_embedded_quotes_doubled(self):
        assert records_to_csv([{"note": 'say "hi", ok'}]) == 'note\n"say ""hi"", ok"'

    def test_columns_from_first_record(self):
        text = records_to_csv([{"a": 1}, {"a": 2, "extra": 3}, {"b": 4}])
        assert text.split("\n") == ["a", '"1"', '"2"', '""']

    def test_roundtrip_through_parser(self):
        records = [{"Site": "A, B", "Files": 2}]
        parsed = parse_csv(records_to_csv(records))
        assert parsed.rows == [{"Site": "A, B", "Files": "2"}]


class TestRecordsToJson:
    """Tests for records_to_json function."""

    def test_indented(self):
        assert records_to_json([{"a": 1}]) == '[\n  {\n    "a": 1\n  }\n]'

    def test_non_ascii_kept(self):
        assert "Zürich" in records_to_json({"site": "Zürich"})

    def test_datetimes_serialized(self):
        payload = json.loads(records_to_json({"at": datetime(2024, 1, 1, tzinfo=UTC)}))
        assert payload["at"] == "2024-01-01T00:00:00+00:00"


class TestSiteRecords:
    """Tests for site export record builders."""

    def test_export_columns(self, sample_sites):
        records = site_export_records(sample_sites)
        assert list(records[0]) == ["SiteName", "Files", "TotalKB", "TotalMB", "SharingLevel", "LastModified"]
        assert records[0] == {
            "SiteName": "Finance",
            "Files": 2,
            "TotalKB": 150,
            "TotalMB": "0.15",
            "SharingLevel": "Only Org",
            "LastModified": "2023-06-01T00:00:00.000Z",
        }

    def test_summary_columns(self, sample_sites):
        records = site_summary_records(sample_sites)
        assert records[2] == {"siteName": "HR", "files": 1, "totalKB": 2048, "sharingLevel": "Everyone"}

    def test_csv_roundtrip_preserves_site_tuples(self, sample_sites):
        parsed = parse_csv(records_to_csv(site_export_records(sample_sites)))
        exported = {(r["SiteName"], r["Files"], r["TotalKB"], r["SharingLevel"]) for r in parsed.rows}
        expected = {(s.site_name, str(s.files), str(s.total_kb), s.sharing_level) for s in sample_sites}
        assert exported == expected

    def test_sites_dataframe(self, sample_sites):
        df = sites_dataframe(sample_sites)
        assert len(df) == 3
        assert df.iloc[0]["SiteName"] == "Finance"

    def test_sites_dataframe_empty(self):
        df = sites_dataframe([])
        assert list(df.columns) == ["SiteName", "Files", "TotalKB", "TotalMB", "SharingLevel", "LastModified"]


class TestDashboardExporter:
    """Tests for DashboardExporter class."""

    def test_protocols(self):
        assert isinstance(MemorySink(), ExportSink)
        assert isinstance(StaticRenderer(), RenderService)

    def test_filtered_sites_csv(self, sample_sites):
        sink = MemorySink()
        assert DashboardExporter(sink).export_filtered_sites_csv(sample_sites) == "filtered_sites.csv"
        text = sink.files["filtered_sites.csv"].decode("utf-8")
        assert text.startswith("SiteName,Files,TotalKB,TotalMB,SharingLevel,LastModified\n")
        assert sink.mime_types["filtered_sites.csv"] == "text/csv"

    def test_empty_csv_skipped(self, caplog):
        sink = MemorySink()
        with caplog.at_level(logging.INFO, logger="sp_readiness.output.exporter"):
            assert DashboardExporter(sink).export_filtered_sites_csv([]) is None
        assert sink.files == {}
        assert "skipped" in caplog.text

    def test_site_summary_json(self, sample_sites):
        sink = MemorySink()
        DashboardExporter(sink).export_site_summary_json(sample_sites)
        payload = json.loads(sink.files["site_summary.json"])
        assert [p["siteName"] for p in payload] == ["Finance", "Marketing", "HR"]
        assert sink.mime_types["site_summary.json"] == "application/json"

    def test_site_rows(self, sample_sites):
        sink = MemorySink()
        exporter = DashboardExporter(sink)
        exporter.export_site_rows(sample_sites[0], "csv")
        exporter.export_site_rows(sample_sites[0], "json")
        assert sink.files["Finance_rows.csv"].decode("utf-8").startswith("SiteName,FileName,FileSize")
        assert len(json.loads(sink.files["Finance_rows.json"])) == 2

    def test_site_rows_bad_format(self, sample_sites):
        with pytest.raises(OutputError):
            DashboardExporter(MemorySink()).export_site_rows(sample_sites[0], "xlsx")

    def test_summary_json(self, pipeline):
        sink = MemorySink()
        DashboardExporter(sink).export_summary_json(pipeline.snapshot())
        payload = json.loads(sink.files["dashboard_summary.json"])
        assert payload["summary"]["totalSites"] == 3

    def test_pdf(self):
        sink = MemorySink()
        assert DashboardExporter(sink, StaticRenderer()).export_pdf() == "AI_Readiness_Report.pdf"
        assert sink.files["AI_Readiness_Report.pdf"].startswith(b"%PDF")
        assert sink.mime_types["AI_Readiness_Report.pdf"] == "application/pdf"

    def test_pdf_without_renderer(self):
        with pytest.raises(OutputError, match="No render service"):
            DashboardExporter(MemorySink()).export_pdf()

    def test_pdf_render_failure_wrapped(self):
        with pytest.raises(OutputError) as exc_info:
            DashboardExporter(MemorySink(), FailingRenderer()).export_pdf()
        assert isinstance(exc_info.value.original_error, RuntimeError)


class TestDirectorySink:
    """Tests for DirectorySink class."""

    def test_writes_file_and_creates_directory(self, tmp_path):
        sink = DirectorySink(tmp_path / "out" / "nested")
        path = sink.save("a.csv", b"x", "text/csv")
        assert (tmp_path / "out" / "nested" / "a.csv").read_bytes() == b"x"
        assert path.endswith("a.csv")

    def test_site_url_filename_sanitized(self, tmp_path):
        sink = DirectorySink(tmp_path)
        path = sink.save("https://contoso/sites/hr_rows.csv", b"x", "text/csv")
        assert (tmp_path / "https___contoso_sites_hr_rows.csv").exists()
        assert path.startswith(str(tmp_path))

    def test_unwritable_directory(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(OutputError) as exc_info:
            DirectorySink(blocker).save("a.csv", b"x", "text/csv")
        assert exc_info.value.output_path == str(blocker / "a.csv")

    def test_safe_filename(self):
        assert safe_filename('a<b>:c"d|e?f*g') == "a_b__c_d_e_f_g"
        assert safe_filename("...") == "export"
