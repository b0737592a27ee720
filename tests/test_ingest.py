"""
Tests for column role inference and dataset loading.
"""

import logging

import pytest

from sp_readiness.core.exceptions import IngestionError
from sp_readiness.ingest.columns import HeaderRoles, find_column, guess_site_column, infer_roles
from sp_readiness.ingest.loader import Dataset, decode_csv_bytes, load_csv_text, read_csv_file


class TestGuessSiteColumn:
    """Tests for guess_site_column function."""

    def test_site_name_suffix(self):
        assert guess_site_column(["FileName", "SiteName"]) == "SiteName"

    def test_exact_site(self):
        assert guess_site_column(["Url", "Site"]) == "Site"

    def test_site_url(self):
        assert guess_site_column(["Owner", "SiteUrl"]) == "SiteUrl"

    def test_web_url_with_space(self):
        assert guess_site_column(["Title", "Web URL"]) == "Web URL"

    def test_case_insensitive(self):
        assert guess_site_column(["x", "PARENT_SITE_NAME"]) == "PARENT_SITE_NAME"

    def test_falls_back_to_first_header(self):
        assert guess_site_column(["Library", "Total Size"]) == "Library"

    def test_no_headers(self):
        assert guess_site_column([]) is None


class TestFindColumn:
    """Tests for find_column function."""

    def test_keyword_priority_beats_header_order(self):
        assert find_column(["Item Count", "FileCount"], ["filecount", "count"]) == "FileCount"

    def test_substring_match(self):
        assert find_column(["Storage Used (Size KB)"], ["size"]) == "Storage Used (Size KB)"

    def test_no_match(self):
        assert find_column(["a", "b"], ["size"]) is None


class TestInferRoles:
    """Tests for infer_roles function."""

    def test_typical_inventory_headers(self):
        roles = infer_roles(["SiteName", "FileName", "FileSize", "LastModified", "Permissions"])
        assert roles.site == "SiteName"
        assert roles.file_name == "FileName"
        assert roles.file_size == "FileSize"
        assert roles.last_modified == "LastModified"
        assert roles.permissions == "Permissions"
        assert roles.file_count is None
        assert roles.file_type is None

    def test_missing_roles_listed(self):
        roles = infer_roles(["SiteName", "FileSize"])
        assert "file_count" in roles.missing
        assert "last_modified" in roles.missing
        assert "site" not in roles.missing

    def test_one_header_may_fill_several_roles(self):
        roles = infer_roles(["Name"])
        assert roles.site == "Name"
        assert roles.file_name == "Name"

    def test_empty_headers(self):
        roles = infer_roles([])
        assert roles == HeaderRoles()
        assert len(roles.missing) == 7

    def test_to_dict_uses_camel_case(self):
        roles = infer_roles(["Site", "Item Count", "Modified"])
        data = roles.to_dict()
        assert data["site"] == "Site"
        assert data["fileCount"] == "Item Count"
        assert data["lastModified"] == "Modified"
        assert set(data) == {"site", "fileCount", "fileSize", "lastModified", "fileType", "fileName", "permissions"}


class TestDecodeCsvBytes:
    """Tests for decode_csv_bytes function."""

    def test_utf8(self):
        assert decode_csv_bytes("Site\nZürich".encode()) == "Site\nZürich"

    def test_bom_removed(self):
        assert decode_csv_bytes(b"\xef\xbb\xbfSite\nA") == "Site\nA"

    def test_other_encoding(self):
        assert decode_csv_bytes("Site\nZürich".encode("latin-1"), encoding="latin-1") == "Site\nZürich"

    def test_binary_content_rejected(self):
        with pytest.raises(IngestionError) as exc_info:
            decode_csv_bytes(b"PK\x03\x04\x00\x00", source="book.xlsx")
        assert exc_info.value.source == "book.xlsx"
        assert "book.xlsx" in str(exc_info.value)

    def test_invalid_utf8_rejected(self):
        with pytest.raises(IngestionError) as exc_info:
            decode_csv_bytes(b"Site\n\xff\xfe\xfa")
        assert isinstance(exc_info.value.original_error, UnicodeDecodeError)

    def test_unknown_encoding(self):
        with pytest.raises(IngestionError, match="Unknown encoding"):
            decode_csv_bytes(b"Site", encoding="no-such-codec")


class TestReadCsvFile:
    """Tests for read_csv_file function."""

    def test_reads_file(self, sample_csv_file, sample_csv_text):
        assert read_csv_file(sample_csv_file) == sample_csv_text

    def test_missing_file(self, tmp_path, caplog):
        missing = tmp_path / "nope.csv"
        with caplog.at_level(logging.ERROR, logger="sp_readiness.ingest.loader"):
            with pytest.raises(IngestionError) as exc_info:
                read_csv_file(missing)
        assert exc_info.value.source == str(missing)
        assert isinstance(exc_info.value.original_error, FileNotFoundError)
        assert "not found" in caplog.text

    def test_directory_is_not_a_file(self, tmp_path):
        with pytest.raises(IngestionError):
            read_csv_file(tmp_path)


class TestLoadCsvText:
    """Tests for load_csv_text function."""

    def test_builds_dataset(self, sample_csv_text):
        dataset = load_csv_text(sample_csv_text, source="sample.csv")
        assert isinstance(dataset, Dataset)
        assert dataset.row_count == 5
        assert dataset.headers[0] == "SiteName"
        assert dataset.roles.site == "SiteName"
        assert dataset.source == "sample.csv"

    def test_header_only_dataset(self):
        dataset = load_csv_text("SiteName,FileSize\n")
        assert dataset.is_empty
        assert dataset.headers == ("SiteName", "FileSize")

    def test_empty_text(self):
        dataset = load_csv_text("")
        assert dataset.is_empty
        assert dataset.headers == ()
        assert dataset.roles.site is None
