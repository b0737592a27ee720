"""
Tests for the inventory CSV parser.
"""

import pandas as pd

from sp_readiness.ingest.parser import ParsedCSV, parse_csv, split_line


class TestSplitLine:
    """Tests for split_line function."""

    def test_plain_fields(self):
        assert split_line("a,b,c") == ["a", "b", "c"]

    def test_quoted_comma_kept(self):
        assert split_line('a,"b,c",d') == ["a", "b,c", "d"]

    def test_doubled_quote_is_literal(self):
        assert split_line('"say ""hi"" now"') == ['say "hi" now']

    def test_trailing_literal_quote_is_stripped(self):
        assert split_line('"say ""hi"""') == ['say "hi']

    def test_leading_literal_quote_is_stripped(self):
        assert split_line('"""x",y') == ["x", "y"]

    def test_fields_are_trimmed(self):
        assert split_line("  a ,  b  ") == ["a", "b"]

    def test_empty_fields_preserved(self):
        assert split_line("a,,c,") == ["a", "", "c", ""]

    def test_unterminated_quote_keeps_rest_of_line(self):
        assert split_line('a,"b,c') == ["a", "b,c"]

    def test_whitespace_around_quoted_field_trimmed(self):
        assert split_line(' "x" ,y') == ["x", "y"]


class TestParseCsv:
    """Tests for parse_csv function."""

    def test_empty_text(self):
        result = parse_csv("")
        assert result.headers == []
        assert result.rows == []
        assert result.is_empty

    def test_whitespace_only(self):
        result = parse_csv("\n  \n\r\n")
        assert result.headers == []
        assert result.row_count == 0

    def test_header_only(self):
        result = parse_csv("Site,Size\n")
        assert result.headers == ["Site", "Size"]
        assert result.rows == []
        assert not result.is_empty

    def test_rows_keyed_by_header(self):
        result = parse_csv("Site,Size\nA,10\nB,20")
        assert result.rows == [{"Site": "A", "Size": "10"}, {"Site": "B", "Size": "20"}]

    def test_short_rows_padded(self):
        result = parse_csv("a,b,c\n1,2")
        assert result.rows == [{"a": "1", "b": "2", "c": ""}]

    def test_long_rows_truncated(self):
        result = parse_csv("a,b\n1,2,3,4")
        assert result.rows == [{"a": "1", "b": "2"}]

    def test_every_row_has_every_header(self):
        result = parse_csv("a,b,c\n1\n1,2,3,4,5\n\n1,2")
        assert all(list(row) == ["a", "b", "c"] for row in result.rows)

    def test_blank_lines_skipped_anywhere(self):
        result = parse_csv("\n\nSite\n\nA\n   \nB\n")
        assert result.headers == ["Site"]
        assert [r["Site"] for r in result.rows] == ["A", "B"]

    def test_leading_bom_removed_from_first_header(self):
        result = parse_csv("\ufeffSite,Size\nA,1")
        assert result.headers == ["Site", "Size"]
        assert result.rows == [{"Site": "A", "Size": "1"}]

    def test_crlf_line_endings(self):
        result = parse_csv("Site,Size\r\nA,1\r\nB,2\r\n")
        assert result.row_count == 2
        assert result.rows[1] == {"Site": "B", "Size": "2"}

    def test_values_stay_strings(self):
        result = parse_csv("Size,Date\n1024,2024-01-01")
        assert result.rows[0]["Size"] == "1024"
        assert result.rows[0]["Date"] == "2024-01-01"

    def test_duplicate_header_last_value_wins(self):
        result = parse_csv("a,a\n1,2")
        assert result.headers == ["a", "a"]
        assert result.rows == [{"a": "2"}]


class TestParsedCsvDataFrame:
    """Tests for ParsedCSV.to_dataframe."""

    def test_columns_in_header_order(self):
        df = parse_csv("b,a\n1,2").to_dataframe()
        assert list(df.columns) == ["b", "a"]
        assert df.iloc[0]["a"] == "2"

    def test_empty_rows(self):
        df = ParsedCSV(headers=["x", "y"]).to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["x", "y"]
        assert len(df) == 0
