"""
SharePoint Inventory CSV Parser

Turns raw delimited text into a header sequence and header-addressable rows.

The parser is deliberately forgiving: inventory exports come from many tools
and are frequently hand-edited, so ragged rows are padded or truncated,
blank lines anywhere are skipped, and broken quoting degrades to literal
text instead of failing. Values are always kept as raw strings; numeric and
date interpretation happens only when a view consumes a field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

import pandas as pd

# A row maps header name -> raw string value
Row = dict[str, str]

_LINE_BREAK = re.compile(r"\r\n|\n")


@dataclass
class ParsedCSV:
    """Result of parsing one CSV document."""

    headers: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.headers

    def to_dataframe(self) -> pd.DataFrame:
        """Get rows as a DataFrame with columns in header order."""
        columns = list(dict.fromkeys(self.headers))
        if not self.rows:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame(self.rows, columns=columns)


def _strip_boundary_quotes(value: str) -> str:
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def split_line(line: str) -> list[str]:
    """Split one CSV line into trimmed field values.

    A double quote toggles quoted mode, a doubled quote is a literal quote,
    and commas split only outside quoted mode. An unterminated quote keeps
    the rest of the line as one field. After unquoting, one leading and one
    trailing double quote are stripped from each value, so a value that ends
    in a literal quote loses it.

    Example:
        'a,"b,c",d' -> ['a', 'b,c', 'd']
    """
    values: list[str] = []
    current: list[str] = []
    in_quote = False
    i = 0
    length = len(line)
    while i < length:
        char = line[i]
        if char == '"':
            if i + 1 < length and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quote = not in_quote
        elif char == "," and not in_quote:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    values.append("".join(current).strip())
    return [_strip_boundary_quotes(v) for v in values]


def parse_csv(text: str) -> ParsedCSV:
    """Parse CSV text into headers and rows.

    The first non-blank line is the header line; every later non-blank line
    is a data row. Short rows are padded with empty strings and fields beyond
    the header count are dropped.

    Args:
        text: Decoded CSV document

    Returns:
        ParsedCSV with the header sequence and one Row per data line
    """
    result = ParsedCSV()
    if not text:
        return result
    text = text.lstrip("\ufeff")

    header_found = False
    for raw_line in _LINE_BREAK.split(text):
        line = raw_line.strip()
        if not line:
            continue

        if not header_found:
            result.headers.extend(split_line(line))
            header_found = True
            continue

        values = split_line(line)
        row: Row = {}
        for index, header in enumerate(result.headers):
            row[header] = values[index] if index < len(values) else ""
        result.rows.append(row)

    return result


__all__ = ["ParsedCSV", "Row", "parse_csv", "split_line"]
