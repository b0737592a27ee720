"""
Ingestion Modules

Turns raw CSV input into a Dataset snapshot:
- CSV parsing (quote-aware, ragged-row tolerant)
- Column role inference
- File/bytes decoding
"""

from __future__ import annotations

from sp_readiness.ingest.columns import HeaderRoles, find_column, guess_site_column, infer_roles
from sp_readiness.ingest.loader import Dataset, decode_csv_bytes, load_csv_text, read_csv_file
from sp_readiness.ingest.parser import ParsedCSV, Row, parse_csv, split_line

__all__ = [
    "Dataset",
    "HeaderRoles",
    "ParsedCSV",
    "Row",
    "decode_csv_bytes",
    "find_column",
    "guess_site_column",
    "infer_roles",
    "load_csv_text",
    "parse_csv",
    "read_csv_file",
    "split_line",
]
