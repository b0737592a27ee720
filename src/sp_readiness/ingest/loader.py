"""
Dataset ingestion entry points.

Reading and decoding are the only fallible steps of the pipeline: an
unreadable file or undecodable bytes raise IngestionError to the immediate
caller. Everything after decoding (parsing, role inference) is total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from sp_readiness.core.exceptions import IngestionError
from sp_readiness.ingest.columns import HeaderRoles, infer_roles
from sp_readiness.ingest.parser import Row, parse_csv

logger = logging.getLogger(__name__)

_UTF8_BOM = "\ufeff"


@dataclass(frozen=True)
class Dataset:
    """Immutable snapshot of one loaded CSV.

    A new Dataset replaces the previous one wholesale; rows are never mutated in place.
    """

    headers: tuple[str, ...] = ()
    rows: tuple[Row, ...] = ()
    roles: HeaderRoles = field(default_factory=HeaderRoles)
    source: str = ""

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows


def decode_csv_bytes(data: bytes, encoding: str = "utf-8", source: str | None = None) -> str:
    """Decode uploaded bytes to CSV text.

    Args:
        data: Raw file content
        encoding: Text encoding (default: utf-8)
        source: Name of the input for error messages

    Returns:
        Decoded text with any leading BOM removed

    Raises:
        IngestionError: If the content is binary or not valid in the encoding
    """
    if b"\x00" in data:
        raise IngestionError("Input is not text (contains NUL bytes)", source=source)
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as e:
        raise IngestionError(
            f"Input is not valid {encoding} text",
            source=source,
            details=f"byte {e.start}: {e.reason}",
            original_error=e,
        ) from e
    except LookupError as e:
        raise IngestionError(f"Unknown encoding {encoding!r}", source=source, original_error=e) from e
    return text[1:] if text.startswith(_UTF8_BOM) else text


def read_csv_file(path: str | Path, encoding: str = "utf-8") -> str:
    """Read and decode a CSV file.

    Raises:
        IngestionError: If the file is missing, unreadable or undecodable
    """
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except FileNotFoundError as e:
        logger.error(f"CSV file not found: {file_path}")
        raise IngestionError("CSV file not found", source=str(file_path), original_error=e) from e
    except PermissionError as e:
        logger.error(f"Permission denied reading CSV file: {file_path}")
        raise IngestionError("Permission denied reading CSV file", source=str(file_path), original_error=e) from e
    except OSError as e:
        logger.error(f"OS error reading CSV file {file_path}: {e}")
        raise IngestionError("Cannot read CSV file", source=str(file_path), details=str(e), original_error=e) from e

    return decode_csv_bytes(data, encoding=encoding, source=str(file_path))


def load_csv_text(text: str, source: str = "") -> Dataset:
    """Parse CSV text and infer column roles into a Dataset."""
    parsed = parse_csv(text)
    roles = infer_roles(parsed.headers)
    dataset = Dataset(
        headers=tuple(parsed.headers),
        rows=tuple(parsed.rows),
        roles=roles,
        source=source,
    )
    logger.debug(
        f"Parsed {dataset.row_count} rows with {len(dataset.headers)} headers"
        + (f" from {source}" if source else "")
    )
    return dataset


__all__ = ["Dataset", "decode_csv_bytes", "load_csv_text", "read_csv_file"]
