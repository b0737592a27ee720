"""
Row classifiers.

Pure, case-insensitive keyword heuristics that turn free text from an
inventory row into categorical labels: sharing level, risk profile, content
category and file extension. None of them raise; unmatched input falls
through to a defined default label. Numeric and date helpers follow the same
rule and degrade to 0 / None.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from sp_readiness.core.constants import (
    ANONYMOUS_TERMS,
    CATEGORY_EXTENSIONS,
    CATEGORY_OTHER,
    CRITICAL_RISK_PHRASES,
    EVERYONE_TERMS,
    EXTERNAL_TERMS,
    LOW_RISK_TERMS,
    MAX_EXTENSION_LENGTH,
    MEDIUM_RISK_TERMS,
    RISK_CRITICAL,
    RISK_LOW,
    RISK_MEDIUM,
    RISK_UNKNOWN,
    SHARING_ANONYMOUS,
    SHARING_EVERYONE,
    SHARING_EXTERNAL,
    SHARING_ONLY_ORG,
    SHARING_RANKS,
    UNKNOWN_EXTENSION,
    VISIBLE_EXTERNAL_TERMS,
)
from sp_readiness.ingest.columns import HeaderRoles
from sp_readiness.ingest.parser import Row

logger = logging.getLogger(__name__)


def _whole_word_pattern(terms: Iterable[str]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(term) for term in terms)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


_ANONYMOUS = _whole_word_pattern(ANONYMOUS_TERMS)
_EXTERNAL = _whole_word_pattern(EXTERNAL_TERMS)
_EVERYONE = _whole_word_pattern(EVERYONE_TERMS)
_VISIBLE_EXTERNAL = _whole_word_pattern(VISIBLE_EXTERNAL_TERMS)
_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_QUERY_FRAGMENT = re.compile(r"[?#]")


# ==================== SHARING ====================


@dataclass(frozen=True)
class SharingClassification:
    """Sharing level plus its permissiveness rank (1 = Only Org ... 4 = Anonymous)."""

    level: str
    rank: int


def _sharing(level: str) -> SharingClassification:
    return SharingClassification(level=level, rank=SHARING_RANKS[level])


def classify_sharing(text: str | None) -> SharingClassification:
    """Classify free text into one of the four sharing levels.

    Checked in strict priority order (most permissive first), so text that
    mentions both "everyone" and "anonymous" is External (Anonymous).
    """
    if not text:
        return _sharing(SHARING_ONLY_ORG)
    if _ANONYMOUS.search(text):
        return _sharing(SHARING_ANONYMOUS)
    if _EXTERNAL.search(text):
        return _sharing(SHARING_EXTERNAL)
    if _EVERYONE.search(text):
        return _sharing(SHARING_EVERYONE)
    return _sharing(SHARING_ONLY_ORG)


def is_visible_everyone(text: str | None) -> bool:
    return bool(text) and _EVERYONE.search(text) is not None


def is_visible_external(text: str | None) -> bool:
    return bool(text) and _VISIBLE_EXTERNAL.search(text) is not None


# ==================== RISK PROFILE ====================


def get_risk_profile(text: str | None) -> str:
    """Map permission-group text to Critical / Medium / Low / Unknown.

    Critical: org-wide "Everyone" grants.
    Medium: visitor and viewer groups ("Project Web App Visitors", ...).
    Low: owner, member and admin style groups.
    """
    t = (text or "").lower()

    if _EVERYONE.search(t) or any(phrase in t for phrase in CRITICAL_RISK_PHRASES):
        return RISK_CRITICAL
    if any(term in t for term in MEDIUM_RISK_TERMS):
        return RISK_MEDIUM
    if any(term in t for term in LOW_RISK_TERMS):
        return RISK_LOW
    return RISK_UNKNOWN


# ==================== CONTENT CATEGORY ====================


def normalize_extension(value: str | None) -> str:
    """Lowercase, trim and drop one leading dot (".PDF " -> "pdf")."""
    clean = (value or "").lower().strip()
    return clean[1:] if clean.startswith(".") else clean


def get_content_category(extension: str | None) -> str:
    """Map an extension to Business / System / Media / Other."""
    ext = normalize_extension(extension)
    for category, extensions in CATEGORY_EXTENSIONS.items():
        if ext in extensions:
            return category
    return CATEGORY_OTHER


# ==================== FILE EXTENSION ====================


def _extension_from_name(name: str) -> str:
    last_segment = name.split("/")[-1]
    parts = last_segment.split(".")
    if len(parts) > 1:
        return _QUERY_FRAGMENT.split(parts[-1])[0]
    return ""


def get_file_extension(row: Row, roles: HeaderRoles) -> str:
    """Extract a row's file extension.

    Uses the file-type column when it has a value; otherwise derives the
    extension from the file-name/URL column. Anything empty or implausibly
    long is "unknown".

    Examples:
        file name "https://x/y/report.PDF?v=2" -> "pdf"
        file name "folder/noext" -> "unknown"
    """
    value = ""
    if roles.file_type and row.get(roles.file_type):
        value = row[roles.file_type]
    elif roles.file_name and row.get(roles.file_name):
        value = _extension_from_name(row[roles.file_name])

    if not value:
        return UNKNOWN_EXTENSION
    clean = normalize_extension(value)
    if 0 < len(clean) < MAX_EXTENSION_LENGTH:
        return clean
    return UNKNOWN_EXTENSION


# ==================== FIELD HELPERS ====================


def row_text(row: Row) -> str:
    """All values of a row joined by spaces (every column, not just permissions)."""
    return " ".join(row.values())


def parse_number(value: object) -> int | float:
    """Parse a numeric field leniently.

    Every character other than digits, "." and "-" is dropped first, so
    "1,024 KB" -> 1024. Anything that still is not a number yields 0.
    """
    if value is None:
        return 0
    cleaned = _NON_NUMERIC.sub("", str(value))
    if not cleaned:
        return 0
    try:
        number = float(cleaned)
    except ValueError:
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def parse_date(value: object) -> datetime | None:
    """Parse a date field to a timezone-aware UTC datetime.

    Naive values are read as UTC. Returns None for empty or unparseable values.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = pd.to_datetime(text, errors="coerce", utc=True)
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Unparseable date {text!r}: {e}")
        return None
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


__all__ = [
    "SharingClassification",
    "classify_sharing",
    "get_content_category",
    "get_file_extension",
    "get_risk_profile",
    "is_visible_everyone",
    "is_visible_external",
    "normalize_extension",
    "parse_date",
    "parse_number",
    "row_text",
]
