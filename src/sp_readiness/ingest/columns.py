"""
Column role inference.

SharePoint inventory exports have no fixed schema: different admin tools
name the same concept "Site URL", "SiteName", "Web Url" or "Title". This
module guesses which header plays each semantic role from keyword matches
and degrades to "role not found" rather than failing.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

from sp_readiness.core.constants import ROLE_KEYWORDS, SITE_COLUMN_PATTERN

logger = logging.getLogger(__name__)

_SITE_COLUMN = re.compile(SITE_COLUMN_PATTERN, re.IGNORECASE)

# Role attribute -> key used by the embedding/JSON contract
_CAMEL_CASE_ROLES = {
    "site": "site",
    "file_count": "fileCount",
    "file_size": "fileSize",
    "last_modified": "lastModified",
    "file_type": "fileType",
    "file_name": "fileName",
    "permissions": "permissions",
}


@dataclass(frozen=True)
class HeaderRoles:
    """Semantic role -> chosen header name (None when no header matched).

    A header may satisfy several roles at once; each role holds at most one header.
    """

    site: str | None = None
    file_count: str | None = None
    file_size: str | None = None
    last_modified: str | None = None
    file_type: str | None = None
    file_name: str | None = None
    permissions: str | None = None

    @property
    def missing(self) -> list[str]:
        """Roles with no matching header."""
        return [name for name, header in asdict(self).items() if header is None]

    def to_dict(self) -> dict[str, Any]:
        """Role map keyed the way host pages expect (camelCase)."""
        return {_CAMEL_CASE_ROLES[name]: header for name, header in asdict(self).items()}


def guess_site_column(headers: Sequence[str]) -> str | None:
    """Return the first header that looks like a site identity column.

    Falls back to the first header, so the result is None only when there are no headers.
    """
    for header in headers:
        if _SITE_COLUMN.search(header):
            return header
    return headers[0] if headers else None


def find_column(headers: Sequence[str], keywords: Sequence[str]) -> str | None:
    """Return the first header containing a keyword, trying keywords in priority order.

    Example:
        >>> find_column(["Item Count", "FileCount"], ["filecount", "count"])
        'FileCount'
    """
    lowered = [h.lower() for h in headers]
    for keyword in keywords:
        needle = keyword.lower()
        for index, header in enumerate(lowered):
            if needle in header:
                return headers[index]
    return None


def infer_roles(headers: Sequence[str]) -> HeaderRoles:
    """Guess the header used for each semantic role.

    Args:
        headers: Header sequence in original order

    Returns:
        HeaderRoles with a header name or None per role
    """
    roles = HeaderRoles(
        site=guess_site_column(headers),
        **{role: find_column(headers, keywords) for role, keywords in ROLE_KEYWORDS.items()},
    )
    if headers and roles.missing:
        logger.debug(f"No header matched roles: {', '.join(roles.missing)}")
    return roles


__all__ = ["HeaderRoles", "find_column", "guess_site_column", "infer_roles"]
