"""Constants and default values for SharePoint Readiness.

This module centralizes keyword lists, classification vocabularies,
thresholds and the embedding message contract used throughout the
application.
"""

# ==================== DISPLAY CONSTANTS ====================

# Width of banner separator lines (used across CLI output)
BANNER_WIDTH: int = 60

# ==================== LOGGING DEFAULTS ====================

LOG_FILE_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB max per log file
LOG_FILE_BACKUP_COUNT: int = 5  # Number of backup log files to keep

# ==================== COLUMN INFERENCE ====================

# Site identity column: ends with site/sitename/site_name, equals site, or
# contains siteurl/weburl/"web url". Case-insensitive.
SITE_COLUMN_PATTERN: str = r"site(name|_name)?$|^site$|siteurl|weburl|web url"

# Keyword lists per semantic role. Order is priority: earlier keywords win.
ROLE_KEYWORDS: dict[str, list[str]] = {
    "file_count": ["filecount", "sitefilecount", "itemcount", "documentcount", "count"],
    "file_size": ["filesize", "file_size", "size", "storageusage"],
    "last_modified": ["lastmodified", "modified", "lastmodifieddate"],
    "file_type": ["extension", "filetype", "file_type", "type", "docicon", "itemtype"],
    "file_name": ["filename", "file_name", "name", "itemname", "url", "path", "link"],
    "permissions": ["permissions", "perm", "usergroup", "group", "sharedwith", "access", "sharing"],
}

# ==================== SHARING CLASSIFICATION ====================

SHARING_ONLY_ORG: str = "Only Org"
SHARING_EVERYONE: str = "Everyone"
SHARING_EXTERNAL: str = "External (New & Existing)"
SHARING_ANONYMOUS: str = "External (Anonymous)"

# Level -> permissiveness rank (higher => more permissive)
SHARING_RANKS: dict[str, int] = {
    SHARING_ONLY_ORG: 1,
    SHARING_EVERYONE: 2,
    SHARING_EXTERNAL: 3,
    SHARING_ANONYMOUS: 4,
}

SHARING_LEVELS: list[str] = [SHARING_ONLY_ORG, SHARING_EVERYONE, SHARING_EXTERNAL, SHARING_ANONYMOUS]

ANONYMOUS_TERMS: list[str] = ["anyone", "anyonewithlink", "anyone with the link", "anonymous", "public"]
EXTERNAL_TERMS: list[str] = ["guest", "external", "new external", "new & existing", "new and existing", "newexisting"]
EVERYONE_TERMS: list[str] = ["everyone"]

# Site-level exposure flags (whole-word match over all text of a site)
VISIBLE_EXTERNAL_TERMS: list[str] = ["external", "guest", "anon", "anyone"]

# ==================== RISK PROFILE ====================

RISK_CRITICAL: str = "Critical"
RISK_MEDIUM: str = "Medium"
RISK_LOW: str = "Low"
RISK_UNKNOWN: str = "Unknown"

RISK_PROFILES: list[str] = [RISK_CRITICAL, RISK_MEDIUM, RISK_LOW, RISK_UNKNOWN]

CRITICAL_RISK_PHRASES: list[str] = ["everyone except external users"]
MEDIUM_RISK_TERMS: list[str] = ["visitor", "excel services viewers", "portfolio viewers"]
LOW_RISK_TERMS: list[str] = ["owner", "member", "administrator", "project manager", "team lead", "resource manager"]

# ==================== CONTENT CATEGORY ====================

CATEGORY_BUSINESS: str = "Business"
CATEGORY_SYSTEM: str = "System"
CATEGORY_MEDIA: str = "Media"
CATEGORY_OTHER: str = "Other"

CONTENT_CATEGORIES: list[str] = [CATEGORY_BUSINESS, CATEGORY_SYSTEM, CATEGORY_MEDIA, CATEGORY_OTHER]

CATEGORY_EXTENSIONS: dict[str, frozenset[str]] = {
    CATEGORY_BUSINESS: frozenset({"doc", "docx", "pdf", "xlsx", "xls", "ppt", "pptx", "folder"}),
    CATEGORY_SYSTEM: frozenset({"aspx", "odc", "n/a", "unknown", ""}),
    CATEGORY_MEDIA: frozenset({"jpg", "jpeg", "png", "gif", "mp4", "mp3", "wav", "mov"}),
}

# ==================== EXTENSIONS & SITES ====================

UNKNOWN_EXTENSION: str = "unknown"
MAX_EXTENSION_LENGTH: int = 10  # Extensions of this length or longer are not real extensions
UNKNOWN_SITE: str = "(unknown)"

# Pass-through value for the row filters
FILTER_ALL: str = "All"
# Pass-through value for the site table sharing filter
SHARING_FILTER_ALL: str = "all"

# ==================== STALENESS ====================

DEFAULT_STALE_PERIOD: str = "6months"

# Period -> calendar offset (months/years, never fixed day counts)
STALE_PERIODS: dict[str, dict[str, int]] = {
    "6months": {"months": 6},
    "12months": {"months": 12},
    "2years": {"years": 2},
    "5years": {"years": 5},
}

STALE_PERIOD_LABELS: dict[str, str] = {
    "6months": "Last 6 Months",
    "12months": "Last 12 Months",
    "2years": "Last 2 Years",
    "5years": "Last 5 Years",
}

# ==================== DATA GRAVITY ====================

GRAVITY_METRICS: list[str] = ["files", "size"]
TOP_SITES_LIMIT: int = 10

# Exclusive lower bounds on file count, evaluated in order (first match wins)
GRAVITY_RISK_THRESHOLDS: list[tuple[int, str]] = [
    (10000, "Critical"),
    (1000, "High"),
    (500, "Medium"),
]
GRAVITY_RISK_DEFAULT: str = "Low"

# ==================== SITE TABLE ====================

# Accepted sort keys -> canonical key
SORT_KEYS: dict[str, str] = {
    "name": "name",
    "files": "files",
    "kb": "kb",
    "storage": "kb",
    "last": "last",
    "last_modified": "last",
}
SORT_DIRECTIONS: list[str] = ["asc", "desc"]

# ==================== FILE TYPE DISTRIBUTION ====================

FILE_TYPE_TOP_N: int = 8
OTHER_BUCKET: str = "Other"

# ==================== EMBEDDING CONTRACT ====================

# Tag strings are relied on by host pages; do not rename.
MSG_LOAD_CSV_DATA: str = "LOAD_CSV_DATA"
MSG_RESIZE: str = "RESIZE"
MSG_LOADED: str = "AI_READINESS_LOADED"
MSG_READY: str = "AI_READINESS_READY"
MSG_DATA_CHANGE: str = "AI_READINESS_DATA_CHANGE"
MSG_EXPORT: str = "AI_READINESS_EXPORT"
MESSAGE_SOURCE: str = "ai-readiness-dashboard"

# ==================== EXPORTS ====================

EXPORT_FILTERED_SITES_CSV: str = "filtered_sites.csv"
EXPORT_SITE_SUMMARY_JSON: str = "site_summary.json"
EXPORT_DASHBOARD_JSON: str = "dashboard_summary.json"
EXPORT_PDF: str = "AI_Readiness_Report.pdf"

MIME_TYPES: dict[str, str] = {
    "csv": "text/csv",
    "json": "application/json",
    "pdf": "application/pdf",
}

OUTPUT_FORMATS: list[str] = ["console", "json", "csv", "all"]
