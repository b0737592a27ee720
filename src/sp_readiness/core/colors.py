"""Console colors and formatting utilities for SharePoint Readiness.

Provides ANSI color codes for terminal output with auto-detection
of TTY support and Windows compatibility, plus storage size formatting.
"""

import math
import os
import re
import sys


class ConsoleColors:
    """ANSI color codes for terminal output.

    Auto-detects TTY support and handles Windows compatibility.
    Use this class for general CLI output formatting.
    """
    GREEN = '\033[92m'
    RED = '\033[91m'
    YELLOW = '\033[93m'
    BOLD = '\033[1m'
    RESET = '\033[0m'
    # Regex to strip ANSI escape codes for visible length calculation
    ANSI_ESCAPE = re.compile(r'\033\[[0-9;]*m')

    # Severity label -> color, used for risk and sharing badges
    SEVERITY = {
        'Critical': RED,
        'High': RED,
        'Medium': YELLOW,
        'Low': GREEN,
        'External (Anonymous)': RED,
        'External (New & Existing)': YELLOW,
        'Everyone': YELLOW,
        'Only Org': GREEN,
    }

    # Disable colors if not a TTY or on Windows without ANSI support
    _enabled = sys.stdout.isatty() and (os.name != 'nt' or os.environ.get('TERM'))

    @classmethod
    def set_enabled(cls, enabled: bool) -> None:
        """Force colors on or off (e.g. for --quiet or piping)."""
        cls._enabled = enabled

    @classmethod
    def is_enabled(cls) -> bool:
        """Check if colors are enabled."""
        return bool(cls._enabled)

    @classmethod
    def _wrap(cls, color: str, text: str) -> str:
        if cls._enabled:
            return f"{color}{text}{cls.RESET}"
        return text

    @classmethod
    def success(cls, text: str) -> str:
        """Format text as success (green)"""
        return cls._wrap(cls.GREEN, text)

    @classmethod
    def error(cls, text: str) -> str:
        """Format text as error (red)"""
        return cls._wrap(cls.RED, text)

    @classmethod
    def warning(cls, text: str) -> str:
        """Format text as warning (yellow)"""
        return cls._wrap(cls.YELLOW, text)

    @classmethod
    def bold(cls, text: str) -> str:
        """Format text as bold"""
        return cls._wrap(cls.BOLD, text)

    @classmethod
    def severity(cls, label: str) -> str:
        """Color a risk or sharing label by how exposed it is."""
        color = cls.SEVERITY.get(label)
        return cls._wrap(color, label) if color else label

    @classmethod
    def visible_len(cls, text: str) -> int:
        """Return the visible length of a string, ignoring ANSI escape codes."""
        return len(cls.ANSI_ESCAPE.sub('', text))

    @classmethod
    def ljust(cls, text: str, width: int) -> str:
        """Left-justify a string accounting for ANSI escape codes."""
        padding = max(0, width - cls.visible_len(text))
        return text + ' ' * padding


def _trim_fixed(value: float) -> str:
    """Two decimals at most, trailing zeros dropped ("1.50" -> "1.5", "2.00" -> "2")."""
    text = f"{value:.2f}".rstrip('0').rstrip('.')
    return "0" if text in ("", "-0") else text


def hr_bytes(kb: float) -> str:
    """
    Format a size given in kilobytes as KB, MB or GB.

    Args:
        kb: Size in kilobytes

    Returns:
        Human-readable string (e.g., "512 KB", "1.5 MB", "2 GB"); "0 KB" for non-finite input
    """
    try:
        kb = float(kb)
    except (TypeError, ValueError):
        return "0 KB"
    if not math.isfinite(kb):
        return "0 KB"
    mb = kb / 1024
    gb = mb / 1024
    if gb >= 1:
        return f"{_trim_fixed(gb)} GB"
    if mb >= 1:
        return f"{_trim_fixed(mb)} MB"
    return f"{_trim_fixed(kb)} KB"


def _format_error_msg(operation: str, item_type: str | None = None, error: Exception | None = None) -> str:
    """
    Format error messages consistently across the application.

    Args:
        operation: Description of the operation that failed (e.g., "writing CSV export")
        item_type: Optional item type context (e.g., "site rows")
        error: Optional exception to include in the message

    Returns:
        Formatted error message string
    """
    msg = f"Error {operation}"
    if item_type:
        msg += f" for {item_type}"
    if error:
        msg += f": {error}"
    return msg
