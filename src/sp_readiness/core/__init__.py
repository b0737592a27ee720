"""Core module - Foundation components with no internal dependencies.

This module provides the basic building blocks used throughout the application:
- Version information
- Custom exceptions
- Configuration dataclasses and validation
- Constants and defaults
- Console colors and formatting utilities
"""

from sp_readiness.core.version import __version__

from sp_readiness.core.exceptions import (
    SPReadinessError,
    IngestionError,
    ConfigurationError,
    OutputError,
)

from sp_readiness.core.config import (
    LogConfig,
    DashboardConfig,
    RunConfig,
)

from sp_readiness.core.config_validation import validate_dashboard_config

from sp_readiness.core.colors import (
    ConsoleColors,
    hr_bytes,
    _format_error_msg,
)

__all__ = [
    # Version
    '__version__',
    # Exceptions
    'SPReadinessError',
    'IngestionError',
    'ConfigurationError',
    'OutputError',
    # Config dataclasses
    'LogConfig',
    'DashboardConfig',
    'RunConfig',
    'validate_dashboard_config',
    # Colors
    'ConsoleColors',
    'hr_bytes',
    '_format_error_msg',
]
