"""Validation of caller selections for SharePoint Readiness.

Filter values arrive from UI dropdowns, the CLI or a host page, so they are
checked once here instead of inside every view function.
"""

from __future__ import annotations

from sp_readiness.core.config import DashboardConfig
from sp_readiness.core.constants import (
    CONTENT_CATEGORIES,
    FILTER_ALL,
    GRAVITY_METRICS,
    RISK_PROFILES,
    SHARING_FILTER_ALL,
    SHARING_LEVELS,
    SORT_DIRECTIONS,
    SORT_KEYS,
    STALE_PERIODS,
)
from sp_readiness.core.exceptions import ConfigurationError


def _check_choice(value: str, choices: list[str], field: str, allow: str | None = None) -> None:
    if allow is not None and value == allow:
        return
    if value not in choices:
        allowed = ([allow] if allow else []) + list(choices)
        raise ConfigurationError(
            f"Invalid value {value!r} for {field}",
            field=field,
            details=f"expected one of: {', '.join(allowed)}",
        )


def validate_risk(risk: str) -> None:
    _check_choice(risk, RISK_PROFILES, "risk", allow=FILTER_ALL)


def validate_category(category: str) -> None:
    _check_choice(category, CONTENT_CATEGORIES, "category", allow=FILTER_ALL)


def validate_stale_period(period: str) -> None:
    _check_choice(period, list(STALE_PERIODS), "stale_period")


def validate_gravity_metric(metric: str) -> None:
    _check_choice(metric, GRAVITY_METRICS, "gravity_metric")


def validate_dashboard_config(config: DashboardConfig) -> DashboardConfig:
    """Validate every selection in a DashboardConfig.

    The file-type filter is free text (any extension may appear in a dataset),
    so it is not checked.

    Returns:
        The same config, for chaining

    Raises:
        ConfigurationError: If any selection is outside its vocabulary
    """
    validate_risk(config.risk)
    validate_category(config.category)
    _check_choice(config.sharing, SHARING_LEVELS, "sharing", allow=SHARING_FILTER_ALL)
    _check_choice(config.sort_key, list(SORT_KEYS), "sort_key")
    _check_choice(config.sort_dir, SORT_DIRECTIONS, "sort_dir")
    validate_stale_period(config.stale_period)
    validate_gravity_metric(config.gravity_metric)
    return config


__all__ = [
    "validate_category",
    "validate_dashboard_config",
    "validate_gravity_metric",
    "validate_risk",
    "validate_stale_period",
]
