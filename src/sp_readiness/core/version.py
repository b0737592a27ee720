"""Version information for SharePoint Readiness."""

__version__ = "1.0.0"
