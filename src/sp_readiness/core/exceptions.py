"""Custom exceptions for SharePoint Readiness.

Only I/O-level failures and invalid caller selections raise. Data-quality
problems inside a CSV (ragged rows, bad numbers, unparseable dates, missing
columns) are absorbed by the pipeline and never surface as exceptions.
"""


class SPReadinessError(Exception):
    """Base exception for all SharePoint Readiness errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class IngestionError(SPReadinessError):
    """Exception raised when CSV input cannot be read or decoded.

    Examples:
        - File not found or permission denied
        - Binary content (NUL bytes)
        - Bytes that are not valid in the declared encoding

    The dataset held by the caller is left unchanged.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.source = source
        self.original_error = original_error
        super().__init__(message, details)

    def __str__(self) -> str:
        parts = [self.message]
        if self.source:
            parts.append(f"source {self.source}")
        if self.details:
            parts.append(self.details)
        return " - ".join(parts)


class ConfigurationError(SPReadinessError):
    """Exception raised for invalid filter, sort, period or metric selections."""

    def __init__(self, message: str, field: str | None = None, details: str | None = None):
        self.field = field
        super().__init__(message, details)


class OutputError(SPReadinessError):
    """Exception raised for export failures.

    Examples:
        - Permission denied
        - Disk full
        - Render service failure during PDF export
    """

    def __init__(
        self,
        message: str,
        output_path: str | None = None,
        output_format: str | None = None,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.output_path = output_path
        self.output_format = output_format
        self.original_error = original_error
        super().__init__(message, details)
