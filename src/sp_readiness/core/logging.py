"""Logging helpers for SharePoint Readiness."""

import atexit
import contextlib
import json
import logging
import os
import re
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

from sp_readiness.core.constants import LOG_FILE_BACKUP_COUNT, LOG_FILE_MAX_BYTES

_LOG_RECORD_RESERVED_FIELDS = set(logging.makeLogRecord({}).__dict__.keys()) | {"message", "asctime", "extra_fields"}
_VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _safe_record_message(record: logging.LogRecord) -> str:
    try:
        return record.getMessage()
    except Exception:
        # Keep logging resilient when message formatting fails (bad placeholders or broken __str__).
        return f"{getattr(record, 'msg', '')} [log-message-format-error]"


def _is_reserved_or_private_record_key(key: object) -> bool:
    if not isinstance(key, str):
        return True
    return key in _LOG_RECORD_RESERVED_FIELDS or key.startswith("_")


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging output.

    Produces JSON lines suitable for log aggregation systems (Splunk, ELK, CloudWatch).
    Each log record is a single JSON object on one line.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _safe_record_message(record),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {}
        record_extra_fields = getattr(record, "extra_fields", None)
        if isinstance(record_extra_fields, dict):
            extra_fields.update(record_extra_fields)

        # Custom LogRecord attributes set via logging's `extra` (e.g. dataset context)
        for key, value in record.__dict__.items():
            if _is_reserved_or_private_record_key(key):
                continue
            extra_fields.setdefault(key, value)

        if extra_fields:
            log_entry.update(extra_fields)

        return json.dumps(log_entry, default=str)


_atexit_registered = False


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges contextual fields into record extras."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = kwargs.get("extra")
        merged_extra = dict(self.extra)
        if isinstance(extra, dict):
            merged_extra.update(extra)
        kwargs["extra"] = merged_extra
        return msg, kwargs


def _unwrap_logger(logger: logging.Logger | logging.LoggerAdapter | None) -> logging.Logger | None:
    current = logger
    while isinstance(current, logging.LoggerAdapter):
        current = current.logger
    if isinstance(current, logging.Logger):
        return current
    return None


def with_log_context(
    logger: logging.Logger | logging.LoggerAdapter, **context: object
) -> logging.Logger | logging.LoggerAdapter:
    """Return a logger enriched with persistent contextual fields.

    Example:
        log = with_log_context(logger, source="sites.csv")
        log.info("Dataset loaded")  # JSON output carries "source": "sites.csv"
    """
    base_logger = _unwrap_logger(logger)
    if base_logger is None:
        return logger

    normalized_context = {k: v for k, v in context.items() if v is not None}
    existing_context = {}
    if isinstance(logger, logging.LoggerAdapter):
        existing_context = dict(getattr(logger, "extra", {}))

    existing_context.update(normalized_context)
    return ContextLoggerAdapter(base_logger, existing_context)


def flush_logging_handlers(logger: logging.Logger | logging.LoggerAdapter | None = None) -> None:
    """Flush logger handlers, including propagated root handlers."""
    handlers: list[logging.Handler] = []
    seen: set[int] = set()

    current = _unwrap_logger(logger)
    while current is not None:
        handlers.extend(current.handlers)
        if not current.propagate:
            break
        current = current.parent

    if not handlers:
        handlers.extend(logging.root.handlers)

    for handler in handlers:
        if id(handler) in seen:
            continue
        seen.add(id(handler))
        with contextlib.suppress(Exception):
            handler.flush()


def _log_file_stem(source_name: str | None, batch_mode: bool) -> str:
    if batch_mode:
        return "SP_Readiness_Batch"
    if not source_name:
        return "SP_Readiness"
    safe = re.sub(r"[^A-Za-z0-9_.-]+", "_", Path(source_name).stem).strip("_")
    return f"SP_Readiness_{safe}" if safe else "SP_Readiness"


def setup_logging(
    source_name: str | None = None,
    batch_mode: bool = False,
    log_level: str | None = None,
    log_format: str = "text",
    log_dir: str | Path | None = "logs",
    max_bytes: int = LOG_FILE_MAX_BYTES,
    backup_count: int = LOG_FILE_BACKUP_COUNT,
) -> logging.Logger:
    """Setup logging to both file and console.

    Args:
        source_name: Input file name used for log file naming
        batch_mode: Whether several input files are processed in one run
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format - "text" (default) or "json" for structured logging
        log_dir: Directory for rotating log files; None logs to console only
        max_bytes: Size at which the log file rotates
        backup_count: Number of rotated log files to keep

    Returns:
        Configured logger instance

    Priority: 1) Passed parameter, 2) Environment variable LOG_LEVEL, 3) Default INFO
    """
    global _atexit_registered

    if not _atexit_registered:
        atexit.register(logging.shutdown)
        _atexit_registered = True

    log_path: Path | None = None
    if log_dir is not None:
        log_path = Path(log_dir)
        try:
            log_path.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            print("Warning: Cannot create logs directory (permission denied). Logging to console only.", file=sys.stderr)
            log_path = None
        except OSError as e:
            print(f"Warning: Cannot create logs directory: {e}. Logging to console only.", file=sys.stderr)
            log_path = None

    timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
    log_file = log_path / f"{_log_file_stem(source_name, batch_mode)}_{timestamp}.log" if log_path else None

    if log_level is None:
        log_level = os.environ.get("LOG_LEVEL", "INFO")

    if log_level.upper() not in _VALID_LEVELS:
        print(f"Warning: Invalid log level '{log_level}', using INFO", file=sys.stderr)
        log_level = "INFO"

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    for handler in logging.root.handlers[:]:
        handler.close()
        logging.root.removeHandler(handler)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        # Rotating handler prevents unbounded log growth
        handlers.append(RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count))

    if log_format.lower() == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        logging.root.addHandler(handler)

    logging.root.setLevel(numeric_level)

    logger = logging.getLogger("sp_readiness")
    logger.propagate = True
    logger.setLevel(logging.NOTSET)

    if log_file is not None:
        logger.info(f"Logging initialized. Log file: {log_file}")
    else:
        logger.info("Logging initialized. Console output only.")

    for handler in logging.root.handlers:
        handler.flush()

    return logger
