"""CLI module - Argument parsing and the sp-readiness entry point."""

from sp_readiness.cli.main import FileResult, main, process_file
from sp_readiness.cli.parser import parse_arguments

__all__ = ["FileResult", "main", "parse_arguments", "process_file"]
