"""Command-line entry point for SharePoint Readiness."""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

from sp_readiness.analysis.pipeline import DashboardPipeline
from sp_readiness.cli.parser import parse_arguments
from sp_readiness.core.colors import ConsoleColors, _format_error_msg, hr_bytes
from sp_readiness.core.config import RunConfig
from sp_readiness.core.config_validation import validate_dashboard_config
from sp_readiness.core.constants import BANNER_WIDTH
from sp_readiness.core.exceptions import ConfigurationError, SPReadinessError
from sp_readiness.core.logging import flush_logging_handlers, setup_logging, with_log_context
from sp_readiness.core.perf import PerformanceTracker
from sp_readiness.output.exporter import DashboardExporter, DirectorySink, safe_filename


@dataclass
class FileResult:
    """Outcome of processing one input file"""

    path: str
    success: bool
    row_count: int = 0
    site_count: int = 0
    outputs: list[str] = field(default_factory=list)
    error_message: str = ""
    duration: float = 0.0


# ==================== CONSOLE OUTPUT ====================


def print_dashboard(pipeline: DashboardPipeline, source: str) -> None:
    """Print the headline metrics, top sites and stale sites of one dataset."""
    summary = pipeline.summary
    stale = pipeline.stale_sites

    print()
    print("=" * BANNER_WIDTH)
    print(ConsoleColors.bold(f"SHAREPOINT READINESS: {Path(source).name}"))
    print("=" * BANNER_WIDTH)
    print(f"Rows:            {pipeline.dataset.row_count} ({len(pipeline.filtered_rows)} after filters)")
    print(f"Sites:           {summary.total_sites}")
    print(f"Files:           {summary.total_files}")
    print(f"Storage:         {hr_bytes(summary.total_kb)}")
    print(f"Public sites:    {summary.public_sites} ({summary.public_pct}%)")
    print(f"Org-wide sites:  {summary.everyone_sites} ({summary.everyone_pct}%)")

    missing = pipeline.roles.missing
    if missing:
        print(ConsoleColors.warning(f"Columns not found: {', '.join(missing)}"))

    top = pipeline.top_sites
    if top:
        print()
        print(ConsoleColors.bold(f"Top sites by {pipeline.config.gravity_metric}"))
        print("-" * BANNER_WIDTH)
        for entry in top:
            name = entry.name if len(entry.name) <= 30 else entry.name[:27] + "..."
            print(f"  {name:30s} {entry.files:>8} {entry.display_size:>10}  {ConsoleColors.severity(entry.risk)}")

    if pipeline.roles.last_modified:
        print()
        print(ConsoleColors.bold(f"Stale sites ({len(stale)})"))
        print("-" * BANNER_WIDTH)
        for view in stale[:10]:
            oldest = view.oldest_modified.date().isoformat() if view.oldest_modified else "-"
            print(f"  {view.site_name[:30]:30s} {view.stale_file_count:>6} files  oldest {oldest}")

    table = pipeline.table
    if table:
        print()
        print(ConsoleColors.bold(f"Sites ({len(table)})"))
        print("-" * BANNER_WIDTH)
        for site in table[:25]:
            label = ConsoleColors.ljust(ConsoleColors.severity(site.sharing_level), 26)
            print(f"  {site.site_name[:30]:30s} {label} {hr_bytes(site.total_kb):>10}")
    print("=" * BANNER_WIDTH)


# ==================== PROCESSING ====================


def _output_dir_for(run_config: RunConfig, path: str, batch_mode: bool) -> Path:
    base = Path(run_config.output_dir)
    # Export names are fixed, so each input gets its own folder in batch mode
    return base / safe_filename(Path(path).stem) if batch_mode else base


def process_file(
    path: str,
    run_config: RunConfig,
    logger: logging.Logger,
    perf_tracker: PerformanceTracker,
    batch_mode: bool = False,
) -> FileResult:
    """
    Load one inventory CSV, compute every view and write the requested outputs.

    Never raises for ingestion or export problems; they are reported in the result.
    """
    log = with_log_context(logger, source=path)
    start = time.perf_counter()
    result = FileResult(path=path, success=False)

    try:
        pipeline = DashboardPipeline(run_config.dashboard)

        name = Path(path).name
        with perf_tracker.stage("Load", name) as timing:
            pipeline.load_file(path)
            timing.rows = pipeline.dataset.row_count

        with perf_tracker.stage("Aggregate", name) as timing:
            timing.rows = len(pipeline.filtered_rows)
            result.site_count = len(pipeline.sites)
        result.row_count = pipeline.dataset.row_count

        with perf_tracker.stage("Views", name) as timing:
            snapshot = pipeline.snapshot()
            timing.rows = result.site_count

        fmt = run_config.output_format
        if fmt in ("console", "all") and not run_config.quiet:
            print_dashboard(pipeline, path)

        if fmt in ("json", "csv", "all"):
            with perf_tracker.stage("Export", name):
                exporter = DashboardExporter(DirectorySink(_output_dir_for(run_config, path, batch_mode)))
                if fmt in ("csv", "all"):
                    written = exporter.export_filtered_sites_csv(pipeline.table)
                    if written:
                        result.outputs.append(written)
                if fmt in ("json", "all"):
                    result.outputs.append(exporter.export_site_summary_json(pipeline.sites))
                    result.outputs.append(exporter.export_summary_json(snapshot))

        result.success = True
        log.info(f"Processed {result.row_count} rows into {result.site_count} sites")

    except SPReadinessError as e:
        result.error_message = str(e)
        log.error(_format_error_msg("processing inventory", Path(path).name, e))

    result.duration = time.perf_counter() - start
    return result


def print_batch_summary(results: list[FileResult], total_duration: float) -> None:
    successful = [r for r in results if r.success]
    failed = [r for r in results if not r.success]

    print()
    print("=" * BANNER_WIDTH)
    print(ConsoleColors.bold("BATCH SUMMARY"))
    print("=" * BANNER_WIDTH)
    print(f"Files processed: {len(results)}")
    print(ConsoleColors.success(f"Successful:      {len(successful)}"))
    if failed:
        print(ConsoleColors.error(f"Failed:          {len(failed)}"))
        for r in failed:
            print(ConsoleColors.error(f"  ✗ {r.path}: {r.error_message}"))
    for r in successful:
        print(f"  ✓ {r.path}: {r.row_count} rows, {r.site_count} sites ({r.duration:.2f}s)")
    print(f"Total time:      {total_duration:.2f}s")
    print("=" * BANNER_WIDTH)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the script"""
    load_dotenv()
    args = parse_arguments(argv)
    run_config = RunConfig.from_args(args)

    if run_config.quiet:
        run_config.log.level = "ERROR"

    batch_mode = len(args.files) > 1
    logger = setup_logging(
        source_name=None if batch_mode else args.files[0],
        batch_mode=batch_mode,
        log_level=run_config.log.level,
        log_format=run_config.log.log_format,
        log_dir=args.log_dir or None,
        max_bytes=run_config.log.file_max_bytes,
        backup_count=run_config.log.file_backup_count,
    )

    try:
        validate_dashboard_config(run_config.dashboard)
    except ConfigurationError as e:
        print(ConsoleColors.error(f"ERROR: {e}"), file=sys.stderr)
        return 1

    perf_tracker = PerformanceTracker(logger)
    results: list[FileResult] = []
    start = time.perf_counter()

    with tqdm(
        total=len(args.files),
        desc="Processing inventories",
        unit="file",
        disable=run_config.quiet or not batch_mode,
    ) as pbar:
        for path in args.files:
            result = process_file(path, run_config, logger, perf_tracker, batch_mode=batch_mode)
            results.append(result)
            pbar.set_postfix_str(f"{'✓' if result.success else '✗'} {Path(path).name[:20]}", refresh=True)
            pbar.update(1)

    if batch_mode:
        print_batch_summary(results, time.perf_counter() - start)
    elif not results[0].success:
        print(ConsoleColors.error(f"ERROR: {results[0].error_message}"), file=sys.stderr)

    if not run_config.quiet:
        for output in (o for r in results for o in r.outputs):
            print(ConsoleColors.success(f"✓ {output}"))

    if run_config.show_timings:
        print(perf_tracker.get_summary())

    flush_logging_handlers(logger)
    return 0 if all(r.success for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
