"""Stage timings for inventory processing (load, views, export)."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sp_readiness.core.constants import BANNER_WIDTH


@dataclass
class StageTiming:
    """One timed stage for one input file."""

    stage: str
    source: str = ""
    duration: float = 0.0
    rows: int | None = None

    @property
    def label(self) -> str:
        return f"{self.stage} {self.source}".strip()

    @property
    def rows_per_second(self) -> float | None:
        if self.rows is None or self.duration <= 0:
            return None
        return self.rows / self.duration


class PerformanceTracker:
    """Collect stage timings across every input of a run.

    Example:
        with tracker.stage("Load", "sites.csv") as timing:
            pipeline.load_file("sites.csv")
            timing.rows = pipeline.dataset.row_count
    """

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter):
        self.logger = logger
        self.timings: list[StageTiming] = []

    @contextmanager
    def stage(self, stage: str, source: str = "") -> Iterator[StageTiming]:
        timing = StageTiming(stage=stage, source=source)
        started = time.perf_counter()
        try:
            yield timing
        finally:
            timing.duration = time.perf_counter() - started
            self.timings.append(timing)
            rows = f" ({timing.rows} rows)" if timing.rows is not None else ""
            self.logger.debug(f"{timing.label} completed in {timing.duration:.3f}s{rows}")

    def stage_totals(self) -> dict[str, float]:
        """Total seconds per stage name, summed over all inputs."""
        totals: dict[str, float] = {}
        for timing in self.timings:
            totals[timing.stage] = totals.get(timing.stage, 0.0) + timing.duration
        return totals

    def get_summary(self) -> str:
        if not self.timings:
            return "No performance metrics collected"

        total = sum(t.duration for t in self.timings)
        lines = ["", "=" * BANNER_WIDTH, "PERFORMANCE SUMMARY", "=" * BANNER_WIDTH]
        for timing in self.timings:
            rate = timing.rows_per_second
            suffix = f"  {rate:,.0f} rows/s" if rate is not None else ""
            lines.append(f"{timing.label[:35]:35s}: {timing.duration:6.3f}s{suffix}")

        if len({t.source for t in self.timings}) > 1:
            lines.append("-" * BANNER_WIDTH)
            for stage, seconds in self.stage_totals().items():
                lines.append(f"{'All ' + stage:35s}: {seconds:6.3f}s")

        lines.extend(["=" * BANNER_WIDTH, f"{'Total':35s}: {total:6.3f}s", "=" * BANNER_WIDTH])
        return "\n".join(lines)


__all__ = ["PerformanceTracker", "StageTiming"]
