"""
GenerationProgress - Reports per-row outcomes and periodic progress.
"""

import logging
from typing import Optional

from .generation_stats import GenerationStats
from .row_result import RowResult, RowStatus


class GenerationProgress:
    """
    Logs one line per row outcome, prefixed with the tab name.

    With show_files the lines are printed instead, in a compact
    [OK]/[SKIP]/[ERROR] form.
    """

    def __init__(
        self,
        tab: str,
        show_files: bool = False,
        log_interval: int = 100,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            tab: Sheet tab name used as line prefix
            show_files: If True, print each row as it's processed
            log_interval: Log a progress summary every N rows
            logger: Optional logger instance
        """
        self.tab = tab
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.last_logged = 0

    def on_row_processed(self, row_number: int, result: RowResult) -> None:
        """Called after each row reaches a terminal state."""
        if self.show_files:
            print(f"  {self._format_row(row_number, result)}")
            return

        prefix = f"[{self.tab}]"
        task = result.task
        if result.status is RowStatus.WRITTEN:
            self.logger.info(f"{prefix} Wrote {task.output_path} ({self._format_bytes(result.bytes_written)})")
        elif result.is_cache_hit:
            self.logger.info(f"{prefix} Skip {result.status_text}: {task.output_path}")
        elif result.status is RowStatus.SKIPPED_NO_SRC:
            self.logger.info(f"{prefix} Row {row_number}: no source URL")
        # Failures are logged by the generator as they happen

    def on_progress_update(self, stats: GenerationStats) -> None:
        """Log a summary every log_interval rows."""
        done = stats.completed_count
        if done - self.last_logged < self.log_interval:
            return
        self.last_logged = done
        self.logger.info(
            f"[{self.tab}] Progress: {done}/{stats.total_rows} rows, "
            f"{stats.written} written, {stats.errors} errors "
            f"({stats.rate_per_minute:.1f}/min)"
        )

    def _format_row(self, row_number: int, result: RowResult) -> str:
        if result.status is RowStatus.WRITTEN:
            return f"[OK] row {row_number} -> {result.task.filename} ({self._format_bytes(result.bytes_written)})"
        if result.is_cache_hit:
            return f"[SKIP] row {row_number} -> {result.task.filename} ({result.status_text})"
        if result.status is RowStatus.SKIPPED_NO_SRC:
            return f"[SKIP] row {row_number} -> no source URL"
        return f"[ERROR] row {row_number} -> {result.reason}"

    @staticmethod
    def _format_bytes(bytes_val: Optional[int]) -> str:
        """Format bytes as human-readable string."""
        if bytes_val is None:
            return "unknown"
        for unit in ['B', 'KB', 'MB', 'GB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} TB"
