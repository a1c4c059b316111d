"""
GenerationStats - Statistics for a build run.
"""

import time
from dataclasses import dataclass, field
from typing import List

from .row_result import RowResult, RowStatus


@dataclass
class GenerationStats:
    """
    Statistics for a build run.

    Attributes:
        total_rows: Rows to process
        written: Images fetched, resized and written
        exists: Rows whose output was reused
        skipped: Rows without a source URL
        errors: Rows that failed
        bytes_written: Total bytes of JPEGs written
        start_time: Start timestamp
        error_details: List of error messages
    """
    total_rows: int = 0
    written: int = 0
    exists: int = 0
    skipped: int = 0
    errors: int = 0
    bytes_written: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    def record(self, result: RowResult) -> None:
        """Count a row result."""
        if result.status is RowStatus.WRITTEN:
            self.written += 1
            self.bytes_written += result.bytes_written
        elif result.is_cache_hit:
            self.exists += 1
        elif result.status is RowStatus.SKIPPED_NO_SRC:
            self.skipped += 1
        else:
            self.errors += 1
            src = result.task.source_url if result.task else '<no source>'
            self.error_details.append(f"{src}: {result.reason}")

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def rate_per_minute(self) -> float:
        """Images written per minute."""
        if self.elapsed_seconds > 0:
            return self.written / self.elapsed_seconds * 60
        return 0.0

    @property
    def completed_count(self) -> int:
        """Total rows with a terminal result."""
        return self.written + self.exists + self.skipped + self.errors

    @property
    def remaining_count(self) -> int:
        """Rows still to process."""
        return self.total_rows - self.completed_count
