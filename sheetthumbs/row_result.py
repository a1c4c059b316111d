"""
RowResult - Outcome of processing one sheet row.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .image_task import ImageTask


class RowStatus(Enum):
    """Terminal states of a row."""
    WRITTEN = 'written'
    EXISTS = 'exists'
    EXISTS_CORRECT = 'exists-correct'
    SKIPPED_NO_SRC = 'skip-no-src'
    FAILED = 'error'


@dataclass(frozen=True)
class RowResult:
    """
    Result of processing a single row.

    Attributes:
        status: Terminal state
        task: The image task, None when the row had no source URL
        reason: Failure message (FAILED only)
        bytes_written: Size of the written JPEG (WRITTEN only)
    """
    status: RowStatus
    task: Optional[ImageTask] = None
    reason: Optional[str] = None
    bytes_written: int = 0

    @classmethod
    def written(cls, task: ImageTask, bytes_written: int = 0) -> 'RowResult':
        return cls(RowStatus.WRITTEN, task, bytes_written=bytes_written)

    @classmethod
    def exists(cls, task: ImageTask, verified: bool = False) -> 'RowResult':
        status = RowStatus.EXISTS_CORRECT if verified else RowStatus.EXISTS
        return cls(status, task)

    @classmethod
    def skipped(cls) -> 'RowResult':
        return cls(RowStatus.SKIPPED_NO_SRC)

    @classmethod
    def failed(cls, task: Optional[ImageTask], reason: str) -> 'RowResult':
        return cls(RowStatus.FAILED, task, reason=reason)

    @property
    def is_cache_hit(self) -> bool:
        return self.status in (RowStatus.EXISTS, RowStatus.EXISTS_CORRECT)

    @property
    def status_text(self) -> str:
        """Status string as stored in the manifest."""
        if self.status is RowStatus.FAILED:
            return f"error: {self.reason}"
        return self.status.value

    def to_manifest_entry(self) -> dict:
        """Convert to a manifest entry dictionary."""
        entry = {}
        if self.task is not None:
            entry['id'] = self.task.id
            entry['src'] = self.task.source_url
            if self.status is not RowStatus.FAILED:
                entry['file'] = self.task.filename
        entry['status'] = self.status_text
        return entry
