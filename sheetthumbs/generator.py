"""
Generator - Materializes one thumbnail per sheet row.
"""

import logging
import os
from typing import Dict, Iterable, Optional

from .build_config import BuildConfig
from .cache_check import needs_build
from .generation_progress import GenerationProgress
from .generation_stats import GenerationStats
from .image_fetcher import ImageFetcher
from .image_task import ImageTask
from .manifest import Manifest
from .row_result import RowResult
from .thumbnail_generator import ThumbnailGenerator


class Generator:
    """
    Processes sheet rows in order and builds the manifest.

    Each row ends in exactly one RowResult; a failing row never stops
    the run.
    """

    def __init__(
        self,
        config: BuildConfig,
        fetcher: ImageFetcher,
        thumbnail_generator: ThumbnailGenerator,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize generator.

        Args:
            config: Build configuration
            fetcher: Source image downloader
            thumbnail_generator: Resizer/encoder
            logger: Optional logger instance
        """
        self.config = config
        self.fetcher = fetcher
        self.thumb_gen = thumbnail_generator
        self.logger = logger or logging.getLogger(__name__)
        self.stats = GenerationStats()

    def source_url(self, row: Dict[str, str]) -> str:
        """Stripped source URL of a row, '' when missing."""
        value = row.get(self.config.source_column)
        if not isinstance(value, str):
            return ''
        return value.strip()

    def process_row(self, row: Dict[str, str]) -> RowResult:
        """
        Process a single row.

        Returns:
            RowResult describing the terminal state of the row
        """
        src = self.source_url(row)
        if not src:
            return RowResult.skipped()

        task = ImageTask.for_url(src, self.config.out_dir)

        if not needs_build(
            task.output_path,
            self.config.width,
            self.config.height,
            force=self.config.force_rebuild,
            verify_dimensions=self.config.verify_dimensions,
        ):
            return RowResult.exists(task, verified=self.config.verify_dimensions)

        try:
            image_data = self.fetcher.fetch(src)
            thumb_data = self.thumb_gen.generate(image_data)
            self._write(task.output_path, thumb_data)
        except Exception as e:
            reason = str(e) or e.__class__.__name__
            self.logger.error(f"[{self.config.sheet_tab}] Error: {src} {reason}")
            self.logger.debug("Row failure details", exc_info=True)
            return RowResult.failed(task, reason)

        return RowResult.written(task, bytes_written=len(thumb_data))

    def _write(self, path: str, data: bytes) -> None:
        """Write the whole buffer, replacing any existing file."""
        with open(path, 'wb') as f:
            f.write(data)

    def generate(
        self,
        rows: Iterable[Dict[str, str]],
        progress: Optional[GenerationProgress] = None,
        limit: Optional[int] = None
    ) -> Manifest:
        """
        Process rows in order.

        Args:
            rows: Sheet rows keyed by header
            progress: Optional progress reporter
            limit: Optional limit on number of rows (for testing)

        Returns:
            Manifest with one entry per processed row
        """
        rows = list(rows)
        if limit is not None:
            rows = rows[:limit]

        os.makedirs(self.config.out_dir, exist_ok=True)

        manifest = Manifest()
        self.stats = GenerationStats(total_rows=len(rows))

        tab = self.config.sheet_tab
        limit_str = f" (limited to {limit})" if limit is not None else ""
        self.logger.info(
            f"[{tab}] Starting build: {len(rows)} rows -> {self.config.out_dir} "
            f"at {self.config.width}x{self.config.height}{limit_str}"
        )

        for row_number, row in enumerate(rows, start=1):
            result = self.process_row(row)
            manifest.add(result)
            self.stats.record(result)

            if progress:
                progress.on_row_processed(row_number, result)
                progress.on_progress_update(self.stats)

        self.logger.info(
            f"[{tab}] Done: {self.stats.written} written, {self.stats.exists} existing, "
            f"{self.stats.skipped} skipped, {self.stats.errors} errors "
            f"({self.stats.elapsed_seconds:.1f}s)"
        )

        return manifest
