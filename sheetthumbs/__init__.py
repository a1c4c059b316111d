"""
Sheet image builder for static sites.

Pipeline:
    1. Fetch a published spreadsheet tab as CSV
    2. Name each image by a hash of its source URL
    3. Fetch, cover-resize and write <id>.jpg, reusing correctly sized files
    4. Write _manifest.json with one entry per row
"""

__version__ = "1.0.0"

from .build_config import BuildConfig, TabProfile
from .image_task import ImageTask, url_id
from .row_result import RowResult, RowStatus
from .cache_check import needs_build
from .thumbnail_generator import ThumbnailGenerator
from .image_fetcher import ImageFetcher, ImageFetchError
from .sheet_source import SheetSource, SheetError, SheetFetchError, SheetFormatError
from .manifest import Manifest
from .generation_stats import GenerationStats
from .generation_progress import GenerationProgress
from .generator import Generator
from .reporter import Reporter

__all__ = [
    "BuildConfig",
    "TabProfile",
    "ImageTask",
    "url_id",
    "RowResult",
    "RowStatus",
    "needs_build",
    "ThumbnailGenerator",
    "ImageFetcher",
    "ImageFetchError",
    "SheetSource",
    "SheetError",
    "SheetFetchError",
    "SheetFormatError",
    "Manifest",
    "GenerationStats",
    "GenerationProgress",
    "Generator",
    "Reporter",
]
