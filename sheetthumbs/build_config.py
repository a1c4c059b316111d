"""
BuildConfig - Immutable configuration for a single build run.
"""

import os
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional
from urllib.parse import quote


DEFAULT_SHEET_ID = '1Igj7ohYqH3TnrESbSQwMSRLMx2tfOqDwmoXEzrNarag'
DEFAULT_TAB = 'VRBO'
DEFAULT_SOURCE_COLUMN = 'Main Image URL'
DEFAULT_USER_AGENT = 'img-bot'

CROP_POSITIONS = ('attention', 'centre')

CSV_URL_TEMPLATE = 'https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:csv&sheet={tab}'


@dataclass(frozen=True)
class TabProfile:
    """
    Per-tab defaults.

    Attributes:
        source_column: Header of the column holding image URLs (exact match)
        width: Default target width in pixels
        height: Default target height in pixels
        out_dir: Default output directory
    """
    source_column: str
    width: int
    height: int
    out_dir: str


TAB_PROFILES: Dict[str, TabProfile] = {
    'VRBO': TabProfile('Main Image URL', 575, 325, 'images/vrbo'),
    'ETSY': TabProfile('Product Image URL', 325, 575, 'images/etsy'),
}


def profile_for_tab(tab: str) -> TabProfile:
    """Return the profile for a tab, falling back to landscape defaults."""
    if tab in TAB_PROFILES:
        return TAB_PROFILES[tab]
    return TabProfile(DEFAULT_SOURCE_COLUMN, 575, 325, f"images/{tab.lower()}")


def _parse_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name, '').strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _parse_flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    return raw.strip() == '1'


@dataclass(frozen=True)
class BuildConfig:
    """
    Configuration for one build run.

    Attributes:
        sheet_id: Google Sheets document id
        sheet_tab: Tab (worksheet) name to export
        out_dir: Directory receiving <id>.jpg files and _manifest.json
        width: Target width in pixels
        height: Target height in pixels
        source_column: Header of the image URL column
        force_rebuild: Rebuild every image regardless of what is on disk
        crop_position: 'attention' (entropy anchored) or 'centre'
        verify_dimensions: Compare existing files against target size
        user_agent: User-Agent sent with every request
        quality: JPEG quality
        timeout: HTTP timeout in seconds
    """
    sheet_id: str
    sheet_tab: str
    out_dir: str
    width: int
    height: int
    source_column: str
    force_rebuild: bool = False
    crop_position: str = 'attention'
    verify_dimensions: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    quality: int = 85
    timeout: float = 30.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'BuildConfig':
        """
        Create configuration from environment variables.

        Defaults that depend on the tab (column, size, output directory)
        come from its TabProfile.
        """
        env = os.environ if environ is None else environ

        tab = env.get('SHEET_TAB', '').strip() or DEFAULT_TAB
        profile = profile_for_tab(tab)

        timeout_raw = env.get('HTTP_TIMEOUT', '').strip()
        try:
            timeout = float(timeout_raw) if timeout_raw else 30.0
        except ValueError:
            raise ValueError(f"HTTP_TIMEOUT must be a number, got {timeout_raw!r}")

        return cls(
            sheet_id=env.get('SHEET_ID', DEFAULT_SHEET_ID).strip(),
            sheet_tab=tab,
            out_dir=env.get('OUT_DIR', '').strip() or profile.out_dir,
            width=_parse_int(env, 'WIDTH', profile.width),
            height=_parse_int(env, 'HEIGHT', profile.height),
            source_column=env.get('SOURCE_COLUMN', '').strip() or profile.source_column,
            force_rebuild=_parse_flag(env, 'FORCE_REBUILD', False),
            crop_position=env.get('CROP_POSITION', '').strip().lower() or 'attention',
            verify_dimensions=_parse_flag(env, 'VERIFY_DIMENSIONS', True),
            user_agent=env.get('USER_AGENT', '').strip() or DEFAULT_USER_AGENT,
            timeout=timeout,
        )

    def with_overrides(self, **overrides) -> 'BuildConfig':
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.sheet_id:
            errors.append("SHEET_ID is required")
        if not self.sheet_tab:
            errors.append("SHEET_TAB is required")
        if not self.out_dir:
            errors.append("OUT_DIR is required")
        if self.width <= 0 or self.height <= 0:
            errors.append(f"Target size must be positive, got {self.width}x{self.height}")
        if self.crop_position not in CROP_POSITIONS:
            errors.append(
                f"CROP_POSITION must be one of {', '.join(CROP_POSITIONS)}, "
                f"got {self.crop_position!r}"
            )
        if not 1 <= self.quality <= 95:
            errors.append(f"JPEG quality must be between 1 and 95, got {self.quality}")

        return errors

    @property
    def csv_url(self) -> str:
        """Public CSV export URL for the configured tab."""
        return CSV_URL_TEMPLATE.format(
            sheet_id=self.sheet_id,
            tab=quote(self.sheet_tab, safe=''),
        )

    @property
    def manifest_path(self) -> str:
        """Path of the manifest written at the end of a run."""
        return os.path.join(self.out_dir, '_manifest.json')
