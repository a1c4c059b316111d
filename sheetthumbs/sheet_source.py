"""
SheetSource - Fetches a published spreadsheet tab as CSV rows.
"""

import io
import logging
from typing import Dict, List, Optional

import pandas as pd
import requests

from .build_config import BuildConfig


class SheetError(Exception):
    """Base class for failures that abort the whole run."""


class SheetFetchError(SheetError):
    """The CSV export could not be downloaded."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ''):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SheetFormatError(SheetError):
    """The CSV export was downloaded but is unusable."""


class SheetSource:
    """
    Downloads and parses the CSV export of one sheet tab.
    """

    def __init__(
        self,
        config: BuildConfig,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize sheet source.

        Args:
            config: Build configuration (sheet id, tab, column, user agent)
            session: Optional requests session
            logger: Optional logger instance
        """
        self.config = config
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def fetch_text(self) -> str:
        """
        Download the CSV export.

        Raises:
            SheetFetchError: On connection failure or non-success status
        """
        url = self.config.csv_url
        self.logger.debug(f"Fetching CSV: {url}")

        try:
            response = self.session.get(
                url,
                headers={'User-Agent': self.config.user_agent},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise SheetFetchError(f"CSV fetch failed: {e}") from e

        if not response.ok:
            raise SheetFetchError(
                f"CSV fetch failed: {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        return response.text

    @staticmethod
    def parse(text: str) -> List[Dict[str, str]]:
        """
        Parse CSV text into rows keyed by header.

        Every cell is kept as a string; blank lines are skipped.

        Raises:
            SheetFormatError: If a row has more fields than the header
        """
        if not text.strip():
            return []
        # header=None: the header line fixes the width, so a longer row is
        # a parse error instead of becoming an implicit index column
        try:
            grid = pd.read_csv(
                io.StringIO(text),
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                on_bad_lines='error',
            )
        except pd.errors.ParserError as e:
            raise SheetFormatError(f"Malformed CSV: {e}") from e

        # Short rows leave NaN in trailing columns even with keep_default_na off
        grid = grid.fillna('')
        header = [str(h) for h in grid.iloc[0]]
        return [
            dict(zip(header, values))
            for values in grid.iloc[1:].itertuples(index=False, name=None)
        ]

    def load_rows(self) -> List[Dict[str, str]]:
        """
        Fetch, parse and check the sheet.

        Returns:
            List of rows in sheet order

        Raises:
            SheetFetchError: If the download fails
            SheetFormatError: If there are no rows or the source column is absent
        """
        rows = self.parse(self.fetch_text())
        if not rows:
            raise SheetFormatError(f"No rows found in tab {self.config.sheet_tab!r}")

        column = self.config.source_column
        if column not in rows[0]:
            available = ', '.join(repr(k) for k in rows[0].keys())
            raise SheetFormatError(
                f"Column {column!r} not found in tab {self.config.sheet_tab!r}. "
                f"Available headers: {available}"
            )

        self.logger.info(f"[{self.config.sheet_tab}] Loaded {len(rows)} rows")
        return rows
