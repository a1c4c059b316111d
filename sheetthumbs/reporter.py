"""
Reporter - Generates human-readable reports from a build manifest.
"""

import logging
import sys
from typing import Optional, TextIO

from .manifest import Manifest


class Reporter:
    """
    Generates human-readable reports from manifest data.
    """

    STATUS_ORDER = ['written', 'exists', 'exists-correct', 'skip-no-src', 'error']

    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def report_summary(self, manifest: Manifest) -> None:
        """Generate a summary report."""
        self._print("=" * 70)
        self._print("IMAGE BUILD MANIFEST SUMMARY")
        self._print("=" * 70)
        self._print()

        total = len(manifest)
        counts = manifest.status_counts()

        self._print(f"  Total Rows:   {total:,}")
        self._print()
        self._print(f"{'Status':<20} {'Rows':>10} {'Share':>10}")
        self._print("-" * 70)

        statuses = self.STATUS_ORDER + sorted(s for s in counts if s not in self.STATUS_ORDER)
        for status in statuses:
            count = counts.get(status, 0)
            share = (count / total * 100) if total else 0.0
            self._print(f"{status:<20} {count:>10,} {share:>9.1f}%")

        self._print("-" * 70)
        self._print()

    def report_errors(self, manifest: Manifest, limit: int = 100) -> None:
        """List rows that failed."""
        self._print("=" * 70)
        self._print("FAILED ROWS")
        self._print("=" * 70)
        self._print()

        count = 0
        for entry in manifest.errors():
            self._print(f"  {entry.get('src', '<no source>')}")
            self._print(f"      {entry['status']}")
            count += 1
            if count >= limit:
                remaining = manifest.total_errors - count
                if remaining > 0:
                    self._print(f"  ... and {remaining:,} more")
                break

        self._print()
        self._print(f"Total errors: {manifest.total_errors:,}")
        self._print()
