"""
Manifest - Ordered record of per-row outcomes, written as _manifest.json.
"""

import json
import os
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List

from .row_result import RowResult


MANIFEST_FILENAME = '_manifest.json'


@dataclass
class Manifest:
    """
    Build manifest: one entry per sheet row, in sheet order.

    Attributes:
        entries: Manifest entries ({id, src, file, status})
    """
    entries: List[dict] = field(default_factory=list)

    def add(self, result: RowResult) -> dict:
        """Append the entry for a row result and return it."""
        entry = result.to_manifest_entry()
        self.entries.append(entry)
        return entry

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[dict]:
        return iter(self.entries)

    @staticmethod
    def status_kind(status: str) -> str:
        """Collapse 'error: <message>' statuses to 'error'."""
        if status.startswith('error'):
            return 'error'
        return status

    def status_counts(self) -> Dict[str, int]:
        """Number of entries per status kind."""
        return dict(Counter(self.status_kind(e['status']) for e in self.entries))

    @property
    def total_written(self) -> int:
        return sum(1 for e in self.entries if e['status'] == 'written')

    @property
    def total_exists(self) -> int:
        return sum(1 for e in self.entries if e['status'] in ('exists', 'exists-correct'))

    @property
    def total_skipped(self) -> int:
        return sum(1 for e in self.entries if e['status'] == 'skip-no-src')

    @property
    def total_errors(self) -> int:
        return sum(1 for e in self.entries if e['status'].startswith('error'))

    def errors(self) -> Iterator[dict]:
        """Yield entries whose status is an error."""
        for entry in self.entries:
            if entry['status'].startswith('error'):
                yield entry

    def to_list(self) -> List[dict]:
        """Convert to a list for JSON serialization."""
        return [dict(e) for e in self.entries]

    @classmethod
    def from_list(cls, data: List[dict]) -> 'Manifest':
        """Create from a list of entries."""
        if not isinstance(data, list):
            raise ValueError("Manifest must be a JSON array")
        return cls(entries=[dict(e) for e in data])

    def save(self, out_dir: str) -> str:
        """
        Write the manifest to <out_dir>/_manifest.json, replacing any previous one.

        Returns:
            Path of the written file
        """
        path = Path(out_dir) / MANIFEST_FILENAME
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_list(), f, indent=2)

        return str(path)

    @classmethod
    def load(cls, filepath: str) -> 'Manifest':
        """Load manifest from a JSON file or from the directory holding it."""
        if os.path.isdir(filepath):
            filepath = os.path.join(filepath, MANIFEST_FILENAME)
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_list(data)
