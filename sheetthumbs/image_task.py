"""
ImageTask - Output naming for a single source image URL.
"""

import hashlib
import os
from dataclasses import dataclass


def url_id(source_url: str) -> str:
    """First 16 hex characters of the SHA-1 of the URL."""
    return hashlib.sha1(source_url.encode('utf-8')).hexdigest()[:16]


@dataclass(frozen=True)
class ImageTask:
    """
    One image to materialize.

    The id is derived from the URL only, so changing the target size
    rewrites the same file in place.

    Attributes:
        source_url: Image URL taken from the sheet
        id: 16-hex-character digest of source_url
        output_path: Where the JPEG is written
    """
    source_url: str
    id: str
    output_path: str

    @classmethod
    def for_url(cls, source_url: str, out_dir: str) -> 'ImageTask':
        """Build a task for a (stripped) source URL inside out_dir."""
        image_id = url_id(source_url)
        return cls(
            source_url=source_url,
            id=image_id,
            output_path=os.path.join(out_dir, f"{image_id}.jpg"),
        )

    @property
    def filename(self) -> str:
        """Output file name relative to the output directory."""
        return os.path.basename(self.output_path)
