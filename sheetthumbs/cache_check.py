"""
Cache check - Decides whether an output image must be (re)built.
"""

import os
from typing import Tuple

from PIL import Image


def read_dimensions(path: str) -> Tuple[int, int]:
    """
    Read (width, height) from a fully decodable image file.

    The pixel data is decoded too, so a file truncated after a valid
    header is rejected.

    Raises:
        OSError: If the file is missing, truncated or not an image
    """
    with Image.open(path) as img:
        img.load()
        return img.size


def needs_build(
    path: str,
    width: int,
    height: int,
    force: bool = False,
    verify_dimensions: bool = True
) -> bool:
    """
    Check if the image at path has to be built.

    A file is reused only when it exists, force is off and, when
    verify_dimensions is set, its decoded size equals width x height.
    Unreadable files are rebuilt.
    """
    if force or not os.path.exists(path):
        return True
    if not verify_dimensions:
        return False

    try:
        return read_dimensions(path) != (width, height)
    except (OSError, ValueError, Image.DecompressionBombError):
        return True
