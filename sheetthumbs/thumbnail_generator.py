"""
ThumbnailGenerator - Cover-fit resizing and JPEG encoding.
"""

import io
import logging
import math
from typing import Optional, Tuple

from PIL import Image, ImageOps


class ThumbnailGenerator:
    """
    Produces fixed-size JPEG thumbnails using Pillow.

    The source is scaled until it covers the target box and the overflow
    is cropped. The crop window is either centred or placed over the
    region with the highest luminance entropy ('attention').
    """

    CROP_POSITIONS = ('attention', 'centre')

    # Candidate crop offsets examined along the overflowing axis
    ATTENTION_STEPS = 16

    def __init__(
        self,
        width: int,
        height: int,
        quality: int = 85,
        crop_position: str = 'attention',
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize thumbnail generator.

        Args:
            width: Output width in pixels
            height: Output height in pixels
            quality: JPEG quality for output (default: 85)
            crop_position: 'attention' or 'centre'
            logger: Optional logger instance
        """
        if crop_position not in self.CROP_POSITIONS:
            raise ValueError(f"Unknown crop position: {crop_position}")
        self.width = width
        self.height = height
        self.quality = quality
        self.crop_position = crop_position
        self.logger = logger or logging.getLogger(__name__)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def generate(self, image_data: bytes) -> bytes:
        """
        Generate a thumbnail from image data.

        Args:
            image_data: Source image as bytes, any format Pillow decodes

        Returns:
            JPEG bytes of exactly width x height
        """
        try:
            with Image.open(io.BytesIO(image_data)) as src:
                img = ImageOps.exif_transpose(src)
                img = self._convert_color_mode(img)
                img = self.cover(img)

            output = io.BytesIO()
            img.save(output, format='JPEG', quality=self.quality, optimize=True)
            return output.getvalue()

        except Exception as e:
            self.logger.debug(f"Error generating thumbnail: {e}")
            raise

    def cover(self, img: Image.Image) -> Image.Image:
        """Scale img to cover the target box and crop the overflow."""
        src_w, src_h = img.size
        scale = max(self.width / src_w, self.height / src_h)
        scaled_w = max(self.width, round(src_w * scale))
        scaled_h = max(self.height, round(src_h * scale))

        if (scaled_w, scaled_h) != img.size:
            img = img.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)

        left, top = self._crop_origin(img)
        return img.crop((left, top, left + self.width, top + self.height))

    def _crop_origin(self, img: Image.Image) -> Tuple[int, int]:
        """Top-left corner of the crop window."""
        extra_w = img.width - self.width
        extra_h = img.height - self.height

        if self.crop_position == 'centre' or (extra_w == 0 and extra_h == 0):
            return extra_w // 2, extra_h // 2

        gray = img.convert('L')
        if extra_w > 0:
            left = self._best_offset(
                extra_w,
                lambda off: gray.crop((off, 0, off + self.width, self.height))
            )
            return left, extra_h // 2
        top = self._best_offset(
            extra_h,
            lambda off: gray.crop((0, off, self.width, off + self.height))
        )
        return extra_w // 2, top

    def _best_offset(self, span: int, window) -> int:
        """Offset in [0, span] whose window has the most entropy; ties go to the centre."""
        steps = min(self.ATTENTION_STEPS, span)
        offsets = sorted({round(span * i / steps) for i in range(steps + 1)})
        centre = span / 2
        return max(
            offsets,
            key=lambda off: (round(self._entropy(window(off)), 6), -abs(off - centre))
        )

    @staticmethod
    def _entropy(img: Image.Image) -> float:
        """Shannon entropy of a grayscale histogram, in bits."""
        histogram = img.histogram()
        total = float(sum(histogram))
        if total == 0:
            return 0.0
        entropy = 0.0
        for count in histogram:
            if count:
                p = count / total
                entropy -= p * math.log2(p)
        return entropy

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to RGB, flattening transparency onto white."""
        if img.mode == 'P':
            img = img.convert('RGBA')
        if img.mode in ('RGBA', 'LA'):
            if img.mode == 'LA':
                img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            return background
        if img.mode != 'RGB':
            return img.convert('RGB')
        return img
