from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Union
import logging

import cv2
import numpy as np

from ..models.image import PixelBuffer, require_same_size
from ..repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)


class ImageService:
    """I/O helpers plus a few inspection utilities.  No blend logic here."""
    def __init__(self):
        self.image_repository = ImageRepository()

    def create_image(self, pixels: np.ndarray, path: Union[str, Path] = None) -> PixelBuffer:
        return self.image_repository.create_image(pixels, path)

    def load(self, path: str | Path) -> PixelBuffer:
        """Load a single TGA from disk into a PixelBuffer."""
        return self.image_repository.load(path)

    def save(self, image: PixelBuffer, path: str | Path = None) -> Path:
        """
        Business-level method to save the image to a specific path
        (or to ``image.path`` when none is given).
        """
        return self.image_repository.save(image, path)

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[PixelBuffer]:
        """
        Yield images lazily instead of returning a gigantic list.
        """
        return self.image_repository.iter_dir(folder,
                                              recursive=recursive,
                                              exts=exts)

    def save_gallery(self, gallery: Iterable[PixelBuffer]) -> List[Path]:
        return [self.save(img) for img in gallery]

    def export_preview(self, image: PixelBuffer, path: str | Path) -> Path:
        return self.image_repository.export_preview(image, path)

    # ─── Inspection ───────────────────────────────────────────────
    @staticmethod
    def pixel_at(image: PixelBuffer, x: int, y: int) -> Tuple[int, int, int]:
        """
        Args:
            image (PixelBuffer): Any canonical buffer.
            x (int): Column, 0 = left edge.
            y (int): Row, 0 = bottom edge.

        Returns:
            (tuple): The (blue, green, red) samples of that pixel.
        """
        if not (0 <= x < image.width and 0 <= y < image.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {image.width}x{image.height} image")
        b, g, r = image.pixels[y, x]
        return int(b), int(g), int(r)

    @staticmethod
    def count_differences(first: PixelBuffer, second: PixelBuffer) -> int:
        """Number of samples (not pixels) that differ between two same-size images."""
        require_same_size("Compare", first=first, second=second)
        return int(np.count_nonzero(first.pixels != second.pixels))

    @staticmethod
    def to_grayscale(image: PixelBuffer) -> PixelBuffer:
        """
        Luminance (0.114 B + 0.587 G + 0.299 R) copied into all three slots.
        Returns a new buffer.
        """
        lum = cv2.cvtColor(np.ascontiguousarray(image.pixels), cv2.COLOR_BGR2GRAY)
        return PixelBuffer(cv2.merge([lum, lum, lum]))
