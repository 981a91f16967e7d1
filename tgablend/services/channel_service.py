from typing import Tuple
import logging

import cv2
import numpy as np

from ..models.blend_mode import Channel
from ..models.image import PixelBuffer, require_same_size

logger = logging.getLogger(__name__)


class ChannelService:
    """
    Pure channel/geometry operations. Every method returns a new buffer and
    leaves its arguments untouched.
    """

    @staticmethod
    def _broadcast(channel: np.ndarray) -> np.ndarray:
        return cv2.merge([channel, channel, channel])

    @classmethod
    def split_rgb(cls, image: PixelBuffer) -> Tuple[PixelBuffer, PixelBuffer, PixelBuffer]:
        """
        Returns (red, green, blue) gray images. Each one carries a single
        source channel copied into all three slots.
        """
        blue, green, red = cv2.split(np.ascontiguousarray(image.pixels))
        return (
            PixelBuffer(cls._broadcast(red)),
            PixelBuffer(cls._broadcast(green)),
            PixelBuffer(cls._broadcast(blue)),
        )

    @staticmethod
    def combine_rgb(red: PixelBuffer, green: PixelBuffer, blue: PixelBuffer) -> PixelBuffer:
        """
        Inverse of split_rgb(): take the red slot of *red*, the green slot of
        *green* and the blue slot of *blue*.
        """
        require_same_size("Combine", red=red, green=green, blue=blue)
        pixels = cv2.merge([
            np.ascontiguousarray(blue.pixels[..., Channel.BLUE]),
            np.ascontiguousarray(green.pixels[..., Channel.GREEN]),
            np.ascontiguousarray(red.pixels[..., Channel.RED]),
        ])
        return PixelBuffer(pixels)

    @staticmethod
    def rotate180(image: PixelBuffer) -> PixelBuffer:
        """Point reflection: pixel p moves to width*height - 1 - p, triplets intact."""
        return PixelBuffer(cv2.flip(np.ascontiguousarray(image.pixels), -1))
