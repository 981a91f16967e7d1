from __future__ import annotations

from typing import Callable, Dict, Sequence, Tuple
import logging

import cv2
import numpy as np

from ..models.blend_mode import BlendMode
from ..models.image import PixelBuffer, require_same_size

logger = logging.getLogger(__name__)


# ─── Per-channel arithmetic (uint8 in, uint8 out) ───────────────────
def _scaled_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """a * b / 255 rounded to nearest: (n + 127) // 255, never truncated."""
    return (a * b + 127) // 255


def _add(base: np.ndarray, over: np.ndarray) -> np.ndarray:
    return cv2.add(base, over)  # saturates at 255


def _subtract(base: np.ndarray, over: np.ndarray) -> np.ndarray:
    return cv2.subtract(base, over)  # base minus overlay, floors at 0


def _multiply(base: np.ndarray, over: np.ndarray) -> np.ndarray:
    b, o = base.astype(np.int32), over.astype(np.int32)
    return _scaled_product(b, o).astype(np.uint8)


def _screen(base: np.ndarray, over: np.ndarray) -> np.ndarray:
    b, o = base.astype(np.int32), over.astype(np.int32)
    return (255 - _scaled_product(255 - b, 255 - o)).astype(np.uint8)


def _overlay(base: np.ndarray, over: np.ndarray) -> np.ndarray:
    b, o = base.astype(np.int32), over.astype(np.int32)
    dark = _scaled_product(2 * b, o)
    light = 255 - _scaled_product(2 * (255 - b), 255 - o)
    # branch point is exactly 128
    return np.where(b < 128, dark, light).astype(np.uint8)


_BLENDERS: Dict[BlendMode, Callable[[np.ndarray, np.ndarray], np.ndarray]] = {
    BlendMode.ADD: _add,
    BlendMode.SUBTRACT: _subtract,
    BlendMode.MULTIPLY: _multiply,
    BlendMode.SCREEN: _screen,
    BlendMode.OVERLAY: _overlay,
}


class CompositingService:
    """
    Blend two equally sized buffers channel by channel in raw 0-255 space.

    *   ``bottom`` is the base layer, ``top`` the overlay.
    *   Inputs are never modified; the result is a freshly allocated buffer.
    """

    @staticmethod
    def blend_arrays(base: np.ndarray, over: np.ndarray, mode: BlendMode) -> np.ndarray:
        mode = BlendMode.from_name(mode)
        return _BLENDERS[mode](np.ascontiguousarray(base), np.ascontiguousarray(over))

    @classmethod
    def blend_pixel(
        cls,
        mode: BlendMode,
        base: Sequence[int],
        over: Sequence[int],
    ) -> Tuple[int, int, int]:
        """Blend a single BGR triplet. Same arithmetic as apply()."""
        triplets = []
        for samples in (base, over):
            values = [int(v) for v in samples]
            if len(values) != 3 or min(values) < 0 or max(values) > 255:
                raise ValueError(f"Expected a BGR triplet of bytes in 0..255, got {tuple(samples)}")
            triplets.append(np.array(values, dtype=np.uint8).reshape(1, 1, 3))
        b, o = triplets
        out = cls.blend_arrays(b, o, mode)
        return tuple(int(v) for v in out.reshape(3))

    @classmethod
    def apply(cls, bottom: PixelBuffer, top: PixelBuffer, mode: BlendMode) -> PixelBuffer:
        """
        Blend *top* onto *bottom*.

        Raises:
            DimensionMismatchError: the two buffers differ in width or height.
            ValueError: unknown blend mode.
        """
        mode = BlendMode.from_name(mode)
        require_same_size(f"Blend '{mode.value}'", base=bottom, overlay=top)

        pixels = cls.blend_arrays(bottom.pixels, top.pixels, mode)
        logger.debug("Blended %dx%d with mode %s", bottom.width, bottom.height, mode.value)
        return PixelBuffer(pixels=pixels)
