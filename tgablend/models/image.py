from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence, Tuple
import numpy as np

from ..errors import DimensionMismatchError

MAX_EXTENT = 0xFFFF  # width/height are u16 on disk
CHANNELS = 3


@dataclass(eq=False)
class PixelBuffer:
    """
    Simple data object: BGR pixels (+ optional source path for bookkeeping).

    Row 0 of ``pixels`` is the *bottom* scanline of the picture, whatever
    orientation the source file used. Only the codec knows about on-disk order.
    """
    pixels: np.ndarray  # Shape (H, W, 3), dtype uint8, BGR order, bottom row first.
    path: Path | None = field(default=None)

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray):
            raise ValueError(f"pixels must be a numpy array, got {type(self.pixels).__name__}")
        if self.pixels.ndim != 3 or self.pixels.shape[2] != CHANNELS:
            raise ValueError(f"pixels must have shape (H, W, 3), got {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"pixels must be uint8, got {self.pixels.dtype}")

        height, width = self.pixels.shape[:2]
        if not (0 < width <= MAX_EXTENT and 0 < height <= MAX_EXTENT):
            raise ValueError(f"Image extents must be within 1..{MAX_EXTENT}, got {width}x{height}")
        if self.path is not None:
            self.path = Path(self.path)

    # ── Construction helpers ─────────────────────────────────────────
    @classmethod
    def from_samples(
        cls,
        width: int,
        height: int,
        samples: bytes | Iterable[int],
        path: str | Path | None = None,
    ) -> "PixelBuffer":
        """Build a buffer from a flat BGR sample sequence, bottom scanline first."""
        if isinstance(samples, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(samples, dtype=np.uint8).copy()
        else:
            flat = np.asarray(list(samples), dtype=np.int64)
            if flat.size and (flat.min() < 0 or flat.max() > 255):
                raise ValueError("samples must be bytes in 0..255")
            flat = flat.astype(np.uint8)

        expected = width * height * CHANNELS
        if flat.size != expected:
            raise ValueError(f"Expected {expected} samples for {width}x{height}, got {flat.size}")
        return cls(pixels=flat.reshape(height, width, CHANNELS), path=path)

    @classmethod
    def filled(cls, width: int, height: int, bgr: Sequence[int] = (0, 0, 0)) -> "PixelBuffer":
        """Solid-color buffer."""
        pixels = np.empty((height, width, CHANNELS), dtype=np.uint8)
        pixels[...] = np.asarray(bgr, dtype=np.uint8)
        return cls(pixels=pixels)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(pixels=self.pixels.copy(), path=self.path)

    # ── Geometry ─────────────────────────────────────────────────────
    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def samples(self) -> np.ndarray:
        """Flat BGR sample view, ``width * height * 3`` long."""
        return self.pixels.reshape(-1)

    def same_size(self, other: "PixelBuffer") -> bool:
        return self.size == other.size

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.same_size(other) and np.array_equal(self.pixels, other.pixels)

    __hash__ = None

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height}, path={self.path})"


def require_same_size(operation: str, **operands: PixelBuffer) -> None:
    """
    Raise DimensionMismatchError unless every operand has the same extents.

    The keyword names end up in the message, e.g.
    ``Blend 'add' failed: base=4x4 vs overlay=2x2``.
    """
    sizes = {name: buf.size for name, buf in operands.items()}
    if len(set(sizes.values())) > 1:
        detail = " vs ".join(f"{name}={w}x{h}" for name, (w, h) in sizes.items())
        raise DimensionMismatchError(f"{operation} failed: {detail}")
