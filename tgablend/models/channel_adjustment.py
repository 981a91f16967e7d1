from __future__ import annotations
from dataclasses import dataclass
import math
import numpy as np

from .blend_mode import Channel
from .image import PixelBuffer


@dataclass(frozen=True)
class ChannelAdjustment:
    """
    A *mutating* transform: it rewrites one channel of the buffer it is given
    and returns nothing. Every other operation in tgablend allocates a new
    buffer; these do not.
    """
    channel: Channel

    def __post_init__(self):
        object.__setattr__(self, "channel", Channel.parse(self.channel))

    def _compute(self, values: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def apply_in_place(self, image: PixelBuffer) -> None:
        view = image.pixels[..., self.channel]
        view[...] = self._compute(view)


@dataclass(frozen=True)
class ChannelOffset(ChannelAdjustment):
    """new = clamp(old + delta, 0, 255)"""
    delta: int = 0

    def __post_init__(self):
        super().__post_init__()
        delta = self.delta
        if isinstance(delta, float) and not delta.is_integer():
            raise ValueError(f"Channel delta must be a whole number, got {delta}")
        object.__setattr__(self, "delta", int(delta))

    def _compute(self, values: np.ndarray) -> np.ndarray:
        # any |delta| >= 255 already saturates
        step = max(-255, min(255, self.delta))
        shifted = values.astype(np.int32) + step
        return np.clip(shifted, 0, 255).astype(np.uint8)


@dataclass(frozen=True)
class ChannelScale(ChannelAdjustment):
    """new = clamp(round(old * factor), 0, 255), halves rounded up."""
    factor: float = 1.0

    def __post_init__(self):
        super().__post_init__()
        factor = float(self.factor)
        if not math.isfinite(factor) or factor < 0:
            raise ValueError(f"Scale factor must be a finite non-negative number, got {self.factor}")
        object.__setattr__(self, "factor", factor)

    def _compute(self, values: np.ndarray) -> np.ndarray:
        scaled = np.floor(values.astype(np.float64) * self.factor + 0.5)
        return np.clip(scaled, 0, 255).astype(np.uint8)
