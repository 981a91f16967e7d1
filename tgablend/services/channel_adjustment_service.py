from __future__ import annotations

from typing import Iterable
import logging

from ..models.blend_mode import Channel
from ..models.channel_adjustment import ChannelAdjustment, ChannelOffset, ChannelScale
from ..models.image import PixelBuffer

logger = logging.getLogger(__name__)


class ChannelAdjustmentService:
    """
    The two in-place operations. They mutate the buffer they are given and
    return None, so a caller can never mistake the result for a copy.
    Use ``image.copy()`` first if the original must survive.
    """

    @staticmethod
    def apply_in_place(image: PixelBuffer, adjustments: Iterable[ChannelAdjustment]) -> None:
        for adjustment in adjustments:
            adjustment.apply_in_place(image)
            logger.debug("Applied %s to %dx%d buffer", adjustment, image.width, image.height)

    @classmethod
    def add_to_channel(cls, image: PixelBuffer, channel: Channel | int | str, delta: int) -> None:
        """new = clamp(old + delta, 0, 255) on one channel."""
        cls.apply_in_place(image, [ChannelOffset(channel, delta)])

    @classmethod
    def scale_channel(cls, image: PixelBuffer, channel: Channel | int | str, factor: float) -> None:
        """new = clamp(round(old * factor), 0, 255) on one channel; factor >= 0."""
        cls.apply_in_place(image, [ChannelScale(channel, factor)])
