from .image import PixelBuffer, require_same_size
from .blend_mode import BlendMode, Channel
from .tga_header import TgaHeader
from .channel_adjustment import ChannelAdjustment, ChannelOffset, ChannelScale

__all__ = [
    "PixelBuffer",
    "require_same_size",
    "BlendMode",
    "Channel",
    "TgaHeader",
    "ChannelAdjustment",
    "ChannelOffset",
    "ChannelScale",
]
