"""
tgablend: decode/encode uncompressed 24-bit TGA files and composite them.

The functions below are the collaborator-facing surface; glue code (the CLI,
the batch drivers) only needs these plus the model types.
"""
from .errors import (
    TgaBlendError,
    ImageIOError,
    ImageReadError,
    ImageWriteError,
    TruncatedFileError,
    FormatError,
    DimensionMismatchError,
)
from .models import BlendMode, Channel, PixelBuffer, ChannelOffset, ChannelScale
from .repositories.image_repository import ImageRepository
from .services.compositing_service import CompositingService
from .services.channel_service import ChannelService
from .services.channel_adjustment_service import ChannelAdjustmentService

__version__ = "1.0.0"

decode = ImageRepository.load
encode = ImageRepository.save

apply = CompositingService.apply
blend = CompositingService.apply

# mutating: these rewrite their first argument and return None
add_to_channel = ChannelAdjustmentService.add_to_channel
scale_channel = ChannelAdjustmentService.scale_channel

split_rgb = ChannelService.split_rgb
combine_rgb = ChannelService.combine_rgb
rotate180 = ChannelService.rotate180

__all__ = [
    "TgaBlendError",
    "ImageIOError",
    "ImageReadError",
    "ImageWriteError",
    "TruncatedFileError",
    "FormatError",
    "DimensionMismatchError",
    "BlendMode",
    "Channel",
    "PixelBuffer",
    "ChannelOffset",
    "ChannelScale",
    "decode",
    "encode",
    "apply",
    "blend",
    "add_to_channel",
    "scale_channel",
    "split_rgb",
    "combine_rgb",
    "rotate180",
]
