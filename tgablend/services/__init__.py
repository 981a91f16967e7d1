from .image_service import ImageService
from .compositing_service import CompositingService
from .channel_service import ChannelService
from .channel_adjustment_service import ChannelAdjustmentService

__all__ = [
    "ImageService",
    "CompositingService",
    "ChannelService",
    "ChannelAdjustmentService",
]
