from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import struct

from ..errors import FormatError

# idLength, colorMapType, dataTypeCode, colorMapOrigin, colorMapLength,
# colorMapDepth, xOrigin, yOrigin, width, height, bitsPerPixel, imageDescriptor
HEADER_STRUCT = struct.Struct("<BBBHHBHHHHBB")
HEADER_SIZE = HEADER_STRUCT.size  # 18

NO_COLOR_MAP = 0
UNCOMPRESSED_TRUE_COLOR = 2
BITS_PER_PIXEL = 24
TOP_ORIGIN_FLAG = 0x20


@dataclass(frozen=True)
class TgaHeader:
    """
    The fixed 18-byte record at the start of every TGA file.

    Multi-byte fields are little-endian u16. Packing goes through an explicit
    ``struct`` format so nothing depends on native layout or padding.
    """
    id_length: int = 0
    color_map_type: int = NO_COLOR_MAP
    data_type_code: int = UNCOMPRESSED_TRUE_COLOR
    color_map_origin: int = 0
    color_map_length: int = 0
    color_map_depth: int = 0
    x_origin: int = 0
    y_origin: int = 0
    width: int = 0
    height: int = 0
    bits_per_pixel: int = BITS_PER_PIXEL
    image_descriptor: int = 0

    @classmethod
    def for_image(cls, width: int, height: int) -> "TgaHeader":
        """Header written for every encoded image: type 2, 24 bpp, bottom-left origin."""
        return cls(width=width, height=height)

    @classmethod
    def unpack(cls, raw: bytes) -> "TgaHeader":
        if len(raw) != HEADER_SIZE:
            raise ValueError(f"TGA header is {HEADER_SIZE} bytes, got {len(raw)}")
        return cls(*HEADER_STRUCT.unpack(raw))

    def pack(self) -> bytes:
        return HEADER_STRUCT.pack(
            self.id_length,
            self.color_map_type,
            self.data_type_code,
            self.color_map_origin,
            self.color_map_length,
            self.color_map_depth,
            self.x_origin,
            self.y_origin,
            self.width,
            self.height,
            self.bits_per_pixel,
            self.image_descriptor,
        )

    @property
    def top_origin(self) -> bool:
        """True when the first scanline on disk is the top of the picture."""
        return bool(self.image_descriptor & TOP_ORIGIN_FLAG)

    @property
    def payload_size(self) -> int:
        return self.width * self.height * (BITS_PER_PIXEL // 8)

    def validate(self, source: str | Path = "<memory>") -> None:
        """Reject every variant other than uncompressed, unmapped 24-bit truecolor."""
        if self.color_map_type != NO_COLOR_MAP:
            raise FormatError(
                f"{source}: Color-mapped images are not supported "
                f"(color map type {self.color_map_type})"
            )
        if self.data_type_code != UNCOMPRESSED_TRUE_COLOR:
            raise FormatError(
                f"{source}: Need uncompressed RGB (type {UNCOMPRESSED_TRUE_COLOR}), "
                f"got type {self.data_type_code}"
            )
        if self.bits_per_pixel != BITS_PER_PIXEL:
            raise FormatError(
                f"{source}: Need {BITS_PER_PIXEL}-bit RGB, got {self.bits_per_pixel}-bit"
            )
        if self.width == 0 or self.height == 0:
            raise FormatError(f"{source}: Empty image ({self.width}x{self.height})")
