"""
Exception hierarchy shared by the codec and the compositor.

Every failure is terminal for the call that raised it: nothing here is retried
and no partially valid buffer is ever returned.
"""


class TgaBlendError(Exception):
    """Base class for every error raised by tgablend."""


class ImageIOError(TgaBlendError, OSError):
    """File could not be opened, read or written."""


class ImageReadError(ImageIOError):
    """Source file could not be opened or read."""


class ImageWriteError(ImageIOError):
    """Destination file could not be opened or fully written."""


class TruncatedFileError(ImageReadError):
    """File ended before the header, image ID or pixel payload was complete."""


class FormatError(TgaBlendError, ValueError):
    """Header describes a TGA variant this codec does not handle."""


class DimensionMismatchError(TgaBlendError, ValueError):
    """Operands of a binary operation differ in width or height."""
