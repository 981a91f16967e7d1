from __future__ import annotations
from enum import Enum, IntEnum


class BlendMode(Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"

    @classmethod
    def from_name(cls, name: str | "BlendMode") -> "BlendMode":
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown blend mode: {name}") from None

    @classmethod
    def names(cls):
        return [mode.value for mode in cls]


class Channel(IntEnum):
    """Sample slot inside a BGR triplet."""
    BLUE = 0
    GREEN = 1
    RED = 2

    @classmethod
    def parse(cls, value: int | str | "Channel") -> "Channel":
        """Accept an index (0-2), a full name ("red") or its initial ("r")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"Channel index must be 0, 1 or 2, got {value}") from None

        text = str(value).strip().lower()
        if text.isdigit():
            return cls.parse(int(text))
        for channel in cls:
            if text in (channel.name.lower(), channel.name[0].lower()):
                return channel
        raise ValueError(f"Unknown channel: {value}")
