"""Deterministic per-user colours.

Two formulas are in use. ``color_for`` gives the light pastel backgrounds of
the name cells in the exported schedule image. ``calendar_color_for`` gives
the stronger tile colours of the calendar and timeline views. Both are pure
functions of the identifier string.
"""

from dataclasses import dataclass

from PIL import ImageColor

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619


@dataclass(frozen=True)
class HSLColor:
    """A colour in HSL space.

    Attributes:
        hue: Hue in degrees, 0-359.
        saturation: Saturation in percent.
        lightness: Lightness in percent.
    """

    hue: int
    saturation: int
    lightness: int

    def css(self) -> str:
        return f"hsl({self.hue}, {self.saturation}%, {self.lightness}%)"

    def rgb(self) -> tuple[int, int, int]:
        """8-bit RGB triple."""
        return ImageColor.getrgb(self.css())[:3]


def _code_units(text: str) -> list[int]:
    # UTF-16 code units, so astral characters hash as surrogate pairs
    data = text.encode("utf-16-le")
    return [int.from_bytes(data[i : i + 2], "little") for i in range(0, len(data), 2)]


def fnv1a_hash(text: str) -> int:
    """Non-negative FNV-1a style hash of a string.

    The accumulator wraps at 32 bits and the final value is read as a
    signed 32-bit integer before taking its absolute value.
    """
    units = _code_units(text)
    if not units:
        return FNV_OFFSET_BASIS

    value = FNV_OFFSET_BASIS
    for unit in units:
        value ^= unit
        value = (value * FNV_PRIME) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def color_for(identifier: str) -> HSLColor:
    """Name-cell background colour for a user identifier.

    Lightness stays in 75-89% so the cell text remains legible. Every hue is
    used, but at that lightness no channel drops below about 54%, so even a
    hue-0 cell is a pale pink well apart from the alert fill.
    """
    value = fnv1a_hash(identifier or "")
    return HSLColor(
        hue=value % 360,
        saturation=55 + value % 30,
        lightness=75 + (value // 360) % 15,
    )


def calendar_color_for(identifier: str) -> HSLColor:
    """Calendar tile colour for a user identifier.

    Hues below 30 degrees are never produced, keeping tiles clear of red.
    """
    total = sum(_code_units(identifier or ""))
    return HSLColor(hue=total % 330 + 30, saturation=70, lightness=60)
