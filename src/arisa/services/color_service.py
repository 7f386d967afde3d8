"""Colour parsing and conversion between RGB, HSL, HSV and CMYK."""

from __future__ import annotations

import string
from typing import NamedTuple, Tuple

from arisa.errors import InvalidFormat

SUPPORTED_FORMATS = (
    "Supported formats:\n"
    "• HEX: #FF0000 or FF0000\n"
    "• RGB: rgb(255, 0, 0) or 255,0,0\n"
    "• HSL: hsl(0, 100%, 50%)\n"
    "• Color names: red, blue, green, etc."
)


class Rgb(NamedTuple):
    r: int
    g: int
    b: int

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    @property
    def css(self) -> str:
        return f"rgb({self.r}, {self.g}, {self.b})"

    @property
    def as_int(self) -> int:
        return (self.r << 16) | (self.g << 8) | self.b


NAMED_COLORS = {
    "red": Rgb(255, 0, 0),
    "green": Rgb(0, 128, 0),
    "blue": Rgb(0, 0, 255),
    "white": Rgb(255, 255, 255),
    "black": Rgb(0, 0, 0),
    "yellow": Rgb(255, 255, 0),
    "cyan": Rgb(0, 255, 255),
    "magenta": Rgb(255, 0, 255),
    "orange": Rgb(255, 165, 0),
    "purple": Rgb(128, 0, 128),
    "pink": Rgb(255, 192, 203),
    "brown": Rgb(165, 42, 42),
    "gray": Rgb(128, 128, 128),
    "grey": Rgb(128, 128, 128),
    "lime": Rgb(0, 255, 0),
    "navy": Rgb(0, 0, 128),
    "maroon": Rgb(128, 0, 0),
    "olive": Rgb(128, 128, 0),
    "teal": Rgb(0, 128, 128),
    "silver": Rgb(192, 192, 192),
}


# -------------------- Parsing --------------------

def _channel(value: str, name: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise InvalidFormat(f"Invalid {name} value") from None
    if not 0 <= number <= 255:
        raise InvalidFormat(f"Invalid {name} value")
    return number


def _parse_hex(text: str) -> Rgb:
    digits = text.removeprefix("#")
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    elif len(digits) != 6:
        raise InvalidFormat("Hex color must be 3 or 6 characters")
    if any(ch not in string.hexdigits for ch in digits):
        raise InvalidFormat("Invalid hex digit")
    return Rgb(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def _parse_rgb_list(text: str) -> Rgb:
    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 3:
        raise InvalidFormat("RGB format requires 3 values")
    return Rgb(_channel(parts[0], "red"), _channel(parts[1], "green"), _channel(parts[2], "blue"))


def _parse_hsl(text: str) -> Rgb:
    parts = [part.strip().rstrip("%") for part in text.split(",")]
    if len(parts) != 3:
        raise InvalidFormat("HSL format requires 3 values")
    values = []
    for part, name in zip(parts, ("hue", "saturation", "lightness")):
        try:
            values.append(float(part))
        except ValueError:
            raise InvalidFormat(f"Invalid {name} value") from None
    h, s, l = values
    return hsl_to_rgb(h, s / 100, l / 100)


def parse_color(raw: str) -> Rgb:
    """Parse a colour name, hex code, ``rgb()``, ``r,g,b`` or ``hsl()`` string.

    Raises
    ------
    InvalidFormat
        When the input matches none of the supported notations.
    """
    text = raw.strip().lower()
    if not text:
        raise InvalidFormat("Unrecognized color format")
    if text in NAMED_COLORS:
        return NAMED_COLORS[text]
    if text.startswith("#") or all(ch in string.hexdigits for ch in text):
        return _parse_hex(text)
    if text.startswith("rgb(") and text.endswith(")"):
        return _parse_rgb_list(text[4:-1])
    if "," in text and not text.startswith("hsl("):
        return _parse_rgb_list(text)
    if text.startswith("hsl(") and text.endswith(")"):
        return _parse_hsl(text[4:-1])
    raise InvalidFormat("Unrecognized color format")


# -------------------- Conversions --------------------

def _hue(r: float, g: float, b: float, high: float, delta: float) -> float:
    if delta == 0:
        return 0.0
    if high == r:
        hue = 60 * (((g - b) / delta) % 6)
    elif high == g:
        hue = 60 * ((b - r) / delta + 2)
    else:
        hue = 60 * ((r - g) / delta + 4)
    return hue + 360 if hue < 0 else hue


def rgb_to_hsl(color: Rgb) -> Tuple[int, int, int]:
    r, g, b = (channel / 255 for channel in color)
    high, low = max(r, g, b), min(r, g, b)
    delta = high - low
    lightness = (high + low) / 2
    if delta == 0:
        return 0, 0, int(lightness * 100)
    saturation = delta / (high + low) if lightness < 0.5 else delta / (2 - high - low)
    return int(_hue(r, g, b, high, delta)), int(saturation * 100), int(lightness * 100)


def rgb_to_hsv(color: Rgb) -> Tuple[int, int, int]:
    r, g, b = (channel / 255 for channel in color)
    high, low = max(r, g, b), min(r, g, b)
    delta = high - low
    saturation = 0.0 if high == 0 else delta / high
    return int(_hue(r, g, b, high, delta)), int(saturation * 100), int(high * 100)


def rgb_to_cmyk(color: Rgb) -> Tuple[int, int, int, int]:
    r, g, b = (channel / 255 for channel in color)
    k = 1 - max(r, g, b)
    if k == 1:
        return 0, 0, 0, 100
    c = (1 - r - k) / (1 - k)
    m = (1 - g - k) / (1 - k)
    y = (1 - b - k) / (1 - k)
    return int(c * 100), int(m * 100), int(y * 100), int(k * 100)


def hsl_to_rgb(h: float, s: float, l: float) -> Rgb:
    chroma = (1 - abs(2 * l - 1)) * s
    x = chroma * (1 - abs((h / 60) % 2 - 1))
    m = l - chroma / 2
    sector = int(h) // 60
    if not 0 <= h < 360:
        r, g, b = 0.0, 0.0, 0.0
    else:
        r, g, b = (
            (chroma, x, 0.0),
            (x, chroma, 0.0),
            (0.0, chroma, x),
            (0.0, x, chroma),
            (x, 0.0, chroma),
            (chroma, 0.0, x),
        )[sector]
    return Rgb(*(max(0, min(255, int((value + m) * 255))) for value in (r, g, b)))


def describe_color(color: Rgb) -> Tuple[str, str]:
    """Return ``(title, body)`` listing every representation of ``color``."""
    h, s, l = rgb_to_hsl(color)
    hv, sv, v = rgb_to_hsv(color)
    c, m, y, k = rgb_to_cmyk(color)
    body = (
        "**Color Formats:**\n"
        f"**HEX:** `{color.hex}`\n"
        f"**RGB:** `{color.css}`\n"
        f"**HSL:** `hsl({h}, {s}%, {l}%)`\n"
        f"**HSV:** `hsv({hv}, {sv}%, {v}%)`\n"
        f"**CMYK:** `cmyk({c}%, {m}%, {y}%, {k}%)`\n\n"
        "**Values:**\n"
        f"**Decimal:** `{color.as_int}`\n"
        f"**CSS:** `{color.css}`\n"
        f"**Int:** `{color.as_int}`"
    )
    return f"Color: {color.hex}", body
