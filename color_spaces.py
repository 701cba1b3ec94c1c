"""Color space utilities for hex/RGB/HSL conversions and contrast selection."""
from __future__ import annotations

import math
import random
import re
from typing import Optional, Tuple

from defaults import CONTRAST_LUMINANCE_THRESHOLD

RgbTuple = Tuple[int, int, int]
HslColor = Tuple[float, float, float]

BLACK = "#000000"
WHITE = "#ffffff"

_HEX_COLOR_PATTERN = re.compile(r"#?([0-9a-f]{3}|[0-9a-f]{6})", re.IGNORECASE)


# --- Basic RGB helpers -----------------------------------------------------

def hex_to_rgb(hex_color: str) -> RgbTuple:
    hex_color = hex_color.lstrip("#")
    return (int(hex_color[0:2], 16), int(hex_color[2:4], 16), int(hex_color[4:6], 16))


def rgb_to_hex(rgb: RgbTuple) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def round_half_up(value: float) -> int:
    # Half-up, like JavaScript's Math.round; Python's round() is half-to-even.
    return int(math.floor(value + 0.5))


def _srgb_float_to_byte(value: float) -> int:
    return max(0, min(255, round_half_up(value * 255.0)))


def normalize_hue(hue: float) -> float:
    return hue % 360.0


# --- Hex validation --------------------------------------------------------

def is_valid_hex_color(color: str) -> bool:
    """True for 3 or 6 hex digits with an optional leading ``#``."""
    if not isinstance(color, str):
        return False
    return _HEX_COLOR_PATTERN.fullmatch(color) is not None


def standardize_hex_color(color: str) -> str:
    """Add the leading ``#`` and expand ``#abc`` shorthand to ``#aabbcc``.

    Does not validate; call :func:`is_valid_hex_color` first.
    """
    hex_color = color if color.startswith("#") else f"#{color}"
    if len(hex_color) == 4:
        return "#" + "".join(digit * 2 for digit in hex_color[1:]).lower()
    return hex_color.lower()


def random_hex_color(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return "#" + "".join(rng.choice("0123456789abcdef") for _ in range(6))


# --- HSL conversions -------------------------------------------------------

def hex_to_hsl(hex_color: str) -> HslColor:
    """Convert ``#rrggbb`` to ``(hue degrees, saturation, lightness)``.

    Grays come back with hue and saturation of zero. Input that is not
    parseable hex raises ``ValueError``.
    """
    r, g, b = (channel / 255.0 for channel in hex_to_rgb(hex_color))

    max_channel = max(r, g, b)
    min_channel = min(r, g, b)
    lightness = (max_channel + min_channel) / 2

    if max_channel == min_channel:
        return (0.0, 0.0, lightness)

    delta = max_channel - min_channel
    if lightness > 0.5:
        saturation = delta / (2 - max_channel - min_channel)
    else:
        saturation = delta / (max_channel + min_channel)

    if max_channel == r:
        hue = (g - b) / delta + (6 if g < b else 0)
    elif max_channel == g:
        hue = (b - r) / delta + 2
    else:
        hue = (r - g) / delta + 4

    return (normalize_hue(hue * 60), saturation, lightness)


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> RgbTuple:
    if saturation == 0:
        red = green = blue = lightness
    else:
        q = (
            lightness * (1 + saturation)
            if lightness < 0.5
            else lightness + saturation - lightness * saturation
        )
        p = 2 * lightness - q
        t = hue / 360
        red = _hue_to_channel(p, q, t + 1 / 3)
        green = _hue_to_channel(p, q, t)
        blue = _hue_to_channel(p, q, t - 1 / 3)
    return (
        _srgb_float_to_byte(red),
        _srgb_float_to_byte(green),
        _srgb_float_to_byte(blue),
    )


def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    return rgb_to_hex(hsl_to_rgb(hue, saturation, lightness))


# --- Contrast --------------------------------------------------------------

def yiq_luminance(hex_color: str) -> float:
    r, g, b = hex_to_rgb(hex_color)
    return (r * 299 + g * 587 + b * 114) / 1000


def get_contrast_color(hex_color: str) -> str:
    """Black text on light swatches, white text on dark ones."""
    if yiq_luminance(hex_color) >= CONTRAST_LUMINANCE_THRESHOLD:
        return BLACK
    return WHITE
