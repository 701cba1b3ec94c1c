"""Harmony scheme generators deriving N-swatch palettes from one base color."""
from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict, List, Union

from color_spaces import hex_to_hsl, hsl_to_hex, normalize_hue, standardize_hex_color
from defaults import DEFAULT_SCHEME, DEFAULT_SWATCH_COUNT, MAX_SWATCH_COUNT


class SchemeType(str, Enum):
    MONOCHROMATIC = "monochromatic"
    ANALOGOUS = "analogous"
    COMPLEMENTARY = "complementary"
    TRIADIC = "triadic"
    TETRADIC = "tetradic"
    SPLIT_COMPLEMENTARY = "split-complementary"


SCHEME_LABELS = {
    SchemeType.MONOCHROMATIC: "Mono",
    SchemeType.ANALOGOUS: "Analogous",
    SchemeType.COMPLEMENTARY: "Complementary",
    SchemeType.TRIADIC: "Triadic",
    SchemeType.TETRADIC: "Tetradic",
    SchemeType.SPLIT_COMPLEMENTARY: "Split",
}

SCHEME_MINIMUM_COUNTS = {
    SchemeType.MONOCHROMATIC: 3,
    SchemeType.ANALOGOUS: 3,
    SchemeType.COMPLEMENTARY: 4,
    SchemeType.TRIADIC: 3,
    SchemeType.TETRADIC: 4,
    SchemeType.SPLIT_COMPLEMENTARY: 3,
}

SchemeLike = Union[SchemeType, str]


def is_valid_scheme(value: str) -> bool:
    return value in {scheme.value for scheme in SchemeType}


def clamp_swatch_count(scheme: SchemeLike, count: int) -> int:
    """Raise ``count`` to the scheme floor and cap it at MAX_SWATCH_COUNT."""
    floor = SCHEME_MINIMUM_COUNTS[SchemeType(scheme)]
    return max(floor, min(int(count), MAX_SWATCH_COUNT))


def _split_into_thirds(count: int) -> List[int]:
    base_arm = math.ceil(count / 3)
    remaining = count - base_arm
    second_arm = math.ceil(remaining / 2)
    return [base_arm, second_arm, remaining - second_arm]


def _split_into_quarters(count: int) -> List[int]:
    sizes: List[int] = []
    remaining = count
    for arms_left in (4, 3, 2, 1):
        size = math.ceil(remaining / arms_left)
        sizes.append(size)
        remaining -= size
    return sizes


# --- Scheme generators -----------------------------------------------------

def generate_monochromatic_palette(
    base_color: str, count: int = DEFAULT_SWATCH_COUNT
) -> List[str]:
    """Tints before the base, shades after it; hue and saturation unchanged."""
    base_hex = standardize_hex_color(base_color)
    h, s, l = hex_to_hsl(base_hex)
    count = clamp_swatch_count(SchemeType.MONOCHROMATIC, count)

    base_index = (count - 1) // 2
    step_size = 0.2 if count <= 5 else 0.8 / (count // 2)

    palette: List[str] = []
    for index in range(count):
        if index < base_index:
            steps = base_index - index
            palette.append(hsl_to_hex(h, s, min(l + steps * step_size, 0.97)))
        elif index > base_index:
            steps = index - base_index
            palette.append(hsl_to_hex(h, s, max(l - steps * step_size, 0.05)))
        else:
            palette.append(base_hex)
    return palette


def generate_analogous_palette(
    base_color: str, count: int = DEFAULT_SWATCH_COUNT
) -> List[str]:
    base_hex = standardize_hex_color(base_color)
    h, s, l = hex_to_hsl(base_hex)
    count = clamp_swatch_count(SchemeType.ANALOGOUS, count)

    half = count // 2
    angle_step = 20.0 if count <= 5 else 80.0 / half

    palette = [
        hsl_to_hex(normalize_hue(h - angle_step * k), s, l)
        for k in range(half, 0, -1)
    ]
    if count % 2 == 1:
        palette.append(base_hex)
    palette.extend(
        hsl_to_hex(normalize_hue(h + angle_step * k), s, l) for k in range(1, half + 1)
    )
    return palette


def _complementary_arm(
    hue: float, s: float, l: float, size: int, anchor_hex: str
) -> List[str]:
    arm: List[str] = []
    for index in range(size):
        if index == 0:
            arm.append(hsl_to_hex(hue, max(0.1, s - 0.2), min(0.9, l + 0.1)))
        elif index == 1:
            arm.append(anchor_hex)
        else:
            delta = (index - 1) * 0.3 / (size - 1)
            arm.append(hsl_to_hex(hue, min(1.0, s + delta), max(0.1, l - delta)))
    return arm


def generate_complementary_palette(
    base_color: str, count: int = DEFAULT_SWATCH_COUNT
) -> List[str]:
    """Base arm first, then the 180 degree complement arm.

    Each arm runs lightened/desaturated, pure anchor, then drifts toward
    more saturation and less lightness.
    """
    base_hex = standardize_hex_color(base_color)
    h, s, l = hex_to_hsl(base_hex)
    count = clamp_swatch_count(SchemeType.COMPLEMENTARY, count)

    complement_hue = normalize_hue(h + 180)
    base_arm = math.ceil(count / 2)
    complement_arm = count // 2

    return _complementary_arm(h, s, l, base_arm, base_hex) + _complementary_arm(
        complement_hue, s, l, complement_arm, hsl_to_hex(complement_hue, s, l)
    )


def generate_triadic_palette(
    base_color: str, count: int = DEFAULT_SWATCH_COUNT
) -> List[str]:
    base_hex = standardize_hex_color(base_color)
    h, s, l = hex_to_hsl(base_hex)
    count = clamp_swatch_count(SchemeType.TRIADIC, count)

    palette: List[str] = []
    for offset, size in zip((0, 120, 240), _split_into_thirds(count)):
        hue = normalize_hue(h + offset)
        for index in range(size):
            if index == 0:
                palette.append(base_hex if offset == 0 else hsl_to_hex(hue, s, l))
                continue
            step = index / size
            palette.append(
                hsl_to_hex(hue, min(1.0, s + 0.05 * step), max(0.1, l - 0.1 * step))
            )
    return palette


def generate_tetradic_palette(
    base_color: str, count: int = DEFAULT_SWATCH_COUNT
) -> List[str]:
    base_hex = standardize_hex_color(base_color)
    h, s, l = hex_to_hsl(base_hex)
    count = clamp_swatch_count(SchemeType.TETRADIC, count)

    base_size, *other_sizes = _split_into_quarters(count)

    palette = [base_hex]
    for index in range(1, base_size):
        step = index / base_size
        palette.append(
            hsl_to_hex(h, max(0.1, s - 0.3 * step), min(0.95, l + 0.2 * step))
        )
    # Non-base arms repeat their anchor for every member.
    for offset, size in zip((90, 180, 270), other_sizes):
        palette.extend([hsl_to_hex(normalize_hue(h + offset), s, l)] * size)
    return palette


def generate_split_complementary_palette(
    base_color: str, count: int = DEFAULT_SWATCH_COUNT
) -> List[str]:
    base_hex = standardize_hex_color(base_color)
    h, s, l = hex_to_hsl(base_hex)
    count = clamp_swatch_count(SchemeType.SPLIT_COMPLEMENTARY, count)

    base_size, first_size, second_size = _split_into_thirds(count)

    if base_size == 1:
        palette = [base_hex]
    else:
        palette = [hsl_to_hex(h, max(0.1, s - 0.1), min(0.95, l + 0.1)), base_hex]
        deepened = hsl_to_hex(h, min(1.0, s + 0.1), max(0.1, l - 0.1))
        palette.extend([deepened] * (base_size - 2))

    palette.extend([hsl_to_hex(normalize_hue(h + 150), s, l)] * first_size)
    palette.extend([hsl_to_hex(normalize_hue(h + 210), s, l)] * second_size)
    return palette


SCHEME_GENERATORS: Dict[SchemeType, Callable[[str, int], List[str]]] = {
    SchemeType.MONOCHROMATIC: generate_monochromatic_palette,
    SchemeType.ANALOGOUS: generate_analogous_palette,
    SchemeType.COMPLEMENTARY: generate_complementary_palette,
    SchemeType.TRIADIC: generate_triadic_palette,
    SchemeType.TETRADIC: generate_tetradic_palette,
    SchemeType.SPLIT_COMPLEMENTARY: generate_split_complementary_palette,
}


def generate_palette(
    base_color: str,
    scheme_type: SchemeLike = DEFAULT_SCHEME,
    count: int = DEFAULT_SWATCH_COUNT,
) -> List[str]:
    """Route ``base_color`` to the generator for ``scheme_type``.

    ``base_color`` must already pass ``is_valid_hex_color``. The result holds
    exactly ``clamp_swatch_count(scheme_type, count)`` lowercase hex strings.
    """
    scheme = SchemeType(scheme_type)
    return SCHEME_GENERATORS[scheme](standardize_hex_color(base_color), count)
