import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from color_spaces import (  # noqa: E402
    get_contrast_color,
    hex_to_hsl,
    hex_to_rgb,
    hsl_to_hex,
    is_valid_hex_color,
    random_hex_color,
    standardize_hex_color,
)


def test_hex_to_hsl_primaries():
    assert hex_to_hsl("#ff0000") == (0.0, 1.0, 0.5)
    assert hex_to_hsl("#00ff00") == (120.0, 1.0, 0.5)
    assert hex_to_hsl("#0000ff") == (240.0, 1.0, 0.5)


def test_hex_to_hsl_red_branch_wins_ties():
    # Red and blue are both max for magenta; the red branch yields 300 degrees.
    hue, saturation, lightness = hex_to_hsl("#ff00ff")
    assert hue == pytest.approx(300.0)
    assert saturation == pytest.approx(1.0)
    assert lightness == pytest.approx(0.5)


def test_hex_to_hsl_gray_has_no_hue_or_saturation():
    hue, saturation, lightness = hex_to_hsl("#808080")
    assert hue == 0.0
    assert saturation == 0.0
    assert lightness == pytest.approx(128 / 255)


def test_hex_to_hsl_accepts_missing_hash():
    assert hex_to_hsl("3b82f6") == hex_to_hsl("#3b82f6")


def test_hex_to_hsl_known_blue():
    hue, saturation, lightness = hex_to_hsl("#3b82f6")
    assert hue == pytest.approx(217.22, abs=0.01)
    assert saturation == pytest.approx(0.9122, abs=1e-3)
    assert lightness == pytest.approx(0.598, abs=1e-3)


def test_hex_to_hsl_rejects_unparseable_input():
    with pytest.raises(ValueError):
        hex_to_hsl("#zzzzzz")


def test_hsl_to_hex_primaries_and_gray():
    assert hsl_to_hex(0, 1, 0.5) == "#ff0000"
    assert hsl_to_hex(120, 1, 0.5) == "#00ff00"
    assert hsl_to_hex(240, 1, 0.5) == "#0000ff"
    # 0.5 * 255 = 127.5 rounds half up.
    assert hsl_to_hex(200, 0, 0.5) == "#808080"
    assert hsl_to_hex(0, 0, 1.0) == "#ffffff"
    assert hsl_to_hex(0, 0, 0.0) == "#000000"


def test_hsl_round_trip_within_one_per_channel():
    rng = random.Random(1234)
    samples = ["#3b82f6", "#000000", "#ffffff", "#ff00ff", "#123456", "#fedcba"]
    samples += [random_hex_color(rng) for _ in range(200)]
    for original in samples:
        reconstructed = hsl_to_hex(*hex_to_hsl(original))
        for before, after in zip(hex_to_rgb(original), hex_to_rgb(reconstructed)):
            assert abs(before - after) <= 1, (original, reconstructed)


def test_hex_to_hsl_hue_in_range():
    rng = random.Random(99)
    for _ in range(200):
        hue, _, _ = hex_to_hsl(random_hex_color(rng))
        assert 0.0 <= hue < 360.0


@pytest.mark.parametrize("value", ["abc", "#ABC", "#3b82f6", "3B82F6", "#aBcDeF"])
def test_is_valid_hex_color_accepts(value):
    assert is_valid_hex_color(value)


@pytest.mark.parametrize(
    "value", ["", "#", "#abcd", "ggg", "#12345", "#1234567", "##abc", "abc\n", None]
)
def test_is_valid_hex_color_rejects(value):
    assert not is_valid_hex_color(value)


def test_standardize_hex_color():
    assert standardize_hex_color("abc") == "#aabbcc"
    assert standardize_hex_color("#ABC") == "#aabbcc"
    assert standardize_hex_color("3B82F6") == "#3b82f6"
    assert standardize_hex_color("#3b82f6") == "#3b82f6"


def test_contrast_color_extremes():
    assert get_contrast_color("#ffffff") == "#000000"
    assert get_contrast_color("#000000") == "#ffffff"


def test_contrast_color_threshold():
    # YIQ of #808080 is exactly 128.
    assert get_contrast_color("#808080") == "#000000"
    assert get_contrast_color("#7f7f7f") == "#ffffff"
    # YIQ of #3b82f6 is 122.
    assert get_contrast_color("#3b82f6") == "#ffffff"


def test_random_hex_color_is_valid_and_seedable():
    color = random_hex_color(random.Random(7))
    assert is_valid_hex_color(color)
    assert len(color) == 7
    assert color == random_hex_color(random.Random(7))
