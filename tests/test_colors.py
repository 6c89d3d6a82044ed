"""Tests for color parsing and contrast."""

import pytest
from pydantic import ValidationError

from discord_color_roles.core.colors import (
    BACKGROUND,
    DEFAULT_MIN_CONTRAST,
    ColorValue,
    contrast_ratio,
    is_acceptable,
    is_color_role_name,
    relative_luminance,
)

BLACK = ColorValue(r=0, g=0, b=0)
WHITE = ColorValue(r=255, g=255, b=255)


# ===========================================================================
# ColorValue.parse
# ===========================================================================


class TestParse:
    def test_lowercase(self):
        assert ColorValue.parse("#1a2b3c") == ColorValue(r=0x1A, g=0x2B, b=0x3C)

    def test_uppercase(self):
        assert ColorValue.parse("#1A2B3C") == ColorValue(r=0x1A, g=0x2B, b=0x3C)

    def test_mixed_case(self):
        assert ColorValue.parse("#fFaA00") == ColorValue(r=255, g=170, b=0)

    def test_black_and_white(self):
        assert ColorValue.parse("#000000") == BLACK
        assert ColorValue.parse("#FFFFFF") == WHITE

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "#",
            "1a2b3c",
            "#1a2b3",
            "#1a2b3c4",
            "#1a2b3c4d",
            "#abc",
            "#gggggg",
            "# 1a2b3c",
            " #1a2b3c",
            "#1a2b3c ",
            "#1a2b3c\n",
            "my color is #1a2b3c",
            "#1a2b3c please",
            "##1a2b3c",
            "0x1a2b3c",
        ],
    )
    def test_rejects(self, text):
        assert ColorValue.parse(text) is None

    @pytest.mark.parametrize("text", ["#000000", "#0a0b0c", "#123abc", "#ffffff", "#4d4d4d"])
    def test_round_trip(self, text):
        color = ColorValue.parse(text)
        assert color is not None
        assert ColorValue.parse(str(color)) == color
        assert str(color) == text

    def test_canonical_is_lowercase(self):
        assert str(ColorValue.parse("#ABCDEF")) == "#abcdef"


# ===========================================================================
# ColorValue basics
# ===========================================================================


class TestColorValue:
    def test_zero_padded_hex(self):
        assert ColorValue(r=1, g=2, b=3).hex == "#010203"

    def test_value_packs_channels(self):
        assert ColorValue(r=0x36, g=0x39, b=0x3E).value == 0x36393E

    def test_from_int(self):
        assert ColorValue.from_int(0x1A2B3C) == ColorValue(r=0x1A, g=0x2B, b=0x3C)

    def test_from_int_out_of_range(self):
        with pytest.raises(ValueError):
            ColorValue.from_int(0x1000000)
        with pytest.raises(ValueError):
            ColorValue.from_int(-1)

    def test_channel_range_validated(self):
        with pytest.raises(ValidationError):
            ColorValue(r=256, g=0, b=0)

    def test_frozen(self):
        color = ColorValue(r=1, g=2, b=3)
        with pytest.raises(ValidationError):
            color.r = 5

    def test_equality_and_hash(self):
        a = ColorValue(r=1, g=2, b=3)
        b = ColorValue.parse("#010203")
        assert a == b
        assert hash(a) == hash(b)
        assert a != ColorValue(r=1, g=2, b=4)


class TestIsColorRoleName:
    def test_matches(self):
        assert is_color_role_name("#1a2b3c")
        assert is_color_role_name("#1A2B3C")

    def test_rejects(self):
        assert not is_color_role_name("colors")
        assert not is_color_role_name("#1a2b3c (old)")
        assert not is_color_role_name("@everyone")


# ===========================================================================
# Contrast
# ===========================================================================


class TestLuminance:
    def test_black(self):
        assert relative_luminance(BLACK) == 0.0

    def test_white(self):
        assert relative_luminance(WHITE) == pytest.approx(1.0)

    def test_green_brighter_than_blue(self):
        green = ColorValue(r=0, g=255, b=0)
        blue = ColorValue(r=0, g=0, b=255)
        assert relative_luminance(green) > relative_luminance(blue)


class TestContrastRatio:
    def test_black_on_white_is_21(self):
        assert contrast_ratio(BLACK, WHITE) == pytest.approx(21.0)

    def test_same_color_is_1(self):
        assert contrast_ratio(BACKGROUND, BACKGROUND) == pytest.approx(1.0)

    @pytest.mark.parametrize("text", ["#1a2b3c", "#ffffff", "#ff0000", "#4d4d4d"])
    def test_symmetric(self, text):
        color = ColorValue.parse(text)
        assert contrast_ratio(color, BACKGROUND) == contrast_ratio(BACKGROUND, color)

    def test_white_on_background(self):
        assert 11.5 < contrast_ratio(WHITE, BACKGROUND) < 11.7

    def test_background_constant(self):
        assert BACKGROUND.value == 0x36393E


class TestIsAcceptable:
    def test_default_threshold(self):
        assert DEFAULT_MIN_CONTRAST == 2.0

    def test_white_accepted(self):
        assert is_acceptable(WHITE)

    def test_background_itself_rejected(self):
        assert not is_acceptable(BACKGROUND)

    def test_near_background_rejected(self):
        assert not is_acceptable(ColorValue.parse("#3a3d42"))

    def test_ratio_equal_to_threshold_rejected(self):
        color = ColorValue.parse("#808080")
        ratio = contrast_ratio(color, BACKGROUND)
        assert not is_acceptable(color, BACKGROUND, threshold=ratio)
        assert is_acceptable(color, BACKGROUND, threshold=ratio - 0.01)

    def test_custom_background(self):
        assert not is_acceptable(WHITE, background=WHITE)
        assert is_acceptable(BLACK, background=WHITE)
