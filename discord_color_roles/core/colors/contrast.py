"""WCAG contrast ratio between a color and the chat background."""

from __future__ import annotations

from discord_color_roles.core.colors.codec import ColorValue

# Dark theme message background.
BACKGROUND = ColorValue.from_int(0x36393E)

DEFAULT_MIN_CONTRAST = 2.0

# sRGB linearization cutoff (WCAG 2.x).
_SRGB_THRESHOLD = 0.03928


def _linearize(channel: int) -> float:
    c = channel / 255
    if c <= _SRGB_THRESHOLD:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: ColorValue) -> float:
    """Relative luminance in ``[0, 1]``."""
    return (
        0.2126 * _linearize(color.r)
        + 0.7152 * _linearize(color.g)
        + 0.0722 * _linearize(color.b)
    )


def contrast_ratio(a: ColorValue, b: ColorValue) -> float:
    """Return ``(L_lighter + 0.05) / (L_darker + 0.05)``, between 1 and 21.

    The order of the arguments does not matter.
    """
    la = relative_luminance(a)
    lb = relative_luminance(b)
    lighter, darker = max(la, lb), min(la, lb)
    return (lighter + 0.05) / (darker + 0.05)


def is_acceptable(
    color: ColorValue,
    background: ColorValue = BACKGROUND,
    threshold: float = DEFAULT_MIN_CONTRAST,
) -> bool:
    """True if *color* is readable on *background*.

    A ratio exactly at *threshold* is not enough.
    """
    return contrast_ratio(color, background) > threshold
