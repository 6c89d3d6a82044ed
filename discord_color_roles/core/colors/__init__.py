"""Color parsing and contrast checks."""

from discord_color_roles.core.colors.codec import ColorValue, is_color_role_name
from discord_color_roles.core.colors.contrast import (
    BACKGROUND,
    DEFAULT_MIN_CONTRAST,
    contrast_ratio,
    is_acceptable,
    relative_luminance,
)

__all__ = [
    "BACKGROUND",
    "ColorValue",
    "DEFAULT_MIN_CONTRAST",
    "contrast_ratio",
    "is_acceptable",
    "is_color_role_name",
    "relative_luminance",
]
