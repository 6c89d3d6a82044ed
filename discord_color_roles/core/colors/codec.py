"""Hex color codes: parsing, canonical text and the color-role name pattern."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

# Anchored with fullmatch(); ``$`` would also accept a trailing newline.
_HEX_COLOR_RE = re.compile(r"#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})")


def is_color_role_name(name: str) -> bool:
    """Return True if *name* looks like a color role (``#`` + 6 hex digits)."""
    return _HEX_COLOR_RE.fullmatch(name) is not None


class ColorValue(BaseModel):
    """An sRGB color with three 8-bit channels."""

    model_config = {"frozen": True}

    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)

    @classmethod
    def parse(cls, text: str) -> ColorValue | None:
        """Parse ``#RRGGBB`` (any case), or return None.

        The whole string must be the color code; anything around it,
        whitespace included, is a rejection.
        """
        m = _HEX_COLOR_RE.fullmatch(text)
        if m is None:
            return None
        r, g, b = (int(part, 16) for part in m.groups())
        return cls(r=r, g=g, b=b)

    @classmethod
    def from_int(cls, value: int) -> ColorValue:
        """Build a color from Discord's packed ``0xRRGGBB`` integer."""
        if not 0 <= value <= 0xFFFFFF:
            raise ValueError(f"Color value out of range: {value!r}")
        return cls(r=(value >> 16) & 0xFF, g=(value >> 8) & 0xFF, b=value & 0xFF)

    @property
    def value(self) -> int:
        return (self.r << 16) | (self.g << 8) | self.b

    @property
    def hex(self) -> str:
        return f"#{self.value:06x}"

    def __str__(self) -> str:
        return self.hex
