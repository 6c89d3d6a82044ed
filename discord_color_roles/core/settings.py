"""Bot settings, filled by the CLI from options and environment variables."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from discord_color_roles.core.colors.codec import ColorValue
from discord_color_roles.core.colors.contrast import BACKGROUND, DEFAULT_MIN_CONTRAST

ANCHOR_ROLE_NAME = "colors"

ACCEPT_EMOJI = "☑"  # ballot box with check
REJECT_EMOJI = "❌"  # cross mark


class BotSettings(BaseModel):
    model_config = {"frozen": True}

    token: str = Field(repr=False)
    min_contrast: float = Field(default=DEFAULT_MIN_CONTRAST, ge=1.0)
    anchor_role_name: str = ANCHOR_ROLE_NAME
    background: ColorValue = BACKGROUND

    @field_validator("token")
    @classmethod
    def _strip_token(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("token must not be empty")
        # Accept tokens pasted with their auth scheme.
        if value.startswith("Bot "):
            value = value[4:].strip()
        return value
