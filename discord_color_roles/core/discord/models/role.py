"""Role model."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

from discord_color_roles.core.colors.codec import is_color_role_name
from discord_color_roles.core.discord.snowflake import Snowflake


class Role(BaseModel):
    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    id: Snowflake
    name: str
    position: int
    color: int = 0  # Packed 0xRRGGBB; 0 means "no color"

    @property
    def is_color_role(self) -> bool:
        """True if the name is a ``#rrggbb`` code, whatever its actual color."""
        return is_color_role_name(self.name)

    @model_validator(mode="before")
    @classmethod
    def _from_api(cls, data: dict) -> dict:  # type: ignore[override]
        if not isinstance(data, dict):
            return data
        if isinstance(data.get("id"), Snowflake):
            return data

        return {
            "id": Snowflake.parse(str(data["id"])),
            "name": data["name"],
            "position": data.get("position", 0),
            "color": data.get("color", 0) or 0,
        }
