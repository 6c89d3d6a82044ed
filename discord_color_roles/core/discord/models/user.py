"""User model."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

from discord_color_roles.core.discord.snowflake import Snowflake


class User(BaseModel):
    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    id: Snowflake
    is_bot: bool = False
    name: str
    display_name: str

    @model_validator(mode="before")
    @classmethod
    def _from_api(cls, data: dict) -> dict:  # type: ignore[override]
        if not isinstance(data, dict):
            return data
        if "username" not in data:
            return data

        uid = Snowflake.parse(str(data["id"]))
        name = data.get("username", "")
        display_name = data.get("global_name") or name

        return {
            "id": uid,
            "is_bot": data.get("bot", False),
            "name": name,
            "display_name": display_name,
        }
