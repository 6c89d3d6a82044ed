"""Inbound message model."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

from discord_color_roles.core.discord.models.user import User
from discord_color_roles.core.discord.snowflake import Snowflake


class Message(BaseModel):
    """A chat message as far as color assignment cares about it.

    ``guild_id`` is None for direct messages.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    id: Snowflake
    channel_id: Snowflake
    guild_id: Snowflake | None = None
    author: User
    content: str = ""

    @property
    def is_direct(self) -> bool:
        return self.guild_id is None

    @model_validator(mode="before")
    @classmethod
    def _from_api(cls, data: dict) -> dict:  # type: ignore[override]
        if not isinstance(data, dict):
            return data
        if isinstance(data.get("author"), User):
            return data

        guild_id_raw = data.get("guild_id")
        return {
            "id": Snowflake.parse(str(data["id"])),
            "channel_id": Snowflake.parse(str(data["channel_id"])),
            "guild_id": Snowflake.parse(str(guild_id_raw)) if guild_id_raw else None,
            "author": User.model_validate(data["author"]),
            "content": data.get("content", ""),
        }
