"""Guild member model."""

from __future__ import annotations

from pydantic import BaseModel, model_validator

from discord_color_roles.core.discord.models.user import User
from discord_color_roles.core.discord.snowflake import Snowflake


class Member(BaseModel):
    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    user: User
    nick: str | None = None
    role_ids: list[Snowflake] = []

    @property
    def id(self) -> Snowflake:
        return self.user.id

    @property
    def display_name(self) -> str:
        return self.nick or self.user.display_name

    def has_role(self, role_id: Snowflake) -> bool:
        return role_id in self.role_ids

    @model_validator(mode="before")
    @classmethod
    def _from_api(cls, data: dict) -> dict:  # type: ignore[override]
        if not isinstance(data, dict):
            return data
        if isinstance(data.get("user"), User):
            return data

        user = User.model_validate(data["user"])
        nick = data.get("nick")
        if nick and not nick.strip():
            nick = None

        role_ids = [Snowflake.parse(str(r)) for r in data.get("roles", [])]

        return {
            "user": user,
            "nick": nick,
            "role_ids": role_ids,
        }
