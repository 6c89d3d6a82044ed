"""Find or create the role for a color, anchored below the ``colors`` role."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from discord_color_roles.core.colors.codec import ColorValue
from discord_color_roles.core.exceptions import MissingAnchorRoleError
from discord_color_roles.core.settings import ANCHOR_ROLE_NAME

if TYPE_CHECKING:
    from discord_color_roles.core.discord.client import DiscordClient
    from discord_color_roles.core.discord.models.role import Role
    from discord_color_roles.core.discord.snowflake import Snowflake

logger = logging.getLogger(__name__)


class RoleResolver:
    """Resolves a color to its guild role, creating the role on first use.

    Callers must hold the guild's lock (see ``GuildLocks``) so two requests
    for the same new color cannot both miss the lookup.
    """

    def __init__(self, client: DiscordClient, anchor_name: str = ANCHOR_ROLE_NAME) -> None:
        self._client = client
        self._anchor_name = anchor_name

    async def resolve_or_create(self, guild_id: Snowflake, color: ColorValue) -> Role:
        # Fresh read: other actors may have reordered roles since last time.
        roles = await self._client.get_roles(guild_id)

        anchor = next((r for r in roles if r.name == self._anchor_name), None)
        if anchor is None:
            raise MissingAnchorRoleError(guild_id, self._anchor_name)

        # Roles named in upper case (#1A2B3C) are the same color.
        for role in roles:
            if ColorValue.parse(role.name) == color:
                return role

        name = color.hex
        role = await self._client.create_role(
            guild_id,
            name,
            color,
            position=anchor.position,
            reason=f"Color role {name}",
        )
        logger.info("Created role %s at position %d in guild %s", name, role.position, guild_id)
        return role
