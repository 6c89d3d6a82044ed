"""Delete color roles that no member holds any more."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from discord_color_roles.core.discord.client import DiscordClient
    from discord_color_roles.core.discord.models.role import Role
    from discord_color_roles.core.discord.snowflake import Snowflake

logger = logging.getLogger(__name__)


class OrphanCollector:
    """Garbage-collects orphaned color roles in a guild.

    Running it twice in a row deletes nothing the second time. Callers must
    hold the guild's lock.
    """

    def __init__(self, client: DiscordClient) -> None:
        self._client = client

    async def find_orphans(
        self,
        guild_id: Snowflake,
        exempt: Snowflake | None = None,
    ) -> list[Role]:
        """Color roles held by nobody, minus *exempt*."""
        used: set[Snowflake] = set()
        async for member in self._client.get_members(guild_id):
            used.update(member.role_ids)

        roles = await self._client.get_roles(guild_id)
        return [
            role
            for role in roles
            if role.is_color_role and role.id != exempt and role.id not in used
        ]

    async def collect(
        self,
        guild_id: Snowflake,
        exempt: Snowflake | None = None,
    ) -> list[Role]:
        """Delete every orphaned color role and return what was deleted.

        *exempt* is never deleted, even if the member listing does not yet
        show it as held. The first failed delete raises ``PlatformError``;
        roles deleted before it stay deleted.
        """
        deleted: list[Role] = []
        for role in await self.find_orphans(guild_id, exempt):
            await self._client.delete_role(guild_id, role.id, reason="Unused color role")
            logger.info("Deleted unused role %s in guild %s", role.name, guild_id)
            deleted.append(role)
        return deleted
