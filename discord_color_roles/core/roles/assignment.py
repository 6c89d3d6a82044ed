"""Assignment transaction: give a member exactly one color role."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from discord_color_roles.core.roles.collector import OrphanCollector
from discord_color_roles.core.roles.locks import GuildLocks
from discord_color_roles.core.roles.resolver import RoleResolver
from discord_color_roles.core.settings import ANCHOR_ROLE_NAME

if TYPE_CHECKING:
    from discord_color_roles.core.colors.codec import ColorValue
    from discord_color_roles.core.discord.client import DiscordClient
    from discord_color_roles.core.discord.models.member import Member
    from discord_color_roles.core.discord.models.role import Role
    from discord_color_roles.core.discord.snowflake import Snowflake

logger = logging.getLogger(__name__)


class AssignmentResult:
    """Outcome of a successful assignment."""

    __slots__ = ("role", "member", "removed", "deleted")

    def __init__(
        self,
        role: Role,
        member: Member,
        removed: list[Role] | None = None,
        deleted: list[Role] | None = None,
    ) -> None:
        self.role = role
        self.member = member
        self.removed = removed or []
        self.deleted = deleted or []

    @property
    def role_name(self) -> str:
        return self.role.name

    @property
    def member_name(self) -> str:
        return self.member.display_name


class ColorAssigner:
    """Runs resolve, reassign and cleanup as one per-guild critical section.

    The Discord calls are not transactional: if one fails midway the member
    may be left without a color role. Nothing is rolled back.
    """

    def __init__(
        self,
        client: DiscordClient,
        locks: GuildLocks | None = None,
        anchor_name: str = ANCHOR_ROLE_NAME,
    ) -> None:
        self._client = client
        self.locks = locks or GuildLocks()
        self.resolver = RoleResolver(client, anchor_name)
        self.collector = OrphanCollector(client)

    async def assign(
        self,
        guild_id: Snowflake,
        user_id: Snowflake,
        color: ColorValue,
    ) -> AssignmentResult:
        async with self.locks.hold(guild_id):
            role = await self.resolver.resolve_or_create(guild_id, color)

            member = await self._client.get_member(guild_id, user_id)
            held = await self._client.get_member_roles(guild_id, user_id, member)
            # More than one entry means the guild was already inconsistent;
            # strip them all.
            previous = [r for r in held if r.is_color_role]
            if len(previous) > 1:
                logger.warning(
                    "Member %s held %d color roles in guild %s",
                    user_id,
                    len(previous),
                    guild_id,
                )

            reason = f"Color {role.name} for {member.user.name}"
            if previous:
                await self._client.remove_member_roles(
                    guild_id, user_id, [r.id for r in previous], reason=reason
                )
            await self._client.add_member_role(guild_id, user_id, role.id, reason=reason)

            deleted = await self.collector.collect(guild_id, exempt=role.id)

        return AssignmentResult(role, member, removed=previous, deleted=deleted)
