"""Per-guild critical sections for role mutations."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from discord_color_roles.core.discord.snowflake import Snowflake


class GuildLocks:
    """One ``asyncio.Lock`` per guild, created on first use.

    Resolve-or-create, reassignment and orphan collection for a guild all
    run under that guild's lock. Unrelated guilds never wait on each other.
    All callers must share one event loop.
    """

    def __init__(self) -> None:
        self._locks: dict[Snowflake, asyncio.Lock] = {}

    def lock_for(self, guild_id: Snowflake) -> asyncio.Lock:
        lock = self._locks.get(guild_id)
        if lock is None:
            lock = self._locks[guild_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, guild_id: Snowflake) -> AsyncIterator[None]:
        async with self.lock_for(guild_id):
            yield
