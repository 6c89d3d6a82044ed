"""Gateway side: receive messages through discord.py and dispatch them."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from discord_color_roles.core.discord.client import DiscordClient
from discord_color_roles.core.discord.models import Message, User
from discord_color_roles.core.discord.snowflake import Snowflake
from discord_color_roles.core.dispatch.dispatcher import EventDispatcher

if TYPE_CHECKING:
    from discord_color_roles.core.settings import BotSettings

logger = logging.getLogger(__name__)


def to_message(msg: discord.Message) -> Message:
    """Convert a discord.py message into the dispatcher's model."""
    return Message(
        id=Snowflake(msg.id),
        channel_id=Snowflake(msg.channel.id),
        guild_id=Snowflake(msg.guild.id) if msg.guild is not None else None,
        author=User(
            id=Snowflake(msg.author.id),
            is_bot=msg.author.bot,
            name=msg.author.name,
            display_name=msg.author.display_name,
        ),
        content=msg.content,
    )


class ColorRoleBot(discord.Client):
    """discord.py client that feeds every message to an ``EventDispatcher``.

    discord.py runs each event handler in its own task, so messages from
    different members are handled concurrently.
    """

    def __init__(self, dispatcher: EventDispatcher) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(intents=intents)
        self.dispatcher = dispatcher

    async def on_ready(self) -> None:
        logger.info("%s is connected!", self.user)

    async def on_message(self, msg: discord.Message) -> None:
        if self.user is not None and msg.author.id == self.user.id:
            return
        await self.dispatcher.handle(to_message(msg))


async def run_bot(settings: BotSettings) -> None:
    """Connect to the gateway and serve until the connection is closed.

    Role changes go through the REST client; the application needs the
    *Server Members* intent enabled so guild members can be listed.
    """
    async with DiscordClient(settings.token) as rest:
        me = await rest.get_current_user()
        logger.info("Authenticated as %s (%s)", me.name, me.id)

        dispatcher = EventDispatcher(rest, settings)
        async with ColorRoleBot(dispatcher) as bot:
            await bot.start(settings.token)
