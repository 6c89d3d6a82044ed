"""Event dispatcher - turns inbound messages into color assignments."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from discord_color_roles.core.colors.codec import ColorValue
from discord_color_roles.core.colors.contrast import contrast_ratio, is_acceptable
from discord_color_roles.core.exceptions import ColorRoleError, PlatformError
from discord_color_roles.core.roles.assignment import ColorAssigner
from discord_color_roles.core.settings import ACCEPT_EMOJI, REJECT_EMOJI

if TYPE_CHECKING:
    from discord_color_roles.core.discord.client import DiscordClient
    from discord_color_roles.core.discord.models.message import Message
    from discord_color_roles.core.roles.locks import GuildLocks
    from discord_color_roles.core.settings import BotSettings

logger = logging.getLogger(__name__)


class DispatchOutcome(Enum):
    IGNORED = "ignored"
    REJECTED = "rejected"
    NO_GUILD = "no_guild"
    ASSIGNED = "assigned"
    FAILED = "failed"


class EventDispatcher:
    """Handles one inbound message at a time; safe to run concurrently.

    Feedback is asymmetric: only a contrast rejection gets the reject
    reaction, assignment failures are logged without any reaction.
    """

    def __init__(
        self,
        client: DiscordClient,
        settings: BotSettings,
        locks: GuildLocks | None = None,
    ) -> None:
        self._client = client
        self.settings = settings
        self.assigner = ColorAssigner(client, locks, settings.anchor_role_name)

    async def handle(self, message: Message) -> DispatchOutcome:
        color = ColorValue.parse(message.content)
        if color is None:
            return DispatchOutcome.IGNORED

        background = self.settings.background
        if not is_acceptable(color, background, self.settings.min_contrast):
            logger.debug(
                "Rejected %s from %s: contrast %.2f <= %.2f",
                color,
                message.author.name,
                contrast_ratio(color, background),
                self.settings.min_contrast,
            )
            await self._react(message, REJECT_EMOJI)
            return DispatchOutcome.REJECTED

        if message.is_direct:
            logger.warning("Failed to get guild for message %s", message.id)
            return DispatchOutcome.NO_GUILD

        try:
            result = await self.assigner.assign(message.guild_id, message.author.id, color)
        except ColorRoleError as exc:
            logger.error("Error assigning color: %s", exc)
            return DispatchOutcome.FAILED

        await self._react(message, ACCEPT_EMOJI)
        logger.info("Assigned role %s for %s", result.role_name, result.member_name)
        return DispatchOutcome.ASSIGNED

    async def _react(self, message: Message, emoji: str) -> None:
        try:
            await self._client.add_reaction(message.channel_id, message.id, emoji)
        except PlatformError as exc:
            # Feedback is best-effort; the outcome stands either way.
            logger.warning("Could not react to message %s: %s", message.id, exc)
