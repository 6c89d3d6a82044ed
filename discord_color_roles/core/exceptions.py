"""Custom exceptions for discord-color-roles."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from discord_color_roles.core.discord.snowflake import Snowflake


class ColorRoleError(Exception):
    """Base exception for all color-role errors.

    Attributes:
        is_fatal: If True, the error is unrecoverable and the operator should
                  take corrective action (e.g. invalid token).
    """

    def __init__(
        self,
        message: str,
        is_fatal: bool = False,
        *args: object,
    ) -> None:
        super().__init__(message, *args)
        self.is_fatal = is_fatal


class MissingAnchorRoleError(ColorRoleError):
    """Raised when a guild has no ``colors`` role to position color roles by."""

    def __init__(self, guild_id: Snowflake, anchor_name: str = "colors") -> None:
        super().__init__(f'missing "{anchor_name}" base role')
        self.guild_id = guild_id
        self.anchor_name = anchor_name


class PlatformError(ColorRoleError):
    """Raised when a Discord API call fails.

    The underlying exception, if any, is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_fatal: bool = False,
    ) -> None:
        super().__init__(f"discord error: {message}", is_fatal)
        self.status_code = status_code
