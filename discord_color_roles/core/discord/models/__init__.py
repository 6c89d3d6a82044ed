"""Discord data models."""

from discord_color_roles.core.discord.models.member import Member
from discord_color_roles.core.discord.models.message import Message
from discord_color_roles.core.discord.models.role import Role
from discord_color_roles.core.discord.models.user import User

__all__ = [
    "Member",
    "Message",
    "Role",
    "User",
]
