"""Discord REST client for role and member management.

Every call is a single attempt: failures surface as ``PlatformError`` and
are never retried here.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterable
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote as url_quote

import httpx
from pydantic import BaseModel

from discord_color_roles.core.discord.models import Member, Role, User
from discord_color_roles.core.discord.snowflake import Snowflake
from discord_color_roles.core.exceptions import PlatformError
from discord_color_roles.core.utils.http import create_async_client, describe_error_body

if TYPE_CHECKING:
    from discord_color_roles.core.colors.codec import ColorValue

logger = logging.getLogger(__name__)

_BASE_URL = "https://discord.com/api/v10/"
_MEMBER_PAGE_SIZE = 1000

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _build(model: type[_ModelT], data: Any, what: str) -> _ModelT:
    """Validate one API object, turning a malformed payload into ``PlatformError``."""
    try:
        return model.model_validate(data)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        # pydantic.ValidationError is a ValueError.
        raise PlatformError(f"unexpected {what} payload: {exc}") from exc


def _build_list(model: type[_ModelT], data: Any, what: str) -> list[_ModelT]:
    if not isinstance(data, list):
        raise PlatformError(
            f"unexpected {what} payload: expected a list, got {type(data).__name__}"
        )
    return [_build(model, item, what) for item in data]


class DiscordClient:
    """Async Discord API client authenticated as a bot.

    Parameters
    ----------
    token:
        Discord bot token (without the ``Bot`` prefix).
    """

    def __init__(self, token: str) -> None:
        self._token = token
        self._client: httpx.AsyncClient | None = None

    # -- lifecycle ----------------------------------------------------------

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = create_async_client()
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> DiscordClient:
        await self._get_client()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # -- low-level request helpers ------------------------------------------

    def _auth_header(self) -> str:
        return f"Bot {self._token}"

    async def _request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        reason: str | None = None,
    ) -> httpx.Response:
        """Execute a single authenticated request.

        Transport failures (timeouts, connection errors) are wrapped in
        ``PlatformError``; HTTP error statuses are left to the caller.
        """
        client = await self._get_client()
        headers = {
            # Don't let httpx validate the value -- tokens may contain
            # special characters.
            "Authorization": self._auth_header(),
        }
        if reason:
            headers["X-Audit-Log-Reason"] = url_quote(reason, safe=" ")

        try:
            return await client.request(
                method,
                _BASE_URL + url,
                json=json,
                params=params,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise PlatformError(f"{method} '{url}' failed: {exc}") from exc

    async def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and return the parsed JSON body (None for 204).

        Raises ``PlatformError`` on any non-success status code and on a
        success body that is not JSON.
        """
        response = await self._request(method, url, **kwargs)
        status = response.status_code

        if response.is_success:
            if status == 204 or not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise PlatformError(
                    f"{method} '{url}' returned a body that is not JSON.",
                    status_code=status,
                ) from exc

        if status == 401:
            raise PlatformError(
                "Authentication token is invalid.",
                status_code=status,
                is_fatal=True,
            )
        if status == 403:
            raise PlatformError(
                f"{method} '{url}' failed: forbidden "
                "(check the bot's Manage Roles permission and role hierarchy).",
                status_code=status,
            )
        if status == 404:
            raise PlatformError(
                f"{method} '{url}' failed: not found.",
                status_code=status,
            )

        raise PlatformError(
            f"{method} '{url}' failed: {status}. {describe_error_body(response)}",
            status_code=status,
        )

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        return await self._send("GET", url, params=params)

    # -- public API ---------------------------------------------------------

    async def get_current_user(self) -> User:
        """Fetch the bot's own user (also validates the token)."""
        data = await self._get_json("users/@me")
        return _build(User, data, "user")

    # ---- roles ------------------------------------------------------------

    async def get_roles(self, guild_id: Snowflake) -> list[Role]:
        """List all roles in a guild, read fresh on every call."""
        data = await self._get_json(f"guilds/{guild_id}/roles")
        return _build_list(Role, data, "roles")

    async def get_role_by_name(self, guild_id: Snowflake, name: str) -> Role | None:
        """Return the first role named exactly *name*, or None."""
        for role in await self.get_roles(guild_id):
            if role.name == name:
                return role
        return None

    async def create_role(
        self,
        guild_id: Snowflake,
        name: str,
        color: ColorValue,
        position: int | None = None,
        reason: str | None = None,
    ) -> Role:
        """Create a role, then move it to *position* if one is given.

        Discord always creates roles just above ``@everyone``, so placing
        the role takes a second request.
        """
        data = await self._send(
            "POST",
            f"guilds/{guild_id}/roles",
            json={"name": name, "color": color.value},
            reason=reason,
        )
        role = _build(Role, data, "role")
        logger.debug("Created role %s (%s) in guild %s", role.name, role.id, guild_id)

        if position is None:
            return role

        roles = await self.modify_role_position(guild_id, role.id, position, reason=reason)
        for moved in roles:
            if moved.id == role.id:
                return moved
        return role.model_copy(update={"position": position})

    async def modify_role_position(
        self,
        guild_id: Snowflake,
        role_id: Snowflake,
        position: int,
        reason: str | None = None,
    ) -> list[Role]:
        """Move one role; returns the guild's roles after the move."""
        data = await self._send(
            "PATCH",
            f"guilds/{guild_id}/roles",
            json=[{"id": str(role_id), "position": position}],
            reason=reason,
        )
        return _build_list(Role, data or [], "roles")

    async def delete_role(
        self,
        guild_id: Snowflake,
        role_id: Snowflake,
        reason: str | None = None,
    ) -> None:
        await self._send("DELETE", f"guilds/{guild_id}/roles/{role_id}", reason=reason)
        logger.debug("Deleted role %s in guild %s", role_id, guild_id)

    # ---- members ----------------------------------------------------------

    async def get_member(self, guild_id: Snowflake, user_id: Snowflake) -> Member:
        """Fetch a single guild member."""
        data = await self._get_json(f"guilds/{guild_id}/members/{user_id}")
        return _build(Member, data, "member")

    async def get_members(self, guild_id: Snowflake) -> AsyncIterator[Member]:
        """Paginate through all members of a guild.

        Requires the privileged *Server Members* intent on the application.
        """
        current_after = Snowflake.ZERO
        while True:
            data = await self._get_json(
                f"guilds/{guild_id}/members",
                params={"limit": _MEMBER_PAGE_SIZE, "after": str(current_after)},
            )

            if not data:
                return

            for member in _build_list(Member, data, "members"):
                yield member
                current_after = member.id

            if len(data) < _MEMBER_PAGE_SIZE:
                return

    async def get_member_roles(
        self,
        guild_id: Snowflake,
        user_id: Snowflake,
        member: Member | None = None,
    ) -> list[Role]:
        """Return the roles a member currently holds.

        Pass an already fetched *member* to skip re-reading it.
        """
        if member is None:
            member = await self.get_member(guild_id, user_id)
        held = set(member.role_ids)
        return [role for role in await self.get_roles(guild_id) if role.id in held]

    async def add_member_role(
        self,
        guild_id: Snowflake,
        user_id: Snowflake,
        role_id: Snowflake,
        reason: str | None = None,
    ) -> None:
        await self._send(
            "PUT",
            f"guilds/{guild_id}/members/{user_id}/roles/{role_id}",
            reason=reason,
        )

    async def remove_member_roles(
        self,
        guild_id: Snowflake,
        user_id: Snowflake,
        role_ids: Iterable[Snowflake],
        reason: str | None = None,
    ) -> None:
        """Remove several roles from a member, one request per role."""
        for role_id in role_ids:
            await self._send(
                "DELETE",
                f"guilds/{guild_id}/members/{user_id}/roles/{role_id}",
                reason=reason,
            )

    # ---- reactions --------------------------------------------------------

    async def add_reaction(
        self,
        channel_id: Snowflake,
        message_id: Snowflake,
        emoji: str,
    ) -> None:
        """React to a message with a unicode emoji."""
        encoded = url_quote(emoji, safe="")
        await self._send(
            "PUT",
            f"channels/{channel_id}/messages/{message_id}/reactions/{encoded}/@me",
        )
