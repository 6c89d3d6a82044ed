"""Shared fixtures and an in-memory Discord guild for engine tests."""

from __future__ import annotations

import asyncio

import pytest

from discord_color_roles.core.colors.codec import ColorValue
from discord_color_roles.core.discord.models.member import Member
from discord_color_roles.core.discord.models.message import Message
from discord_color_roles.core.discord.models.role import Role
from discord_color_roles.core.discord.models.user import User
from discord_color_roles.core.discord.snowflake import Snowflake
from discord_color_roles.core.exceptions import PlatformError

GUILD_ID = Snowflake(1)
CHANNEL_ID = Snowflake(100)
ANCHOR_ID = Snowflake(2005)
ALICE_ID = Snowflake(1001)
BOB_ID = Snowflake(1002)


# ---------------------------------------------------------------------------
# Mock Discord client
# ---------------------------------------------------------------------------


class MockDiscordClient:
    """Duck-typed stand-in for ``DiscordClient`` backed by one in-memory guild.

    Every call yields to the event loop once so concurrent tasks interleave
    the way they would against the real API. Operation names listed in
    ``fail_on`` raise ``PlatformError``.
    """

    def __init__(
        self,
        roles: list[Role] | None = None,
        members: list[Member] | None = None,
    ) -> None:
        self.roles: dict[Snowflake, Role] = {r.id: r for r in roles or []}
        self.members: dict[Snowflake, Member] = {m.id: m for m in members or []}
        self.reactions: list[tuple[Snowflake, str]] = []
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self._next_id = 5000

    async def _call(self, op: str) -> None:
        self.calls.append(op)
        await asyncio.sleep(0)
        if op in self.fail_on:
            raise PlatformError(f"{op} failed", status_code=500)

    @property
    def mutations(self) -> list[str]:
        return [
            c
            for c in self.calls
            if c in {"create_role", "delete_role", "add_member_role", "remove_member_roles"}
        ]

    # -- helpers for assertions --

    def role_named(self, name: str) -> Role | None:
        return next((r for r in self.roles.values() if r.name == name), None)

    def color_roles_of(self, user_id: Snowflake) -> list[Role]:
        member = self.members[user_id]
        return [self.roles[rid] for rid in member.role_ids if self.roles[rid].is_color_role]

    def give(self, user_id: Snowflake, role_id: Snowflake) -> None:
        member = self.members[user_id]
        self.members[user_id] = member.model_copy(
            update={"role_ids": [*member.role_ids, role_id]}
        )

    # -- DiscordClient surface --

    async def get_roles(self, guild_id: Snowflake) -> list[Role]:
        await self._call("get_roles")
        return sorted(self.roles.values(), key=lambda r: r.position)

    async def create_role(
        self,
        guild_id: Snowflake,
        name: str,
        color: ColorValue,
        position: int | None = None,
        reason: str | None = None,
    ) -> Role:
        await self._call("create_role")
        self._next_id += 1
        position = 1 if position is None else position
        for rid, r in list(self.roles.items()):
            if r.position >= position and r.position > 0:
                self.roles[rid] = r.model_copy(update={"position": r.position + 1})
        role = Role(id=Snowflake(self._next_id), name=name, position=position, color=color.value)
        self.roles[role.id] = role
        return role

    async def delete_role(
        self,
        guild_id: Snowflake,
        role_id: Snowflake,
        reason: str | None = None,
    ) -> None:
        await self._call("delete_role")
        del self.roles[role_id]
        for uid, member in list(self.members.items()):
            if role_id in member.role_ids:
                self.members[uid] = member.model_copy(
                    update={"role_ids": [r for r in member.role_ids if r != role_id]}
                )

    async def get_member(self, guild_id: Snowflake, user_id: Snowflake) -> Member:
        await self._call("get_member")
        if user_id not in self.members:
            raise PlatformError("not found", status_code=404)
        return self.members[user_id]

    async def get_members(self, guild_id: Snowflake):
        await self._call("get_members")
        for member in list(self.members.values()):
            yield member

    async def get_member_roles(
        self,
        guild_id: Snowflake,
        user_id: Snowflake,
        member: Member | None = None,
    ) -> list[Role]:
        await self._call("get_member_roles")
        if member is None:
            member = self.members[user_id]
        return [self.roles[rid] for rid in member.role_ids if rid in self.roles]

    async def add_member_role(
        self,
        guild_id: Snowflake,
        user_id: Snowflake,
        role_id: Snowflake,
        reason: str | None = None,
    ) -> None:
        await self._call("add_member_role")
        if not self.members[user_id].has_role(role_id):
            self.give(user_id, role_id)

    async def remove_member_roles(
        self,
        guild_id: Snowflake,
        user_id: Snowflake,
        role_ids,
        reason: str | None = None,
    ) -> None:
        await self._call("remove_member_roles")
        drop = set(role_ids)
        member = self.members[user_id]
        self.members[user_id] = member.model_copy(
            update={"role_ids": [r for r in member.role_ids if r not in drop]}
        )

    async def add_reaction(
        self,
        channel_id: Snowflake,
        message_id: Snowflake,
        emoji: str,
    ) -> None:
        await self._call("add_reaction")
        self.reactions.append((message_id, emoji))


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


def _user(uid: Snowflake, name: str) -> User:
    return User(id=uid, is_bot=False, name=name, display_name=name.title())


@pytest.fixture
def alice() -> User:
    return _user(ALICE_ID, "alice")


@pytest.fixture
def bob() -> User:
    return _user(BOB_ID, "bob")


@pytest.fixture
def base_roles() -> list[Role]:
    """@everyone, two ordinary roles, the anchor at position 5 and an admin role."""
    return [
        Role(id=GUILD_ID, name="@everyone", position=0),
        Role(id=Snowflake(2001), name="Member", position=1),
        Role(id=Snowflake(2002), name="Moderator", position=4),
        Role(id=ANCHOR_ID, name="colors", position=5),
        Role(id=Snowflake(2009), name="Admin", position=9),
    ]


@pytest.fixture
def guild(base_roles: list[Role], alice: User, bob: User) -> MockDiscordClient:
    return MockDiscordClient(
        roles=base_roles,
        members=[
            Member(user=alice, role_ids=[Snowflake(2001)]),
            Member(user=bob, role_ids=[Snowflake(2001)]),
        ],
    )


@pytest.fixture
def guild_without_anchor(base_roles: list[Role], alice: User) -> MockDiscordClient:
    return MockDiscordClient(
        roles=[r for r in base_roles if r.name != "colors"],
        members=[Member(user=alice, role_ids=[])],
    )


@pytest.fixture
def make_message(alice: User):
    """Factory for inbound messages; defaults to alice posting in the guild."""
    counter = iter(range(10_000, 20_000))

    def _make(
        content: str,
        author: User | None = None,
        guild_id: Snowflake | None = GUILD_ID,
    ) -> Message:
        return Message(
            id=Snowflake(next(counter)),
            channel_id=CHANNEL_ID,
            guild_id=guild_id,
            author=author or alice,
            content=content,
        )

    return _make
