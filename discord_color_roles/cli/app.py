"""CLI application - main entry point with all commands."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import click
from rich.console import Console

if TYPE_CHECKING:
    from discord_color_roles.core.colors.codec import ColorValue
    from discord_color_roles.core.discord.snowflake import Snowflake
    from discord_color_roles.core.settings import BotSettings

console = Console()


class SnowflakeParamType(click.ParamType):
    """Click parameter type for Discord snowflake IDs."""

    name = "snowflake"

    def convert(self, value: str, param: click.Parameter | None, ctx: click.Context | None) -> Snowflake:
        from discord_color_roles.core.discord.snowflake import Snowflake

        result = Snowflake.try_parse(value)
        if result is None:
            self.fail(f"Invalid snowflake: {value!r}", param, ctx)
        return result


class ColorParamType(click.ParamType):
    """Click parameter type for ``#RRGGBB`` colors."""

    name = "color"

    def convert(self, value: str, param: click.Parameter | None, ctx: click.Context | None) -> ColorValue:
        from discord_color_roles.core.colors.codec import ColorValue

        if isinstance(value, ColorValue):
            return value
        color = ColorValue.parse(value)
        if color is None:
            self.fail(f"Invalid color: {value!r}. Expected #RRGGBB.", param, ctx)
        return color


SNOWFLAKE = SnowflakeParamType()
COLOR = ColorParamType()

# Common options
token_option = click.option(
    "-t", "--token", envvar="DISCORD_TOKEN", required=True, help="Discord bot token."
)
min_contrast_option = click.option(
    "--min-contrast",
    envvar="MIN_CONTRAST",
    type=float,
    default=2.0,
    show_default=True,
    help="Minimum contrast ratio against the chat background.",
)


def _build_settings(token: str, min_contrast: float = 2.0) -> BotSettings:
    from pydantic import ValidationError

    from discord_color_roles.core.settings import BotSettings

    try:
        return BotSettings(token=token, min_contrast=min_contrast)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise click.UsageError(f"Invalid settings: {problems}") from exc


def _run_async(coro) -> None:  # type: ignore[no-untyped-def]
    from discord_color_roles.core.exceptions import ColorRoleError

    try:
        asyncio.run(coro)
    except ColorRoleError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.version_option(package_name="discord-color-roles")
def cli() -> None:
    """Discord color roles - members pick their name color by posting #RRGGBB."""


@cli.command()
@token_option
@min_contrast_option
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Logging verbosity.",
)
def run(token: str, min_contrast: float, log_level: str) -> None:
    """Connect to Discord and assign color roles until stopped."""
    from rich.logging import RichHandler

    from discord_color_roles.gateway.bot import run_bot

    settings = _build_settings(token, min_contrast)

    logging.basicConfig(
        level=log_level.upper(),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )

    try:
        _run_async(run_bot(settings))
    except KeyboardInterrupt:
        console.print("Stopped.")


@cli.command()
@min_contrast_option
@click.argument("colors", nargs=-1, required=True)
def check(min_contrast: float, colors: tuple[str, ...]) -> None:
    """Check colors offline: canonical form, contrast and verdict."""
    from discord_color_roles.core.colors.codec import ColorValue
    from discord_color_roles.core.colors.contrast import BACKGROUND, contrast_ratio, is_acceptable

    for text in colors:
        color = ColorValue.parse(text)
        if color is None:
            console.print(f"{text!r} | [yellow]not a color[/yellow]")
            continue

        ratio = contrast_ratio(color, BACKGROUND)
        verdict = (
            "[green]accepted[/green]"
            if is_acceptable(color, BACKGROUND, min_contrast)
            else "[red]rejected[/red]"
        )
        console.print(f"{color} | {ratio:.2f} | {verdict}")


@cli.command()
@token_option
@click.argument("guild_id", type=SNOWFLAKE)
def roles(token: str, guild_id: Snowflake) -> None:
    """List the anchor role and color roles of a guild with holder counts."""

    async def _run() -> None:
        from collections import Counter

        from discord_color_roles.core.discord.client import DiscordClient
        from discord_color_roles.core.settings import ANCHOR_ROLE_NAME

        async with DiscordClient(settings.token) as client:
            holders: Counter = Counter()
            async for member in client.get_members(guild_id):
                holders.update(member.role_ids)

            role_list = await client.get_roles(guild_id)
            anchor = next((r for r in role_list if r.name == ANCHOR_ROLE_NAME), None)
            if anchor is None:
                console.print(f"[red]No '{ANCHOR_ROLE_NAME}' role in this guild.[/red]")
            else:
                console.print(f"{anchor.id} | {anchor.position:>3} | {anchor.name} (anchor)")

            color_roles = [r for r in role_list if r.is_color_role]
            for r in sorted(color_roles, key=lambda role: role.position, reverse=True):
                console.print(f"{r.id} | {r.position:>3} | {r.name} | {holders[r.id]} member(s)")

    settings = _build_settings(token)
    _run_async(_run())


@cli.command()
@token_option
@click.argument("guild_id", type=SNOWFLAKE)
@click.argument("user_id", type=SNOWFLAKE)
@click.argument("color", type=COLOR)
def assign(token: str, guild_id: Snowflake, user_id: Snowflake, color: ColorValue) -> None:
    """Give a member a color role, skipping the contrast check."""

    async def _run() -> None:
        from discord_color_roles.core.discord.client import DiscordClient
        from discord_color_roles.core.roles.assignment import ColorAssigner

        async with DiscordClient(settings.token) as client:
            result = await ColorAssigner(client).assign(guild_id, user_id, color)
            console.print(f"Assigned role {result.role_name} for {result.member_name}")
            for r in result.deleted:
                console.print(f"Deleted: {r.name}")

    settings = _build_settings(token)
    _run_async(_run())


@cli.command()
@token_option
@click.argument("guild_id", type=SNOWFLAKE)
@click.option("--dry-run", is_flag=True, help="Only list the roles that would be deleted.")
def cleanup(token: str, guild_id: Snowflake, dry_run: bool) -> None:
    """Delete color roles no member holds."""

    async def _run() -> None:
        from discord_color_roles.core.discord.client import DiscordClient
        from discord_color_roles.core.roles.collector import OrphanCollector
        from discord_color_roles.core.roles.locks import GuildLocks

        async with DiscordClient(settings.token) as client:
            collector = OrphanCollector(client)
            async with GuildLocks().hold(guild_id):
                if dry_run:
                    orphans = await collector.find_orphans(guild_id)
                else:
                    orphans = await collector.collect(guild_id)

            verb = "Would delete" if dry_run else "Deleted"
            for r in orphans:
                console.print(f"{verb}: {r.id} | {r.name}")
            console.print(f"{len(orphans)} unused color role(s).")

    settings = _build_settings(token)
    _run_async(_run())
