"""
Moderation module - kick, ban, unban, timeouts and message purges.

Discord API failures are left to propagate so the dispatcher reports them
and writes an error entry to the audit log.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Optional

import discord

from core.commands import Command, CommandContext, command
from core.constants import Category
from core.utils import format_duration, parse_duration, parse_user_id

logger = logging.getLogger("cmdobot.moderation")

MAX_TIMEOUT = dt.timedelta(days=28)
MAX_PURGE = 100


async def _resolve_member(guild: discord.Guild, token: str) -> Optional[discord.Member]:
    user_id = parse_user_id(token)
    if user_id is None:
        return None
    member = guild.get_member(user_id)
    if member is not None:
        return member
    try:
        return await guild.fetch_member(user_id)
    except discord.NotFound:
        return None


def _reason(ctx: CommandContext, words: list[str]) -> str:
    text = " ".join(words).strip() or "No reason provided"
    return f"{text} (by {ctx.author})"


def _hierarchy_error(ctx: CommandContext, target: Any) -> Optional[str]:
    """Return a reason the invoker may not act on ``target``, or None."""
    guild = ctx.guild
    author = ctx.author
    if target.id == author.id:
        return "You cannot use this command on yourself."
    if ctx.bot is not None and ctx.bot.user is not None and target.id == ctx.bot.user.id:
        return "I can't do that to myself."
    if guild is not None and guild.owner_id == target.id:
        return "You cannot moderate the server owner."
    if guild is not None and guild.owner_id != author.id:
        author_top = getattr(author, "top_role", None)
        target_top = getattr(target, "top_role", None)
        if author_top is not None and target_top is not None and target_top >= author_top:
            return "You cannot moderate a member with an equal or higher role."
    return None


async def _target_from_args(ctx: CommandContext, args: list[str], usage: str) -> Optional[discord.Member]:
    if ctx.guild is None:
        await ctx.reply("This command only works in a server.")
        return None
    if not args:
        await ctx.reply(f"**Usage:** `{ctx.prefix}{usage}`")
        return None
    member = await _resolve_member(ctx.guild, args[0])
    if member is None:
        await ctx.reply("Member not found. Mention them or use their ID.")
        return None
    problem = _hierarchy_error(ctx, member)
    if problem:
        await ctx.reply(problem)
        return None
    return member


@command(
    "kick",
    permissions=["kick_members"],
    category=Category.MODERATION,
    usage="kick @user [reason]",
    cooldown=5,
)
async def kick(ctx: CommandContext, args: list[str]) -> None:
    """Kick a member from the server."""
    member = await _target_from_args(ctx, args, "kick @user [reason]")
    if member is None:
        return
    await member.kick(reason=_reason(ctx, args[1:]))
    logger.info("Guild %s: %s kicked %s", ctx.guild.id, ctx.author.id, member.id)
    await ctx.reply(f"👢 Kicked **{member}**.")


@command(
    "ban",
    permissions=["ban_members"],
    category=Category.MODERATION,
    usage="ban @user [reason]",
    cooldown=5,
)
async def ban(ctx: CommandContext, args: list[str]) -> None:
    """Ban a user from the server."""
    if ctx.guild is None:
        await ctx.reply("This command only works in a server.")
        return
    if not args:
        await ctx.reply(f"**Usage:** `{ctx.prefix}ban @user [reason]`")
        return

    target: Any = await _resolve_member(ctx.guild, args[0])
    if target is None:
        # Not in the server; ban by ID.
        user_id = parse_user_id(args[0])
        if user_id is None:
            await ctx.reply("User not found. Mention them or use their ID.")
            return
        target = discord.Object(id=user_id)
    else:
        problem = _hierarchy_error(ctx, target)
        if problem:
            await ctx.reply(problem)
            return

    await ctx.guild.ban(target, reason=_reason(ctx, args[1:]), delete_message_seconds=0)
    logger.info("Guild %s: %s banned %s", ctx.guild.id, ctx.author.id, target.id)
    await ctx.reply(f"🔨 Banned **{target}**." if isinstance(target, discord.Member) else f"🔨 Banned user `{target.id}`.")


@command(
    "unban",
    permissions=["ban_members"],
    category=Category.MODERATION,
    usage="unban <user_id> [reason]",
    cooldown=5,
)
async def unban(ctx: CommandContext, args: list[str]) -> None:
    """Lift a ban by user ID."""
    if ctx.guild is None:
        await ctx.reply("This command only works in a server.")
        return
    user_id = parse_user_id(args[0]) if args else None
    if user_id is None:
        await ctx.reply(f"**Usage:** `{ctx.prefix}unban <user_id> [reason]`")
        return

    try:
        await ctx.guild.unban(discord.Object(id=user_id), reason=_reason(ctx, args[1:]))
    except discord.NotFound:
        await ctx.reply(f"User `{user_id}` is not banned.")
        return
    await ctx.reply(f"✅ Unbanned user `{user_id}`.")


@command(
    "timeout",
    aliases=["mute"],
    permissions=["moderate_members"],
    category=Category.MODERATION,
    usage="timeout @user <duration> [reason]",
)
async def timeout(ctx: CommandContext, args: list[str]) -> None:
    """Time a member out (e.g. 10m, 1h, 1d12h)."""
    member = await _target_from_args(ctx, args, "timeout @user <duration> [reason]")
    if member is None:
        return
    duration = parse_duration(args[1]) if len(args) > 1 else None
    if duration is None:
        await ctx.reply("Give a duration such as `10m`, `1h` or `1d12h`.")
        return
    if duration > MAX_TIMEOUT:
        await ctx.reply("Timeouts can be at most 28 days.")
        return

    await member.timeout(duration, reason=_reason(ctx, args[2:]))
    await ctx.reply(f"🔇 Timed out **{member}** for {format_duration(duration)}.")


@command(
    "purge",
    aliases=["clear"],
    permissions=["manage_messages"],
    category=Category.MODERATION,
    usage="purge <1-100>",
    cooldown=5,
)
async def purge(ctx: CommandContext, args: list[str]) -> None:
    """Bulk-delete recent messages in this channel."""
    amount = int(args[0]) if args and args[0].isdigit() else 0
    if not 1 <= amount <= MAX_PURGE:
        await ctx.reply(f"Give a number between 1 and {MAX_PURGE}.")
        return

    # +1 removes the command message itself.
    deleted = await ctx.channel.purge(limit=amount + 1)
    count = max(len(deleted) - 1, 0)
    await ctx.channel.send(f"🧹 Deleted {count} message(s).", delete_after=5)


COMMANDS: list[Command] = [kick, ban, unban, timeout, purge]
