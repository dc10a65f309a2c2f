"""
Server configuration commands - log channel, prefix, presence status and an
overview of the current setup.
"""
from __future__ import annotations

import logging

import discord

from core.commands import Command, CommandContext, command
from core.constants import MANAGE_GUILD, Category, Color, RecordSet, Status
from core.utils import parse_channel_id

logger = logging.getLogger("cmdobot.server_config")

MAX_PREFIX_LENGTH = 5


@command(
    "setlogs",
    permissions=[MANAGE_GUILD],
    category=Category.ADMIN,
    usage="setlogs [#channel|off]",
    persists=[RecordSet.LOGS],
)
async def setlogs(ctx: CommandContext, args: list[str]) -> None:
    """Choose the channel that receives moderation logs."""
    guild = ctx.guild
    if guild is None:
        await ctx.reply("This command only works in a server.")
        return

    store = ctx.state.store.logs
    if args and args[0].lower() in ("off", "none", "disable"):
        store.remove(guild.id)
        await ctx.reply("Moderation logging disabled.")
        return

    channel = ctx.channel
    if args:
        channel_id = parse_channel_id(args[0])
        channel = guild.get_channel(channel_id) if channel_id else None
    if not isinstance(channel, discord.TextChannel):
        await ctx.reply("Give a text channel, e.g. `#mod-logs`.")
        return

    store.set(guild.id, str(channel.id))
    await ctx.reply(f"📝 Moderation logs will be sent to {channel.mention}.")


@command(
    "setprefix",
    aliases=["prefix"],
    permissions=[MANAGE_GUILD],
    category=Category.ADMIN,
    usage="setprefix <prefix|reset>",
    persists=[RecordSet.PREFIXES],
)
async def setprefix(ctx: CommandContext, args: list[str]) -> None:
    """Change the command prefix for this server."""
    guild = ctx.guild
    if guild is None:
        await ctx.reply("This command only works in a server.")
        return

    store = ctx.state.store.prefixes
    default = ctx.state.settings.prefix
    if not args:
        await ctx.reply(f"The prefix here is `{store.prefix_for(guild.id, default)}`.")
        return

    new_prefix = args[0]
    if new_prefix.lower() == "reset":
        store.remove(guild.id)
        await ctx.reply(f"Prefix reset to `{default}`.")
        return
    if len(new_prefix) > MAX_PREFIX_LENGTH:
        await ctx.reply(f"Prefixes can be at most {MAX_PREFIX_LENGTH} characters.")
        return

    store.set(guild.id, new_prefix)
    await ctx.reply(f"✅ Prefix set to `{new_prefix}`.")


@command(
    "setstatus",
    aliases=["status"],
    permissions=[MANAGE_GUILD],
    category=Category.ADMIN,
    usage="setstatus <online|idle|dnd|offline>",
    persists=[RecordSet.STATUSES],
)
async def setstatus(ctx: CommandContext, args: list[str]) -> None:
    """Set the presence the bot shows while active in this server."""
    guild = ctx.guild
    if guild is None:
        await ctx.reply("This command only works in a server.")
        return

    store = ctx.state.store.statuses
    if not args:
        await ctx.reply(f"Current status: **{store.status_for(guild.id)}**")
        return

    status = args[0].lower()
    if status not in Status.ALL:
        await ctx.reply(f"Status must be one of: {', '.join(Status.ALL)}.")
        return

    store.set(guild.id, status)
    refresh = getattr(ctx.bot, "refresh_presence", None)
    if refresh is not None:
        await refresh(guild)
    await ctx.reply(f"✅ Status set to **{status}**.")


@command(
    "setup",
    permissions=[MANAGE_GUILD],
    category=Category.ADMIN,
    usage="setup",
)
async def setup(ctx: CommandContext, args: list[str]) -> None:
    """Show this server's bot configuration."""
    guild = ctx.guild
    if guild is None:
        await ctx.reply("This command only works in a server.")
        return

    store = ctx.state.store
    prefix = ctx.prefix

    log_id = store.logs.channel_for(guild.id)
    log_channel = guild.get_channel(log_id) if log_id else None
    role_id = store.autoroles.role_for(guild.id)
    role = guild.get_role(role_id) if role_id else None
    chat_channels = [
        f"<#{channel_id}>"
        for channel_id, chat in ctx.state.chat.channels.items()
        if chat.enabled and guild.get_channel(channel_id) is not None
    ]

    embed = discord.Embed(title=f"Setup for {guild.name}", color=Color.INFO)
    embed.add_field(name="Prefix", value=f"`{prefix}` (`{prefix}setprefix`)", inline=False)
    embed.add_field(
        name="Log channel",
        value=log_channel.mention if log_channel else f"Not set (`{prefix}setlogs #channel`)",
        inline=False,
    )
    embed.add_field(
        name="Auto-role",
        value=role.name if role else f"Not set (`{prefix}autorole @role`)",
        inline=False,
    )
    embed.add_field(name="Status", value=store.statuses.status_for(guild.id), inline=False)
    embed.add_field(
        name="Chat channels",
        value=", ".join(chat_channels) if chat_channels else f"None (`{prefix}chat on`)",
        inline=False,
    )
    await ctx.reply(embed=embed)


COMMANDS: list[Command] = [setlogs, setprefix, setstatus, setup]
