"""
General commands - ping, help, server info and uptime.
"""
from __future__ import annotations

import logging
import time

import discord

from core.commands import Command, CommandContext, command
from core.constants import Category, Color
from core.help_system import build_help_embed, get_command_help
from core.utils import format_uptime

logger = logging.getLogger("cmdobot.general")


@command("ping", aliases=["latency"], category=Category.GENERAL, usage="ping")
async def ping(ctx: CommandContext, args: list[str]) -> None:
    """Check the bot's response time."""
    started = time.perf_counter()
    sent = await ctx.reply("Pinging...")
    roundtrip_ms = (time.perf_counter() - started) * 1000

    latency = getattr(ctx.bot, "latency", None)
    text = f"🏓 Pong! Roundtrip: {roundtrip_ms:.0f}ms"
    if isinstance(latency, float) and latency == latency:  # NaN before the first heartbeat
        text += f" | API: {latency * 1000:.0f}ms"

    try:
        await sent.edit(content=text)
    except (AttributeError, discord.HTTPException):
        await ctx.reply(text)


@command("help", aliases=["commands", "h"], category=Category.GENERAL, usage="help [command]")
async def help_command(ctx: CommandContext, args: list[str]) -> None:
    """List commands or show details for one command."""
    if args:
        embed = get_command_help(ctx.state.registry, ctx.prefix, args[0])
        if embed is None:
            await ctx.reply(f"No command named `{args[0]}`.")
            return
    else:
        embed = build_help_embed(ctx.state.registry, ctx.prefix)
    await ctx.reply(embed=embed)


@command("serverinfo", aliases=["si", "server"], category=Category.GENERAL, usage="serverinfo")
async def serverinfo(ctx: CommandContext, args: list[str]) -> None:
    """Show information about this server."""
    guild = ctx.guild
    if guild is None:
        await ctx.reply("This command only works in a server.")
        return

    text_channels = len([c for c in guild.channels if isinstance(c, discord.TextChannel)])
    voice_channels = len([c for c in guild.channels if isinstance(c, discord.VoiceChannel)])

    embed = discord.Embed(title=f"Server Info for {guild.name}", color=Color.INFO)
    if guild.icon:
        embed.set_thumbnail(url=guild.icon.url)

    embed.add_field(name="Members", value=f"{guild.member_count or 0:,}", inline=True)
    embed.add_field(name="Channels", value=f"{text_channels} text, {voice_channels} voice", inline=True)
    embed.add_field(name="Roles", value=str(max(len(guild.roles) - 1, 0)), inline=True)
    embed.add_field(name="Created", value=guild.created_at.strftime("%B %d, %Y"), inline=True)
    embed.add_field(name="Status", value=ctx.state.store.statuses.status_for(guild.id), inline=True)
    embed.set_footer(text=f"ID: {guild.id}")

    await ctx.reply(embed=embed)


@command("uptime", category=Category.GENERAL, usage="uptime")
async def uptime(ctx: CommandContext, args: list[str]) -> None:
    """Show how long the bot has been running."""
    await ctx.reply(f"⏱️ Uptime: {format_uptime(ctx.state.uptime_seconds)}")


COMMANDS: list[Command] = [ping, help_command, serverinfo, uptime]
