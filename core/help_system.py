"""
Help rendering - builds help embeds from the command registry.

Commands are grouped by category; long groups are split across several
embed fields to stay under Discord's 1024-character field limit.
"""
from __future__ import annotations

from typing import Optional

import discord

from .commands import Command, CommandRegistry
from .constants import Category, Color

CATEGORY_TITLES = {
    Category.GENERAL: "General",
    Category.MODERATION: "Moderation",
    Category.ADMIN: "Server Setup",
    Category.FUN: "Fun",
    Category.UTILITY: "Utility",
    Category.AI: "AI",
}

FIELD_LIMIT = 1024


def format_command_line(cmd: Command, prefix: str) -> str:
    line = f"**`{prefix}{cmd.usage}`**"
    if cmd.description:
        line += f" - {cmd.description}"
    if cmd.aliases:
        line += f" (aliases: {', '.join(cmd.aliases)})"
    return line


def chunk_lines(lines: list[str], limit: int = FIELD_LIMIT) -> list[str]:
    """Join ``lines`` into newline-separated chunks no longer than ``limit``."""
    chunks: list[str] = []
    current: list[str] = []
    current_len = 0
    for line in lines:
        line = line[:limit]
        line_len = len(line) + (1 if current else 0)
        if current and current_len + line_len > limit:
            chunks.append("\n".join(current))
            current = [line]
            current_len = len(line)
        else:
            current.append(line)
            current_len += line_len
    if current:
        chunks.append("\n".join(current))
    return chunks


def build_help_embed(registry: CommandRegistry, prefix: str) -> discord.Embed:
    """Overview of every registered command, grouped by category."""
    embed = discord.Embed(
        title="Bot Commands",
        description=f"Prefix: `{prefix}`. Use `{prefix}help <command>` for details.",
        color=Color.INFO,
    )

    for category, commands in registry.by_category().items():
        title = CATEGORY_TITLES.get(category, category.title())
        lines = [format_command_line(cmd, prefix) for cmd in commands]
        for index, chunk in enumerate(chunk_lines(lines), start=1):
            name = title if index == 1 else f"{title} (cont. {index})"
            embed.add_field(name=name, value=chunk, inline=False)

    embed.set_footer(text=f"{len(registry)} commands loaded")
    return embed


def build_command_embed(cmd: Command, prefix: str) -> discord.Embed:
    """Detailed help for one command."""
    embed = discord.Embed(
        title=f"{prefix}{cmd.name}",
        description=cmd.description or "No description.",
        color=Color.INFO,
    )
    embed.add_field(name="Usage", value=f"`{prefix}{cmd.usage}`", inline=False)
    if cmd.aliases:
        embed.add_field(name="Aliases", value=", ".join(cmd.aliases), inline=True)
    if cmd.permissions:
        perms = ", ".join(sorted(p.replace("_", " ").title() for p in cmd.permissions))
        embed.add_field(name="Requires", value=perms, inline=True)
    embed.add_field(name="Cooldown", value=f"{cmd.cooldown:g}s", inline=True)
    return embed


def get_command_help(registry: CommandRegistry, prefix: str, name: str) -> Optional[discord.Embed]:
    cmd = registry.resolve(name)
    if cmd is None:
        return None
    return build_command_embed(cmd, prefix)
