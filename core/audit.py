"""
Audit log delivery.

Posts ``AuditEntry`` embeds to the log channel configured for a guild.
Delivery is best-effort: nothing here raises into the caller.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import discord

from .constants import Color
from .storage import LogChannelStore
from .types import AuditEntry

logger = logging.getLogger("cmdobot.audit")


class AuditLogger:
    def __init__(self, channels: LogChannelStore) -> None:
        self.channels = channels

    def resolve_channel(self, guild: Optional[discord.Guild]) -> Optional[Any]:
        if guild is None:
            return None
        channel_id = self.channels.channel_for(guild.id)
        if channel_id is None:
            return None
        channel = guild.get_channel(channel_id)
        # Categories and forums resolve by id but cannot take messages.
        if channel is None or not callable(getattr(channel, "send", None)):
            return None
        return channel

    async def emit(self, guild: Optional[discord.Guild], entry: AuditEntry) -> bool:
        """Send ``entry`` to the guild's log channel. Returns True if delivered."""
        channel = self.resolve_channel(guild)
        if channel is None:
            return False

        try:
            await channel.send(
                embed=entry.to_embed(),
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except discord.HTTPException as exc:
            logger.error("Error sending log to guild %s: %s", guild.id, exc)
            return False
        return True


def action_entry(author: Any, prefix: str, command_name: str, channel_name: str, args: list[str]) -> AuditEntry:
    return AuditEntry(
        title="🛡️ Server Action",
        description=f"**{author}** used moderation command: {prefix}{command_name}",
        color=Color.ACTION,
        fields=[
            ("Channel", channel_name),
            ("Details", " ".join(args) or "No additional details"),
        ],
    )


def error_entry(author: Any, prefix: str, command_name: str, error: BaseException) -> AuditEntry:
    return AuditEntry(
        title="⚠️ Server Action Error",
        description=f"Error executing moderation command: {prefix}{command_name}",
        color=Color.ERROR,
        fields=[
            ("User", str(author)),
            ("Error", str(error) or error.__class__.__name__),
        ],
    )


def member_joined_entry(member: Any, role_name: str) -> AuditEntry:
    return AuditEntry(
        title="👋 Member Joined",
        description=f"**{member}** joined the server",
        color=Color.JOIN,
        fields=[
            ("Auto-role", role_name),
            ("Member ID", str(member.id)),
        ],
    )
