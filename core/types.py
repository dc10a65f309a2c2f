"""
Type definitions and dataclasses for the bot.

Using dataclasses instead of raw dicts provides:
- Type safety and IDE autocomplete
- Self-documenting code
- Easier refactoring
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

import discord

from .constants import Color
from .utils import truncate, utcnow

if TYPE_CHECKING:
    from .commands import Command


@dataclass(frozen=True)
class CooldownResult:
    """Outcome of a cooldown check."""
    allowed: bool
    remaining: float = 0.0


class DispatchStatus:
    """How the dispatcher handled a message."""
    IGNORED = "ignored"
    DENIED = "denied"
    COOLDOWN = "cooldown"
    EXECUTED = "executed"
    FAILED = "failed"


@dataclass
class DispatchResult:
    status: str
    command: Optional["Command"] = None
    reply: Optional[str] = None

    @property
    def handled(self) -> bool:
        return self.status != DispatchStatus.IGNORED


@dataclass
class AuditEntry:
    """
    A structured notification of a sensitive action.

    Rendered as a Discord embed and posted to the guild's log channel.
    """
    title: str
    description: str
    color: int = Color.ACTION
    fields: list[tuple[str, str]] = field(default_factory=list)
    timestamp: dt.datetime = field(default_factory=utcnow)

    def to_embed(self) -> discord.Embed:
        embed = discord.Embed(
            title=self.title,
            description=self.description,
            color=self.color,
            timestamp=self.timestamp,
        )
        for name, value in self.fields:
            embed.add_field(name=name, value=truncate(value or "-"), inline=False)
        return embed

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "color": self.color,
            "fields": [list(item) for item in self.fields],
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class ChatChannelState:
    """Casual-chat settings for one channel. Not persisted."""
    enabled: bool = False
    topic: Optional[str] = None
