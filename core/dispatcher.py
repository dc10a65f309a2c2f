"""
Prefix command dispatch.

Parses a message, resolves the command, runs the permission gate, then the
cooldown gate, then the handler. Rejections at either gate leave cooldowns
and persisted state untouched.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

import discord

from .audit import action_entry, error_entry
from .commands import CommandContext
from .constants import Replies
from .types import DispatchResult, DispatchStatus

if TYPE_CHECKING:
    from bot.state import BotState

logger = logging.getLogger("cmdobot.dispatcher")

PermissionCheck = Callable[[Any, Any, Iterable[str]], bool]


def has_permissions(member: Any, channel: Any, required: Iterable[str]) -> bool:
    """True if ``member`` holds every permission in ``required`` in ``channel``."""
    permissions_for = getattr(channel, "permissions_for", None)
    if permissions_for is None:
        return False
    try:
        perms = permissions_for(member)
    except (AttributeError, TypeError) as exc:
        logger.debug("Could not compute permissions for %s: %s", member, exc)
        return False
    if perms is None:
        return False
    return all(getattr(perms, name, False) is True for name in required)


def parse_invocation(content: str, prefix: str) -> Optional[tuple[str, list[str]]]:
    """Split ``<prefix><name> arg arg`` into ``(name, args)``."""
    if not prefix or not content or not content.startswith(prefix):
        return None
    parts = content[len(prefix):].split()
    if not parts:
        return None
    return parts[0].lower(), parts[1:]


class CommandDispatcher:
    def __init__(
        self,
        state: "BotState",
        permission_check: PermissionCheck = has_permissions,
    ) -> None:
        self.state = state
        self.permission_check = permission_check

    def resolve_prefix(self, guild: Optional[discord.Guild]) -> str:
        guild_id = guild.id if guild is not None else None
        return self.state.store.prefixes.prefix_for(guild_id, self.state.settings.prefix)

    async def dispatch(self, message: discord.Message, prefix: Optional[str] = None) -> DispatchResult:
        if getattr(message.author, "bot", False):
            return DispatchResult(DispatchStatus.IGNORED)

        if prefix is None:
            prefix = self.resolve_prefix(message.guild)

        parsed = parse_invocation(message.content or "", prefix)
        if parsed is None:
            return DispatchResult(DispatchStatus.IGNORED)
        name, args = parsed

        cmd = self.state.registry.resolve(name)
        if cmd is None:
            return DispatchResult(DispatchStatus.IGNORED)

        if cmd.permissions and not self.permission_check(message.author, message.channel, cmd.permissions):
            await self._reply(message, Replies.NO_PERMISSION)
            return DispatchResult(DispatchStatus.DENIED, cmd, Replies.NO_PERMISSION)

        cooldown = self.state.cooldowns.check_and_record(cmd.name, message.author.id, cmd.cooldown)
        if not cooldown.allowed:
            text = Replies.COOLDOWN.format(remaining=cooldown.remaining, name=cmd.name)
            await self._reply(message, text)
            return DispatchResult(DispatchStatus.COOLDOWN, cmd, text)

        ctx = CommandContext(message=message, state=self.state, prefix=prefix, command=cmd)
        try:
            await cmd.handler(ctx, args)
        except Exception as exc:
            logger.exception("Command %s failed for user %s", cmd.name, message.author.id)
            await self._reply(message, Replies.EXECUTION_ERROR)
            if cmd.is_moderation_impacting:
                await self.state.audit.emit(
                    message.guild,
                    error_entry(message.author, prefix, cmd.name, exc),
                )
            return DispatchResult(DispatchStatus.FAILED, cmd, Replies.EXECUTION_ERROR)

        for record_set in cmd.persists:
            await self.state.store.flush(record_set)

        if cmd.is_moderation_impacting:
            channel_name = getattr(message.channel, "name", None) or str(message.channel.id)
            await self.state.audit.emit(
                message.guild,
                action_entry(message.author, prefix, cmd.name, channel_name, args),
            )

        return DispatchResult(DispatchStatus.EXECUTED, cmd, ctx.replies[-1] if ctx.replies else None)

    async def _reply(self, message: discord.Message, text: str) -> None:
        try:
            await message.reply(
                text,
                mention_author=False,
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except discord.HTTPException as exc:
            logger.warning("Failed to reply in channel %s: %s", message.channel.id, exc)
