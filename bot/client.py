"""
Discord bot client - lean event handling.

Business logic lives in the dispatcher, the chat responder and the command
modules; this class only routes Discord events to them.
"""
from __future__ import annotations

import logging
from typing import Optional

import discord

from modules.roles import assign_auto_role

from .state import BotState

logger = logging.getLogger("cmdobot")

# Presence shown for a guild's stored status; "offline" means invisible.
PRESENCE_STATUS = {
    "online": discord.Status.online,
    "idle": discord.Status.idle,
    "dnd": discord.Status.dnd,
    "offline": discord.Status.invisible,
}


class CmdoBot(discord.Client):
    """
    Main Discord bot client.

    Handles:
    - Discord events (on_ready, on_message, on_member_join, ...)
    - Presence updates per guild status
    """

    def __init__(self, state: BotState) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        intents.guilds = True
        super().__init__(intents=intents)

        self.state = state
        state.client = self
        self.ready_once = False
        self._last_presence: Optional[discord.Status] = None

    # ─── Lifecycle ────────────────────────────────────────────────────────────

    async def on_ready(self) -> None:
        logger.info("Logged in as %s", self.user)
        if not self.ready_once:
            self.ready_once = True
            await self._set_presence(discord.Status.dnd)

    # ─── Guild Events ─────────────────────────────────────────────────────────

    async def on_guild_join(self, guild: discord.Guild) -> None:
        logger.info("Joined guild %s (%s)", guild.name, guild.id)
        if self.state.store.statuses.ensure_default(guild.id):
            await self.state.store.statuses.save()

    async def on_member_join(self, member: discord.Member) -> None:
        try:
            await assign_auto_role(self.state, member)
        except Exception:
            logger.exception("Auto-role handling failed for %s in guild %s", member, member.guild.id)

    # ─── Message Events ───────────────────────────────────────────────────────

    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return

        prefix = self.state.prefix_for(message.guild)

        if message.guild is not None:
            await self.refresh_presence(message.guild)
            await self.state.chat.handle_message(message, prefix)

        await self.state.dispatcher.dispatch(message, prefix)

    # ─── Interaction Events ───────────────────────────────────────────────────

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        if interaction.guild is not None:
            await self.refresh_presence(interaction.guild)

    # ─── Presence ─────────────────────────────────────────────────────────────

    def activity(self) -> discord.Activity:
        return discord.Activity(
            type=discord.ActivityType.watching,
            name=f"{self.state.settings.prefix}help✅",
        )

    async def refresh_presence(self, guild: discord.Guild) -> None:
        """Show the presence stored for the guild the bot is active in."""
        status = PRESENCE_STATUS[self.state.store.statuses.status_for(guild.id)]
        await self._set_presence(status)

    async def _set_presence(self, status: discord.Status) -> None:
        if status == self._last_presence:
            return
        try:
            await self.change_presence(status=status, activity=self.activity())
        except (discord.HTTPException, ConnectionError) as exc:
            logger.warning("Failed to update presence: %s", exc)
            return
        self._last_presence = status
