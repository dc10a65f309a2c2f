"""
Casual-chat responder.

Channels opt in through the ``chat`` command. In an enabled channel the bot
answers a share of non-command messages after a short typing delay.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Optional

import discord

from core.types import ChatChannelState

from .matching import KeywordMatcher

logger = logging.getLogger("cmdobot.chat")

DEFAULT_PARTICIPATION = 0.7
DEFAULT_DELAY_RANGE = (0.5, 2.0)


class ChatResponder:
    def __init__(
        self,
        matcher: Optional[KeywordMatcher] = None,
        participation: float = DEFAULT_PARTICIPATION,
        delay_range: tuple[float, float] = DEFAULT_DELAY_RANGE,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.rng = rng or random.Random()
        self.matcher = matcher or KeywordMatcher(rng=self.rng)
        self.participation = participation
        self.delay_range = delay_range
        self.sleep = sleep
        self.channels: dict[int, ChatChannelState] = {}
        self._tasks: set[asyncio.Task] = set()

    # ─── Channel state ────────────────────────────────────────────────────────

    def channel_state(self, channel_id: int) -> ChatChannelState:
        return self.channels.get(channel_id) or ChatChannelState()

    def enable(self, channel_id: int) -> None:
        self.channels.setdefault(channel_id, ChatChannelState()).enabled = True

    def disable(self, channel_id: int) -> None:
        state = self.channels.get(channel_id)
        if state is not None:
            state.enabled = False

    def set_topic(self, channel_id: int, topic: Optional[str]) -> None:
        self.channels.setdefault(channel_id, ChatChannelState()).topic = topic or None

    def is_enabled(self, channel_id: int) -> bool:
        return self.channel_state(channel_id).enabled

    # ─── Message handling ─────────────────────────────────────────────────────

    def should_respond(self, message: discord.Message, prefix: str) -> bool:
        if getattr(message.author, "bot", False):
            return False
        if message.guild is None:
            return False
        content = message.content or ""
        if prefix and content.startswith(prefix):
            return False
        if not self.is_enabled(message.channel.id):
            return False
        return self.rng.random() < self.participation

    def next_delay(self) -> float:
        low, high = self.delay_range
        return low + self.rng.random() * (high - low)

    async def handle_message(self, message: discord.Message, prefix: str) -> Optional[asyncio.Task]:
        """Schedule a reply if this message gets one; returns the reply task."""
        if not self.should_respond(message, prefix):
            return None

        topic = self.channel_state(message.channel.id).topic
        response = self.matcher.respond(message.content, topic)

        try:
            await message.channel.typing()
        except discord.HTTPException as exc:
            logger.debug("Typing indicator failed in %s: %s", message.channel.id, exc)

        task = asyncio.create_task(self._delayed_reply(message, response, self.next_delay()))
        self._tasks.add(task)
        task.add_done_callback(self._reply_done)
        return task

    def _reply_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Chat reply task failed: %s", exc, exc_info=exc)

    async def _delayed_reply(self, message: discord.Message, response: str, delay: float) -> Optional[str]:
        await self.sleep(delay)
        try:
            await message.reply(
                response,
                mention_author=False,
                allowed_mentions=discord.AllowedMentions.none(),
            )
        except discord.HTTPException as exc:
            logger.error("Chat reply failed in channel %s: %s", message.channel.id, exc)
            return None
        return response
