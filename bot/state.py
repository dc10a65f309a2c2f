"""
Process-wide bot state.

One ``BotState`` is built at startup and handed to the Discord client, the
dispatcher, every command handler and the dashboard.
"""
from __future__ import annotations

import logging
import random
import time
from typing import Any, Callable, Optional

import discord

from core.audit import AuditLogger
from core.commands import CommandRegistry
from core.config import BotSettings
from core.cooldowns import CooldownTracker
from core.dispatcher import CommandDispatcher, PermissionCheck, has_permissions
from core.storage import StateStore
from modules import register_all
from responders.chat import ChatResponder
from responders.matching import KeywordMatcher

logger = logging.getLogger("cmdobot.state")


class BotState:
    def __init__(
        self,
        settings: BotSettings,
        *,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        permission_check: PermissionCheck = has_permissions,
        chat: Optional[ChatResponder] = None,
    ) -> None:
        self.settings = settings
        self.clock = clock
        self.started_at = clock()
        self.rng = rng or random.Random()

        self.store = StateStore(settings.data_dir)
        self.registry = CommandRegistry()
        self.cooldowns = CooldownTracker(clock)
        self.audit = AuditLogger(self.store.logs)
        self.chat = chat or ChatResponder(KeywordMatcher(rng=self.rng), rng=self.rng)
        self.dispatcher = CommandDispatcher(self, permission_check)

        # Set by the Discord client once it is constructed.
        self.client: Optional[discord.Client] = None
        # OpenAI client; stays None when no API key is configured.
        self.ai_client: Optional[Any] = None

    @property
    def uptime_seconds(self) -> float:
        return self.clock() - self.started_at

    def prefix_for(self, guild: Optional[discord.Guild]) -> str:
        return self.dispatcher.resolve_prefix(guild)

    async def load(self) -> None:
        await self.store.load_all()
        logger.info(
            "State loaded: %d auto-role(s), %d log channel(s), %d server status(es)",
            len(self.store.autoroles),
            len(self.store.logs),
            len(self.store.statuses),
        )


def build_state(settings: BotSettings, **kwargs: Any) -> BotState:
    """Create the state and register every command module."""
    state = BotState(settings, **kwargs)
    register_all(state)
    return state
