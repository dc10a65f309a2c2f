"""
Command modules.

Each module exposes ``COMMANDS``; ``register_all`` adds them to the registry
in a fixed order.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import chatting, general, messages, moderation, roles, server_config

if TYPE_CHECKING:
    from bot.state import BotState

logger = logging.getLogger("cmdobot.modules")


def register_all(state: "BotState") -> None:
    registry = state.registry
    for module in (general, moderation, roles, server_config, chatting, messages):
        registry.register_all(module.COMMANDS)

    if state.settings.ai_enabled:
        from . import ai

        state.ai_client = ai.create_client(state.settings)
        registry.register_all(ai.COMMANDS)
        logger.info("AI commands enabled (model %s)", state.settings.openai_model)
    else:
        logger.info("OPENAI_API_KEY not set; AI commands disabled")

    logger.info("Registered %d commands", len(registry))
