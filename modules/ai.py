"""
AI module - answers questions through an OpenAI-compatible chat API.

Registered only when ``OPENAI_API_KEY`` is set.
"""
from __future__ import annotations

import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from core.commands import Command, CommandContext, command
from core.config import BotSettings
from core.constants import Category
from core.utils import sanitize_text

logger = logging.getLogger("cmdobot.ai")

SYSTEM_PROMPT = (
    "You are a friendly assistant in a Discord community server. "
    "Answer briefly and casually, in at most a few short paragraphs."
)
MAX_QUESTION_LENGTH = 1000
MAX_ANSWER_LENGTH = 1900


def create_client(settings: BotSettings) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=settings.openai_api_key)


async def ask_model(client: Any, model: str, question: str) -> str:
    response = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": question},
        ],
    )
    if not response.choices:
        return ""
    return (response.choices[0].message.content or "").strip()


@command("ask", aliases=["ai"], category=Category.AI, usage="ask <question>", cooldown=10)
async def ask(ctx: CommandContext, args: list[str]) -> None:
    """Ask the AI a question."""
    client = ctx.state.ai_client
    if client is None:
        await ctx.reply("AI features are not configured.")
        return

    question = " ".join(args).strip()
    if not question:
        await ctx.reply(f"**Usage:** `{ctx.prefix}ask <question>`")
        return
    if len(question) > MAX_QUESTION_LENGTH:
        await ctx.reply(f"Questions can be at most {MAX_QUESTION_LENGTH} characters.")
        return

    async with ctx.channel.typing():
        try:
            answer = await ask_model(client, ctx.state.settings.openai_model, question)
        except OpenAIError as exc:
            logger.error("AI request failed: %s", exc)
            await ctx.reply("Sorry, I couldn't get an answer right now.")
            return

    await ctx.reply(sanitize_text(answer, max_len=MAX_ANSWER_LENGTH) or "I don't have an answer for that.")


COMMANDS: list[Command] = [ask]
