"""
Main entry point for the Discord bot.

Loads configuration from environment, starts the dashboard and keeps the bot
connected.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import discord
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)

from bot import CmdoBot, build_state, run_forever
from core.config import BotSettings, ConfigError
from web import run_web_server

logger = logging.getLogger("cmdobot")


def configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
    logging.getLogger("discord").setLevel(level)
    # Access logs are noisy below DEBUG.
    if level > logging.DEBUG:
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


async def main() -> None:
    try:
        settings = BotSettings.from_env()
        token = settings.require_token()
    except ConfigError as exc:
        logging.basicConfig(level=logging.INFO)
        logger.error("%s", exc)
        return

    configure_logging(settings.log_level)

    if not env_path.exists():
        logger.warning(".env file not found at %s", env_path)

    state = build_state(settings)
    await state.load()

    web_server = None
    if settings.web_enabled:
        try:
            web_server = await run_web_server(state, settings.web_host, settings.web_port)
        except OSError as exc:
            logger.error("Dashboard server error: %s", exc)

    try:
        await run_forever(lambda: CmdoBot(state), token, settings.reconnect_delay)
    except (discord.LoginFailure, discord.PrivilegedIntentsRequired) as exc:
        logger.error("Stopping: %s", exc)
    finally:
        if web_server is not None:
            await web_server.stop()
        await state.store.flush_all()


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
