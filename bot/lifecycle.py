"""
Connection lifecycle - keep the bot connected.

discord.py reconnects dropped gateway sessions by itself; this loop covers
the cases where ``start`` gives up entirely (network down at startup, the
gateway refusing connections) by building a fresh client and trying again
after a fixed delay, forever.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import aiohttp
import discord
from discord.errors import PrivilegedIntentsRequired

logger = logging.getLogger("cmdobot.lifecycle")

RETRYABLE_ERRORS = (
    discord.GatewayNotFound,
    discord.ConnectionClosed,
    discord.DiscordServerError,
    aiohttp.ClientError,
    OSError,
    asyncio.TimeoutError,
)


async def run_forever(
    client_factory: Callable[[], discord.Client],
    token: str,
    delay: float,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> int:
    """
    Run clients from ``client_factory`` until one exits cleanly.

    Returns the number of reconnect attempts made. Invalid tokens and missing
    privileged intents are configuration problems and are re-raised.
    """
    attempts = 0
    while True:
        client = client_factory()
        try:
            await client.start(token)
        except discord.LoginFailure:
            logger.error(
                "Token is invalid. Reset it in the Discord developer portal and "
                "update DISCORD_BOT_TOKEN."
            )
            raise
        except PrivilegedIntentsRequired:
            logger.error(
                "Privileged intents required. Enable MESSAGE CONTENT and SERVER MEMBERS "
                "intents in the Discord developer portal."
            )
            raise
        except RETRYABLE_ERRORS as exc:
            attempts += 1
            logger.error(
                "Discord connection failed (%s); reconnecting in %.0fs (attempt %d)",
                exc,
                delay,
                attempts,
            )
        else:
            logger.info("Discord client stopped")
            return attempts
        finally:
            if not client.is_closed():
                await client.close()

        await sleep(delay)
