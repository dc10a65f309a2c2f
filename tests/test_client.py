from unittest.mock import AsyncMock

import discord
import pytest

from bot.client import CmdoBot
from core.constants import Status

from .fakes import GUILD_ID, make_guild, make_message, make_role, make_user


@pytest.fixture
def bot(state):
    client = CmdoBot(state)
    client.change_presence = AsyncMock()
    return client


def test_client_is_attached_to_state(bot, state):
    assert state.client is bot
    assert bot.intents.message_content
    assert bot.intents.members


@pytest.mark.asyncio
async def test_presence_follows_guild_status(bot, state):
    guild = make_guild()
    state.store.statuses.set(GUILD_ID, Status.OFFLINE)

    await bot.refresh_presence(guild)
    await bot.refresh_presence(guild)

    bot.change_presence.assert_awaited_once()
    kwargs = bot.change_presence.await_args.kwargs
    assert kwargs["status"] == discord.Status.invisible
    assert kwargs["activity"].name == "!help✅"


@pytest.mark.asyncio
async def test_guild_join_seeds_online_status(bot, state, settings):
    guild = make_guild()

    await bot.on_guild_join(guild)

    assert state.store.statuses.get(GUILD_ID) == Status.ONLINE
    assert (settings.data_dir / "serverstatus.json").exists()


@pytest.mark.asyncio
async def test_on_message_routes_chat_and_commands(bot, state):
    state.chat.handle_message = AsyncMock()
    guild = make_guild()

    ping = make_message("!ping", guild=guild)
    await bot.on_message(ping)

    state.chat.handle_message.assert_awaited_once_with(ping, "!")
    assert ping.reply.await_args_list[0].args[0] == "Pinging..."


@pytest.mark.asyncio
async def test_direct_messages_skip_chat(bot, state):
    state.chat.handle_message = AsyncMock()

    await bot.on_message(make_message("hello"))

    state.chat.handle_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_bot_messages_are_skipped(bot, state):
    state.dispatcher.dispatch = AsyncMock()

    await bot.on_message(make_message("!ping", author=make_user(bot=True)))

    state.dispatcher.dispatch.assert_not_awaited()


@pytest.mark.asyncio
async def test_member_join_errors_are_not_raised(bot, state):
    role = make_role(666666666666666666, "Member")
    member = make_user(
        777777777777777777,
        guild=make_guild(roles=[role]),
        add_roles=AsyncMock(side_effect=RuntimeError("gateway hiccup")),
    )
    state.store.autoroles.set(GUILD_ID, str(role.id))

    await bot.on_member_join(member)

    member.add_roles.assert_awaited_once()
