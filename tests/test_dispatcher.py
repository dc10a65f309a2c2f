import json
from unittest.mock import AsyncMock

import discord
import pytest

from core.commands import command
from core.constants import Category, Replies
from core.dispatcher import has_permissions, parse_invocation
from core.types import DispatchStatus

from .fakes import (
    GUILD_ID,
    LOG_CHANNEL_ID,
    make_channel,
    make_guild,
    make_message,
    make_role,
    make_user,
)

TARGET_ID = 555555555555555555


def reply_text(message):
    return message.reply.await_args.args[0]


def guild_with_log_channel(state, **kwargs):
    log_channel = make_channel(LOG_CHANNEL_ID, name="mod-log")
    state.store.logs.set(GUILD_ID, str(LOG_CHANNEL_ID))
    return make_guild(log_channel=log_channel, **kwargs), log_channel


def test_parse_invocation():
    assert parse_invocation("!Kick <@1> spam", "!") == ("kick", ["<@1>", "spam"])
    assert parse_invocation("hello", "!") is None
    assert parse_invocation("!", "!") is None
    assert parse_invocation("!   ", "!") is None


def test_has_permissions_needs_every_flag():
    channel = make_channel(permissions=discord.Permissions(kick_members=True))
    member = make_user()

    assert has_permissions(member, channel, ["kick_members"])
    assert not has_permissions(member, channel, ["kick_members", "ban_members"])
    assert not has_permissions(member, object(), ["kick_members"])


@pytest.mark.asyncio
async def test_bot_authors_are_ignored(state):
    message = make_message("!ping", author=make_user(bot=True))

    result = await state.dispatcher.dispatch(message)

    assert result.status == DispatchStatus.IGNORED
    message.reply.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_command_is_ignored(state):
    message = make_message("!doesnotexist")

    result = await state.dispatcher.dispatch(message)

    assert result.status == DispatchStatus.IGNORED
    assert not result.handled


@pytest.mark.asyncio
async def test_ping_twice_hits_cooldown(state, clock):
    first = make_message("!ping")
    assert (await state.dispatcher.dispatch(first)).status == DispatchStatus.EXECUTED

    clock.advance(0.5)
    second = make_message("!ping")
    result = await state.dispatcher.dispatch(second)

    assert result.status == DispatchStatus.COOLDOWN
    text = reply_text(second)
    assert "more second(s)" in text
    assert "`ping`" in text
    assert 2.0 <= float(text.split("wait ")[1].split(" ")[0]) <= 2.9


@pytest.mark.asyncio
async def test_alias_shares_cooldown_with_command(state, clock):
    await state.dispatcher.dispatch(make_message("!ping"))
    clock.advance(1)

    result = await state.dispatcher.dispatch(make_message("!latency"))

    assert result.status == DispatchStatus.COOLDOWN
    assert result.command.name == "ping"


@pytest.mark.asyncio
async def test_kick_without_permission_is_rejected_and_not_logged(state):
    guild, log_channel = guild_with_log_channel(state)
    message = make_message("!kick <@555555555555555555>", guild=guild)

    result = await state.dispatcher.dispatch(message)

    assert result.status == DispatchStatus.DENIED
    assert reply_text(message) == "You do not have permission to use this command!"
    log_channel.send.assert_not_awaited()
    assert state.cooldowns.last_used("kick", message.author.id) is None


@pytest.mark.asyncio
async def test_denied_then_allowed_is_not_blocked_by_cooldown(state):
    target = make_user(TARGET_ID, name="spammer#0002", kick=AsyncMock())
    guild, _ = guild_with_log_channel(state, members=[target])

    denied = make_message(f"!kick {TARGET_ID}", guild=guild)
    assert (await state.dispatcher.dispatch(denied)).status == DispatchStatus.DENIED

    allowed = make_message(
        f"!kick {TARGET_ID} spamming",
        guild=guild,
        permissions=discord.Permissions(kick_members=True),
    )
    result = await state.dispatcher.dispatch(allowed)

    assert result.status == DispatchStatus.EXECUTED
    target.kick.assert_awaited_once()


@pytest.mark.asyncio
async def test_kick_success_writes_action_audit(state):
    target = make_user(TARGET_ID, name="spammer#0002", kick=AsyncMock())
    guild, log_channel = guild_with_log_channel(state, members=[target])
    message = make_message(
        f"!kick <@{TARGET_ID}> spamming",
        guild=guild,
        permissions=discord.Permissions(kick_members=True),
    )

    result = await state.dispatcher.dispatch(message)

    assert result.status == DispatchStatus.EXECUTED
    assert "spamming" in target.kick.await_args.kwargs["reason"]
    embed = log_channel.send.await_args.kwargs["embed"]
    assert embed.title == "🛡️ Server Action"
    assert "!kick" in embed.description
    assert embed.fields[0].value == "general"


@pytest.mark.asyncio
async def test_moderation_failure_replies_and_writes_error_audit(state):
    target = make_user(TARGET_ID, name="spammer#0002", kick=AsyncMock(side_effect=RuntimeError("boom")))
    guild, log_channel = guild_with_log_channel(state, members=[target])
    message = make_message(
        f"!kick {TARGET_ID}",
        guild=guild,
        permissions=discord.Permissions(kick_members=True),
    )

    result = await state.dispatcher.dispatch(message)

    assert result.status == DispatchStatus.FAILED
    assert reply_text(message) == Replies.EXECUTION_ERROR
    embed = log_channel.send.await_args.kwargs["embed"]
    assert embed.title == "⚠️ Server Action Error"
    assert any(field.value == "boom" for field in embed.fields)


@pytest.mark.asyncio
async def test_general_failure_is_not_audited(state):
    @command("explode", category=Category.FUN)
    async def explode(ctx, args):
        raise RuntimeError("nope")

    state.registry.register(explode)
    guild, log_channel = guild_with_log_channel(state)
    message = make_message("!explode", guild=guild)

    result = await state.dispatcher.dispatch(message)

    assert result.status == DispatchStatus.FAILED
    log_channel.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_autorole_change_is_flushed_to_disk(state, settings):
    role = make_role(666666666666666666, "Member")
    guild = make_guild(roles=[role])
    message = make_message(
        f"!autorole <@&{role.id}>",
        guild=guild,
        permissions=discord.Permissions(manage_roles=True),
    )

    result = await state.dispatcher.dispatch(message)

    assert result.status == DispatchStatus.EXECUTED
    raw = json.loads((settings.data_dir / "autoroles.json").read_text(encoding="utf-8"))
    assert raw == {str(GUILD_ID): str(role.id)}


@pytest.mark.asyncio
async def test_guild_prefix_replaces_default(state):
    guild = make_guild()
    state.store.prefixes.set(GUILD_ID, "?")

    assert state.prefix_for(guild) == "?"
    assert (await state.dispatcher.dispatch(make_message("!ping", guild=guild))).status == DispatchStatus.IGNORED
    assert (await state.dispatcher.dispatch(make_message("?ping", guild=guild))).status == DispatchStatus.EXECUTED


@pytest.mark.asyncio
async def test_setprefix_is_audited_and_saved(state, settings):
    guild, log_channel = guild_with_log_channel(state)
    message = make_message("!setprefix $", guild=guild, permissions=discord.Permissions(manage_guild=True))

    result = await state.dispatcher.dispatch(message)

    assert result.status == DispatchStatus.EXECUTED
    assert state.prefix_for(guild) == "$"
    raw = json.loads((settings.data_dir / "prefixes.json").read_text(encoding="utf-8"))
    assert raw == {str(GUILD_ID): "$"}
    log_channel.send.assert_awaited_once()
