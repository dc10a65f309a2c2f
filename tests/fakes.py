"""Lightweight stand-ins for Discord objects used across the tests."""
from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord

GUILD_ID = 111111111111111111
CHANNEL_ID = 222222222222222222
LOG_CHANNEL_ID = 333333333333333333
AUTHOR_ID = 444444444444444444


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeUser(SimpleNamespace):
    def __str__(self):
        return self.name


def make_user(user_id=AUTHOR_ID, name="mod#0001", bot=False, **extra):
    return FakeUser(id=user_id, name=name, bot=bot, mention=f"<@{user_id}>", top_role=None, **extra)


def make_channel(channel_id=CHANNEL_ID, name="general", permissions=None):
    perms = permissions if permissions is not None else discord.Permissions.none()
    return SimpleNamespace(
        id=channel_id,
        name=name,
        mention=f"<#{channel_id}>",
        permissions_for=lambda member: perms,
        send=AsyncMock(),
        typing=AsyncMock(),
    )


def make_guild(guild_id=GUILD_ID, log_channel=None, members=(), roles=(), owner_id=AUTHOR_ID):
    members_by_id = {member.id: member for member in members}
    roles_by_id = {role.id: role for role in roles}

    def get_channel(channel_id):
        if log_channel is not None and channel_id == log_channel.id:
            return log_channel
        return None

    return SimpleNamespace(
        id=guild_id,
        name="Test Guild",
        owner_id=owner_id,
        me=None,
        member_count=len(members_by_id),
        roles=list(roles),
        system_channel=None,
        get_channel=get_channel,
        get_member=members_by_id.get,
        get_role=roles_by_id.get,
        fetch_member=AsyncMock(side_effect=discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "")),
    )


def make_message(content, *, author=None, guild=None, channel=None, permissions=None):
    return SimpleNamespace(
        content=content,
        author=author or make_user(),
        guild=guild,
        channel=channel or make_channel(permissions=permissions),
        reply=AsyncMock(return_value=SimpleNamespace(edit=AsyncMock())),
    )


def make_role(role_id, name, managed=False):
    return SimpleNamespace(id=role_id, name=name, managed=managed, is_default=lambda: False)
