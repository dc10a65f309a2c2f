"""
Auto-role module - configure and apply the role given to new members.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import discord

from core.audit import member_joined_entry
from core.commands import Command, CommandContext, command
from core.constants import Category, Color, RecordSet
from core.utils import parse_role_id

if TYPE_CHECKING:
    from bot.state import BotState

logger = logging.getLogger("cmdobot.roles")

OFF_WORDS = ("off", "none", "disable", "remove")


def _find_role(guild: discord.Guild, args: list[str]) -> Optional[discord.Role]:
    role_id = parse_role_id(args[0])
    if role_id is not None:
        return guild.get_role(role_id)
    name = " ".join(args).lower()
    return discord.utils.find(lambda role: role.name.lower() == name, guild.roles)


@command(
    "autorole",
    permissions=["manage_roles"],
    category=Category.ADMIN,
    usage="autorole [@role|id|name|off]",
    persists=[RecordSet.AUTOROLES],
)
async def autorole(ctx: CommandContext, args: list[str]) -> None:
    """Set, show or clear the role given to new members."""
    guild = ctx.guild
    if guild is None:
        await ctx.reply("This command only works in a server.")
        return

    store = ctx.state.store.autoroles

    if not args:
        role_id = store.role_for(guild.id)
        role = guild.get_role(role_id) if role_id else None
        if role is None:
            await ctx.reply(f"No auto-role is set. Use `{ctx.prefix}autorole @role` to set one.")
        else:
            await ctx.reply(f"New members receive **{role.name}**.")
        return

    if args[0].lower() in OFF_WORDS:
        if store.disable(guild.id):
            await ctx.reply("Auto-role disabled.")
        else:
            await ctx.reply("No auto-role was set.")
        return

    role = _find_role(guild, args)
    if role is None:
        await ctx.reply("Role not found. Mention it, or give its ID or exact name.")
        return
    if role.is_default() or role.managed:
        await ctx.reply("That role can't be assigned automatically.")
        return
    me = guild.me
    if me is not None and role >= me.top_role:
        await ctx.reply("That role is above my highest role, so I can't assign it.")
        return

    store.set(guild.id, str(role.id))
    await ctx.reply(f"✅ New members will now receive **{role.name}**.")


async def assign_auto_role(state: "BotState", member: discord.Member) -> Optional[discord.Role]:
    """Give ``member`` the guild's auto-role, welcome them and log it."""
    guild = member.guild
    role_id = state.store.autoroles.role_for(guild.id)
    if role_id is None:
        logger.debug("No auto-role configured for guild %s", guild.id)
        return None

    role = guild.get_role(role_id)
    if role is None:
        logger.error("Auto-role %s not found in guild %s", role_id, guild.id)
        return None

    try:
        await member.add_roles(role, reason="Auto-role")
    except discord.HTTPException as exc:
        logger.error("Error assigning auto-role to %s in guild %s: %s", member, guild.id, exc)
        return None
    logger.info("Assigned role %s to new member %s", role.name, member)

    system_channel = guild.system_channel
    if system_channel is not None:
        embed = discord.Embed(
            title="👋 Welcome!",
            description=f"Welcome {member.mention}! You've been automatically assigned the {role.name} role.",
            color=Color.JOIN,
            timestamp=discord.utils.utcnow(),
        )
        try:
            await system_channel.send(embed=embed)
        except discord.HTTPException as exc:
            logger.warning("Welcome message failed in guild %s: %s", guild.id, exc)

    await state.audit.emit(guild, member_joined_entry(member, role.name))
    return role


COMMANDS: list[Command] = [autorole]
