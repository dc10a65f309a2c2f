"""
Custom messages - short named texts that staff save and anyone can recall.
"""
from __future__ import annotations

from core.commands import Command, CommandContext, command
from core.constants import Category, RecordSet
from core.utils import sanitize_text

MAX_KEY_LENGTH = 32
MAX_MESSAGE_LENGTH = 1500


@command(
    "addmessage",
    permissions=["manage_messages"],
    category=Category.UTILITY,
    usage="addmessage <name> <text>",
    persists=[RecordSet.MESSAGES],
)
async def addmessage(ctx: CommandContext, args: list[str]) -> None:
    """Save a named message."""
    if ctx.guild is None:
        await ctx.reply("This command only works in a server.")
        return
    if len(args) < 2:
        await ctx.reply(f"**Usage:** `{ctx.prefix}addmessage <name> <text>`")
        return

    key = args[0].lower()
    if len(key) > MAX_KEY_LENGTH:
        await ctx.reply(f"Names can be at most {MAX_KEY_LENGTH} characters.")
        return
    text = " ".join(args[1:])
    if len(text) > MAX_MESSAGE_LENGTH:
        await ctx.reply(f"Messages can be at most {MAX_MESSAGE_LENGTH} characters.")
        return

    store = ctx.state.store.messages
    existed = store.key_for(ctx.guild.id, key) in store
    store.set(store.key_for(ctx.guild.id, key), text)
    await ctx.reply(f"✅ {'Updated' if existed else 'Saved'} message `{key}`.")


@command(
    "removemessage",
    aliases=["delmessage"],
    permissions=["manage_messages"],
    category=Category.UTILITY,
    usage="removemessage <name>",
    persists=[RecordSet.MESSAGES],
)
async def removemessage(ctx: CommandContext, args: list[str]) -> None:
    """Delete a saved message."""
    if ctx.guild is None or not args:
        await ctx.reply(f"**Usage:** `{ctx.prefix}removemessage <name>`")
        return
    store = ctx.state.store.messages
    if store.remove(store.key_for(ctx.guild.id, args[0])):
        await ctx.reply(f"🗑️ Removed message `{args[0].lower()}`.")
    else:
        await ctx.reply(f"No message named `{args[0].lower()}`.")


@command("message", aliases=["msg"], category=Category.UTILITY, usage="message <name>")
async def message(ctx: CommandContext, args: list[str]) -> None:
    """Post a saved message."""
    if ctx.guild is None or not args:
        await ctx.reply(f"**Usage:** `{ctx.prefix}message <name>`")
        return
    store = ctx.state.store.messages
    text = store.get(store.key_for(ctx.guild.id, args[0]))
    if text is None:
        await ctx.reply(f"No message named `{args[0].lower()}`.")
        return
    await ctx.reply(sanitize_text(text, max_len=2000))


@command("messages", category=Category.UTILITY, usage="messages")
async def messages(ctx: CommandContext, args: list[str]) -> None:
    """List saved messages."""
    if ctx.guild is None:
        await ctx.reply("This command only works in a server.")
        return
    keys = ctx.state.store.messages.keys_for(ctx.guild.id)
    if not keys:
        await ctx.reply("No saved messages yet.")
        return
    await ctx.reply("Saved messages: " + ", ".join(f"`{key}`" for key in keys))


COMMANDS: list[Command] = [addmessage, removemessage, message, messages]
