"""
Chatting module - turn the casual-chat responder on or off per channel.
"""
from __future__ import annotations

from core.commands import Command, CommandContext, command
from core.constants import Category

MAX_TOPIC_LENGTH = 100


@command(
    "chat",
    aliases=["chatting"],
    permissions=["manage_channels"],
    category=Category.FUN,
    usage="chat <on|off|topic <text>|status>",
)
async def chat(ctx: CommandContext, args: list[str]) -> None:
    """Let the bot join the conversation in this channel."""
    responder = ctx.state.chat
    channel_id = ctx.channel.id
    action = args[0].lower() if args else "status"

    if action in ("on", "enable", "start"):
        responder.enable(channel_id)
        await ctx.reply("💬 Chatting enabled in this channel.")
    elif action in ("off", "disable", "stop"):
        responder.disable(channel_id)
        await ctx.reply("Chatting disabled in this channel.")
    elif action == "topic":
        topic = " ".join(args[1:]).strip()
        if len(topic) > MAX_TOPIC_LENGTH:
            await ctx.reply(f"Topics can be at most {MAX_TOPIC_LENGTH} characters.")
            return
        responder.set_topic(channel_id, topic)
        await ctx.reply(f"Topic set to **{topic}**." if topic else "Topic cleared.")
    elif action == "status":
        state = responder.channel_state(channel_id)
        enabled = "on" if state.enabled else "off"
        await ctx.reply(f"Chatting is **{enabled}** here. Topic: {state.topic or 'none'}")
    else:
        await ctx.reply(f"**Usage:** `{ctx.prefix}chat <on|off|topic <text>|status>`")


COMMANDS: list[Command] = [chat]
