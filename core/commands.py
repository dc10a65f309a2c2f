"""
Prefix command model and registry.

Commands are plain frozen dataclasses registered explicitly at startup.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, Optional

import discord

from .constants import DEFAULT_COOLDOWN_SECONDS, MANAGE_GUILD, Category

if TYPE_CHECKING:
    from bot.state import BotState

logger = logging.getLogger("cmdobot.commands")

CommandHandler = Callable[["CommandContext", list[str]], Awaitable[Any]]


@dataclass(frozen=True)
class Command:
    """
    A prefix command.

    ``permissions`` holds ``discord.Permissions`` attribute names; the invoker
    needs all of them in the invoking channel. ``persists`` names the record
    sets saved after the handler succeeds.
    """
    name: str
    handler: CommandHandler
    aliases: tuple[str, ...] = ()
    permissions: frozenset[str] = frozenset()
    cooldown: float = DEFAULT_COOLDOWN_SECONDS
    category: str = Category.GENERAL
    description: str = ""
    usage: str = ""
    persists: tuple[str, ...] = ()

    @property
    def is_moderation_impacting(self) -> bool:
        return (
            self.category == Category.MODERATION
            or self.name == "setup"
            or MANAGE_GUILD in self.permissions
        )


def command(
    name: str,
    *,
    aliases: Iterable[str] = (),
    permissions: Iterable[str] = (),
    cooldown: float = DEFAULT_COOLDOWN_SECONDS,
    category: str = Category.GENERAL,
    description: str = "",
    usage: str = "",
    persists: Iterable[str] = (),
) -> Callable[[CommandHandler], Command]:
    """Decorator turning an async handler into a ``Command``."""

    def decorator(handler: CommandHandler) -> Command:
        summary = description
        if not summary and handler.__doc__:
            summary = handler.__doc__.strip().splitlines()[0]
        required = frozenset(permissions)
        unknown = [perm for perm in sorted(required) if perm not in discord.Permissions.VALID_FLAGS]
        if unknown:
            raise ValueError(f"Unknown permission(s) for {name}: {', '.join(unknown)}")
        return Command(
            name=name.lower(),
            handler=handler,
            aliases=tuple(alias.lower() for alias in aliases),
            permissions=required,
            cooldown=cooldown,
            category=category,
            description=summary,
            usage=usage or name.lower(),
            persists=tuple(persists),
        )

    return decorator


class CommandRegistry:
    """name -> Command and alias -> name lookup tables."""

    def __init__(self) -> None:
        self.commands: dict[str, Command] = {}
        self.aliases: dict[str, str] = {}

    def register(self, cmd: Command) -> None:
        if cmd.name in self.commands:
            raise ValueError(f"Command {cmd.name!r} is already registered")
        self.commands[cmd.name] = cmd
        for alias in cmd.aliases:
            if alias in self.aliases or alias in self.commands:
                logger.warning("Alias %r of %s shadows an existing command or alias", alias, cmd.name)
                continue
            self.aliases[alias] = cmd.name

    def register_all(self, commands: Iterable[Command]) -> None:
        for cmd in commands:
            self.register(cmd)

    def resolve(self, token: str) -> Optional[Command]:
        token = token.lower()
        found = self.commands.get(token)
        if found is not None:
            return found
        target = self.aliases.get(token)
        if target is not None and target in self.commands:
            return self.commands[target]
        for cmd in self.commands.values():
            if token in cmd.aliases:
                return cmd
        return None

    def by_category(self) -> dict[str, list[Command]]:
        grouped: dict[str, list[Command]] = {}
        for cmd in self.commands.values():
            grouped.setdefault(cmd.category, []).append(cmd)
        return grouped

    def __len__(self) -> int:
        return len(self.commands)

    def __contains__(self, name: str) -> bool:
        return name in self.commands


@dataclass
class CommandContext:
    """Everything a handler needs about one invocation."""
    message: discord.Message
    state: "BotState"
    prefix: str
    command: Optional[Command] = None
    replies: list[str] = field(default_factory=list)

    @property
    def bot(self) -> Optional[discord.Client]:
        return self.state.client

    @property
    def author(self) -> Any:
        return self.message.author

    @property
    def guild(self) -> Optional[discord.Guild]:
        return self.message.guild

    @property
    def channel(self) -> Any:
        return self.message.channel

    async def reply(self, content: Optional[str] = None, **kwargs: Any) -> Any:
        if content is not None:
            self.replies.append(content)
        kwargs.setdefault("mention_author", False)
        kwargs.setdefault("allowed_mentions", discord.AllowedMentions.none())
        return await self.message.reply(content, **kwargs)
