"""
Shared constants.

Using constants instead of string literals provides:
- IDE autocomplete
- Typo protection (caught at import time)
- Single source of truth for key names
"""
from __future__ import annotations

DEFAULT_PREFIX = "!"
DEFAULT_COOLDOWN_SECONDS = 3.0


class RecordSet:
    """Names of the persisted JSON record sets."""

    AUTOROLES = "autoroles"
    LOGS = "logs"
    STATUSES = "statuses"
    MESSAGES = "messages"
    INVITES = "invites"
    PREFIXES = "prefixes"


class Category:
    """Command category tags."""

    GENERAL = "general"
    MODERATION = "moderation"
    ADMIN = "admin"
    FUN = "fun"
    UTILITY = "utility"
    AI = "ai"


class Status:
    """Per-guild presence values accepted by ``setstatus``."""

    ONLINE = "online"
    IDLE = "idle"
    DND = "dnd"
    OFFLINE = "offline"

    ALL = (ONLINE, IDLE, DND, OFFLINE)


class Color:
    """Embed colours used for audit and welcome embeds."""

    ACTION = 0x0099FF
    ERROR = 0xFF0000
    JOIN = 0x00FF00
    INFO = 0x5865F2


class Replies:
    """User-visible dispatcher replies."""

    NO_PERMISSION = "You do not have permission to use this command!"
    COOLDOWN = "Please wait {remaining:.1f} more second(s) before reusing the `{name}` command."
    EXECUTION_ERROR = "There was an error executing that command!"


# Permission that marks a command as server-changing for audit purposes.
MANAGE_GUILD = "manage_guild"

# Legacy global auto-role key, honoured for every guild.
LEGACY_AUTOROLE_KEY = "DEFAULT_ROLE_ID"
# Per-guild value that overrides the legacy key.
AUTOROLE_OFF = "off"
