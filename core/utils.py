"""
General utility functions.

Provides date/time helpers, text sanitization, mention parsing and duration helpers.
"""
from __future__ import annotations

import datetime as dt
import re
from typing import Any, Optional

UTC = dt.timezone.utc

CONTROL_RE = re.compile(r"[\x00-\x09\x0b-\x1f\x7f]")
USER_MENTION_RE = re.compile(r"^<@!?(\d+)>$")
ROLE_MENTION_RE = re.compile(r"^<@&(\d+)>$")
CHANNEL_MENTION_RE = re.compile(r"^<#(\d+)>$")

# e.g. "1h", "30m", "7d", "1d12h"
DURATION_PATTERN = re.compile(
    r"^(?:(\d+)d)?(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s)?$",
    re.IGNORECASE,
)


def utcnow() -> dt.datetime:
    return dt.datetime.now(tz=UTC)


def sanitize_text(text: Any, max_len: int = 1500) -> str:
    if text is None:
        return ""
    text = str(text)
    text = CONTROL_RE.sub("", text)
    text = text.replace("@", "@\u200b")
    if len(text) > max_len:
        text = text[: max_len - 3] + "..."
    return text


def truncate(text: str, max_len: int = 1024) -> str:
    """Cut ``text`` to fit an embed field value."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def safe_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isdigit():
            try:
                return int(stripped)
            except ValueError:
                return default
    return default


def _parse_snowflake(token: str, pattern: re.Pattern[str]) -> Optional[int]:
    token = (token or "").strip()
    match = pattern.match(token)
    if match:
        return int(match.group(1))
    if token.isdigit() and 15 <= len(token) <= 21:
        return int(token)
    return None


def parse_user_id(token: str) -> Optional[int]:
    """Accept ``<@123>``, ``<@!123>`` or a raw snowflake."""
    return _parse_snowflake(token, USER_MENTION_RE)


def parse_role_id(token: str) -> Optional[int]:
    """Accept ``<@&123>`` or a raw snowflake."""
    return _parse_snowflake(token, ROLE_MENTION_RE)


def parse_channel_id(token: str) -> Optional[int]:
    """Accept ``<#123>`` or a raw snowflake."""
    return _parse_snowflake(token, CHANNEL_MENTION_RE)


def parse_duration(duration_str: str) -> Optional[dt.timedelta]:
    """
    Parse a duration string like "1h30m" or "7d" into a timedelta.

    Returns None if invalid or zero.
    """
    duration_str = (duration_str or "").strip().lower()
    if not duration_str:
        return None

    match = DURATION_PATTERN.match(duration_str)
    if not match:
        return None

    days = int(match.group(1) or 0)
    hours = int(match.group(2) or 0)
    minutes = int(match.group(3) or 0)
    seconds = int(match.group(4) or 0)

    if days == hours == minutes == seconds == 0:
        return None

    return dt.timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds)


def format_duration(td: dt.timedelta) -> str:
    """Format a timedelta as a compact string such as ``1d2h``."""
    total_seconds = int(td.total_seconds())

    days, remainder = divmod(total_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = []
    if days:
        parts.append(f"{days}d")
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds and not parts:
        parts.append(f"{seconds}s")

    return "".join(parts) if parts else "0s"


def format_uptime(seconds: float) -> str:
    """Render process uptime as ``Xd Yh Zm``."""
    seconds = max(0, int(seconds))
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60
    return f"{days}d {hours}h {minutes}m"
