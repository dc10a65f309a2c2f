"""
Core utilities and infrastructure for the bot.

This package contains:
- audit: Audit log entries and delivery
- commands: Command model and registry
- config: Environment configuration, validation and the data directory
- constants: Record-set names, categories and reply texts
- cooldowns: Per-command, per-user cooldown tracking
- dispatcher: Prefix command dispatch
- help_system: Help embeds built from the registry
- io_utils: File I/O helpers
- storage: Persistent JSON record sets
- types: Dataclasses and type definitions
- utils: General utilities
"""
from .constants import Category, RecordSet, Replies, Status
from .types import AuditEntry, ChatChannelState, CooldownResult, DispatchResult, DispatchStatus

__all__ = [
    # Constants
    "Category",
    "RecordSet",
    "Replies",
    "Status",
    # Types
    "AuditEntry",
    "ChatChannelState",
    "CooldownResult",
    "DispatchResult",
    "DispatchStatus",
]
