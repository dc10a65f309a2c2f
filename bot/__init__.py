"""Bot package - Discord client, shared state and connection lifecycle."""
from .state import BotState, build_state
from .client import CmdoBot
from .lifecycle import run_forever

__all__ = ["BotState", "build_state", "CmdoBot", "run_forever"]
