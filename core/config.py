"""
Process configuration loading and validation.

Settings come from environment variables (``main.py`` loads ``.env`` first).
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .constants import DEFAULT_PREFIX
from .utils import safe_int

REPO_ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = REPO_ROOT / "data"

DEFAULT_WEB_HOST = "0.0.0.0"
DEFAULT_WEB_PORT = 5000
DEFAULT_RECONNECT_DELAY = 5.0
DEFAULT_OPENAI_MODEL = "gpt-5"


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class BotSettings:
    token: Optional[str] = None
    prefix: str = DEFAULT_PREFIX
    data_dir: Path = DATA_DIR
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    dashboard_username: str = "admin"
    dashboard_password: str = "admin123"
    web_host: str = DEFAULT_WEB_HOST
    web_port: int = DEFAULT_WEB_PORT
    web_enabled: bool = True
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY
    log_level: str = "INFO"

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BotSettings":
        env = os.environ if environ is None else environ

        prefix = env.get("BOT_PREFIX", DEFAULT_PREFIX).strip()
        if not prefix or any(ch.isspace() for ch in prefix):
            raise ConfigError("BOT_PREFIX must be a non-empty string without spaces")

        port = safe_int(env.get("WEB_PORT", str(DEFAULT_WEB_PORT)))
        if port is None or not 0 < port < 65536:
            raise ConfigError("WEB_PORT must be an integer between 1 and 65535")

        try:
            reconnect_delay = float(env.get("RECONNECT_DELAY_SECONDS", DEFAULT_RECONNECT_DELAY))
        except ValueError as exc:
            raise ConfigError("RECONNECT_DELAY_SECONDS must be a number") from exc
        if reconnect_delay < 0:
            raise ConfigError("RECONNECT_DELAY_SECONDS must not be negative")

        return cls(
            token=env.get("DISCORD_BOT_TOKEN") or env.get("BOT_TOKEN") or None,
            prefix=prefix,
            data_dir=data_dir_from(env.get("DATA_DIR", "data")),
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            openai_model=env.get("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            dashboard_username=env.get("DASHBOARD_USERNAME", "admin"),
            dashboard_password=env.get("DASHBOARD_PASSWORD", "admin123"),
            web_host=env.get("WEB_HOST", DEFAULT_WEB_HOST),
            web_port=port,
            web_enabled=env.get("WEB_ENABLED", "1").strip().lower() not in ("0", "false", "no"),
            reconnect_delay=reconnect_delay,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def require_token(self) -> str:
        if not self.token:
            raise ConfigError("Missing bot token. Set DISCORD_BOT_TOKEN in .env or environment.")
        return self.token


def data_dir_from(value: str) -> Path:
    """Relative data directories are taken from the repository root."""
    path = Path(value).expanduser()
    return path if path.is_absolute() else REPO_ROOT / path
