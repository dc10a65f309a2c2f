"""
Persistent JSON record sets.

Each record set is a flat ``{key: value}`` map held in memory and mirrored to
one JSON file. Loads and saves are whole-file operations; saves of the same
set are serialised by a per-store lock.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Iterator, Optional

from .constants import AUTOROLE_OFF, LEGACY_AUTOROLE_KEY, RecordSet, Status
from .io_utils import ensure_json, read_json, write_json_atomic
from .utils import safe_int

logger = logging.getLogger("cmdobot.storage")


class JsonRecordStore:
    """
    In-memory map backed by a JSON file.

    Subclasses override ``wrapper_key`` when the file nests the map under a
    single top-level key (``{"servers": {...}}``).
    """

    name: str = ""
    filename: str = ""
    wrapper_key: Optional[str] = None

    def __init__(self, data_dir: Path) -> None:
        self.path = Path(data_dir) / self.filename
        self.data: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    # ─── Map access ───────────────────────────────────────────────────────────

    def get(self, key: Any, default: Any = None) -> Any:
        return self.data.get(str(key), default)

    def set(self, key: Any, value: Any) -> None:
        self.data[str(key)] = value

    def remove(self, key: Any) -> bool:
        return self.data.pop(str(key), None) is not None

    def __contains__(self, key: Any) -> bool:
        return str(key) in self.data

    def __len__(self) -> int:
        return len(self.data)

    def items(self) -> Iterator[tuple[str, Any]]:
        return iter(list(self.data.items()))

    # ─── Encoding ─────────────────────────────────────────────────────────────

    def decode(self, raw: Any) -> dict[str, Any]:
        if self.wrapper_key is not None:
            raw = raw.get(self.wrapper_key) if isinstance(raw, dict) else None
        if not isinstance(raw, dict):
            raise ValueError(f"{self.filename} does not contain a JSON object")
        return {str(key): value for key, value in raw.items()}

    def encode(self) -> Any:
        snapshot = dict(self.data)
        if self.wrapper_key is not None:
            return {self.wrapper_key: snapshot}
        return snapshot

    # ─── Persistence ──────────────────────────────────────────────────────────

    async def load(self) -> None:
        """Replace the in-memory map with the file contents. Never raises."""
        async with self._lock:
            try:
                raw = await read_json(self.path)
            except (OSError, ValueError) as exc:
                logger.error("Error loading %s from %s: %s", self.name, self.path, exc)
                self.data = {}
                return

            if raw is None:
                logger.info("No %s file at %s; starting empty", self.name, self.path)
                self.data = {}
                return

            try:
                self.data = self.decode(raw)
            except ValueError as exc:
                logger.error("Invalid %s data in %s: %s", self.name, self.path, exc)
                self.data = {}
                return

            logger.info("Loaded %d %s record(s)", len(self.data), self.name)

    async def save(self) -> bool:
        """Write a full snapshot of the map. Returns False on failure."""
        async with self._lock:
            payload = self.encode()
            try:
                await write_json_atomic(self.path, payload)
            except (OSError, TypeError, ValueError) as exc:
                logger.error("Error saving %s to %s: %s", self.name, self.path, exc)
                return False
            logger.debug("Saved %d %s record(s)", len(self.data), self.name)
            return True


class AutoRoleStore(JsonRecordStore):
    name = RecordSet.AUTOROLES
    filename = "autoroles.json"

    def role_for(self, guild_id: int) -> Optional[int]:
        value = self.get(guild_id)
        if value == AUTOROLE_OFF:
            return None
        if value is None:
            value = self.get(LEGACY_AUTOROLE_KEY)
        return safe_int(value)

    def disable(self, guild_id: int) -> bool:
        """Turn the auto-role off for a guild. Returns False if none was active."""
        was_active = self.role_for(guild_id) is not None
        if LEGACY_AUTOROLE_KEY in self:
            # The legacy key applies to every guild, so shadow it here.
            self.set(guild_id, AUTOROLE_OFF)
        else:
            self.remove(guild_id)
        return was_active


class LogChannelStore(JsonRecordStore):
    name = RecordSet.LOGS
    filename = "logs.json"
    wrapper_key = "channels"

    def decode(self, raw: Any) -> dict[str, Any]:
        # Older files hold the map at the top level.
        if isinstance(raw, dict) and not isinstance(raw.get("channels"), dict):
            return {str(key): value for key, value in raw.items()}
        return super().decode(raw)

    def channel_for(self, guild_id: int) -> Optional[int]:
        return safe_int(self.get(guild_id))


class ServerStatusStore(JsonRecordStore):
    name = RecordSet.STATUSES
    filename = "serverstatus.json"
    wrapper_key = "servers"

    def status_for(self, guild_id: int) -> str:
        value = self.get(guild_id)
        return value if value in Status.ALL else Status.ONLINE

    def ensure_default(self, guild_id: int) -> bool:
        """Seed ``online`` for a guild seen for the first time."""
        if guild_id in self:
            return False
        self.set(guild_id, Status.ONLINE)
        return True


class MessageStore(JsonRecordStore):
    name = RecordSet.MESSAGES
    filename = "messages.json"
    wrapper_key = "addedMessages"

    @staticmethod
    def key_for(guild_id: int, key: str) -> str:
        return f"{guild_id}:{key.lower()}"

    def keys_for(self, guild_id: int) -> list[str]:
        prefix = f"{guild_id}:"
        return sorted(key[len(prefix):] for key in self.data if key.startswith(prefix))


class InviteStore(JsonRecordStore):
    """Placeholder record set for invite tracking; only initialised."""

    name = RecordSet.INVITES
    filename = "invites.json"
    wrapper_key = "invites"

    async def load(self) -> None:
        try:
            if await ensure_json(self.path, {"invites": {}}):
                logger.info("Initialised invites file at %s", self.path)
        except OSError as exc:
            logger.error("Error initialising invites: %s", exc)
        await super().load()


class PrefixStore(JsonRecordStore):
    name = RecordSet.PREFIXES
    filename = "prefixes.json"

    def prefix_for(self, guild_id: Optional[int], default: str) -> str:
        if guild_id is None:
            return default
        return self.get(guild_id) or default


class StateStore:
    """All record sets of the bot, keyed by record-set name."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.autoroles = AutoRoleStore(self.data_dir)
        self.logs = LogChannelStore(self.data_dir)
        self.statuses = ServerStatusStore(self.data_dir)
        self.messages = MessageStore(self.data_dir)
        self.invites = InviteStore(self.data_dir)
        self.prefixes = PrefixStore(self.data_dir)
        self._stores: dict[str, JsonRecordStore] = {
            store.name: store
            for store in (
                self.messages,
                self.invites,
                self.autoroles,
                self.statuses,
                self.logs,
                self.prefixes,
            )
        }

    def __getitem__(self, name: str) -> JsonRecordStore:
        return self._stores[name]

    @property
    def names(self) -> list[str]:
        return list(self._stores)

    async def load_all(self) -> None:
        for store in self._stores.values():
            await store.load()

    async def flush(self, name: str) -> bool:
        store = self._stores.get(name)
        if store is None:
            logger.warning("Unknown record set %r; nothing to flush", name)
            return False
        return await store.save()

    async def flush_all(self) -> None:
        for store in self._stores.values():
            await store.save()
