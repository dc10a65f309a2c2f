"""
JSON file helpers for the record stores.

Blocking file work runs in a worker thread so the event loop keeps serving
Discord events while a store is read or written.
"""
from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any


async def read_json(path: Path) -> Any:
    """Parsed contents of ``path``, or None if the file does not exist."""

    def _read() -> Any:
        if not path.is_file():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    return await asyncio.to_thread(_read)


async def write_json_atomic(path: Path, data: Any) -> None:
    """Replace ``path`` with ``data``; readers never see a half-written file."""
    text = json.dumps(data, ensure_ascii=False, indent=2)

    def _write() -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    await asyncio.to_thread(_write)


async def ensure_json(path: Path, default: Any) -> bool:
    """Create ``path`` holding ``default`` if it does not exist yet."""
    if path.exists():
        return False
    await write_json_atomic(path, default)
    return True
