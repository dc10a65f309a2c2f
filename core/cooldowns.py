"""
Per-command, per-invoker cooldowns.

``check_and_record`` has no await in it, so a check and the matching record
always happen in one step of the event loop.
"""
from __future__ import annotations

import time
from typing import Callable, Optional

from .types import CooldownResult


class CooldownTracker:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        # command name -> invoker id -> last allowed timestamp (seconds)
        self._timestamps: dict[str, dict[int, float]] = {}

    def check_and_record(
        self,
        command_name: str,
        invoker_id: int,
        cooldown_seconds: float,
        now: Optional[float] = None,
    ) -> CooldownResult:
        if now is None:
            now = self._clock()

        bucket = self._timestamps.setdefault(command_name, {})
        self._sweep(bucket, cooldown_seconds, now)

        last = bucket.get(invoker_id)
        if last is not None:
            expires_at = last + cooldown_seconds
            if now < expires_at:
                return CooldownResult(allowed=False, remaining=round(expires_at - now, 1))

        bucket[invoker_id] = now
        return CooldownResult(allowed=True)

    def last_used(self, command_name: str, invoker_id: int) -> Optional[float]:
        return self._timestamps.get(command_name, {}).get(invoker_id)

    def reset(self, command_name: Optional[str] = None) -> None:
        if command_name is None:
            self._timestamps.clear()
        else:
            self._timestamps.pop(command_name, None)

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._timestamps.values())

    @staticmethod
    def _sweep(bucket: dict[int, float], cooldown_seconds: float, now: float) -> None:
        expired = [uid for uid, ts in bucket.items() if now >= ts + cooldown_seconds]
        for uid in expired:
            del bucket[uid]
