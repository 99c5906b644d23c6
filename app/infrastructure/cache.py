"""In-memory cache with per-entry expiry, used by the QR and geolocation services."""

import time
from typing import Any, Dict, Optional, Tuple


class TimedCache:
    """
    Dict-backed cache. Entries older than `ttl_seconds` are treated as missing
    and dropped on read; once the cache holds more than `max_entries`, a write
    sweeps every expired entry.
    """

    def __init__(self, ttl_seconds: float, max_entries: int):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str, now: float | None = None) -> Optional[Any]:
        now = time.time() if now is None else now
        entry = self._entries.get(key)
        if entry and now - entry[0] < self.ttl_seconds:
            return entry[1]
        self._entries.pop(key, None)
        return None

    def set(self, key: str, value: Any, now: float | None = None) -> None:
        now = time.time() if now is None else now
        self._entries[key] = (now, value)
        if len(self._entries) > self.max_entries:
            expired = [k for k, (ts, _) in list(self._entries.items()) if now - ts > self.ttl_seconds]
            for k in expired:
                self._entries.pop(k, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict:
        return {"size": len(self._entries), "timeout": self.ttl_seconds}
