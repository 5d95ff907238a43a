# quiz/storage/memory.py - In-process cache layer consulted before Redis

import time
from typing import Any, Callable, Dict, Optional, Tuple


class MemoryCache:
    """Dict of encoded values with per-entry expiry"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None):
        expires_at = self._clock() + ttl if ttl else None
        self._entries[key] = (value, expires_at)

    def delete(self, key: str):
        self._entries.pop(key, None)

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [k for k, (_, exp) in self._entries.items() if exp is not None and exp <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self):
        return len(self._entries)
