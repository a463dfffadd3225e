import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """
    Small key -> value cache where every entry expires ``ttl`` seconds after it
    was written.

    Instances are passed into the clients that need them (price oracle,
    provider pool) so tests can hand in a fake ``clock``. Concurrent writers on
    a miss simply overwrite each other; the last value wins.
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._store: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expiry = entry
        if self._clock() >= expiry:
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any):
        self._store[key] = (value, self._clock() + self.ttl)

    def clear(self):
        self._store.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._store)
