import time
from typing import Any, Callable, Optional
from aiocache import SimpleMemoryCache

class TTLCache:
    """Expiring key/value cache owned by a single component.

    Expiry is decided against an injected clock so callers (and tests)
    control time; storage lives in a private aiocache backend.
    """

    def __init__(
        self,
        ttl: Optional[float],
        clock: Callable[[], float] = time.monotonic,
        namespace: str = ""
    ):
        self.ttl = ttl
        self._clock = clock
        self._backend = SimpleMemoryCache(namespace=namespace)

    async def get(self, key: str) -> Optional[Any]:
        entry = await self._backend.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            await self._backend.delete(key)
            return None
        return value

    async def set(self, key: str, value: Any) -> None:
        expires_at = self._clock() + self.ttl if self.ttl is not None else None
        await self._backend.set(key, (value, expires_at))

    async def delete(self, key: str) -> None:
        await self._backend.delete(key)
