"""进程内 state 缓存"""

import threading
import time
from collections.abc import Callable

from .base import DEFAULT_STATE_TTL_SECONDS, BaseStateCache


class MemoryStateCache(BaseStateCache):
    """基于 dict 的 state 缓存

    线程安全；过期判断以注入的 clock 为准（默认 time.monotonic），
    测试中可传入可控时钟。过期清理在写入时顺带进行，只是回收内存，
    读取时的过期判断不依赖它。
    """

    def __init__(
        self,
        default_ttl: int = DEFAULT_STATE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive, got {default_ttl}")
        self.default_ttl = default_ttl
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (value, expire_at)
        self._store: dict[str, tuple[str, float]] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    async def put(self, key: str, value: str, ttl: int | None = None) -> None:
        expire_at = self._clock() + (ttl or self.default_ttl)
        with self._lock:
            self._purge_expired()
            self._store[key] = (value, expire_at)

    async def get(self, key: str) -> str | None:
        with self._lock:
            item = self._get_alive(key)
            return item[0] if item else None

    async def contains_valid(self, key: str) -> bool:
        with self._lock:
            return self._get_alive(key) is not None

    async def remove(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    async def consume(self, key: str) -> bool:
        with self._lock:
            alive = self._get_alive(key) is not None
            self._store.pop(key, None)
            return alive

    def _get_alive(self, key: str) -> tuple[str, float] | None:
        # 调用方需持有锁
        item = self._store.get(key)
        if item is None:
            return None
        if item[1] <= self._clock():
            del self._store[key]
            return None
        return item

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [k for k, (_, expire_at) in self._store.items() if expire_at <= now]
        for k in expired:
            del self._store[k]
