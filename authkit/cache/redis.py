"""Redis state 缓存 - 多实例部署共享 state"""

import functools
from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from redis.asyncio import Redis

from .base import DEFAULT_STATE_TTL_SECONDS, BaseStateCache, StateCacheError

SessionProvider = Callable[[], AbstractAsyncContextManager[Redis]]

STATE_KEY_PREFIX = "authkit:state:"

# GET + DEL 放在同一个脚本里执行，保证同一个 state 只能被消费一次
CONSUME_STATE_SCRIPT = r"""
local value = redis.call("GET", KEYS[1])
if value then
    redis.call("DEL", KEYS[1])
end
return value
"""


def handle_redis_exception(func):
    """
    装饰器：统一包装 Redis 操作异常
    """

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except StateCacheError:
            raise
        except Exception as e:
            raise StateCacheError(f"Redis error in '{func.__name__}': {repr(e)}") from e

    return wrapper


def _decode(value: bytes | str | None) -> str | None:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


class RedisStateCache(BaseStateCache):
    """基于 Redis 的 state 缓存

    过期交给 Redis 的 EX 处理；consume 通过 Lua 脚本保证原子性。
    """

    def __init__(
        self,
        session_provider: SessionProvider,
        *,
        default_ttl: int = DEFAULT_STATE_TTL_SECONDS,
        key_prefix: str = STATE_KEY_PREFIX,
    ):
        if default_ttl <= 0:
            raise ValueError(f"default_ttl must be positive, got {default_ttl}")
        self.session_provider = session_provider
        self.default_ttl = default_ttl
        self.key_prefix = key_prefix

    @classmethod
    def from_client(cls, redis: Redis, **kwargs) -> "RedisStateCache":
        """使用一个已有的 Redis 客户端（连接池由客户端自身管理）"""

        @asynccontextmanager
        async def _provider() -> AsyncGenerator[Redis, None]:
            yield redis

        return cls(_provider, **kwargs)

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisStateCache":
        return cls.from_client(Redis.from_url(url), **kwargs)

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    @handle_redis_exception
    async def put(self, key: str, value: str, ttl: int | None = None) -> None:
        async with self.session_provider() as redis:
            await redis.set(self._key(key), value, ex=ttl or self.default_ttl)

    @handle_redis_exception
    async def get(self, key: str) -> str | None:
        async with self.session_provider() as redis:
            return _decode(await redis.get(self._key(key)))

    @handle_redis_exception
    async def contains_valid(self, key: str) -> bool:
        async with self.session_provider() as redis:
            return await redis.exists(self._key(key)) > 0

    @handle_redis_exception
    async def remove(self, key: str) -> None:
        async with self.session_provider() as redis:
            await redis.delete(self._key(key))

    @handle_redis_exception
    async def consume(self, key: str) -> bool:
        async with self.session_provider() as redis:
            value = await redis.eval(CONSUME_STATE_SCRIPT, 1, self._key(key))
        return value is not None
