"""state 缓存 - 登录尝试之间唯一共享的状态

- base: 抽象接口与默认过期时间
- memory: 进程内实现（默认）
- redis: 多进程/多实例共享实现
- NullStateCache: 显式关闭 state 校验
"""

from .base import DEFAULT_STATE_TTL_SECONDS, BaseStateCache, NullStateCache, StateCacheError
from .memory import MemoryStateCache
from .redis import RedisStateCache

__all__ = [
    "DEFAULT_STATE_TTL_SECONDS",
    "BaseStateCache",
    "NullStateCache",
    "StateCacheError",
    "MemoryStateCache",
    "RedisStateCache",
]
