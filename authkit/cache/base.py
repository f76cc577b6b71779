"""state 缓存抽象基类"""

from abc import ABC, abstractmethod

# 授权页面停留时间上限，超时后 state 失效
DEFAULT_STATE_TTL_SECONDS = 180


class StateCacheError(Exception):
    """缓存后端操作异常"""

    pass


class BaseStateCache(ABC):
    """state 缓存接口

    key 为 state 本身。实现必须保证不同 key 之间互不干扰，
    过期的 key 必须表现为不存在。
    """

    # 为 False 时 AuthFlow 跳过 state 校验
    enabled: bool = True

    @abstractmethod
    async def put(self, key: str, value: str, ttl: int | None = None) -> None:
        """写入，ttl 为秒，None 使用实现的默认值"""
        pass

    @abstractmethod
    async def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    async def contains_valid(self, key: str) -> bool:
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        pass

    async def consume(self, key: str) -> bool:
        """
        校验并作废 key，key 有效时返回 True。

        默认实现分两步完成，不具备原子性；
        共享存储的实现必须重写为原子操作，防止同一个 state 被消费两次。
        """
        if not await self.contains_valid(key):
            return False
        await self.remove(key)
        return True


class NullStateCache(BaseStateCache):
    """空实现：不保存任何内容，AuthFlow 据此跳过 CSRF 校验"""

    enabled = False

    async def put(self, key: str, value: str, ttl: int | None = None) -> None:
        return None

    async def get(self, key: str) -> str | None:
        return None

    async def contains_valid(self, key: str) -> bool:
        return False

    async def remove(self, key: str) -> None:
        return None
