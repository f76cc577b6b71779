from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from redis.asyncio import Redis

from authkit.logger import logger

_redis_client: Redis | None = None


def init_redis(url: str) -> None:
    """
    初始化 Redis 客户端（连接池由客户端管理）。
    应在 FastAPI lifespan 中调用。
    """
    global _redis_client

    if _redis_client is None:
        logger.info("Initializing Redis connection...")
        _redis_client = Redis.from_url(url, encoding="utf-8", decode_responses=True)
        logger.info("Redis initialized successfully.")


async def close_redis() -> None:
    """关闭 Redis 连接"""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        logger.warning("Redis connection closed.")
    _redis_client = None


@asynccontextmanager
async def get_redis() -> AsyncGenerator[Redis, None]:
    """Session provider，供 RedisStateCache 使用"""
    if _redis_client is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    yield _redis_client
