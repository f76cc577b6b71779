from authkit.cache import BaseStateCache, MemoryStateCache, NullStateCache, RedisStateCache
from authkit.logger import logger
from authkit.third_party_auth import AuthFlow, ThirdPartyAuthFactory, ThirdPartyPlatform
from authkit.toolkit.http_cli import AsyncHttpClient
from internal.config.settings import Settings
from internal.core.exception import AppException, global_codes
from internal.infra.redis import get_redis


def new_state_cache(settings: Settings) -> BaseStateCache:
    """按配置选择 state 缓存实现"""
    if not settings.STATE_CHECK_ENABLED:
        logger.warning("State check disabled, OAuth callbacks are NOT protected against CSRF")
        return NullStateCache()
    if settings.REDIS_URL is not None:
        return RedisStateCache(get_redis, default_ttl=settings.STATE_TTL_SECONDS)
    return MemoryStateCache(default_ttl=settings.STATE_TTL_SECONDS)


class OAuthService:
    """按平台懒加载 AuthFlow，所有平台共享同一个 state 缓存与 HTTP 客户端"""

    def __init__(
        self,
        settings: Settings,
        state_cache: BaseStateCache | None = None,
        http_client: AsyncHttpClient | None = None,
    ):
        self._settings = settings
        self._state_cache = state_cache or new_state_cache(settings)
        self._http_client = http_client or AsyncHttpClient(timeout=settings.HTTP_TIMEOUT)
        self._flows: dict[ThirdPartyPlatform, AuthFlow] = {}

    def available_platforms(self) -> list[str]:
        return [p.value for p in self._settings.configured_platforms]

    def get_flow(self, platform: str) -> AuthFlow:
        """
        Raises:
            AppException: 平台不存在或未配置凭证
        """
        try:
            resolved = ThirdPartyAuthFactory.resolve_platform(platform)
        except ValueError as e:
            raise AppException(global_codes.NotFound, message=str(e)) from e

        if resolved not in self._settings.configured_platforms:
            raise AppException(global_codes.NotFound, message=f"Platform '{resolved.value}' is not configured")

        flow = self._flows.get(resolved)
        if flow is None:
            flow = ThirdPartyAuthFactory.create_flow(
                resolved,
                self._settings.auth_config(resolved),
                state_cache=self._state_cache,
                http_client=self._http_client,
                state_ttl=self._settings.STATE_TTL_SECONDS,
            )
            self._flows[resolved] = flow
        return flow

    async def close(self) -> None:
        # 共享的 HTTP 客户端由 service 负责关闭，flow 本身不持有资源
        await self._http_client.close()
        self._flows.clear()


_oauth_service: OAuthService | None = None


def init_oauth_service(settings: Settings) -> OAuthService:
    global _oauth_service
    _oauth_service = OAuthService(settings)
    logger.info(f"OAuth service initialized, platforms: {_oauth_service.available_platforms()}")
    return _oauth_service


async def close_oauth_service() -> None:
    global _oauth_service
    if _oauth_service is not None:
        await _oauth_service.close()
    _oauth_service = None


def new_oauth_service() -> OAuthService:
    if _oauth_service is None:
        raise RuntimeError("OAuthService not initialized. Call init_oauth_service() first.")
    return _oauth_service
