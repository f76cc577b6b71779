"""第三方认证策略工厂 - 可复用的策略注册表"""

from authkit.cache import DEFAULT_STATE_TTL_SECONDS, BaseStateCache
from authkit.logger import logger
from authkit.toolkit.http_cli import AsyncHttpClient

from .base import BaseThirdPartyAuthStrategy
from .config import AuthConfig
from .flow import AuthFlow
from .source import ThirdPartyPlatform
from .strategies import GithubAuthStrategy, QQAuthStrategy, WeChatMpAuthStrategy, WeChatOpenAuthStrategy


class ThirdPartyAuthFactory:
    """第三方认证策略工厂

    使用示例:
        ```python
        flow = ThirdPartyAuthFactory.create_flow(
            ThirdPartyPlatform.WECHAT_MP,
            AuthConfig(client_id="appid", client_secret="secret", redirect_uri="https://x/cb"),
            state_cache=RedisStateCache.from_url("redis://localhost:6379/0"),
        )

        # 注册新的策略（在模块初始化时调用）
        ThirdPartyAuthFactory.register_strategy(ThirdPartyPlatform.GITHUB, MyGithubAuthStrategy)
        ```
    """

    # 策略注册表
    _strategies: dict[ThirdPartyPlatform, type[BaseThirdPartyAuthStrategy]] = {
        ThirdPartyPlatform.WECHAT_MP: WeChatMpAuthStrategy,
        ThirdPartyPlatform.WECHAT_OPEN: WeChatOpenAuthStrategy,
        ThirdPartyPlatform.QQ: QQAuthStrategy,
        ThirdPartyPlatform.GITHUB: GithubAuthStrategy,
    }

    @classmethod
    def register_strategy(
        cls,
        platform: ThirdPartyPlatform,
        strategy_class: type[BaseThirdPartyAuthStrategy],
    ) -> None:
        """
        注册新的认证策略，已存在的平台会被覆盖

        Args:
            platform: 平台标识
            strategy_class: 策略类
        """
        cls._strategies[platform] = strategy_class
        logger.info(f"Registered third-party auth strategy for {platform.value}")

    @classmethod
    def resolve_platform(cls, platform: ThirdPartyPlatform | str) -> ThirdPartyPlatform:
        """
        Raises:
            ValueError: 当平台未注册时
        """
        # 支持字符串输入
        if isinstance(platform, str) and not isinstance(platform, ThirdPartyPlatform):
            try:
                platform = ThirdPartyPlatform(platform.lower())
            except ValueError as e:
                raise ValueError(f"Unsupported third-party platform: {platform}") from e

        if platform not in cls._strategies:
            raise ValueError(
                f"Third-party platform '{platform.value}' not supported. "
                f"Available platforms: {cls.get_available_platforms()}"
            )
        return platform

    @classmethod
    def get_strategy(
        cls,
        platform: ThirdPartyPlatform | str,
        config: AuthConfig,
        http_client: AsyncHttpClient | None = None,
        *,
        timeout: float = 30,
    ) -> BaseThirdPartyAuthStrategy:
        """
        获取对应平台的认证策略实例

        Raises:
            ValueError: 当平台未注册时
        """
        strategy_class = cls._strategies[cls.resolve_platform(platform)]
        return strategy_class(config, http_client, timeout=timeout)

    @classmethod
    def create_flow(
        cls,
        platform: ThirdPartyPlatform | str,
        config: AuthConfig,
        *,
        state_cache: BaseStateCache | None = None,
        http_client: AsyncHttpClient | None = None,
        timeout: float = 30,
        state_ttl: int = DEFAULT_STATE_TTL_SECONDS,
    ) -> AuthFlow:
        """创建平台对应的登录流程"""
        strategy = cls.get_strategy(platform, config, http_client, timeout=timeout)
        return AuthFlow(strategy, state_cache, state_ttl=state_ttl)

    @classmethod
    def get_available_platforms(cls) -> list[str]:
        return [platform.value for platform in cls._strategies]
