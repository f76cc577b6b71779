"""应用配置模型定义"""

from functools import lru_cache
from typing import Literal

from loguru import logger
from pydantic import BaseModel, RedisDsn, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from authkit.cache import DEFAULT_STATE_TTL_SECONDS
from authkit.logger import LogFormat
from authkit.third_party_auth import AuthConfig, ThirdPartyPlatform
from internal import BASE_DIR


class ProviderCredentials(BaseModel):
    """单个平台的应用凭证

    环境变量示例（嵌套分隔符为 "__"）:
        WECHAT_MP__CLIENT_ID=wx123
        WECHAT_MP__CLIENT_SECRET=xxx
        WECHAT_MP__REDIRECT_URI=https://example.com/v1/oauth/wechat_mp/callback
    """

    CLIENT_ID: str
    CLIENT_SECRET: SecretStr
    REDIRECT_URI: str
    SCOPES: list[str] | None = None
    IGNORE_CHECK_STATE: bool = False
    EXTRAS: dict[str, str] = {}


class Settings(BaseSettings):
    """
    应用全局配置。

    加载优先级 (从高到低):
    1. 系统环境变量
    2. 环境配置文件 (configs/.env.local / configs/.env.prod 等)
    """

    # --- 核心环境配置 ---
    APP_ENV: Literal["local", "dev", "test", "prod"] = "local"
    DEBUG: bool = False

    # --- 日志配置 ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.TEXT
    LOG_TO_FILE: bool = False

    # --- 登录流程 ---
    HTTP_TIMEOUT: float = 30
    STATE_TTL_SECONDS: int = DEFAULT_STATE_TTL_SECONDS
    # 关闭后所有平台跳过 state 校验（关闭 CSRF 防护）
    STATE_CHECK_ENABLED: bool = True

    # --- Cache (Redis)，不配置时 state 存放在进程内 ---
    REDIS_URL: RedisDsn | None = None

    # --- 平台凭证，未配置的平台不可用 ---
    WECHAT_MP: ProviderCredentials | None = None
    WECHAT_OPEN: ProviderCredentials | None = None
    QQ: ProviderCredentials | None = None
    GITHUB: ProviderCredentials | None = None

    model_config = SettingsConfigDict(
        case_sensitive=True,
        extra="ignore",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    @property
    def configured_platforms(self) -> list[ThirdPartyPlatform]:
        return [p for p in ThirdPartyPlatform if getattr(self, p.name, None) is not None]

    def auth_config(self, platform: ThirdPartyPlatform) -> AuthConfig:
        """
        生成平台的 AuthConfig

        Raises:
            ValueError: 平台未配置凭证
        """
        credentials: ProviderCredentials | None = getattr(self, platform.name, None)
        if credentials is None:
            raise ValueError(f"Credentials for '{platform.value}' are not configured")

        return AuthConfig(
            client_id=credentials.CLIENT_ID,
            client_secret=credentials.CLIENT_SECRET.get_secret_value(),
            redirect_uri=credentials.REDIRECT_URI,
            scopes=tuple(credentials.SCOPES) if credentials.SCOPES is not None else None,
            ignore_check_state=credentials.IGNORE_CHECK_STATE,
            extras=dict(credentials.EXTRAS),
        )


@lru_cache
def get_settings() -> Settings:
    """
    获取配置单例。

    先读取环境变量中的 APP_ENV，再加载 configs/.env.{APP_ENV}（存在时）。
    """

    class EnvProber(BaseSettings):
        APP_ENV: Literal["local", "dev", "test", "prod"] = "local"
        model_config = SettingsConfigDict(extra="ignore")

    app_env = EnvProber().APP_ENV
    env_file_path = BASE_DIR / "configs" / f".env.{app_env}"
    load_files = [env_file_path] if env_file_path.exists() else []

    logger.info(f"Loading configuration, env: {app_env}, files: {[f.name for f in load_files]}")
    try:
        return Settings(_env_file=load_files or None)  # type: ignore[call-arg]
    except Exception as e:
        logger.critical(f"Failed to load configuration: {e}")
        raise
