"""第三方认证策略抽象基类 - 无业务依赖的通用接口"""

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Any, ClassVar

from authkit.logger import logger
from authkit.toolkit.http_cli import AsyncHttpClient

from .config import AuthConfig
from .exception import AuthException, AuthResponseStatus
from .models import AuthCallback, AuthToken, AuthUser
from .source import ProviderDescriptor, ThirdPartyPlatform
from .url_builder import UrlBuilder


class UuidOrigin(StrEnum):
    """用户唯一标识的来源

    TOKEN: 换取 access_token 的响应中已携带（如微信 openid）
    PROFILE: 需从用户信息接口中读取（如 GitHub id）
    """

    TOKEN = "token"
    PROFILE = "profile"


class BaseThirdPartyAuthStrategy(ABC):
    """第三方认证策略抽象基类

    AuthFlow 按固定顺序调用这里的钩子；默认实现覆盖标准 OAuth2 平台，
    具体策略只需重写与平台不一致的部分。
    策略本身无状态，配置与 HTTP 客户端通过构造函数注入。
    """

    platform: ClassVar[ThirdPartyPlatform]
    source: ClassVar[ProviderDescriptor]
    default_scopes: ClassVar[tuple[str, ...]] = ()
    scope_delimiter: ClassVar[str] = " "
    uuid_origin: ClassVar[UuidOrigin] = UuidOrigin.PROFILE
    # uuid_origin 为 PROFILE 时读取的字段
    uuid_field: ClassVar[str] = "id"

    def __init__(self, config: AuthConfig, http_client: AsyncHttpClient | None = None, *, timeout: float = 30):
        """
        Args:
            config: 平台应用配置（通过依赖注入）
            http_client: 共享的 HTTP 客户端；不传时策略自行创建并在 close() 时关闭
            timeout: 自行创建 HTTP 客户端时的超时时间（秒）
        """
        self.config = config
        self._owns_http_client = http_client is None
        self._http_client = http_client or AsyncHttpClient(timeout=timeout)

    def get_platform_name(self) -> str:
        return self.platform.value

    @property
    def scope(self) -> str:
        scopes = self.config.scopes if self.config.scopes is not None else self.default_scopes
        return self.scope_delimiter.join(scopes)

    # ---------- URL 构造 ----------

    def build_authorize_url(self, state: str, redirect_uri: str) -> str:
        return (
            UrlBuilder.from_base_url(self.source.authorize)
            .query_param("response_type", "code")
            .query_param("client_id", self.config.client_id)
            .query_param("redirect_uri", redirect_uri)
            .query_param("scope", self.scope)
            .query_param("state", state)
            .build()
        )

    def build_access_token_url(self, code: str) -> str:
        return (
            UrlBuilder.from_base_url(self.source.access_token)
            .query_param("code", code)
            .query_param("client_id", self.config.client_id)
            .query_param("client_secret", self.config.client_secret)
            .query_param("grant_type", "authorization_code")
            .query_param("redirect_uri", self.config.redirect_uri)
            .build()
        )

    def build_user_info_url(self, token: AuthToken) -> str:
        return UrlBuilder.from_base_url(self.source.user_info).query_param("access_token", token.access_token).build()

    def build_refresh_url(self, refresh_token: str) -> str:
        if not self.source.refresh:
            raise AuthException(AuthResponseStatus.NOT_IMPLEMENTED, msg=f"{self.platform.value} does not support refresh")
        return (
            UrlBuilder.from_base_url(self.source.refresh)
            .query_param("client_id", self.config.client_id)
            .query_param("client_secret", self.config.client_secret)
            .query_param("refresh_token", refresh_token)
            .query_param("grant_type", "refresh_token")
            .build()
        )

    # ---------- 网络请求 ----------

    async def request_json(
        self, url: str, *, method: str = "GET", headers: dict[str, str] | None = None
    ) -> dict[str, Any]:
        """
        请求并解析 JSON 响应

        平台错误结构优先于 HTTP 状态码：即使是 4xx 响应，只要能解析出平台错误，
        就以平台的错误码和信息为准。

        Raises:
            AuthException: TRANSPORT_ERROR / PROVIDER_ERROR / MALFORMED_RESPONSE
        """
        if method.upper() == "POST":
            result = await self._http_client.post(url, headers=headers)
        else:
            result = await self._http_client.get(url, headers=headers)

        if not result.reached_server:
            raise AuthException(AuthResponseStatus.TRANSPORT_ERROR, msg=result.error or "")

        try:
            payload = result.json()
        except RuntimeError as e:
            if not result.success:
                raise AuthException(
                    AuthResponseStatus.PROVIDER_ERROR, code=result.status_code, msg=result.error or ""
                ) from e
            raise AuthException(AuthResponseStatus.MALFORMED_RESPONSE, msg=str(e)) from e

        if not isinstance(payload, dict):
            raise AuthException(
                AuthResponseStatus.MALFORMED_RESPONSE, msg=f"Expected JSON object, got {type(payload).__name__}"
            )

        self.check_response(payload)

        if not result.success:
            raise AuthException(AuthResponseStatus.PROVIDER_ERROR, code=result.status_code, msg=result.error or "")

        return payload

    def check_response(self, payload: dict[str, Any]) -> None:
        """
        检查平台返回的错误结构，默认按 RFC 6749 的 error / error_description 判断

        Raises:
            AuthException: PROVIDER_ERROR，错误码与信息原样透传
        """
        error = payload.get("error")
        if error:
            msg = payload.get("error_description") or str(error)
            logger.error(f"{self.platform.value} API error: {error} {msg}")
            raise AuthException(AuthResponseStatus.PROVIDER_ERROR, code=error, msg=msg)

    def parse_token(self, payload: dict[str, Any]) -> AuthToken:
        """
        解析 token 结构，换取与刷新共用

        Raises:
            AuthException: MALFORMED_RESPONSE，缺少 access_token 或 expires_in 非数字时
        """
        access_token = payload.get("access_token")
        if not access_token:
            raise AuthException(AuthResponseStatus.MALFORMED_RESPONSE, msg="access_token missing in token response")

        try:
            expires_in = int(payload.get("expires_in") or 0)
        except (TypeError, ValueError) as e:
            raise AuthException(
                AuthResponseStatus.MALFORMED_RESPONSE, msg=f"Invalid expires_in: {payload.get('expires_in')!r}"
            ) from e

        return AuthToken(
            access_token=str(access_token),
            refresh_token=str(payload.get("refresh_token") or ""),
            expires_in=expires_in,
            open_id=payload.get("openid"),
            union_id=payload.get("unionid"),
            scope=payload.get("scope"),
            token_type=payload.get("token_type"),
            source=self.platform.value,
        )

    # ---------- 流程钩子 ----------

    async def exchange_token(self, callback: AuthCallback) -> AuthToken:
        """通过授权码换取 access_token"""
        payload = await self.request_json(self.build_access_token_url(callback.code))
        return self.parse_token(payload)

    async def fetch_profile(self, token: AuthToken) -> dict[str, Any]:
        """获取平台原始用户信息"""
        return await self.request_json(self.build_user_info_url(token))

    @abstractmethod
    def map_profile(self, raw: dict[str, Any], token: AuthToken) -> AuthUser:
        """
        将平台原始用户信息转换为 AuthUser

        Args:
            raw: fetch_profile 返回的原始数据（已通过 check_response）
            token: 本次登录的 token

        Returns:
            AuthUser: 标准化的用户信息
        """
        pass

    def resolve_uuid(self, raw: dict[str, Any], token: AuthToken) -> str | None:
        if self.uuid_origin == UuidOrigin.TOKEN:
            return token.open_id
        value = raw.get(self.uuid_field)
        return None if value is None or value == "" else str(value)

    async def refresh_token(self, token: AuthToken) -> AuthToken:
        """
        刷新 token

        刷新响应中未返回的平台标识沿用旧 token 的值。
        """
        payload = await self.request_json(self.build_refresh_url(token.refresh_token))
        new_token = self.parse_token(payload)
        new_token.open_id = new_token.open_id or token.open_id
        new_token.union_id = new_token.union_id or token.union_id
        return new_token

    async def close(self) -> None:
        """关闭自行创建的 HTTP 客户端"""
        if self._owns_http_client:
            await self._http_client.close()
