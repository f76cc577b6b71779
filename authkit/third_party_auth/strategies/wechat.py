"""微信登录策略实现 - 配置通过参数注入"""

from typing import Any

from authkit.logger import logger

from ..base import BaseThirdPartyAuthStrategy, UuidOrigin
from ..exception import AuthException, AuthResponseStatus
from ..models import AuthCallback, AuthToken, AuthUser, AuthUserGender
from ..source import WECHAT_MP, WECHAT_OPEN, ThirdPartyPlatform
from ..url_builder import UrlBuilder


class _WeChatAuthStrategy(BaseThirdPartyAuthStrategy):
    """微信 OAuth2.0 公共逻辑

    微信的特殊性：换取 access_token 的响应同时包含 openid，
    用户唯一标识取自 token 而不是用户信息接口。
    """

    uuid_origin = UuidOrigin.TOKEN

    def build_authorize_url(self, state: str, redirect_uri: str) -> str:
        return (
            UrlBuilder.from_base_url(self.source.authorize)
            .query_param("response_type", "code")
            .query_param("appid", self.config.client_id)
            .query_param("redirect_uri", redirect_uri)
            .query_param("scope", self.scope)
            .query_param("state", state)
            .build()
        )

    def build_access_token_url(self, code: str) -> str:
        return (
            UrlBuilder.from_base_url(self.source.access_token)
            .query_param("code", code)
            .query_param("appid", self.config.client_id)
            .query_param("secret", self.config.client_secret)
            .query_param("grant_type", "authorization_code")
            .build()
        )

    def build_user_info_url(self, token: AuthToken) -> str:
        return (
            UrlBuilder.from_base_url(self.source.user_info)
            .query_param("access_token", token.access_token)
            .query_param("openid", token.open_id)
            .query_param("lang", self.config.extras.get("lang", "zh_CN"))
            .build()
        )

    def build_refresh_url(self, refresh_token: str) -> str:
        return (
            UrlBuilder.from_base_url(self.source.refresh)
            .query_param("appid", self.config.client_id)
            .query_param("refresh_token", refresh_token)
            .query_param("grant_type", "refresh_token")
            .build()
        )

    def check_response(self, payload: dict[str, Any]) -> None:
        # 只要出现 errcode 即视为错误结构，优先于正常字段解析
        if "errcode" in payload:
            errmsg = payload.get("errmsg") or "unknown error"
            logger.error(f"WeChat API error: {payload['errcode']} {errmsg}")
            raise AuthException(AuthResponseStatus.PROVIDER_ERROR, code=payload["errcode"], msg=errmsg)

    async def exchange_token(self, callback: AuthCallback) -> AuthToken:
        token = await super().exchange_token(callback)
        if not token.open_id:
            raise AuthException(AuthResponseStatus.MALFORMED_RESPONSE, msg="openid missing in WeChat token response")
        return token

    def map_profile(self, raw: dict[str, Any], token: AuthToken) -> AuthUser:
        if raw.get("unionid"):
            token.union_id = raw["unionid"]

        # 国家-省份-城市，缺失的部分保留为空段
        location = "-".join(str(raw.get(key) or "") for key in ("country", "province", "city"))

        return AuthUser(
            uuid=self.resolve_uuid(raw, token),
            username=raw.get("nickname"),
            nickname=raw.get("nickname"),
            avatar=raw.get("headimgurl"),
            location=location,
            gender=AuthUserGender.from_code(raw.get("sex")),
            token=token,
            source=self.platform.value,
            raw_user_info=raw,
        )


class WeChatMpAuthStrategy(_WeChatAuthStrategy):
    """微信公众号网页授权

    使用示例:
        ```python
        strategy = WeChatMpAuthStrategy(
            config=AuthConfig(
                client_id="your_app_id",
                client_secret="your_app_secret",
                redirect_uri="https://example.com/oauth/wechat_mp/callback",
            )
        )
        flow = AuthFlow(strategy)
        ```
    """

    platform = ThirdPartyPlatform.WECHAT_MP
    source = WECHAT_MP
    default_scopes = ("snsapi_userinfo",)


class WeChatOpenAuthStrategy(_WeChatAuthStrategy):
    """微信开放平台网站应用扫码登录"""

    platform = ThirdPartyPlatform.WECHAT_OPEN
    source = WECHAT_OPEN
    default_scopes = ("snsapi_login",)
