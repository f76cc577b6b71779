"""QQ 登录策略实现"""

from typing import Any

from authkit.logger import logger

from ..base import BaseThirdPartyAuthStrategy, UuidOrigin
from ..exception import AuthException, AuthResponseStatus
from ..models import AuthCallback, AuthToken, AuthUser, AuthUserGender
from ..source import QQ, ThirdPartyPlatform
from ..url_builder import UrlBuilder


class QQAuthStrategy(BaseThirdPartyAuthStrategy):
    """QQ 互联 OAuth2.0 认证策略

    token 响应中不含 openid，换取 token 后需额外请求 /oauth2.0/me 获取，
    因此 openid 仍在换取 token 阶段确定。
    config.extras["union_id"] 为 "1" 时同时申请 unionid。
    """

    platform = ThirdPartyPlatform.QQ
    source = QQ
    default_scopes = ("get_user_info",)
    scope_delimiter = ","
    uuid_origin = UuidOrigin.TOKEN

    def build_access_token_url(self, code: str) -> str:
        return (
            UrlBuilder.from_base_url(self.source.access_token)
            .query_param("grant_type", "authorization_code")
            .query_param("code", code)
            .query_param("client_id", self.config.client_id)
            .query_param("client_secret", self.config.client_secret)
            .query_param("redirect_uri", self.config.redirect_uri)
            .query_param("fmt", "json")
            .build()
        )

    def build_open_id_url(self, token: AuthToken) -> str:
        return (
            UrlBuilder.from_base_url(self.source.extras["open_id"])
            .query_param("access_token", token.access_token)
            .query_param("unionid", self.config.extras.get("union_id"))
            .query_param("fmt", "json")
            .build()
        )

    def build_user_info_url(self, token: AuthToken) -> str:
        return (
            UrlBuilder.from_base_url(self.source.user_info)
            .query_param("access_token", token.access_token)
            .query_param("oauth_consumer_key", self.config.client_id)
            .query_param("openid", token.open_id)
            .build()
        )

    def build_refresh_url(self, refresh_token: str) -> str:
        return (
            UrlBuilder.from_base_url(self.source.refresh)
            .query_param("grant_type", "refresh_token")
            .query_param("client_id", self.config.client_id)
            .query_param("client_secret", self.config.client_secret)
            .query_param("refresh_token", refresh_token)
            .query_param("fmt", "json")
            .build()
        )

    def check_response(self, payload: dict[str, Any]) -> None:
        ret = payload.get("ret")
        if ret not in (None, 0, "0"):
            msg = payload.get("msg") or "unknown error"
            logger.error(f"QQ API error: {ret} {msg}")
            raise AuthException(AuthResponseStatus.PROVIDER_ERROR, code=ret, msg=msg)
        super().check_response(payload)

    async def exchange_token(self, callback: AuthCallback) -> AuthToken:
        token = await super().exchange_token(callback)

        payload = await self.request_json(self.build_open_id_url(token))
        if not payload.get("openid"):
            raise AuthException(AuthResponseStatus.MALFORMED_RESPONSE, msg="openid missing in QQ me response")
        token.open_id = payload["openid"]
        token.union_id = payload.get("unionid") or token.union_id
        return token

    def map_profile(self, raw: dict[str, Any], token: AuthToken) -> AuthUser:
        avatar = raw.get("figureurl_qq_2") or raw.get("figureurl_qq_1")
        location = "-".join(str(raw.get(key) or "") for key in ("province", "city"))

        return AuthUser(
            uuid=self.resolve_uuid(raw, token),
            username=raw.get("nickname"),
            nickname=raw.get("nickname"),
            avatar=avatar,
            location=location,
            gender=AuthUserGender.from_code(raw.get("gender")),
            token=token,
            source=self.platform.value,
            raw_user_info=raw,
        )
