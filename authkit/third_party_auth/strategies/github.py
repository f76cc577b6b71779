"""GitHub 登录策略实现"""

from typing import Any

from ..base import BaseThirdPartyAuthStrategy, UuidOrigin
from ..models import AuthCallback, AuthToken, AuthUser, AuthUserGender
from ..source import GITHUB, ThirdPartyPlatform


class GithubAuthStrategy(BaseThirdPartyAuthStrategy):
    """GitHub OAuth App 认证策略

    换取 token 必须使用 POST；用户唯一标识为用户信息中的数字 id。
    GitHub OAuth App 的 token 不过期，也不支持刷新。
    """

    platform = ThirdPartyPlatform.GITHUB
    source = GITHUB
    uuid_origin = UuidOrigin.PROFILE
    uuid_field = "id"

    async def exchange_token(self, callback: AuthCallback) -> AuthToken:
        payload = await self.request_json(
            self.build_access_token_url(callback.code),
            method="POST",
            headers={"Accept": "application/json"},
        )
        return self.parse_token(payload)

    async def fetch_profile(self, token: AuthToken) -> dict[str, Any]:
        return await self.request_json(
            self.build_user_info_url(token),
            headers={"Authorization": f"token {token.access_token}"},
        )

    def build_user_info_url(self, token: AuthToken) -> str:
        # access_token 放在请求头中
        return self.source.user_info

    def map_profile(self, raw: dict[str, Any], token: AuthToken) -> AuthUser:
        return AuthUser(
            uuid=self.resolve_uuid(raw, token),
            username=raw.get("login"),
            nickname=raw.get("name") or raw.get("login"),
            avatar=raw.get("avatar_url"),
            location=raw.get("location"),
            gender=AuthUserGender.UNKNOWN,
            email=raw.get("email"),
            blog=raw.get("blog"),
            company=raw.get("company"),
            remark=raw.get("bio"),
            token=token,
            source=self.platform.value,
            raw_user_info=raw,
        )
