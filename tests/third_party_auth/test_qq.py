from urllib.parse import parse_qs, urlsplit

import pytest

from authkit.third_party_auth import (
    AuthCallback,
    AuthConfig,
    AuthFlow,
    AuthResponseStatus,
    AuthToken,
    AuthUserGender,
    QQAuthStrategy,
)

TOKEN_PATH = "/oauth2.0/token"
ME_PATH = "/oauth2.0/me"
USER_INFO_PATH = "/user/get_user_info"

QQ_PROFILE = {
    "ret": 0,
    "msg": "",
    "nickname": "Bob",
    "gender": "女",
    "province": "广东",
    "city": "深圳",
    "figureurl_qq_1": "https://q.qlogo.cn/40",
    "figureurl_qq_2": "https://q.qlogo.cn/100",
}


@pytest.fixture
def flow(qq_config, http_client, state_cache) -> AuthFlow:
    return AuthFlow(QQAuthStrategy(qq_config, http_client), state_cache)


@pytest.fixture
def qq_provider(provider_stub):
    provider_stub.add(TOKEN_PATH, json={"access_token": "T", "expires_in": "7776000", "refresh_token": "R"})
    provider_stub.add(ME_PATH, json={"client_id": "qq_app", "openid": "QO", "unionid": "QU"})
    provider_stub.add(USER_INFO_PATH, json=QQ_PROFILE)
    return provider_stub


class TestQQAuthStrategy:
    async def test_authorize_url_scope_delimiter(self, http_client):
        config = AuthConfig(
            client_id="qq_app",
            client_secret="qq_secret",
            redirect_uri="https://example.com/qq/callback",
            scopes=("get_user_info", "list_album"),
        )
        strategy = QQAuthStrategy(config, http_client)

        query = parse_qs(urlsplit(strategy.build_authorize_url("S", "https://example.com/qq/callback")).query)

        assert query["scope"] == ["get_user_info,list_album"]
        assert query["client_id"] == ["qq_app"]

    async def test_login(self, flow, qq_provider):
        await flow.authorize(state="S")
        resp = await flow.login(AuthCallback(code="C", state="S"))

        assert resp.ok
        user = resp.data
        assert user.uuid == "QO"
        assert user.nickname == "Bob"
        assert user.gender == AuthUserGender.FEMALE
        assert user.location == "广东-深圳"
        assert user.avatar == "https://q.qlogo.cn/100"
        assert user.token.expires_in == 7776000
        assert user.token.union_id == "QU"

        assert [r.url.path for r in qq_provider.requests] == [TOKEN_PATH, ME_PATH, USER_INFO_PATH]
        assert qq_provider.last(TOKEN_PATH).url.params["fmt"] == "json"
        assert qq_provider.last(ME_PATH).url.params["unionid"] == "1"
        info_params = qq_provider.last(USER_INFO_PATH).url.params
        assert info_params["oauth_consumer_key"] == "qq_app"
        assert info_params["openid"] == "QO"

    async def test_profile_ret_error(self, flow, qq_provider):
        qq_provider.add(USER_INFO_PATH, json={"ret": 1002, "msg": "请先登录"})
        await flow.authorize(state="S")

        resp = await flow.login(AuthCallback(code="C", state="S"))

        assert resp.status == AuthResponseStatus.PROVIDER_ERROR
        assert resp.code == 1002
        assert resp.msg == "请先登录"

    async def test_token_error(self, flow, qq_provider):
        qq_provider.add(TOKEN_PATH, json={"error": 100019, "error_description": "code to access token error"})
        await flow.authorize(state="S")

        resp = await flow.login(AuthCallback(code="C", state="S"))

        assert resp.status == AuthResponseStatus.PROVIDER_ERROR
        assert resp.code == 100019

    async def test_missing_openid(self, flow, qq_provider):
        qq_provider.add(ME_PATH, json={"client_id": "qq_app"})
        await flow.authorize(state="S")

        resp = await flow.login(AuthCallback(code="C", state="S"))

        assert resp.status == AuthResponseStatus.MALFORMED_RESPONSE
        assert USER_INFO_PATH not in [r.url.path for r in qq_provider.requests]

    async def test_avatar_falls_back_to_small_size(self, qq_config, http_client):
        strategy = QQAuthStrategy(qq_config, http_client)

        user = strategy.map_profile({"figureurl_qq_1": "small"}, AuthToken(access_token="T", open_id="QO"))

        assert user.avatar == "small"
        assert user.location == "-"
