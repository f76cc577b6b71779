import httpx
import pytest
from fastapi.testclient import TestClient

from authkit.cache import MemoryStateCache, StateCacheError
from authkit.toolkit.http_cli import AsyncHttpClient
from internal.app import create_app
from internal.config.settings import ProviderCredentials, Settings
from internal.services.oauth import OAuthService, new_oauth_service

TOKEN_PATH = "/sns/oauth2/access_token"
USER_INFO_PATH = "/sns/userinfo"
REFRESH_PATH = "/sns/oauth2/refresh_token"


def _wechat_platform(request: httpx.Request) -> httpx.Response:
    if request.url.path == TOKEN_PATH:
        return httpx.Response(
            200, json={"access_token": "T", "refresh_token": "R", "expires_in": 7200, "openid": "O"}
        )
    if request.url.path == USER_INFO_PATH:
        return httpx.Response(
            200,
            json={"openid": "O", "nickname": "Alice", "sex": 2, "country": "CN", "province": "GD", "city": "SZ"},
        )
    if request.url.path == REFRESH_PATH:
        return httpx.Response(200, json={"access_token": "T2", "refresh_token": "R2", "expires_in": 7200})
    return httpx.Response(404)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        WECHAT_MP=ProviderCredentials(
            CLIENT_ID="wx_app",
            CLIENT_SECRET="wx_secret",
            REDIRECT_URI="https://example.com/v1/oauth/wechat_mp/callback",
        ),
        GITHUB=None,
        QQ=None,
        WECHAT_OPEN=None,
    )


@pytest.fixture
def client(settings) -> TestClient:
    service = OAuthService(
        settings,
        http_client=AsyncHttpClient(transport=httpx.MockTransport(_wechat_platform)),
    )
    app = create_app(settings)
    app.dependency_overrides[new_oauth_service] = lambda: service
    # 不进入 lifespan，直接使用注入的 service
    return TestClient(app)


def _authorize_state(client: TestClient) -> str:
    resp = client.get("/v1/oauth/wechat_mp/authorize", params={"redirect": "false"})
    assert resp.status_code == 200
    url = httpx.URL(resp.json()["data"]["url"])
    return url.params["state"]


class TestOAuthApi:
    def test_platforms(self, client):
        resp = client.get("/v1/oauth/platforms")

        assert resp.status_code == 200
        assert resp.json()["data"] == {"platforms": ["wechat_mp"]}

    def test_authorize_redirect(self, client):
        resp = client.get("/v1/oauth/wechat_mp/authorize", params={"state": "S"}, follow_redirects=False)

        assert resp.status_code == 307
        location = httpx.URL(resp.headers["location"])
        assert location.host == "open.weixin.qq.com"
        assert location.params["state"] == "S"
        assert location.params["redirect_uri"] == "https://example.com/v1/oauth/wechat_mp/callback"

    def test_authorize_json(self, client):
        state = _authorize_state(client)
        assert len(state) == 32

    def test_callback_success(self, client):
        state = _authorize_state(client)

        resp = client.get("/v1/oauth/wechat_mp/callback", params={"code": "C", "state": state})

        assert resp.status_code == 200
        body = resp.json()
        assert body["code"] == 20000
        assert body["data"]["uuid"] == "O"
        assert body["data"]["gender"] == "female"
        assert body["data"]["location"] == "CN-GD-SZ"
        assert body["data"]["token"]["access_token"] == "T"

    def test_callback_replay(self, client):
        state = _authorize_state(client)
        assert client.get("/v1/oauth/wechat_mp/callback", params={"code": "C", "state": state}).status_code == 200

        resp = client.get("/v1/oauth/wechat_mp/callback", params={"code": "C", "state": state})

        assert resp.status_code == 400
        assert resp.json()["code"] == 5009
        assert resp.json()["data"] == {"status": "state_mismatch"}

    def test_callback_without_code(self, client):
        resp = client.get("/v1/oauth/wechat_mp/callback", params={"state": "S"})

        assert resp.status_code == 400
        assert resp.json()["code"] == 5002

    def test_unknown_platform(self, client):
        resp = client.get("/v1/oauth/weibo/authorize")

        assert resp.status_code == 404
        assert resp.json()["code"] == 40004

    def test_unconfigured_platform(self, client):
        resp = client.get("/v1/oauth/github/authorize", params={"redirect": "false"})

        assert resp.status_code == 404
        assert "not configured" in resp.json()["message"]

    def test_refresh(self, client):
        resp = client.post("/v1/oauth/wechat_mp/refresh", json={"refresh_token": "R", "open_id": "O"})

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["access_token"] == "T2"
        assert data["open_id"] == "O"
        assert data["source"] == "wechat_mp"

    def test_refresh_foreign_token(self, client):
        resp = client.post("/v1/oauth/wechat_mp/refresh", json={"refresh_token": "R", "source": "github"})

        assert resp.status_code == 400
        assert resp.json()["data"] == {"status": "illegal_token"}

    def test_refresh_validation_error(self, client):
        resp = client.post("/v1/oauth/wechat_mp/refresh", json={"refresh_token": ""})

        assert resp.status_code == 422
        assert resp.json()["code"] == 40000


class UnavailableStateCache(MemoryStateCache):
    """模拟 Redis 不可用"""

    async def put(self, key: str, value: str, ttl: int | None = None) -> None:
        raise StateCacheError("Redis error in 'put': ConnectionError('redis down')")


class TestOAuthApiStateCacheDown:
    @pytest.fixture
    def client(self, settings) -> TestClient:
        service = OAuthService(
            settings,
            state_cache=UnavailableStateCache(),
            http_client=AsyncHttpClient(transport=httpx.MockTransport(_wechat_platform)),
        )
        app = create_app(settings)
        app.dependency_overrides[new_oauth_service] = lambda: service
        return TestClient(app)

    def test_authorize_returns_error_envelope(self, client):
        resp = client.get("/v1/oauth/wechat_mp/authorize", params={"redirect": "false"})

        assert resp.status_code == 503
        body = resp.json()
        assert body["code"] == 50003
        assert "redis down" in body["message"]
        assert body["data"] is None
