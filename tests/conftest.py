"""
Pytest 配置文件 (conftest.py)

提供测试运行所需的共享 fixtures、hooks 和配置。

主要功能：
1. 第三方平台桩（基于 httpx.MockTransport，不访问网络）
2. 可控时钟与进程内 state 缓存
3. 各平台的 AuthConfig
4. 配置 pytest-asyncio
"""

import asyncio
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio

# ==========================================
# 1. 路径配置
# ==========================================

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from authkit.cache import MemoryStateCache  # noqa: E402
from authkit.third_party_auth import AuthConfig  # noqa: E402
from authkit.toolkit.http_cli import AsyncHttpClient  # noqa: E402


# ==========================================
# 2. pytest 配置 hooks
# ==========================================


def pytest_configure(config: pytest.Config):
    config.addinivalue_line("markers", "unit: 单元测试，不依赖外部服务")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """为所有 async 测试函数自动添加 asyncio marker"""
    for item in items:
        if isinstance(item, pytest.Function) and asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)


# ==========================================
# 3. 第三方平台桩
# ==========================================


class ProviderStub:
    """
    按 URL 路径返回预设响应，并记录收到的请求。

    用法:
        stub.add("/sns/userinfo", json={"openid": "O"})
        stub.add("/sns/oauth2/access_token", error=httpx.ConnectError("boom"))
    """

    def __init__(self):
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        path: str,
        *,
        json: Any = None,
        status: int = 200,
        content: bytes | None = None,
        error: Exception | None = None,
    ) -> None:
        def _respond(request: httpx.Request) -> httpx.Response:
            if error is not None:
                raise error
            if content is not None:
                return httpx.Response(status, content=content)
            return httpx.Response(status, json=json)

        self.routes[path] = _respond

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get(request.url.path)
        if responder is None:
            return httpx.Response(404, json={"error": "not_found", "error_description": request.url.path})
        return responder(request)

    def last(self, path: str) -> httpx.Request:
        matched = [r for r in self.requests if r.url.path == path]
        assert matched, f"no request to {path}"
        return matched[-1]


@pytest.fixture
def provider_stub() -> ProviderStub:
    return ProviderStub()


@pytest_asyncio.fixture
async def http_client(provider_stub: ProviderStub) -> AsyncGenerator[AsyncHttpClient, None]:
    client = AsyncHttpClient(timeout=5, transport=httpx.MockTransport(provider_stub.handler))
    yield client
    await client.close()


# ==========================================
# 4. state 缓存
# ==========================================


class FakeClock:
    """可手动推进的时钟，替代 time.monotonic"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def state_cache(clock: FakeClock) -> MemoryStateCache:
    return MemoryStateCache(default_ttl=180, clock=clock)


# ==========================================
# 5. 平台配置
# ==========================================


@pytest.fixture
def wechat_config() -> AuthConfig:
    return AuthConfig(
        client_id="wx_app",
        client_secret="wx_secret",
        redirect_uri="https://example.com/callback?from=wx",
    )


@pytest.fixture
def qq_config() -> AuthConfig:
    return AuthConfig(
        client_id="qq_app",
        client_secret="qq_secret",
        redirect_uri="https://example.com/qq/callback",
        extras={"union_id": "1"},
    )


@pytest.fixture
def github_config() -> AuthConfig:
    return AuthConfig(
        client_id="gh_app",
        client_secret="gh_secret",
        redirect_uri="https://example.com/github/callback",
        scopes=("read:user", "user:email"),
    )


# ==========================================
# 6. 预置的微信平台响应
# ==========================================

WECHAT_TOKEN_PATH = "/sns/oauth2/access_token"
WECHAT_USER_INFO_PATH = "/sns/userinfo"
WECHAT_REFRESH_PATH = "/sns/oauth2/refresh_token"

WECHAT_TOKEN_RESPONSE = {
    "access_token": "T",
    "refresh_token": "R",
    "expires_in": 7200,
    "openid": "O",
    "scope": "snsapi_userinfo",
}

WECHAT_PROFILE_RESPONSE = {
    "openid": "O",
    "nickname": "Alice",
    "sex": "1",
    "country": "CN",
    "province": "GD",
    "city": "SZ",
    "headimgurl": "https://thirdwx.qlogo.cn/alice.png",
    "unionid": "U",
}


@pytest.fixture
def wechat_provider(provider_stub: ProviderStub) -> ProviderStub:
    """换取 token 与获取用户信息均成功的微信平台"""
    provider_stub.add(WECHAT_TOKEN_PATH, json=WECHAT_TOKEN_RESPONSE)
    provider_stub.add(WECHAT_USER_INFO_PATH, json=WECHAT_PROFILE_RESPONSE)
    return provider_stub
