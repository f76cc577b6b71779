"""第三方认证模块 - 统一的 OAuth2 授权码登录

使用策略模式 + 模板流程设计，不同平台的差异全部收敛在策略中：
- 微信公众号 / 微信开放平台
- QQ
- GitHub
- 等等...

架构设计:
    - flow: 固定的授权码登录流程（authorize / login / refresh）
    - base: 策略抽象基类与默认钩子实现
    - strategies: 具体平台策略实现（配置通过参数注入）
    - factory: 策略注册表
    - models / config / source: 数据结构、应用配置、平台端点

使用示例:
    ```python
    from authkit.third_party_auth import AuthCallback, AuthConfig, ThirdPartyAuthFactory

    flow = ThirdPartyAuthFactory.create_flow(
        "wechat_mp",
        AuthConfig(client_id="your_app_id", client_secret="your_app_secret", redirect_uri="https://x/cb"),
    )

    url = await flow.authorize()
    resp = await flow.login(AuthCallback(code=code, state=state))
    if resp.ok:
        print(resp.data.uuid, resp.data.nickname)
    ```
"""

from .base import BaseThirdPartyAuthStrategy, UuidOrigin
from .config import AuthConfig
from .exception import AuthCodes, AuthException, AuthResponseStatus, AuthStatus
from .factory import ThirdPartyAuthFactory
from .flow import AuthFlow, FlowPhase, RedirectUriProcessor
from .models import AuthCallback, AuthResponse, AuthToken, AuthUser, AuthUserGender
from .source import ProviderDescriptor, ThirdPartyPlatform
from .strategies import GithubAuthStrategy, QQAuthStrategy, WeChatMpAuthStrategy, WeChatOpenAuthStrategy
from .url_builder import UrlBuilder

__all__ = [
    # 流程与基础接口
    "AuthFlow",
    "FlowPhase",
    "RedirectUriProcessor",
    "BaseThirdPartyAuthStrategy",
    "UuidOrigin",
    "UrlBuilder",
    # 数据结构
    "AuthCallback",
    "AuthConfig",
    "AuthResponse",
    "AuthToken",
    "AuthUser",
    "AuthUserGender",
    # 错误
    "AuthCodes",
    "AuthException",
    "AuthResponseStatus",
    "AuthStatus",
    # 平台、工厂和策略
    "ProviderDescriptor",
    "ThirdPartyPlatform",
    "ThirdPartyAuthFactory",
    "GithubAuthStrategy",
    "QQAuthStrategy",
    "WeChatMpAuthStrategy",
    "WeChatOpenAuthStrategy",
]
