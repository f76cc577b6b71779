"""第三方平台端点定义"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


class ThirdPartyPlatform(StrEnum):
    """第三方平台枚举

    添加新平台时在此处声明，并在 factory 中注册策略。
    """

    WECHAT_MP = "wechat_mp"
    WECHAT_OPEN = "wechat_open"
    QQ = "qq"
    GITHUB = "github"


@dataclass(frozen=True)
class ProviderDescriptor:
    """平台的静态端点信息，不包含行为

    Attributes:
        platform: 所属平台
        authorize: 授权页面地址
        access_token: 换取 access_token 的地址
        user_info: 获取用户信息的地址
        refresh: 刷新 token 的地址，None 表示平台不支持刷新
        extras: 平台特有的其他端点
    """

    platform: ThirdPartyPlatform
    authorize: str
    access_token: str
    user_info: str
    refresh: str | None = None
    extras: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


WECHAT_MP = ProviderDescriptor(
    platform=ThirdPartyPlatform.WECHAT_MP,
    authorize="https://open.weixin.qq.com/connect/oauth2/authorize",
    access_token="https://api.weixin.qq.com/sns/oauth2/access_token",
    user_info="https://api.weixin.qq.com/sns/userinfo",
    refresh="https://api.weixin.qq.com/sns/oauth2/refresh_token",
)

# 微信开放平台网站应用（扫码登录）
WECHAT_OPEN = ProviderDescriptor(
    platform=ThirdPartyPlatform.WECHAT_OPEN,
    authorize="https://open.weixin.qq.com/connect/qrconnect",
    access_token="https://api.weixin.qq.com/sns/oauth2/access_token",
    user_info="https://api.weixin.qq.com/sns/userinfo",
    refresh="https://api.weixin.qq.com/sns/oauth2/refresh_token",
)

QQ = ProviderDescriptor(
    platform=ThirdPartyPlatform.QQ,
    authorize="https://graph.qq.com/oauth2.0/authorize",
    access_token="https://graph.qq.com/oauth2.0/token",
    user_info="https://graph.qq.com/user/get_user_info",
    refresh="https://graph.qq.com/oauth2.0/token",
    extras=MappingProxyType({"open_id": "https://graph.qq.com/oauth2.0/me"}),
)

GITHUB = ProviderDescriptor(
    platform=ThirdPartyPlatform.GITHUB,
    authorize="https://github.com/login/oauth/authorize",
    access_token="https://github.com/login/oauth/access_token",
    user_info="https://api.github.com/user",
)
