"""第三方认证配置数据类 - 类型安全的配置容器"""

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class AuthConfig:
    """第三方平台应用配置

    Attributes:
        client_id: 平台分配的应用 ID（微信 AppID、QQ/GitHub client_id）
        client_secret: 平台分配的应用密钥
        redirect_uri: 授权回调地址
        scopes: 申请的权限，None 时使用策略的默认权限
        ignore_check_state: 是否跳过 state 校验（关闭 CSRF 防护，仅在明确需要时开启）
        extras: 平台特有配置，如微信的 lang、QQ 的 union_id
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: tuple[str, ...] | None = None
    ignore_check_state: bool = False
    extras: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """验证配置有效性"""
        if not self.client_id or not self.client_secret:
            raise ValueError("Auth config requires client_id and client_secret")
        if not self.redirect_uri:
            raise ValueError("Auth config requires redirect_uri")
        if self.scopes is not None and not isinstance(self.scopes, tuple):
            object.__setattr__(self, "scopes", tuple(self.scopes))

    def __repr__(self) -> str:
        # 不输出 client_secret
        return f"AuthConfig(client_id={self.client_id!r}, redirect_uri={self.redirect_uri!r}, scopes={self.scopes!r})"
