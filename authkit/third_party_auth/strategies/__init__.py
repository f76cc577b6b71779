"""第三方认证策略实现模块"""

from .github import GithubAuthStrategy
from .qq import QQAuthStrategy
from .wechat import WeChatMpAuthStrategy, WeChatOpenAuthStrategy

__all__ = [
    "GithubAuthStrategy",
    "QQAuthStrategy",
    "WeChatMpAuthStrategy",
    "WeChatOpenAuthStrategy",
]
