"""登录流程中流转的数据结构"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

from .exception import AuthCodes, AuthException, AuthResponseStatus


class AuthUserGender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str | int | None) -> "AuthUserGender":
        """
        将平台的性别编码转换为统一枚举

        兼容 微信 sex (1/2/0)、QQ gender (男/女) 以及 m/f/male/female。
        无法识别的值一律视为 UNKNOWN。
        """
        if code is None:
            return cls.UNKNOWN
        value = str(code).strip().lower()
        if value in _MALE_CODES:
            return cls.MALE
        if value in _FEMALE_CODES:
            return cls.FEMALE
        return cls.UNKNOWN


_MALE_CODES = frozenset({"1", "m", "male", "男"})
_FEMALE_CODES = frozenset({"2", "f", "female", "女"})


@dataclass
class AuthCallback:
    """第三方平台回调携带的参数

    Attributes:
        code: 授权码
        state: 授权时传入的 state
        extras: 平台特有的其他回调参数
    """

    code: str = ""
    state: str = ""
    extras: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "AuthCallback":
        """从回调地址的查询参数构造"""
        params = dict(query)
        code = params.pop("code", "") or ""
        state = params.pop("state", "") or ""
        return cls(code=code, state=state, extras=params)


@dataclass
class AuthToken:
    """授权令牌

    换取 access_token 与刷新 token 的响应结构相同，共用同一个解析逻辑。

    Attributes:
        access_token: 访问令牌
        refresh_token: 刷新令牌，平台未返回时为空字符串
        expires_in: 有效期（秒）
        open_id: 平台用户标识（微信/QQ openid）
        union_id: 跨应用统一标识
        scope: 实际授予的权限
        token_type: 令牌类型
        source: 签发该 token 的平台
    """

    access_token: str
    refresh_token: str = ""
    expires_in: int = 0
    open_id: str | None = None
    union_id: str | None = None
    scope: str | None = None
    token_type: str | None = None
    source: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class AuthUser:
    """第三方用户信息统一结构

    Attributes:
        uuid: 用户在平台内的唯一标识
        username: 用户名
        nickname: 昵称
        avatar: 头像 URL
        location: 所在地
        gender: 性别
        token: 本次登录获取的 token
        source: 来源平台
        raw_user_info: 平台返回的原始数据（保留扩展性）
    """

    uuid: str
    username: str | None = None
    nickname: str | None = None
    avatar: str | None = None
    location: str | None = None
    gender: AuthUserGender = AuthUserGender.UNKNOWN
    email: str | None = None
    blog: str | None = None
    company: str | None = None
    remark: str | None = None
    token: AuthToken | None = None
    source: str = ""
    raw_user_info: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class AuthResponse[T]:
    """登录 / 刷新的统一结果

    成功时 data 为结果；失败时 status 为错误类别，code/msg 为错误码与信息。
    """

    status: AuthResponseStatus
    code: int | str
    msg: str = ""
    data: T | None = None

    @property
    def ok(self) -> bool:
        return self.status == AuthResponseStatus.SUCCESS

    @classmethod
    def success(cls, data: T) -> "AuthResponse[T]":
        return cls(status=AuthResponseStatus.SUCCESS, code=AuthCodes.SUCCESS.code, data=data)

    @classmethod
    def failure(
        cls, status: AuthResponseStatus, *, code: int | str | None = None, msg: str = ""
    ) -> "AuthResponse[T]":
        auth_status = AuthCodes.of(status)
        return cls(
            status=status,
            code=auth_status.code if code is None else code,
            msg=msg or auth_status.get_msg(),
        )

    @classmethod
    def from_exception(cls, exc: AuthException) -> "AuthResponse[T]":
        return cls(status=exc.status, code=exc.code, msg=exc.msg)

    def to_dict(self) -> dict[str, Any]:
        data = self.data.to_dict() if hasattr(self.data, "to_dict") else self.data
        return {"status": self.status.value, "code": self.code, "msg": self.msg, "data": data}
