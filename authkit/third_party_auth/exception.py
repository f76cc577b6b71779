"""登录流程的错误类型与状态码"""

from dataclasses import dataclass
from enum import StrEnum


class AuthResponseStatus(StrEnum):
    """AuthResponse 的结果类别"""

    SUCCESS = "success"
    # callback 中的 state 不存在、已过期或已被使用
    STATE_MISMATCH = "state_mismatch"
    # 第三方平台返回了自身的错误结构
    PROVIDER_ERROR = "provider_error"
    # 第三方响应缺少必要字段或无法解析
    MALFORMED_RESPONSE = "malformed_response"
    # 网络错误或超时
    TRANSPORT_ERROR = "transport_error"
    PARAMETER_INCOMPLETE = "parameter_incomplete"
    # token 不属于当前平台
    ILLEGAL_TOKEN = "illegal_token"
    NOT_IMPLEMENTED = "not_implemented"


@dataclass(frozen=True)
class AuthStatus:
    """
    状态码与多语言文案的绑定
    """

    status: AuthResponseStatus
    code: int
    message: dict[str, str]

    def get_msg(self, lang: str = "en") -> str:
        """根据语言获取文案，默认回退到英文"""
        return self.message.get(lang) or self.message.get("en", "")


class AuthCodes:
    """
    登录流程状态码定义
    不使用 Enum，直接使用类属性，方便代码跳转和类型提示
    """

    SUCCESS = AuthStatus(AuthResponseStatus.SUCCESS, 2000, {"zh": "成功", "en": "Success"})
    PROVIDER_ERROR = AuthStatus(AuthResponseStatus.PROVIDER_ERROR, 5000, {"zh": "第三方平台返回错误", "en": "Provider error"})
    NOT_IMPLEMENTED = AuthStatus(AuthResponseStatus.NOT_IMPLEMENTED, 5001, {"zh": "平台不支持该操作", "en": "Not implemented"})
    PARAMETER_INCOMPLETE = AuthStatus(
        AuthResponseStatus.PARAMETER_INCOMPLETE, 5002, {"zh": "参数不完整", "en": "Parameter incomplete"}
    )
    STATE_MISMATCH = AuthStatus(
        AuthResponseStatus.STATE_MISMATCH, 5009, {"zh": "state 无效、已过期或已被使用", "en": "Illegal state"}
    )
    ILLEGAL_TOKEN = AuthStatus(AuthResponseStatus.ILLEGAL_TOKEN, 5011, {"zh": "非法的 token", "en": "Illegal token"})
    MALFORMED_RESPONSE = AuthStatus(
        AuthResponseStatus.MALFORMED_RESPONSE, 5020, {"zh": "第三方响应格式错误", "en": "Malformed provider response"}
    )
    TRANSPORT_ERROR = AuthStatus(
        AuthResponseStatus.TRANSPORT_ERROR, 5021, {"zh": "请求第三方平台失败", "en": "Transport error"}
    )

    @classmethod
    def of(cls, status: AuthResponseStatus) -> AuthStatus:
        return getattr(cls, status.name)


class AuthException(Exception):
    """登录流程内部的受控异常，由 AuthFlow 转换为 AuthResponse"""

    def __init__(self, status: AuthResponseStatus, *, code: int | str | None = None, msg: str = ""):
        """
        :param status: 错误类别
        :param code: 错误码；PROVIDER_ERROR 时为第三方原样返回的错误码，缺省使用 AuthCodes 中的定义
        :param msg: 错误信息，缺省使用 AuthCodes 中的英文文案
        """
        auth_status = AuthCodes.of(status)
        self.status = status
        self.code = auth_status.code if code is None else code
        self.msg = msg or auth_status.get_msg()
        super().__init__(self.msg)

    def __str__(self):
        return f"AuthException: status={self.status.value}, code={self.code}, msg={self.msg}"
