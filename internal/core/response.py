from dataclasses import dataclass
from typing import Any

from fastapi.responses import ORJSONResponse
from pydantic import BaseModel

from authkit.toolkit.json import orjson_dumps_bytes

# =========================================================
# 1. 定义状态码结构与全局状态码
# =========================================================


@dataclass(frozen=True)
class AppStatus:
    """
    应用状态对象基类
    将状态码与多语言文案绑定在一起
    """

    code: int
    message: dict[str, str]

    def get_msg(self, lang: str = "zh") -> str:
        """根据语言获取文案，默认回退到中文"""
        return self.message.get(lang) or self.message.get("zh", "")


@dataclass(frozen=True)
class AppError(AppStatus):
    """
    专门用于表示应用错误的子类 (继承自 AppStatus)
    """

    pass


class BaseCodes:
    """
    全局状态码定义
    不使用 Enum，直接使用类属性，方便代码跳转和类型提示
    """

    success = AppStatus(20000, {"zh": "", "en": ""})


# =========================================================
# 2. 高性能 JSON 响应类
# =========================================================


class CustomORJSONResponse(ORJSONResponse):
    """
    基于 orjson 的响应类，序列化规则与日志保持一致。
    """

    def render(self, content: Any) -> bytes:
        return orjson_dumps_bytes(content)


# =========================================================
# 3. 响应工厂
# =========================================================


class ResponseFactory:
    @staticmethod
    def _make_response(
        *, code: int | str, data: Any = None, message: str = "", http_status: int = 200
    ) -> CustomORJSONResponse:
        """基础响应构造器"""
        return CustomORJSONResponse(
            status_code=http_status,
            content={
                "code": code,
                "message": message,
                "data": data,
            },
        )

    @staticmethod
    def _process_success_data(data: dict | BaseModel | None) -> dict | None:
        """
        将成功响应的数据统一转换为 dict。

        Raises:
            TypeError: 如果数据类型不符合要求。
        """
        if isinstance(data, BaseModel):
            return data.model_dump(mode="json")

        if isinstance(data, dict) or data is None:
            return data

        raise TypeError(
            f"Success response data must be a dict, a Pydantic model instance, or None, "
            f"but received type: {type(data)}"
        )

    def success(self, *, data: dict | BaseModel | None, message: str = "") -> CustomORJSONResponse:
        """
        成功响应
        """
        data = self._process_success_data(data)
        return self._make_response(code=BaseCodes.success.code, data=data, message=message)

    def error(
        self, error: AppError, *, message: str = "", data: Any = None, lang: str = "zh", http_status: int = 200
    ) -> CustomORJSONResponse:
        """
        通用错误响应。

        Args:
            error: GlobalCodes 中定义的错误对象
            message: 自定义详细信息。如果传入，将拼接到默认文案后面。
            data: 附加数据
            lang: 语言代码 ('zh', 'en')，默认为 'zh'
            http_status: HTTP 状态码
        """
        base_msg = error.get_msg(lang)
        final_message = f"{base_msg}: {message}" if message else base_msg
        return self._make_response(code=error.code, message=final_message, data=data, http_status=http_status)

    def auth_failure(
        self, *, code: int | str, message: str, data: Any = None, http_status: int = 400
    ) -> CustomORJSONResponse:
        """登录流程失败：错误码与信息来自 AuthResponse，原样透传"""
        return self._make_response(code=code, message=message, data=data, http_status=http_status)


# 全局单例
response_factory = ResponseFactory()


# =========================================================
# 4. 工具函数
# =========================================================


def success_response(data: dict | BaseModel | None, message: str = "") -> CustomORJSONResponse:
    """
    成功响应
    """
    return response_factory.success(data=data, message=message)


def error_response(
    error: AppError, *, message: str = "", data: Any = None, lang: str = "zh", http_status: int = 200
) -> CustomORJSONResponse:
    """
    通用错误响应
    """
    return response_factory.error(error, message=message, data=data, lang=lang, http_status=http_status)
