from internal.core.response import AppError, BaseCodes


class GlobalCodes(BaseCodes):
    """
    全局状态码定义
    """

    # 客户端错误 (40000 - 49999)
    BadRequest = AppError(40000, {"zh": "请求参数错误", "en": "Bad Request"})
    NotFound = AppError(40004, {"zh": "资源不存在", "en": "Not Found"})

    # 服务端错误 (50000 - 59999)
    InternalServerError = AppError(50000, {"zh": "服务器内部错误", "en": "Internal Server Error"})
    ServiceUnavailable = AppError(50003, {"zh": "依赖服务不可用", "en": "Service Unavailable"})


global_codes = GlobalCodes()


class AppException(Exception):
    def __init__(self, error: AppError, message: str = ""):
        """
        业务异常，由全局异常处理器转换为统一响应。

        :param error: GlobalCodes 中定义的错误对象
        :param message: 详细信息，拼接在默认文案之后
        """
        self.error = error
        self.message = message

    def __str__(self):
        return f"AppException: code={self.error.code}, message={self.message}"
