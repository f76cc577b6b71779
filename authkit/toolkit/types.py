from collections.abc import Callable
from typing import Any


class LazyProxy:
    """
    通用懒加载代理，用于延迟初始化的单例对象。

    解决问题：
    - 模块导入时对象还未初始化 (None)
    - 需要在运行时动态获取实际对象

    用法示例:
        _logger: Logger | None = None

        def _get_logger() -> Logger:
            if _logger is None:
                raise RuntimeError("Logger not initialized")
            return _logger

        logger = LazyProxy(_get_logger)  # 导出代理对象

        # 使用时自动转发到真实对象
        logger.info("hello")  # 等价于 _get_logger().info("hello")
    """

    __slots__ = ("_getter",)

    def __init__(self, getter: "Callable[[], Any]"):
        object.__setattr__(self, "_getter", getter)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._getter(), name)

    def __repr__(self) -> str:
        try:
            return repr(self._getter())
        except RuntimeError:
            return "<LazyProxy: uninitialized>"
