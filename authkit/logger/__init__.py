"""
authkit.logger - 统一的日志管理包

使用方式：
使用 init_logger() + logger 代理对象（延迟初始化）

使用示例:
    from authkit.logger import init_logger, logger

    # 在应用启动时初始化
    init_logger(level="DEBUG", base_log_dir=Path("/var/log/myapp"))

    # 之后在任何地方使用
    logger.info("Application started")

作为库被引用且未调用 init_logger() 时，logger 转发到 loguru 的默认 logger。
"""
from datetime import UTC, time, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

import loguru

from authkit.logger.handler import LogFormat, LoggerHandler, RetentionType, RotationType
from authkit.toolkit.types import LazyProxy

if TYPE_CHECKING:
    from loguru import Logger

# 内部持有真实对象（延迟初始化）
_logger_manager: "LoggerHandler | None" = None
_logger: "Logger | None" = None


# --- Getter 函数 ---
def _get_logger() -> "Logger":
    if _logger is None:
        return loguru.logger
    return _logger


def _get_logger_manager() -> "LoggerHandler":
    if _logger_manager is None:
        raise RuntimeError("LoggerHandler not initialized. Call init_logger() first.")
    return _logger_manager


# --- 初始化函数 ---
def init_logger(
    *,
    level: str = "INFO",
    base_log_dir: Path | None = None,
    rotation: RotationType = time(0, 0, 0, tzinfo=UTC),
    retention: RetentionType = timedelta(days=30),
    use_utc: bool = True,
    enqueue: bool = True,
    log_format: LogFormat | str = LogFormat.TEXT,
    write_to_file: bool = True,
    write_to_console: bool = True,
) -> "Logger":
    """
    初始化应用层 Logger。

    :param level: 日志等级 (e.g., "INFO", "DEBUG")
    :param base_log_dir: 日志存放的根目录
    :param rotation: 轮转策略 (默认: 每天 00:00, UTC时间)
    :param retention: 保留策略 (默认: 30天)
    :param use_utc: 是否强制使用 UTC 时间
    :param enqueue: 是否使用多进程安全的队列写入
    :param log_format: 日志格式 (LogFormat.JSON 或 LogFormat.TEXT，默认 LogFormat.TEXT)
    :param write_to_file: 是否写入文件
    :param write_to_console: 是否输出到控制台
    :return: 初始化后的 Logger 实例
    """
    global _logger_manager, _logger

    _logger_manager = LoggerHandler(
        level=level,
        base_log_dir=base_log_dir,
        rotation=rotation,
        retention=retention,
        use_utc=use_utc,
        enqueue=enqueue,
        log_format=LogFormat(log_format),
    )
    _logger = _logger_manager.setup(write_to_file=write_to_file, write_to_console=write_to_console)

    return _logger


def get_logger_manager() -> "LoggerHandler":
    """获取当前的 LoggerHandler 实例（需先调用 init_logger）"""
    return _get_logger_manager()


# --- 导出代理对象 ---
logger: "Logger" = LazyProxy(_get_logger)  # type: ignore[assignment]

__all__ = [
    "LoggerHandler",
    "LogFormat",
    "RotationType",
    "RetentionType",
    "init_logger",
    "get_logger_manager",
    "logger",
]
