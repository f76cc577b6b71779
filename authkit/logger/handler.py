import sys
from datetime import UTC, time, timedelta
from enum import StrEnum
from pathlib import Path
from typing import Any

import loguru

from authkit.toolkit import context
from authkit.toolkit.json import orjson_dumps
from authkit.toolkit.timer import format_iso_datetime

# 默认日志目录
_DEFAULT_BASE_LOG_DIR = Path("/tmp/authkit_logs")

# 类型别名
RotationType = str | int | time | timedelta
RetentionType = str | int | timedelta


class LogFormat(StrEnum):
    """日志格式枚举"""

    JSON = "json"
    TEXT = "text"


class LoggerHandler:
    """
    日志管理器
    配置在实例化 (__init__) 时传入，并在 setup() 时生效。
    """

    def __init__(
        self,
        *,
        level: str = "INFO",
        base_log_dir: Path | None = None,
        rotation: RotationType = time(0, 0, 0, tzinfo=UTC),
        retention: RetentionType = timedelta(days=30),
        compression: str | None = None,
        use_utc: bool = True,
        enqueue: bool = True,
        log_format: LogFormat = LogFormat.TEXT,
    ):
        """
        :param level: 日志等级 (e.g., "INFO", "DEBUG")
        :param base_log_dir: 日志存放的根目录
        :param rotation: 轮转策略 (默认: 每天 00:00, UTC时间)
        :param retention: 保留策略 (默认: 30天)
        :param compression: 压缩格式 (e.g., "zip")
        :param use_utc: 是否强制使用 UTC 时间 (影响日志内容及轮转触发时间)
        :param enqueue: 是否使用多进程安全的队列写入
        :param log_format: 日志格式 (LogFormat.JSON 或 LogFormat.TEXT)
        """
        self._logger = loguru.logger
        self._is_initialized = False

        self.level = level
        self.base_log_dir = base_log_dir or _DEFAULT_BASE_LOG_DIR
        self.retention = retention
        self.compression = compression
        self.use_utc = use_utc
        self.enqueue = enqueue
        self.log_format = log_format

        is_json = self.log_format == LogFormat.JSON
        self.console_format = self._json_formatter if is_json else self._console_formatter
        self.file_format = self._json_formatter if is_json else self._file_formatter
        self.colorize = not is_json

        # 强制 UTC 时，为无时区的 rotation 补上 UTC，保证轮转时刻与日志时间一致
        if self.use_utc and isinstance(rotation, time) and rotation.tzinfo is None:
            self.rotation = rotation.replace(tzinfo=UTC)
        else:
            self.rotation = rotation

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def setup(self, *, write_to_file: bool = True, write_to_console: bool = True) -> "loguru.Logger":
        """应用配置并初始化日志"""
        self._logger.remove()

        config_params: dict[str, Any] = {
            "extra": {
                "trace_id": None,
                "json_content": None,
            },
        }

        if self.use_utc:
            config_params["patcher"] = self._utc_time_patcher

        self._logger.configure(**config_params)

        if write_to_console:
            self._logger.add(
                sink=sys.stderr,
                level=self.level,
                enqueue=self.enqueue,
                colorize=self.colorize,
                diagnose=False,
                format=self.console_format,
            )

        if write_to_file:
            self._ensure_dir(self.base_log_dir)
            self._logger.add(
                sink=self.base_log_dir / "{time:YYYY-MM-DD}.log",
                level=self.level,
                rotation=self.rotation,
                retention=self.retention,
                compression=self.compression,
                enqueue=self.enqueue,
                format=self.file_format,
            )

        mode_str = "UTC" if self.use_utc else "Local Time"
        self._logger.info(
            f"Logger initialized. Mode: {mode_str} | Format: {self.log_format} | Rotation: {self.rotation} | Level: {self.level}"
        )
        self._is_initialized = True
        return self._logger

    # --- 格式化器 ---

    @classmethod
    def _console_formatter(cls, record: Any) -> str:
        """控制台格式化器"""
        trace_id = cls._get_trace_id(record)

        fmt = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSSZ}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            f"<magenta>{trace_id}</magenta> - <level>{{message}}</level>"
        )

        if record["extra"].get("json_content") is not None:
            fmt += "\n<cyan>{extra[json_content]}</cyan>"
        return fmt + "\n"

    @classmethod
    def _file_formatter(cls, record: Any) -> str:
        """File 文本格式化器 (log_format='text' 时使用)"""
        trace_id = cls._get_trace_id(record)

        fmt = (
            "{time:YYYY-MM-DD HH:mm:ss.SSSZ} | "
            "{level: <8} | "
            "{name}:{function}:{line} | "
            f"{trace_id} - {{message}}"
        )

        json_content = record["extra"].get("json_content")
        if json_content is not None:
            record["extra"]["_text_json"] = orjson_dumps(json_content, default=str)
            fmt += "\n{extra[_text_json]}"

        return fmt + "\n"

    @classmethod
    def _json_formatter(cls, record: Any) -> str:
        """JSON Lines 格式化器 (log_format='json' 时使用)"""
        trace_id = cls._get_trace_id(record)

        extra_data = record["extra"].copy()
        json_content = extra_data.pop("json_content", None)
        extra_data.pop("_json_out", None)
        extra_data.pop("trace_id", None)

        if not isinstance(json_content, (dict, list, str, type(None))):
            raise TypeError(f"json_content must be types or None. Got {type(json_content)}")

        log_record = {
            "time": format_iso_datetime(record["time"]),
            "level": record["level"].name,
            "trace_id": trace_id,
            "location": f"{record['name']}.{record['function']}:{record['line']}",
            "message": record["message"],
            **extra_data,
        }

        if json_content is not None:
            log_record["json_content"] = json_content

        record["extra"]["_json_out"] = orjson_dumps(log_record, default=str)
        return "{extra[_json_out]}\n"

    # --- 辅助方法 ---
    @staticmethod
    def _utc_time_patcher(record: Any):
        record["time"] = record["time"].astimezone(UTC)

    @staticmethod
    def _ensure_dir(path: Path):
        if not path.parent.exists():
            raise FileNotFoundError(f"Parent directory does not exist: {path.parent}")
        path.mkdir(exist_ok=True)

    @classmethod
    def _get_trace_id(cls, record: Any) -> str:
        """
        获取 trace_id，优先级：extra[trace_id] > context.get_trace_id() > "-"
        """
        trace_id = record["extra"].get("trace_id")
        if trace_id is None:
            trace_id = context.get_trace_id()
        return trace_id
