from authkit.logger import init_logger as _init_logger
from internal import BASE_DIR
from internal.config.settings import Settings


def init_logger(settings: Settings) -> None:
    """按应用配置初始化 authkit.logger"""
    _init_logger(
        level=settings.LOG_LEVEL,
        base_log_dir=BASE_DIR / "logs",
        log_format=settings.LOG_FORMAT,
        write_to_file=settings.LOG_TO_FILE,
        write_to_console=True,
    )
