from ..typ import LogLevel
from .base import GenericLogger, Logger, NullLogger
from .reflect import LogReflector, logger, set_global_logger
from .report import log_exc


def get_logger() -> GenericLogger:
    """获取当前的全局日志器

    :return: 日志器
    """
    return LogReflector.get_global_logger() or NullLogger()
