from typing_extensions import Any

from ..typ import LogLevel
from .reflect import logger


def log_exc(exc: BaseException, msg: str, obj: Any = None) -> None:
    """记录异常及其回溯栈

    :param exc: 异常
    :param msg: 日志消息
    :param obj: 相关变量信息，为空则不记录
    """
    try:
        raise exc
    except BaseException:
        logger.exception(msg)
        if obj is not None:
            logger.generic_obj("相关变量信息：", obj, level=LogLevel.ERROR)
