from __future__ import annotations

import logging

from typing_extensions import Any

from .base import GenericLogger, Logger


class LogReflector:
    global_logger: GenericLogger | None = Logger()

    @classmethod
    def set_global_logger(cls, logger: GenericLogger | None) -> None:
        cls.global_logger = logger

    @classmethod
    def get_global_logger(cls) -> GenericLogger | None:
        return cls.global_logger


def set_global_logger(logger: GenericLogger | None) -> None:
    """设置全局日志器

    :param logger: 日志器，为空则关闭所有日志
    """
    LogReflector.set_global_logger(logger)


class GenericLogProxy(GenericLogger):
    """始终转发到当前全局日志器的代理"""

    def __log_meth__(self, meth_name: str, *_: Any, **kwargs: Any) -> None:
        logger = LogReflector.global_logger
        if logger is None:
            return
        if isinstance(logger, logging.Logger):
            kwargs["stacklevel"] = 3
        getattr(logger, meth_name)(*_, **kwargs)

    def debug(self, *_: Any, **__: Any) -> None:
        self.__log_meth__("debug", *_, **__)

    def info(self, *_: Any, **__: Any) -> None:
        self.__log_meth__("info", *_, **__)

    def warning(self, *_: Any, **__: Any) -> None:
        self.__log_meth__("warning", *_, **__)

    def error(self, *_: Any, **__: Any) -> None:
        self.__log_meth__("error", *_, **__)

    def critical(self, *_: Any, **__: Any) -> None:
        self.__log_meth__("critical", *_, **__)

    def exception(self, *_: Any, **__: Any) -> None:
        self.__log_meth__("exception", *_, **__)

    def generic_lazy(self, *_: Any, **__: Any) -> None:
        self.__log_meth__("generic_lazy", *_, **__)

    def generic_obj(self, *_: Any, **__: Any) -> None:
        self.__log_meth__("generic_obj", *_, **__)


logger: GenericLogger = GenericLogProxy()
