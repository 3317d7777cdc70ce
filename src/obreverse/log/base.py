from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from abc import ABC, abstractmethod
from contextlib import contextmanager
from logging import CRITICAL
from logging import Logger as _Logger

from typing_extensions import Any, Callable, Generator, Literal

from .._render import get_rich_exception, get_rich_object, get_rich_repr
from ..typ import LogLevel, T, VoidType
from ..utils import singleton


class GenericLogger(ABC):
    """通用日志器抽象类

    任何日志器实现本类接口后，即可兼容内部所有日志操作
    """

    @abstractmethod
    def debug(self, msg: object) -> None:
        raise NotImplementedError

    @abstractmethod
    def info(self, msg: object) -> None:
        raise NotImplementedError

    @abstractmethod
    def warning(self, msg: object) -> None:
        raise NotImplementedError

    @abstractmethod
    def error(self, msg: object) -> None:
        raise NotImplementedError

    @abstractmethod
    def critical(self, msg: object) -> None:
        raise NotImplementedError

    @abstractmethod
    def exception(self, msg: object) -> None:
        """记录异常信息的日志"""
        raise NotImplementedError

    @abstractmethod
    def generic_lazy(
        self,
        msg: str,
        *arg_getters: Callable[[], str],
        level: LogLevel,
        with_exc: bool = False,
    ) -> None:
        """通用懒惰日志方法

        :param msg: 日志消息，可使用 %s 指定稍后填充的参数
        :param arg_getters: 填充消息 %s 位置的填充函数
        :param level: 日志等级
        :param with_exc: 是否记录异常栈信息
        """
        raise NotImplementedError

    @abstractmethod
    def generic_obj(
        self,
        msg: str,
        obj: T,
        *arg_getters: Callable[[], str],
        level: LogLevel = LogLevel.INFO,
    ) -> None:
        """通用记录对象日志方法

        :param msg: 附加的日志消息，可使用 %s 指定稍后填充的参数
        :param obj: 需要被日志记录的对象
        :param arg_getters: 填充消息 %s 位置的填充函数
        :param level: 日志等级
        """
        raise NotImplementedError


@singleton
class NullLogger(_Logger, GenericLogger):
    def __init__(self) -> None:
        super().__init__("__OBREVERSE_EMPTYLOGGER__", CRITICAL)
        self.addHandler(logging.NullHandler())

    def generic_lazy(
        self,
        msg: str,
        *arg_getters: Callable[[], str],
        level: LogLevel,
        with_exc: bool = False,
        stacklevel: int = 1,
    ) -> None:
        return

    def generic_obj(
        self,
        msg: str,
        obj: T,
        *arg_getters: Callable[[], str],
        level: LogLevel = LogLevel.INFO,
        stacklevel: int = 1,
    ) -> None:
        return


class Logger(_Logger, GenericLogger):
    """内置日志器

    `debug`, `info`, `warning`, `error`, `critical`, `exception`
    等接口与 :class:`logging.Logger` 用法完全一致
    """

    def __init__(
        self,
        name: str = "obreverse",
        level: LogLevel = LogLevel.INFO,
        file_level: LogLevel = LogLevel.DEBUG,
        to_console: bool = True,
        to_dir: str | None = None,
        add_tag: bool = True,
        yellow_warn: bool = True,
        red_error: bool = True,
    ) -> None:
        """初始化日志器

        :param name: 日志器的名称
        :param level: 日志等级
        :param file_level: 日志文件的日志等级
        :param to_console: 是否输出到控制台
        :param to_dir: 保存日志文件的目录，为空则不保存文件
        :param add_tag: 记录日志时是否标识日志器名称
        :param yellow_warn: 记录 `WARNING` 级别时，是否将日志内容着色为黄色
        :param red_error: 记录 `ERROR` 及以上级别时，是否将日志内容着色为红色
        """
        super().__init__(name, LogLevel.DEBUG)
        self._no_tag = not add_tag
        self._filter = _LogFilter(name, yellow_warn, red_error)

        if to_console:
            con_handler = self._add_handler(self._console_handler(), self._console_fmt())
            con_handler.setLevel(level)

        if to_dir is not None:
            file_handler = self._add_handler(
                self._file_handler(to_dir, name), self._file_fmt()
            )
            file_handler.setLevel(file_level)

    def _add_handler(self, handler: logging.Handler, fmt: logging.Formatter) -> logging.Handler:
        handler.setFormatter(fmt)
        handler.addFilter(self._filter)
        self.addHandler(handler)
        return handler

    @staticmethod
    def _make_fmt_nocache(fmt: logging.Formatter) -> None:
        _original_format = fmt.format

        def nocache_format(record: logging.LogRecord) -> str:
            record.exc_text = None
            return _original_format(record)

        fmt.format = nocache_format  # type: ignore[method-assign]

    def _console_fmt(self) -> logging.Formatter:
        import colorlog

        fmt_arr = [
            "%(cyan)s%(asctime)s.%(msecs)03d%(reset)s",
            "%(log_color)s%(levelname)-7s%(reset)s",
            "%(blue)s%(module)s%(reset)s:%(cyan)s%(lineno)d%(reset)s",
        ]
        if not self._no_tag:
            fmt_arr.insert(1, f"%(purple)s{self.name}%(reset)s")
        fmt_s = " | ".join(fmt_arr) + " - %(colored_msg_str)s%(colored_obj)s"

        fmt = colorlog.ColoredFormatter(fmt_s, datefmt="%Y-%m-%d %H:%M:%S", reset=True)
        fmt.formatException = lambda exc_info: get_rich_exception(*exc_info)[0]  # type: ignore
        Logger._make_fmt_nocache(fmt)
        return fmt

    def _file_fmt(self) -> logging.Formatter:
        fmt_arr = ["%(asctime)s.%(msecs)03d", "%(levelname)-7s", "%(module)s:%(lineno)d"]
        if not self._no_tag:
            fmt_arr.insert(1, self.name)
        fmt_s = " | ".join(fmt_arr) + " - %(msg_str)s%(obj)s"

        fmt = logging.Formatter(fmt=fmt_s, datefmt="%Y-%m-%d %H:%M:%S")
        fmt.formatException = lambda exc_info: get_rich_exception(*exc_info)[1]  # type: ignore
        Logger._make_fmt_nocache(fmt)
        return fmt

    @staticmethod
    def _console_handler() -> logging.Handler:
        return logging.StreamHandler(sys.stderr)

    @staticmethod
    def _file_handler(log_dir: str, name: str) -> logging.Handler:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        return logging.handlers.RotatingFileHandler(
            filename=os.path.join(log_dir, f"{name}.log"),
            maxBytes=1024 * 1024,
            backupCount=10,
            encoding="UTF-8",
        )

    def generic_lazy(
        self,
        msg: str,
        *arg_getters: Callable[[], str],
        level: LogLevel,
        with_exc: bool = False,
        stacklevel: int = 1,
    ) -> None:
        """懒惰日志方法

        :param msg: 日志消息，可使用 %s 指定稍后填充的参数
        :param arg_getters: 填充消息 %s 位置的填充函数
        :param level: 日志等级
        :param with_exc: 是否记录异常栈信息
        :param stacklevel: 打印日志时尝试解析的调用栈层级
        """
        if not self.isEnabledFor(level):
            return
        exc = sys.exc_info() if with_exc else None
        self._log(
            level, msg, tuple(g() for g in arg_getters), exc_info=exc, stacklevel=stacklevel + 1
        )

    def generic_obj(
        self,
        msg: str,
        obj: T,
        *arg_getters: Callable[[], str],
        level: LogLevel = LogLevel.INFO,
        stacklevel: int = 1,
    ) -> None:
        """记录对象的日志方法

        :param msg: 附加的日志消息，可使用 %s 指定稍后填充的参数
        :param obj: 需要被日志记录的对象
        :param arg_getters: 填充消息 %s 位置的填充函数
        :param level: 日志等级
        :param stacklevel: 打印日志时尝试解析的调用栈层级
        """
        with self._filter.on_obj(obj):
            self.generic_lazy(msg + "\n", *arg_getters, level=level, stacklevel=stacklevel + 1)


class _LogFilter(logging.Filter):
    def __init__(self, name: str = "", yellow_warn: bool = True, red_error: bool = True) -> None:
        super().__init__(name)
        self._obj: Any = VoidType.VOID
        self._enable_yellow_warn = yellow_warn
        self._enable_red_error = red_error

    @contextmanager
    def on_obj(self, obj: Any) -> Generator[None, None, None]:
        try:
            self._obj = obj
            yield
        finally:
            self._obj = VoidType.VOID

    def filter(self, record: logging.LogRecord) -> Literal[True]:
        from rich.style import Style

        msg = str(record.msg)
        if record.args:
            msg = msg % record.args

        if self._enable_red_error and record.levelno >= logging.ERROR:
            record.colored_msg_str, record.msg_str = get_rich_repr(msg, Style(color="red"))
        elif self._enable_yellow_warn and logging.ERROR > record.levelno >= logging.WARNING:
            record.colored_msg_str, record.msg_str = get_rich_repr(msg, Style(color="yellow"))
        else:
            record.colored_msg_str, record.msg_str = get_rich_repr(msg)

        if self._obj is VoidType.VOID:
            record.colored_obj, record.obj = "", ""
        else:
            record.colored_obj, record.obj = get_rich_object(self._obj)
        return True
