from enum import Enum
from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING

from typing_extensions import Any, Awaitable, ParamSpec, Protocol, TypeVar

#: 泛型 T，无约束
T = TypeVar("T", default=Any)
#: 泛型 T_co，协变无约束
T_co = TypeVar("T_co", covariant=True, default=Any)
#: :obj:`~typing.ParamSpec` 泛型 P，无约束
P = ParamSpec("P", default=Any)


class AsyncCallable(Protocol[P, T_co]):
    """用法：AsyncCallable[P, T]

    是该类型的等价形式：Callable[P, Awaitable[T]]
    """

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> Awaitable[T_co]: ...


class SyncOrAsyncCallable(Protocol[P, T_co]):
    """用法：SyncOrAsyncCallable[P, T]

    是该类型的等价形式：Callable[P, T | Awaitable[T]]
    """

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> T_co | Awaitable[T_co]: ...


class ExitCode(Enum):
    NORMAL = 0
    ERROR = 1


class LogLevel(int, Enum):
    """日志等级枚举"""

    CRITICAL = CRITICAL
    ERROR = ERROR
    WARNING = WARNING
    INFO = INFO
    DEBUG = DEBUG

    @classmethod
    def from_name(cls, name: "str | int | LogLevel") -> "LogLevel":
        if isinstance(name, LogLevel):
            return name
        if isinstance(name, int):
            return cls(name)
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"不存在的日志等级：{name!r}") from None


class VoidType(Enum):
    VOID = type("Void", (), {})
