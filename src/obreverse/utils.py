import inspect
from functools import wraps

from typing_extensions import Any, Awaitable, Callable, Coroutine, cast

from .typ import AsyncCallable, P, T


def singleton(cls: Callable[P, T]) -> Callable[P, T]:
    """单例装饰器

    :param cls: 需要被单例化的可调用对象
    :return: 需要被单例化的可调用对象
    """
    obj_map = {}

    @wraps(cls)
    def singleton_wrapped(*args: P.args, **kwargs: P.kwargs) -> T:
        if cls not in obj_map:
            obj_map[cls] = cls(*args, **kwargs)
        return obj_map[cls]

    return singleton_wrapped


def to_async(
    obj: Callable[P, T] | AsyncCallable[P, T] | Awaitable[T]
) -> Callable[P, Coroutine[Any, Any, T]]:
    """异步包装函数

    将一个可调用对象或可等待对象装饰为异步函数

    :param obj: 需要转换的可调用对象或可等待对象
    :return: 异步函数
    """
    if inspect.iscoroutinefunction(obj):
        return cast(Callable[P, Coroutine[Any, Any, T]], obj)

    async def async_wrapped(*args: P.args, **kwargs: P.kwargs) -> T:
        if not inspect.isawaitable(obj):
            ret = cast(Callable[P, T], obj)(*args, **kwargs)
        else:
            ret = obj
        if inspect.isawaitable(ret):
            return cast(T, await ret)
        return cast(T, ret)

    if not inspect.isawaitable(obj):
        async_wrapped = wraps(obj)(async_wrapped)
    return async_wrapped


def truncate(s: str | bytes, placeholder: str = "...", width: int = 500) -> str:
    """截断过长的字符串，用于日志输出

    :param s: 字符串或字节串
    :param placeholder: 截断后的占位符
    :param width: 最大保留长度
    :return: 截断后的字符串
    """
    if isinstance(s, bytes):
        s = s.decode("utf-8", errors="replace")
    if len(s) <= width:
        return s
    return s[:width] + placeholder
