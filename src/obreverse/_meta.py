from __future__ import annotations

from typing import Any, Generic, NoReturn, TypeVar

T = TypeVar("T")

__version__ = "1.0.0"


class ReadOnlyAttr(Generic[T]):
    def __init__(self, val: T):
        self.val = val

    def __get__(self, obj: Any, klass: Any = None) -> T:
        return self.val

    def __set__(self, obj: Any, value: T) -> NoReturn:
        raise AttributeError("只读属性无法重新设定值")


class MetaInfo:
    """元信息类"""

    VER = ReadOnlyAttr[str](__version__)
    PROJ_NAME = ReadOnlyAttr[str]("obreverse")
    PROJ_DESC = ReadOnlyAttr[str]("OneBot v11 反向 WebSocket 传输绑定：事件分发与调用关联")
    PROJ_SRC = ReadOnlyAttr[str]("https://github.com/Meloland/obreverse")
    AUTHOR = ReadOnlyAttr[str]("Meloland")
    AUTHOR_EMAIL = ReadOnlyAttr[str]("contact@meloland.org")
    PROTOCOL = ReadOnlyAttr[str]("OneBot-v11")
