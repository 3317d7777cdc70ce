from __future__ import annotations

import io
from types import TracebackType

from typing_extensions import TYPE_CHECKING

from .utils import singleton

if TYPE_CHECKING:
    import rich.console
    import rich.highlighter
    from rich.style import Style

# 使用 singleton 做 lazyload 优化

_TMP_CONSOLE_IO = io.StringIO()


@singleton
def _get_tmp_console() -> "rich.console.Console":
    import rich.console

    return rich.console.Console(
        file=_TMP_CONSOLE_IO, record=True, color_system="256", width=120
    )


@singleton
def _get_repr_highlighter() -> "rich.highlighter.Highlighter":
    import rich.highlighter

    return rich.highlighter.ReprHighlighter()


def _flush_tmp_console(strip_all: bool = True) -> tuple[str, str]:
    colored_str = _TMP_CONSOLE_IO.getvalue()
    plain_str = _get_tmp_console().export_text()
    _TMP_CONSOLE_IO.seek(0)
    _TMP_CONSOLE_IO.truncate(0)
    if strip_all:
        return colored_str.rstrip("\n"), plain_str.rstrip("\n")
    # 只去掉 print 追加的换行
    return colored_str[:-1], plain_str[:-1]


def get_rich_object(obj: object, max_len: int | None = 2000) -> tuple[str, str]:
    """渲染对象，返回（带颜色字符串，纯文本字符串）"""
    import rich.pretty

    _get_tmp_console().print(
        rich.pretty.Pretty(
            obj,
            indent_guides=True,
            max_string=max_len,
            overflow="ignore",
            expand_all=True,
        ),
        crop=False,
    )
    return _flush_tmp_console()


def get_rich_repr(s: str, style: "Style" | None = None) -> tuple[str, str]:
    from rich.text import Text

    if style:
        msg = Text(s, style=style)
    else:
        msg = _get_repr_highlighter()(Text(s))
    _get_tmp_console().print(msg, crop=False)
    return _flush_tmp_console(strip_all=False)


def get_rich_exception(
    exc_type: type[BaseException], exc: BaseException, tb: TracebackType | None
) -> tuple[str, str]:
    from rich.traceback import Traceback

    _get_tmp_console().print(
        Traceback.from_exception(exc_type, exc, tb, show_locals=False, max_frames=20),
        crop=False,
    )
    return _flush_tmp_console()
