import json

from typing_extensions import Any, Mapping


class Action:
    """调用请求

    值为 `None` 的参数不会被发送

    :ivar str type: 调用的动作名
    :ivar dict params: 调用参数
    :ivar str | None echo: 关联标识，为空时无法关联响应
    """

    def __init__(self, type: str, params: Mapping[str, Any] | None = None) -> None:
        self.type = type
        self.params = {k: v for k, v in (params or {}).items() if v is not None}
        self.echo: str | None = None

    def set_echo(self, echo: str | None) -> None:
        self.echo = echo

    def extract(self) -> dict[str, Any]:
        obj: dict[str, Any] = {
            "action": self.type,
            "params": self.params,
        }
        if self.echo is not None:
            obj["echo"] = self.echo
        return obj

    def flatten(self) -> str:
        return json.dumps(self.extract(), ensure_ascii=False)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type={self.type!r}, echo={self.echo!r})"
