from __future__ import annotations

from types import MappingProxyType

from typing_extensions import Any, Iterator, Literal, Mapping

from ..exceptions import MalformedMessage

#: 通配的分发键，注册到此键的监听器接收所有事件
WILDCARD_KEY = "*"

POST_TYPES = ("message", "notice", "request", "meta_event")
# 按此顺序查找二级类型字段
DETAIL_TYPE_FIELDS = ("message_type", "request_type", "notice_type", "meta_event_type")

EventKey = Literal[
    "message.private",
    "message.group",
    "notice.group_upload",
    "notice.group_admin",
    "notice.group_decrease",
    "notice.group_increase",
    "notice.group_ban",
    "notice.friend_add",
    "notice.group_recall",
    "notice.friend_recall",
    "notice.notify",
    "request.friend",
    "request.group",
    "meta_event.lifecycle",
    "meta_event.heartbeat",
]


def get_detail_type(raw: Mapping[str, Any]) -> str:
    """获取事件的二级类型，没有任何二级类型字段时为空字符串"""
    for name in DETAIL_TYPE_FIELDS:
        if name in raw:
            return str(raw[name])
    return ""


def classify(raw: Mapping[str, Any]) -> str:
    """计算事件的分发键：`<post_type>.<二级类型>`

    :param raw: 事件的原始字典
    :return: 分发键
    """
    if "post_type" not in raw:
        raise MalformedMessage("事件缺少 post_type 字段", raw)
    return f"{raw['post_type']}.{get_detail_type(raw)}"


class Event(Mapping[str, Any]):
    """上报事件

    对原始上报字典的只读封装，可通过 `event["field"]` 或 `event.get()` 访问任意字段

    :ivar str post_type: 事件的上报类型
    :ivar str detail_type: 事件的二级类型
    :ivar str key: 事件的分发键
    """

    __slots__ = ("_raw", "post_type", "detail_type", "key")

    def __init__(self, raw: Mapping[str, Any]) -> None:
        self.key = classify(raw)
        self.post_type = str(raw["post_type"])
        self.detail_type = get_detail_type(raw)
        # 最后设置，此后对象只读
        self._raw = MappingProxyType(dict(raw))

    @property
    def raw(self) -> Mapping[str, Any]:
        """原始上报数据（只读）"""
        return self._raw

    @property
    def time(self) -> int | None:
        return self._raw.get("time")

    @property
    def self_id(self) -> int | None:
        return self._raw.get("self_id")

    @property
    def sub_type(self) -> str | None:
        return self._raw.get("sub_type")

    def is_message(self) -> bool:
        return self.post_type == "message"

    def is_notice(self) -> bool:
        return self.post_type == "notice"

    def is_request(self) -> bool:
        return self.post_type == "request"

    def is_meta(self) -> bool:
        return self.post_type == "meta_event"

    def __getitem__(self, name: str) -> Any:
        return self._raw[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._raw)

    def __len__(self) -> int:
        return len(self._raw)

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "_raw"):
            raise AttributeError(f"{self.__class__.__name__} 对象是只读的")
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self.key!r}, time={self.time})"
