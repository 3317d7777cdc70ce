from __future__ import annotations

import json

from typing_extensions import Any, Mapping

from .adapter.event import WILDCARD_KEY, Event
from .exceptions import MalformedMessage
from .log import log_exc, logger
from .typ import LogLevel, SyncOrAsyncCallable
from .utils import to_async

EventListener = SyncOrAsyncCallable[[Event], None]


def parse_message(raw: str | bytes | Mapping[str, Any]) -> dict[str, Any]:
    """把收到的一帧数据解析为 JSON 对象

    :param raw: 原始数据
    :return: 解析后的字典
    """
    if isinstance(raw, Mapping):
        return dict(raw)
    try:
        obj = json.loads(raw)
    except (ValueError, TypeError) as e:
        raise MalformedMessage(f"无法解析为 JSON 的数据：{e}", raw) from e
    if not isinstance(obj, dict):
        raise MalformedMessage("数据不是 JSON 对象", raw)
    return obj


class EventDispatcher:
    """事件分发器

    监听器按分发键（或通配键）注册，分发时先调用所有通配监听器，再调用对应分发键的监听器，
    均按注册顺序依次调用
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[EventListener]] = {}

    def register(self, key: str, callback: EventListener) -> None:
        """注册监听器

        :param key: 分发键（如 `"message.group"`），或通配键 `"*"`
        :param callback: 监听器，可以是同步或异步函数
        """
        self._listeners.setdefault(key, []).append(callback)

    def unregister(self, callback: EventListener) -> None:
        """从所有分发键下移除监听器

        按对象身份匹配，因此需要传入注册时的同一个对象

        :param callback: 需要移除的监听器
        """
        for key in tuple(self._listeners):
            remains = [cb for cb in self._listeners[key] if cb is not callback]
            if remains:
                self._listeners[key] = remains
            else:
                del self._listeners[key]

    def get_listeners(self, key: str) -> tuple[EventListener, ...]:
        return tuple(self._listeners.get(key, ()))

    def keys(self) -> tuple[str, ...]:
        return tuple(self._listeners)

    async def dispatch(self, raw: str | bytes | Mapping[str, Any] | Event) -> Event | None:
        """分发一个事件

        单个监听器抛出的异常会被记录，不影响后续监听器运行。无法解析或分类的数据被记录后丢弃

        :param raw: 原始数据，或已构造的事件
        :return: 分发的事件，数据无效时为空
        """
        if isinstance(raw, Event):
            event = raw
        else:
            try:
                event = Event(parse_message(raw))
            except MalformedMessage as e:
                logger.warning(f"丢弃无效的事件数据：{e}")
                logger.generic_obj("无效的事件数据：", e.raw, level=LogLevel.DEBUG)
                return None

        # 分发开始时的监听器快照，分发过程中的注册变化不影响本次分发
        listeners = self.get_listeners(WILDCARD_KEY) + self.get_listeners(event.key)

        for listener in listeners:
            try:
                await to_async(listener)(event)
            except Exception as e:
                log_exc(e, f"事件 {event.key} 的监听器 {listener} 发生异常", obj=dict(event.raw))
        return event
