from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass

from typing_extensions import Any, Callable, Mapping
from websockets import ConnectionClosed

from .adapter.action import Action
from .adapter.echo import Echo
from .exceptions import CallAbandoned, CallError, CallTimeout, MalformedMessage, NoConnection
from .io.channel import AbstractChannel
from .log import logger
from .typ import LogLevel


@dataclass
class PendingCall:
    action: str
    fut: asyncio.Future[Any]


class EchoGenerator:
    """关联标识生成器，使用单调递增的计数值"""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return str(next(self._counter))


class CallCorrelator:
    """调用关联器

    为每个调用生成唯一的关联标识，在等待表中登记，收到携带相同标识的响应时完成对应的调用。
    响应的顺序不必与请求的顺序一致
    """

    def __init__(
        self,
        get_channel: Callable[[], AbstractChannel | None],
        timeout: float | None = None,
        max_pending: int = 256,
    ) -> None:
        """初始化调用关联器

        :param get_channel: 获取当前活动连接的函数，没有活动连接时返回空
        :param timeout: 等待响应的超时时间，为空则一直等待
        :param max_pending: 同时等待响应的调用数量上限
        """
        self.timeout = timeout
        self.max_pending = max_pending
        self._get_channel = get_channel
        self._pending: dict[str, PendingCall] = {}
        self._gen_echo = EchoGenerator()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def is_pending(self, echo: str) -> bool:
        return echo in self._pending

    def _new_echo(self) -> str:
        echo = self._gen_echo()
        while echo in self._pending:
            echo = self._gen_echo()
        return echo

    async def call(self, action: str | Action, params: Mapping[str, Any] | None = None) -> Any:
        """发起调用并等待响应

        :param action: 动作名，或已构造的 :class:`.Action`
        :param params: 调用参数，`action` 为 :class:`.Action` 时忽略
        :return: 响应中的 `data` 字段
        """
        act = action if isinstance(action, Action) else Action(action, params)
        chan = self._get_channel()
        if chan is None:
            raise NoConnection("no connection")
        if len(self._pending) >= self.max_pending:
            logger.warning(f"等待响应的调用已达到上限 {self.max_pending}，丢弃调用 {act.type}")
            raise CallError(f"等待响应的调用过多，调用 {act.type} 被丢弃")

        echo = self._new_echo()
        act.set_echo(echo)
        fut: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._pending[echo] = PendingCall(act.type, fut)

        try:
            try:
                await chan.send(act.flatten())
            except ConnectionClosed as e:
                raise NoConnection("no connection") from e

            if self.timeout is None:
                return await fut
            try:
                return await asyncio.wait_for(fut, self.timeout)
            except asyncio.TimeoutError:
                raise CallTimeout(f"调用 {act.type} 在 {self.timeout}s 内没有收到响应") from None
        finally:
            self._pending.pop(echo, None)

    def feed(self, raw: Mapping[str, Any]) -> bool:
        """尝试把收到的数据作为响应处理

        :param raw: 收到的 JSON 对象
        :return: 是否匹配了等待中的调用，匹配时数据已被消费
        """
        echo = raw.get("echo")
        if echo is None:
            return False

        pending = self._pending.pop(str(echo), None)
        if pending is None:
            return False
        if pending.fut.done():
            return True

        try:
            resp = Echo.resolve(raw)
        except MalformedMessage as e:
            logger.generic_obj(f"调用 {pending.action} 的响应无法解析", raw, level=LogLevel.WARNING)
            pending.fut.set_exception(e)
            return True

        if resp.is_ok():
            pending.fut.set_result(resp.data)
        else:
            logger.warning(f"调用 {pending.action} 失败：{resp.prompt}（retcode={resp.retcode}）")
            pending.fut.set_exception(resp.to_error(pending.action))
        return True

    def abandon_all(self, reason: str) -> int:
        """让所有等待中的调用以 :class:`.CallAbandoned` 失败

        :param reason: 放弃的原因
        :return: 被放弃的调用数量
        """
        pendings = tuple(self._pending.values())
        self._pending.clear()
        for pending in pendings:
            if not pending.fut.done():
                pending.fut.set_exception(CallAbandoned(f"调用 {pending.action} 被放弃：{reason}"))
        if pendings:
            logger.warning(f"{len(pendings)} 个等待响应的调用被放弃：{reason}")
        return len(pendings)
