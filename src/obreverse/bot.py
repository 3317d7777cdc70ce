from __future__ import annotations

import asyncio

from typing_extensions import Any, Callable, Mapping, Self, overload

from ._hook import LinkLifeSpan
from .adapter.action import Action
from .adapter.event import WILDCARD_KEY, Event
from .config import BotConfig
from .correlate import CallCorrelator
from .dispatch import EventDispatcher, EventListener, parse_message
from .exceptions import MalformedMessage
from .facade import ActionMixin
from .io.channel import AbstractChannel
from .io.server import ReverseWebSocketServer
from .log import GenericLogger, Logger, LogLevel, log_exc, logger, set_global_logger
from .typ import SyncOrAsyncCallable


class ReverseWsBot(ActionMixin):
    """OneBot v11 反向 WebSocket bot

    监听端口等待实现端连接，接收事件并分发给监听器，并通过 :meth:`call` 向实现端发起调用。

    .. code:: python

        bot = ReverseWsBot(BotConfig(port=8080))

        @bot.on("message.group")
        async def _(event: Event) -> None:
            await bot.send_group_msg(event["group_id"], "hello")

        await bot.run()
    """

    def __init__(
        self, config: BotConfig | None = None, logger: GenericLogger | None = None
    ) -> None:
        """初始化 bot

        :param config: 配置，为空则使用默认配置
        :param logger: 日志器，为空则按配置创建
        """
        self.config = config if config is not None else BotConfig()
        self.logger = (
            logger
            if logger is not None
            else Logger(level=self.config.log_level, to_dir=self.config.log_dir)
        )

        self.server = ReverseWebSocketServer(
            self.config.host,
            self.config.port,
            on_received=self._on_received,
            ping_interval=self.config.ping_interval,
        )
        self.dispatcher = EventDispatcher()
        self.correlator = CallCorrelator(
            lambda: self.server.channel,
            timeout=self.config.call_timeout,
            max_pending=self.config.max_pending,
        )

        self._event_q: asyncio.Queue[Event] = asyncio.Queue()
        self._dispatch_task: asyncio.Task[None] | None = None
        self.server.on(LinkLifeSpan.DISCONNECTED, self._on_unlinked)

    async def __aenter__(self) -> Self:
        await self.init()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.dispose()

    @property
    def port(self) -> int:
        """实际监听的端口"""
        return self.server.bound_port

    def connected(self) -> bool:
        """是否有活动的实现端连接"""
        return self.server.linked()

    async def init(self) -> None:
        """启动监听。端口无法绑定时抛出 :class:`.BindError`"""
        set_global_logger(self.logger)
        await self.server.start()
        if self._dispatch_task is None:
            self._dispatch_task = asyncio.create_task(self._dispatch_loop())

    async def dispose(self) -> None:
        """停止监听并释放所有资源，可重复调用"""
        self.correlator.abandon_all("bot 已停止运行")
        await self.server.stop()
        if self._dispatch_task is not None:
            self._dispatch_task.cancel()
            await asyncio.wait((self._dispatch_task,))
            self._dispatch_task = None

    async def run(self) -> None:
        """启动并持续运行，直到被取消"""
        async with self:
            await asyncio.get_running_loop().create_future()

    async def wait_connected(self, timeout: float | None = None) -> AbstractChannel:
        """等待实现端连接

        :param timeout: 超时时间，为空则一直等待
        :return: 活动的连接
        """
        return await self.server.wait_linked(timeout)

    @overload
    def on(self, key: EventListener) -> EventListener: ...

    @overload
    def on(self, key: str, callback: EventListener) -> EventListener: ...

    @overload
    def on(self, key: str) -> Callable[[EventListener], EventListener]: ...

    def on(
        self, key: str | EventListener, callback: EventListener | None = None
    ) -> EventListener | Callable[[EventListener], EventListener]:
        """注册事件监听器

        - `on(callback)`：监听所有事件
        - `on("message.group", callback)`：监听指定分发键的事件
        - `@on("message.group")`：作为装饰器使用

        :param key: 分发键，或直接传入监听所有事件的监听器
        :param callback: 监听器
        """
        if not isinstance(key, str):
            self.dispatcher.register(WILDCARD_KEY, key)
            return key
        if callback is not None:
            self.dispatcher.register(key, callback)
            return callback

        def on_wrapped(func: EventListener) -> EventListener:
            self.dispatcher.register(key, func)
            return func

        return on_wrapped

    def off(self, callback: EventListener) -> None:
        """从所有分发键下移除监听器"""
        self.dispatcher.unregister(callback)

    def on_hook(self, hook_type: LinkLifeSpan, func: SyncOrAsyncCallable[..., None]) -> None:
        """注册生命周期 hook，`CONNECTED` 类型的 hook 在后台运行，不阻塞数据接收"""
        self.server.on(hook_type, func)

    def on_connected(
        self, func: SyncOrAsyncCallable[[AbstractChannel], None]
    ) -> SyncOrAsyncCallable[[AbstractChannel], None]:
        self.on_hook(LinkLifeSpan.CONNECTED, func)
        return func

    def on_disconnected(
        self, func: SyncOrAsyncCallable[[AbstractChannel], None]
    ) -> SyncOrAsyncCallable[[AbstractChannel], None]:
        self.on_hook(LinkLifeSpan.DISCONNECTED, func)
        return func

    async def call(self, action: str | Action, params: Mapping[str, Any] | None = None) -> Any:
        """通用调用入口

        :param action: 动作名，或已构造的 :class:`.Action`
        :param params: 调用参数
        :return: 响应中的 `data` 字段
        """
        return await self.correlator.call(action, params)

    async def _on_received(self, raw: str | bytes) -> None:
        if raw in ("", b""):
            return

        try:
            obj = parse_message(raw)
        except MalformedMessage as e:
            logger.warning(f"丢弃无效的数据：{e}")
            return

        if self.correlator.feed(obj):
            return
        if "post_type" in obj:
            self._event_q.put_nowait(Event(obj))
            return
        if "echo" in obj:
            logger.debug(f"收到未匹配任何调用的响应（echo={obj['echo']!r}），已忽略")
            return
        logger.generic_obj("丢弃无法分类的数据：", obj, level=LogLevel.WARNING)

    async def _dispatch_loop(self) -> None:
        while True:
            event = await self._event_q.get()
            try:
                await self.dispatcher.dispatch(event)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                log_exc(e, f"分发事件 {event.key} 时发生异常", obj=event)

    def _on_unlinked(self, _: AbstractChannel) -> None:
        if self.config.reject_on_close:
            self.correlator.abandon_all("连接已断开")
