from __future__ import annotations

import asyncio
import http

from typing_extensions import Any, Self, cast
from websockets import ConnectionClosed
from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.frames import CloseCode
from websockets.http11 import Request, Response

from .._hook import HookBus, LinkLifeSpan
from ..exceptions import BindError
from ..log import log_exc, logger
from ..typ import AsyncCallable, LogLevel, SyncOrAsyncCallable
from ..utils import truncate
from .channel import AbstractChannel, WebSocketChannel

_RECONN_REFUSED = "Already accepted the unique connection\n"


class ReverseWebSocketServer:
    """反向 WebSocket 连接管理器

    监听端口，同一时间只接受一个实现端连接。已有活动连接时，新的连接请求会被立即拒绝，
    直到活动连接断开
    """

    def __init__(
        self,
        host: str,
        port: int,
        on_received: AsyncCallable[[str | bytes], None] | None = None,
        ping_interval: float | None = 20,
        name: str = "OneBot v11 反向 WebSocket",
    ) -> None:
        self.name = f"[{name}]"
        self.host = host
        self.port = port
        self.ping_interval = ping_interval
        self.channel: AbstractChannel | None = None
        self.server: Server | None = None

        self._on_received = on_received
        self._hook_bus = HookBus[LinkLifeSpan](LinkLifeSpan, tag=self.name)
        self._linked = asyncio.Event()
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.stop()

    @property
    def bound_port(self) -> int:
        """实际监听的端口，`port` 为 0 时由系统分配"""
        if self.server is None:
            return self.port
        for sock in self.server.sockets:
            return cast(int, sock.getsockname()[1])
        return self.port

    def started(self) -> bool:
        return self.server is not None

    def linked(self) -> bool:
        return self.channel is not None

    def on(self, hook_type: LinkLifeSpan, func: SyncOrAsyncCallable[..., None]) -> None:
        """注册生命周期 hook

        `CONNECTED` 和 `DISCONNECTED` 类型的 hook 会收到对应的 :class:`.AbstractChannel` 参数

        `CONNECTED` 类型的 hook 在后台运行，其中可以发起调用并等待响应
        """
        self._hook_bus.register(hook_type, func)

    async def wait_linked(self, timeout: float | None = None) -> AbstractChannel:
        await asyncio.wait_for(self._linked.wait(), timeout)
        return cast(AbstractChannel, self.channel)

    async def start(self) -> None:
        if self.server is not None:
            return

        async with self._lock:
            if self.server is not None:
                return

            try:
                self.server = await serve(
                    self._input_loop,
                    self.host,
                    self.port,
                    process_request=self._on_req,
                    ping_interval=self.ping_interval,
                )
            except OSError as e:
                raise BindError(f"{self.name} 无法监听 {self.host}:{self.port}：{e}") from e

            logger.info(f"{self.name} 服务已启动 (ws://{self.host}:{self.bound_port})")
            logger.info(f"{self.name} 等待实现端连接中...")
            await self._hook_bus.emit(LinkLifeSpan.STARTED, True)

    async def stop(self) -> None:
        if self.server is None:
            return

        async with self._lock:
            if self.server is None:
                return

            server, self.server = self.server, None
            logger.info(f"{self.name} 正在关闭服务...")
            # 同时关闭活动连接，并等待其接收循环结束
            server.close()
            await server.wait_closed()
            logger.info(f"{self.name} 服务已停止")
            await self._hook_bus.emit(LinkLifeSpan.STOPPED, True)

    async def _on_req(self, conn: ServerConnection, req: Request) -> Response | None:
        if self.channel is not None:
            logger.warning(
                f"{self.name} 已存在活动的连接，拒绝来自 {conn.remote_address} 的连接请求"
            )
            return conn.respond(http.HTTPStatus.FORBIDDEN, _RECONN_REFUSED)
        return None

    async def _input_loop(self, ws: ServerConnection) -> None:
        # 握手期间可能有多个请求同时通过检查，先建立的连接胜出
        if self.channel is not None or self.server is None:
            logger.warning(f"{self.name} 已存在活动的连接，关闭来自 {ws.remote_address} 的新连接")
            await ws.close(CloseCode.POLICY_VIOLATION, _RECONN_REFUSED.strip())
            return

        chan = WebSocketChannel(ws)
        self.channel = chan
        self._linked.set()
        logger.info(f"{self.name} 已与实现端 {chan.peer} 建立了连接")
        # 不等待 hook 完成，hook 中发起的调用需要接收循环读取响应
        await self._hook_bus.emit(LinkLifeSpan.CONNECTED, False, args=(chan,))

        try:
            while True:
                try:
                    raw = await chan.recv()
                except ConnectionClosed:
                    break

                logger.generic_lazy(
                    f"{self.name} 收到数据：\n%s", lambda: truncate(raw), level=LogLevel.DEBUG
                )
                if self._on_received is None:
                    continue
                try:
                    await self._on_received(raw)
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    log_exc(e, f"{self.name} 处理收到的数据时抛出异常", obj={"raw": truncate(raw)})
        finally:
            self.channel = None
            self._linked.clear()
            logger.info(f"{self.name} 与实现端 {chan.peer} 断开了连接")
            await self._hook_bus.emit(LinkLifeSpan.DISCONNECTED, True, args=(chan,))
