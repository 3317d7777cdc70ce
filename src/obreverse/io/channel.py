from abc import ABC, abstractmethod

from websockets.asyncio.server import ServerConnection
from websockets.protocol import State


class AbstractChannel(ABC):
    """消息通道

    一条全双工、以消息为单位分帧的连接，每条消息是一个 JSON 文档
    """

    @abstractmethod
    async def recv(self) -> str | bytes:
        """接收下一条消息，连接关闭时抛出 :class:`websockets.ConnectionClosed`"""
        raise NotImplementedError

    @abstractmethod
    async def send(self, data: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def closed(self) -> bool:
        raise NotImplementedError

    @property
    @abstractmethod
    def peer(self) -> str:
        """对端的标识"""
        raise NotImplementedError


class WebSocketChannel(AbstractChannel):
    def __init__(self, conn: ServerConnection) -> None:
        self.conn = conn

    async def recv(self) -> str | bytes:
        return await self.conn.recv()

    async def send(self, data: str) -> None:
        await self.conn.send(data)

    async def close(self) -> None:
        await self.conn.close()

    def closed(self) -> bool:
        return self.conn.state is State.CLOSED

    @property
    def peer(self) -> str:
        addr = self.conn.remote_address
        if addr is None:
            return "<unknown>"
        return f"{addr[0]}:{addr[1]}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(peer={self.peer})"
