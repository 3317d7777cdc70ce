from .channel import AbstractChannel, WebSocketChannel
from .server import ReverseWebSocketServer
