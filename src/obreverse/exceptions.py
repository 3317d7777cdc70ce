from typing_extensions import Any


class BotException(Exception):
    """异常基类"""

    def __init__(self, *args: object):
        super().__init__(*args)
        if not len(args):
            self.err = ""
        elif len(args) == 1:
            self.err = str(args[0])
        else:
            self.err = str(args)
        self.pretty_err = f"[{self.__class__.__module__}.{self.__class__.__qualname__}] {self.err}"

    def __str__(self) -> str:
        return self.err


class SourceError(BotException):
    """连接源异常"""


class BindError(SourceError):
    """监听端口绑定失败"""


class MalformedMessage(BotException):
    """收到无法解析或无法分类的消息"""

    def __init__(self, msg: str, raw: Any = None) -> None:
        super().__init__(msg)
        self.raw = raw


class CallError(BotException):
    """调用异常"""


class NoConnection(CallError):
    """没有活动的连接时发起调用"""


class CallFailed(CallError):
    """实现端返回了非 ok 状态的响应"""

    def __init__(
        self,
        msg: str,
        action: str = "",
        status: str = "failed",
        retcode: int | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(msg)
        self.action = action
        self.status = status
        self.retcode = retcode
        self.data = data


class CallTimeout(CallError):
    """等待响应超时"""


class CallAbandoned(CallError):
    """连接关闭或服务停止，等待中的调用被放弃"""


class ConfigError(BotException):
    """配置异常"""

