import asyncio
from enum import Enum

from typing_extensions import Any, Generic, TypeVar

from .log import log_exc, logger
from .typ import AsyncCallable, SyncOrAsyncCallable
from .utils import to_async

HookEnumT = TypeVar("HookEnumT", bound=Enum)


class LinkLifeSpan(Enum):
    """连接生命周期的 hook 类型"""

    STARTED = "started"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    STOPPED = "stopped"


class HookRunner(Generic[HookEnumT]):
    def __init__(self, type: HookEnumT, func: AsyncCallable[..., None]) -> None:
        self.type = type
        self.callback: AsyncCallable[..., None] = func

    async def run(self, *args: Any, **kwargs: Any) -> None:
        try:
            await self.callback(*args, **kwargs)
        except Exception as e:
            log_exc(e, f"{self.type} 类型的 hook 方法 {self.callback} 发生异常")


class HookBus(Generic[HookEnumT]):
    def __init__(self, type: type[HookEnumT], tag: str | None = None) -> None:
        self._hooks: dict[HookEnumT, list[HookRunner]] = {t: [] for t in list(type)}
        self._tag = tag
        self._tasks: set[asyncio.Task] = set()

    def register(self, hook_type: HookEnumT, hook_func: SyncOrAsyncCallable[..., None]) -> None:
        self._hooks[hook_type].append(HookRunner(hook_type, to_async(hook_func)))

    async def emit(
        self,
        hook_type: HookEnumT,
        wait: bool = False,
        /,
        *,
        args: tuple | None = None,
        kwargs: dict[str, Any] | None = None,
    ) -> None:
        args = args if args is not None else ()
        kwargs = kwargs if kwargs is not None else {}

        msg = f"<{hook_type}>（{wait = }）"  # noqa: E251, E202
        if self._tag:
            msg = f"开始 {self._tag} 的 hook: {msg}"
        else:
            msg = f"开始 hook: {msg}"
        logger.debug(msg)

        if wait:
            # 等待时按注册顺序依次运行
            for runner in tuple(self._hooks[hook_type]):
                await runner.run(*args, **kwargs)
            return

        for runner in tuple(self._hooks[hook_type]):
            t = asyncio.create_task(runner.run(*args, **kwargs))
            self._tasks.add(t)
            t.add_done_callback(self._tasks.discard)
