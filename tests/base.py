import asyncio as aio
import json

import pytest as pt
from pytest import fixture

from obreverse.log import Logger, LogLevel, set_global_logger

set_global_logger(Logger("tests", level=LogLevel.DEBUG))
# Auto use "package" loop_scope (not pytest fixture scope) for all async test functions
pytestmark = pt.mark.asyncio(loop_scope="package")


def dump(obj: dict) -> str:
    return json.dumps(obj, ensure_ascii=False)


async def wait_until(cond, timeout: float = 3) -> None:
    async def _poll() -> None:
        while not cond():
            await aio.sleep(0.01)

    await aio.wait_for(_poll(), timeout)
