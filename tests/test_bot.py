from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, InvalidStatus

from obreverse import (
    BindError,
    BotConfig,
    CallAbandoned,
    CallFailed,
    Event,
    LinkLifeSpan,
    NoConnection,
    ReverseWsBot,
    get_logger,
)
from tests.base import *

_TEST_EVENT_DICT = {
    "time": 1725292489,
    "self_id": 123456,
    "post_type": "message",
    "message_type": "private",
    "sub_type": "friend",
    "message_id": 1,
    "user_id": 1574260633,
    "message": "hello",
    "raw_message": "hello",
    "font": 0,
    "sender": {"user_id": 1574260633, "nickname": "someone"},
}


def new_bot(**kwargs) -> ReverseWsBot:
    conf = BotConfig(host="127.0.0.1", port=0, ping_interval=None, **kwargs)
    return ReverseWsBot(conf, logger=get_logger())


def uri(bot: ReverseWsBot) -> str:
    return f"ws://127.0.0.1:{bot.port}"


async def test_call_roundtrip():
    async with new_bot() as bot:
        with pt.raises(NoConnection):
            await bot.get_login_info()

        async with connect(uri(bot)) as ws:
            await bot.wait_connected(3)
            assert bot.connected()

            t = aio.create_task(bot.get_login_info())
            req = json.loads(await aio.wait_for(ws.recv(), 3))
            assert req == {"action": "get_login_info", "params": {}, "echo": req["echo"]}

            data = {"user_id": 10001, "nickname": "bot"}
            await ws.send(dump({"echo": req["echo"], "status": "ok", "retcode": 0, "data": data}))
            assert await aio.wait_for(t, 3) == data

            t = aio.create_task(bot.call("delete_msg", {"message_id": 1}))
            req = json.loads(await aio.wait_for(ws.recv(), 3))
            await ws.send(
                dump({"echo": req["echo"], "status": "failed", "retcode": 1, "data": None})
            )
            with pt.raises(CallFailed):
                await aio.wait_for(t, 3)


async def test_event_dispatch():
    async with new_bot() as bot:
        received: list[tuple[str, Event]] = []
        done = aio.Event()

        @bot.on("message.private")
        async def on_private(event: Event) -> None:
            received.append(("private", event))
            done.set()

        def on_all(event: Event) -> None:
            received.append(("all", event))

        bot.on(on_all)
        bot.on("message.group", lambda e: received.append(("group", e)))

        async with connect(uri(bot)) as ws:
            await bot.wait_connected(3)
            await ws.send("")
            await ws.send("{malformed")
            await ws.send(dump({"hello": "world"}))
            await ws.send(dump({"echo": "not-pending", "status": "ok", "data": None}))
            await ws.send(dump(_TEST_EVENT_DICT))
            await aio.wait_for(done.wait(), 3)

        assert [tag for tag, _ in received] == ["all", "private"]
        assert received[1][1].key == "message.private"
        assert dict(received[1][1]) == _TEST_EVENT_DICT

        bot.off(on_all)
        assert bot.dispatcher.keys() == ("message.private", "message.group")


async def test_call_inside_listener():
    async with new_bot() as bot:
        replies: list = []
        done = aio.Event()

        @bot.on("message.private")
        async def reply(event: Event) -> None:
            replies.append(await bot.send_private_msg(event["user_id"], "pong"))
            done.set()

        async with connect(uri(bot)) as ws:
            await bot.wait_connected(3)
            await ws.send(dump(_TEST_EVENT_DICT))

            req = json.loads(await aio.wait_for(ws.recv(), 3))
            assert req["action"] == "send_private_msg"
            assert req["params"] == {"user_id": 1574260633, "message": "pong"}
            await ws.send(
                dump({"echo": req["echo"], "status": "ok", "data": {"message_id": 2}})
            )
            await aio.wait_for(done.wait(), 3)

        assert replies == [{"message_id": 2}]


async def test_call_inside_connected_hook():
    async with new_bot() as bot:
        got: list = []

        @bot.on_connected
        async def _(chan) -> None:
            got.append(await bot.get_login_info())

        async with connect(uri(bot)) as ws:
            req = json.loads(await aio.wait_for(ws.recv(), 3))
            assert req["action"] == "get_login_info"
            await ws.send(dump({"echo": req["echo"], "status": "ok", "data": {"user_id": 1}}))
            await wait_until(lambda: got)

        assert got == [{"user_id": 1}]


async def test_response_not_dispatched_as_event():
    async with new_bot() as bot:
        received: list[Event] = []
        done = aio.Event()

        def on_all(event: Event) -> None:
            received.append(event)
            done.set()

        bot.on(on_all)

        async with connect(uri(bot)) as ws:
            await bot.wait_connected(3)
            t = aio.create_task(bot.get_status())
            req = json.loads(await aio.wait_for(ws.recv(), 3))

            # 同时带有 post_type 和等待中的 echo，只作为响应处理
            resp = {**_TEST_EVENT_DICT, "echo": req["echo"], "status": "ok", "data": {"good": True}}
            await ws.send(dump(resp))
            assert await aio.wait_for(t, 3) == {"good": True}

            await ws.send(dump(_TEST_EVENT_DICT))
            await aio.wait_for(done.wait(), 3)

        assert len(received) == 1
        assert "echo" not in received[0]


async def test_reject_second_connection():
    async with new_bot() as bot:
        async with connect(uri(bot)) as first:
            chan = await bot.wait_connected(3)

            with pt.raises((InvalidStatus, ConnectionClosed)):
                async with connect(uri(bot)) as second:
                    await aio.wait_for(second.recv(), 3)

            assert bot.connected()
            assert bot.server.channel is chan

            t = aio.create_task(bot.get_status())
            req = json.loads(await aio.wait_for(first.recv(), 3))
            await first.send(dump({"echo": req["echo"], "status": "ok", "data": {"good": True}}))
            assert await aio.wait_for(t, 3) == {"good": True}


async def test_reconnect_after_close():
    async with new_bot() as bot:
        async with connect(uri(bot)):
            await bot.wait_connected(3)
        await wait_until(lambda: not bot.connected())

        async with connect(uri(bot)):
            await bot.wait_connected(3)
            assert bot.connected()


async def test_disconnect_abandons_pending():
    async with new_bot() as bot:
        async with connect(uri(bot)) as ws:
            await bot.wait_connected(3)
            t = aio.create_task(bot.get_status())
            await aio.wait_for(ws.recv(), 3)

        with pt.raises(CallAbandoned):
            await aio.wait_for(t, 3)
        assert bot.correlator.pending_count == 0


async def test_disconnect_keeps_pending():
    async with new_bot(reject_on_close=False) as bot:
        async with connect(uri(bot)) as ws:
            await bot.wait_connected(3)
            t = aio.create_task(bot.get_status())
            await aio.wait_for(ws.recv(), 3)

        await wait_until(lambda: not bot.connected())
        await aio.sleep(0.05)
        assert not t.done()
        assert bot.correlator.pending_count == 1

    with pt.raises(CallAbandoned):
        await aio.wait_for(t, 3)


async def test_hooks():
    bot = new_bot()
    seen: list = []

    bot.on_hook(LinkLifeSpan.STARTED, lambda: seen.append("started"))
    bot.on_connected(lambda chan: seen.append(("connected", chan.peer)))

    @bot.on_disconnected
    async def _(chan) -> None:
        seen.append("disconnected")

    bot.on_hook(LinkLifeSpan.STOPPED, lambda: seen.append("stopped"))

    async with bot:
        async with connect(uri(bot)):
            await bot.wait_connected(3)
        await wait_until(lambda: "disconnected" in seen)

    assert seen[0] == "started"
    assert seen[1][0] == "connected"
    assert seen[2:] == ["disconnected", "stopped"]


async def test_bind_error_and_dispose():
    async with new_bot() as bot:
        other = ReverseWsBot(
            BotConfig(host="127.0.0.1", port=bot.port, ping_interval=None), logger=get_logger()
        )
        with pt.raises(BindError):
            await other.init()
        await other.dispose()

    await bot.dispose()
    assert not bot.server.started()
