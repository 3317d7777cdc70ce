from obreverse.adapter.event import Event, classify, get_detail_type
from obreverse.exceptions import MalformedMessage
from tests.base import *

_TEST_EVENT_DICT = {
    "time": 1725292489,
    "self_id": 123456,
    "post_type": "message",
    "message_type": "group",
    "sub_type": "normal",
    "message_id": -1234567890,
    "message": "",
    "user_id": 1574260633,
    "group_id": 535705163,
    "raw_message": "",
}


async def test_classify():
    assert classify(_TEST_EVENT_DICT) == "message.group"
    assert classify({"post_type": "notice", "notice_type": "group_ban"}) == "notice.group_ban"
    assert classify({"post_type": "request", "request_type": "friend"}) == "request.friend"
    assert (
        classify({"post_type": "meta_event", "meta_event_type": "heartbeat"})
        == "meta_event.heartbeat"
    )
    assert classify({"post_type": "message_sent"}) == "message_sent."


async def test_detail_type_order():
    raw = {"post_type": "x", "notice_type": "b", "message_type": "a"}
    assert get_detail_type(raw) == "a"
    raw = {"post_type": "x", "meta_event_type": "d", "request_type": "c"}
    assert get_detail_type(raw) == "c"


async def test_classify_no_post_type():
    with pt.raises(MalformedMessage):
        classify({"echo": "1", "status": "ok"})


async def test_event_view():
    e = Event(_TEST_EVENT_DICT)
    assert e.key == "message.group"
    assert e.post_type == "message"
    assert e.detail_type == "group"
    assert e.time == 1725292489
    assert e.self_id == 123456
    assert e.sub_type == "normal"
    assert e["group_id"] == 535705163
    assert e.get("not_exist") is None
    assert dict(e) == _TEST_EVENT_DICT
    assert e.is_message() and not e.is_notice()


async def test_event_readonly():
    src = dict(_TEST_EVENT_DICT)
    e = Event(src)
    src["group_id"] = 0
    assert e["group_id"] == 535705163

    with pt.raises(AttributeError):
        e.key = "notice.notify"
    with pt.raises(TypeError):
        e.raw["group_id"] = 0  # type: ignore[index]
