from obreverse.adapter.action import Action
from obreverse.facade import ActionMixin
from tests.base import *


class Recorder(ActionMixin):
    def __init__(self) -> None:
        self.calls: list[dict] = []

    async def call(self, action, params=None):
        a = action if isinstance(action, Action) else Action(action, params)
        self.calls.append(a.extract())
        return a.type


async def test_base():
    a = Action("test", {"hi": True, "you": 123.45, "none": None})
    assert a.extract() == {"action": "test", "params": {"hi": True, "you": 123.45}}
    a.set_echo("12")
    assert a.flatten() == '{"action": "test", "params": {"hi": true, "you": 123.45}, "echo": "12"}'
    assert Action("get_status").params == {}


async def test_send_msg():
    r = Recorder()
    assert await r.send_msg("private", 10, "hi") == "send_msg"
    await r.send_msg("group", 20, [{"type": "text", "data": {"text": "hi"}}], auto_escape=True)
    assert r.calls == [
        {"action": "send_msg", "params": {"message_type": "private", "user_id": 10, "message": "hi"}},
        {
            "action": "send_msg",
            "params": {
                "message_type": "group",
                "group_id": 20,
                "message": [{"type": "text", "data": {"text": "hi"}}],
                "auto_escape": True,
            },
        },
    ]


async def test_defaults():
    r = Recorder()
    await r.set_group_ban(1, 2)
    await r.set_group_anonymous_ban(1, flag="f")
    await r.get_login_info()
    await r.get_group_honor_info(1, "all")
    await r.send_like(3)
    assert r.calls == [
        {"action": "set_group_ban", "params": {"group_id": 1, "user_id": 2, "duration": 1800}},
        {
            "action": "set_group_anonymous_ban",
            "params": {"group_id": 1, "flag": "f", "duration": 1800},
        },
        {"action": "get_login_info", "params": {}},
        {"action": "get_group_honor_info", "params": {"group_id": 1, "type": "all"}},
        {"action": "send_like", "params": {"user_id": 3}},
    ]


async def test_action_names():
    r = Recorder()
    await r.send_private_msg(1, "a")
    await r.send_group_msg(1, "a")
    await r.delete_msg(1)
    await r.get_msg(1)
    await r.get_forward_msg("x")
    await r.set_group_kick(1, 2, True)
    await r.set_group_whole_ban(1)
    await r.set_group_admin(1, 2, False)
    await r.set_group_anonymous(1)
    await r.set_group_card(1, 2)
    await r.set_group_name(1, "n")
    await r.set_group_leave(1)
    await r.set_group_special_title(1, 2, "t")
    await r.set_friend_add_request("f", True)
    await r.set_group_add_request("f", "invite", False, "no")
    await r.get_stranger_info(1)
    await r.get_friend_list()
    await r.get_group_info(1)
    await r.get_group_list()
    await r.get_group_member_info(1, 2)
    await r.get_group_member_list(1)
    await r.get_cookies()
    await r.get_csrf_token()
    await r.get_credentials("qq.com")
    await r.get_record("f", "mp3")
    await r.get_image("f")
    await r.can_send_image()
    await r.can_send_record()
    await r.get_status()
    await r.get_version_info()
    await r.set_restart()
    await r.clean_cache()
    await r.send_group_forward_msg(1, [])
    await r.send_private_forward_msg(1, [])
    await r.get_essence_msg_list(1)
    await r.set_essence_msg(1)
    await r.delete_essence_msg(1)

    names = [c["action"] for c in r.calls]
    assert names == [
        "send_private_msg",
        "send_group_msg",
        "delete_msg",
        "get_msg",
        "get_forward_msg",
        "set_group_kick",
        "set_group_whole_ban",
        "set_group_admin",
        "set_group_anonymous",
        "set_group_card",
        "set_group_name",
        "set_group_leave",
        "set_group_special_title",
        "set_friend_add_request",
        "set_group_add_request",
        "get_stranger_info",
        "get_friend_list",
        "get_group_info",
        "get_group_list",
        "get_group_member_info",
        "get_group_member_list",
        "get_cookies",
        "get_csrf_token",
        "get_credentials",
        "get_record",
        "get_image",
        "can_send_image",
        "can_send_record",
        "get_status",
        "get_version_info",
        "set_restart",
        "clean_cache",
        "send_group_forward_msg",
        "send_private_forward_msg",
        "get_essence_msg_list",
        "set_essence_msg",
        "delete_essence_msg",
    ]
    assert r.calls[5]["params"] == {"group_id": 1, "user_id": 2, "reject_add_request": True}
    assert r.calls[14]["params"] == {
        "flag": "f",
        "sub_type": "invite",
        "approve": False,
        "reason": "no",
    }
    assert r.calls[24]["params"] == {"file": "f", "out_format": "mp3"}
