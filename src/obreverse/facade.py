from __future__ import annotations

from abc import abstractmethod

from typing_extensions import Any, Iterable, Literal, Mapping

from .adapter.action import Action

#: 消息内容：纯文本，或消息段字典的列表
MessageContent = str | Iterable[Mapping[str, Any]]
HonorType = Literal["talkative", "performer", "legend", "strong_newbie", "emotion", "all"]


def _msg(message: MessageContent) -> str | list[Mapping[str, Any]]:
    return message if isinstance(message, str) else list(message)


class ActionMixin:
    """OneBot v11 各动作的便捷调用方法

    每个方法只负责把参数转换为通用调用 :meth:`call`，可选参数为 `None` 时不发送
    """

    @abstractmethod
    async def call(self, action: str | Action, params: Mapping[str, Any] | None = None) -> Any:
        raise NotImplementedError

    async def send_private_msg(
        self, user_id: int, message: MessageContent, auto_escape: bool | None = None
    ) -> Any:
        return await self.call(
            "send_private_msg",
            {"user_id": user_id, "message": _msg(message), "auto_escape": auto_escape},
        )

    async def send_group_msg(
        self, group_id: int, message: MessageContent, auto_escape: bool | None = None
    ) -> Any:
        return await self.call(
            "send_group_msg",
            {"group_id": group_id, "message": _msg(message), "auto_escape": auto_escape},
        )

    async def send_msg(
        self,
        message_type: Literal["private", "group"],
        id: int,
        message: MessageContent,
        auto_escape: bool | None = None,
    ) -> Any:
        id_key = "user_id" if message_type == "private" else "group_id"
        return await self.call(
            "send_msg",
            {
                "message_type": message_type,
                id_key: id,
                "message": _msg(message),
                "auto_escape": auto_escape,
            },
        )

    async def delete_msg(self, message_id: int) -> Any:
        return await self.call("delete_msg", {"message_id": message_id})

    async def get_msg(self, message_id: int) -> Any:
        return await self.call("get_msg", {"message_id": message_id})

    async def get_forward_msg(self, id: str) -> Any:
        return await self.call("get_forward_msg", {"id": id})

    async def send_like(self, user_id: int, times: int | None = None) -> Any:
        return await self.call("send_like", {"user_id": user_id, "times": times})

    async def set_group_kick(
        self, group_id: int, user_id: int, reject_add_request: bool | None = None
    ) -> Any:
        return await self.call(
            "set_group_kick",
            {"group_id": group_id, "user_id": user_id, "reject_add_request": reject_add_request},
        )

    async def set_group_ban(self, group_id: int, user_id: int, duration: int = 30 * 60) -> Any:
        return await self.call(
            "set_group_ban", {"group_id": group_id, "user_id": user_id, "duration": duration}
        )

    async def set_group_anonymous_ban(
        self,
        group_id: int,
        anonymous: Mapping[str, Any] | None = None,
        flag: str | None = None,
        duration: int = 30 * 60,
    ) -> Any:
        return await self.call(
            "set_group_anonymous_ban",
            {"group_id": group_id, "anonymous": anonymous, "flag": flag, "duration": duration},
        )

    async def set_group_whole_ban(self, group_id: int, enable: bool | None = None) -> Any:
        return await self.call("set_group_whole_ban", {"group_id": group_id, "enable": enable})

    async def set_group_admin(
        self, group_id: int, user_id: int, enable: bool | None = None
    ) -> Any:
        return await self.call(
            "set_group_admin", {"group_id": group_id, "user_id": user_id, "enable": enable}
        )

    async def set_group_anonymous(self, group_id: int, enable: bool | None = None) -> Any:
        return await self.call("set_group_anonymous", {"group_id": group_id, "enable": enable})

    async def set_group_card(self, group_id: int, user_id: int, card: str | None = None) -> Any:
        return await self.call(
            "set_group_card", {"group_id": group_id, "user_id": user_id, "card": card}
        )

    async def set_group_name(self, group_id: int, group_name: str) -> Any:
        return await self.call("set_group_name", {"group_id": group_id, "group_name": group_name})

    async def set_group_leave(self, group_id: int, is_dismiss: bool | None = None) -> Any:
        return await self.call("set_group_leave", {"group_id": group_id, "is_dismiss": is_dismiss})

    async def set_group_special_title(
        self,
        group_id: int,
        user_id: int,
        special_title: str | None = None,
        duration: int | None = None,
    ) -> Any:
        return await self.call(
            "set_group_special_title",
            {
                "group_id": group_id,
                "user_id": user_id,
                "special_title": special_title,
                "duration": duration,
            },
        )

    async def set_friend_add_request(
        self, flag: str, approve: bool | None = None, remark: str | None = None
    ) -> Any:
        return await self.call(
            "set_friend_add_request", {"flag": flag, "approve": approve, "remark": remark}
        )

    async def set_group_add_request(
        self,
        flag: str,
        sub_type: Literal["add", "invite"],
        approve: bool | None = None,
        reason: str | None = None,
    ) -> Any:
        return await self.call(
            "set_group_add_request",
            {"flag": flag, "sub_type": sub_type, "approve": approve, "reason": reason},
        )

    async def get_login_info(self) -> Any:
        return await self.call("get_login_info")

    async def get_stranger_info(self, user_id: int, no_cache: bool | None = None) -> Any:
        return await self.call("get_stranger_info", {"user_id": user_id, "no_cache": no_cache})

    async def get_friend_list(self) -> Any:
        return await self.call("get_friend_list")

    async def get_group_info(self, group_id: int, no_cache: bool | None = None) -> Any:
        return await self.call("get_group_info", {"group_id": group_id, "no_cache": no_cache})

    async def get_group_list(self) -> Any:
        return await self.call("get_group_list")

    async def get_group_member_info(
        self, group_id: int, user_id: int, no_cache: bool | None = None
    ) -> Any:
        return await self.call(
            "get_group_member_info",
            {"group_id": group_id, "user_id": user_id, "no_cache": no_cache},
        )

    async def get_group_member_list(self, group_id: int) -> Any:
        return await self.call("get_group_member_list", {"group_id": group_id})

    async def get_group_honor_info(self, group_id: int, type: HonorType) -> Any:
        return await self.call("get_group_honor_info", {"group_id": group_id, "type": type})

    async def get_cookies(self, domain: str | None = None) -> Any:
        return await self.call("get_cookies", {"domain": domain})

    async def get_csrf_token(self) -> Any:
        return await self.call("get_csrf_token")

    async def get_credentials(self, domain: str | None = None) -> Any:
        return await self.call("get_credentials", {"domain": domain})

    async def get_record(self, file: str, out_format: str) -> Any:
        return await self.call("get_record", {"file": file, "out_format": out_format})

    async def get_image(self, file: str) -> Any:
        return await self.call("get_image", {"file": file})

    async def can_send_image(self) -> Any:
        return await self.call("can_send_image")

    async def can_send_record(self) -> Any:
        return await self.call("can_send_record")

    async def get_status(self) -> Any:
        return await self.call("get_status")

    async def get_version_info(self) -> Any:
        return await self.call("get_version_info")

    async def set_restart(self, delay: int | None = None) -> Any:
        return await self.call("set_restart", {"delay": delay})

    async def clean_cache(self) -> Any:
        return await self.call("clean_cache")

    async def send_group_forward_msg(
        self, group_id: int, messages: Iterable[Mapping[str, Any]]
    ) -> Any:
        return await self.call(
            "send_group_forward_msg", {"group_id": group_id, "messages": list(messages)}
        )

    async def send_private_forward_msg(
        self, user_id: int, messages: Iterable[Mapping[str, Any]]
    ) -> Any:
        return await self.call(
            "send_private_forward_msg", {"user_id": user_id, "messages": list(messages)}
        )

    async def get_essence_msg_list(self, group_id: int) -> Any:
        return await self.call("get_essence_msg_list", {"group_id": group_id})

    async def set_essence_msg(self, message_id: int) -> Any:
        return await self.call("set_essence_msg", {"message_id": message_id})

    async def delete_essence_msg(self, message_id: int) -> Any:
        return await self.call("delete_essence_msg", {"message_id": message_id})
