from __future__ import annotations

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from typing_extensions import Any, Mapping

from ..exceptions import CallFailed, MalformedMessage

DEFAULT_FAILED_PROMPT = "API call failed"


class Echo(BaseModel):
    """调用的响应

    :ivar echo: 关联标识
    :ivar status: 响应状态，只有 "ok" 表示成功
    :ivar retcode: 返回码
    :ivar data: 响应数据
    :ivar message: 实现端给出的错误信息
    :ivar wording: 实现端给出的错误信息（部分实现端使用此字段）
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    echo: str
    status: str = "failed"
    retcode: int | None = None
    data: Any = None
    message: str | None = None
    wording: str | None = None

    @field_validator("status", "message", "wording", mode="before")
    @classmethod
    def coerce_str(cls, v: Any) -> Any:
        # 部分实现端会给出数字等非字符串的值
        return v if v is None or isinstance(v, str) else str(v)

    @field_validator("retcode", mode="before")
    @classmethod
    def coerce_retcode(cls, v: Any) -> int | None:
        try:
            return int(v)
        except (TypeError, ValueError):
            return None

    @classmethod
    def resolve(cls, raw: Mapping[str, Any]) -> Echo:
        try:
            return cls.model_validate({**raw, "echo": str(raw["echo"])})
        except (KeyError, ValidationError) as e:
            raise MalformedMessage(f"无法解析的响应：{e}", raw) from e

    def is_ok(self) -> bool:
        return self.status == "ok"

    @property
    def prompt(self) -> str:
        return self.message or self.wording or DEFAULT_FAILED_PROMPT

    def to_error(self, action: str = "") -> CallFailed:
        return CallFailed(
            self.prompt, action=action, status=self.status, retcode=self.retcode, data=self.data
        )
