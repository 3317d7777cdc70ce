import os

import toml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from typing_extensions import Annotated, Any

from .exceptions import ConfigError
from .log import logger
from .typ import LogLevel


class BotConfig(BaseModel):
    """配置类

    :ivar host: 反向 WebSocket 服务监听的 host
    :ivar port: 监听端口，为 0 时由系统分配空闲端口
    :ivar log_level: 全局日志等级
    :ivar log_dir: 日志文件输出目录，为空则不输出到文件
    :ivar call_timeout: 等待调用响应的超时时间（秒），为空则一直等待
    :ivar reject_on_close: 连接断开时，是否让所有等待中的调用失败
    :ivar ping_interval: 心跳间隔（秒），为空则关闭心跳
    :ivar max_pending: 同时等待响应的调用数量上限
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=0, le=65535)
    log_level: LogLevel = LogLevel.INFO
    log_dir: str | None = None
    call_timeout: Annotated[float, Field(gt=0)] | None = None
    reject_on_close: bool = True
    ping_interval: Annotated[float, Field(gt=0)] | None = 20
    max_pending: int = Field(default=256, gt=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_level(cls, val: Any) -> LogLevel:
        return LogLevel.from_name(val)

    @classmethod
    def from_mapping(cls, raw: dict[str, Any]) -> "BotConfig":
        """从键名大小写不敏感的映射构建配置"""
        normalized = {str(k).lower(): v for k, v in raw.items()}
        # toml 没有空值，约定 0 或空字符串表示“不启用”
        for name in ("call_timeout", "ping_interval"):
            if normalized.get(name) == 0:
                normalized[name] = None
        if normalized.get("log_dir") == "":
            normalized["log_dir"] = None

        try:
            return cls.model_validate(normalized)
        except ValidationError as e:
            raise ConfigError(f"配置项不合法：{e}") from e


DEFAULT_CONFIG_TEXT = """# 以下为自动生成的默认配置文件

# 反向 WebSocket 服务监听的 host
HOST = "0.0.0.0"
# 反向 WebSocket 服务监听的端口
PORT = 8080
# 全局日志等级（DEBUG, INFO, WARNING, ERROR, CRITICAL）
LOG_LEVEL = "INFO"
# 日志输出目录（为空则不输出日志文件）
LOG_DIR = ""
# 等待调用响应的超时时间，单位秒（0 为一直等待）
CALL_TIMEOUT = 0
# 连接断开时，是否让所有等待中的调用立即失败
REJECT_ON_CLOSE = true
# 心跳间隔，单位秒（0 为关闭心跳）
PING_INTERVAL = 20
# 同时等待响应的调用数量上限
MAX_PENDING = 256
"""


def load_config(path: str, create: bool = True) -> BotConfig:
    """读取 toml 配置文件

    配置文件不存在时，若 `create` 为真，则生成默认配置文件，并抛出异常提示填写

    :param path: 配置文件路径
    :param create: 配置文件不存在时是否自动生成
    :return: 配置对象
    """
    if not os.path.exists(path):
        if not create:
            raise ConfigError(f"配置文件 {path} 不存在")

        dir_path = os.path.dirname(os.path.abspath(path))
        if not os.path.exists(dir_path):
            os.makedirs(dir_path)
        with open(path, "w", encoding="utf-8") as fp:
            fp.write(DEFAULT_CONFIG_TEXT)
        logger.info(f"未检测到配置文件，已在 {path} 自动生成，请填写配置后重新启动")
        raise ConfigError(f"配置文件 {path} 为新生成的默认配置，需要确认后重新启动")

    try:
        with open(path, encoding="utf-8") as fp:
            raw = toml.load(fp)
    except (OSError, toml.TomlDecodeError) as e:
        raise ConfigError(f"读取配置文件 {path} 失败：{e}") from e

    return BotConfig.from_mapping(raw)
