import argparse
import asyncio
import sys

from .adapter.event import Event
from .bot import ReverseWsBot
from .config import BotConfig, load_config
from .exceptions import BindError, ConfigError
from .log import logger
from .typ import ExitCode, LogLevel

parser = argparse.ArgumentParser(prog="obreverse", description="OneBot v11 反向 WebSocket 服务")
parser.add_argument("-c", "--config", default="obreverse.toml", help="toml 配置文件路径")
parser.add_argument("-p", "--port", type=int, default=None, help="覆盖配置中的监听端口")
parser.add_argument("-l", "--log-level", default=None, help="覆盖配置中的日志等级")


def _log_event(event: Event) -> None:
    logger.generic_obj(f"收到事件 {event.key}", dict(event.raw), level=LogLevel.INFO)


def main(argv: list[str] | None = None) -> int:
    args = parser.parse_args(argv)
    try:
        config = load_config(args.config)
        overrides: dict = {}
        if args.port is not None:
            overrides["port"] = args.port
        if args.log_level is not None:
            overrides["log_level"] = LogLevel.from_name(args.log_level)
        if overrides:
            config = BotConfig.from_mapping({**config.model_dump(), **overrides})
    except (ConfigError, ValueError) as e:
        print(f"配置错误：{e}", file=sys.stderr)
        return ExitCode.ERROR.value

    bot = ReverseWsBot(config)
    bot.on(_log_event)
    try:
        asyncio.run(bot.run())
    except KeyboardInterrupt:
        logger.info("收到中断信号，已停止运行")
    except BindError as e:
        logger.critical(str(e))
        return ExitCode.ERROR.value
    return ExitCode.NORMAL.value


if __name__ == "__main__":
    sys.exit(main())
