from ._hook import LinkLifeSpan
from ._meta import MetaInfo, __version__
from .adapter import WILDCARD_KEY, Action, Echo, Event
from .bot import ReverseWsBot
from .config import BotConfig, load_config
from .correlate import CallCorrelator
from .dispatch import EventDispatcher
from .exceptions import (
    BindError,
    BotException,
    CallAbandoned,
    CallError,
    CallFailed,
    CallTimeout,
    ConfigError,
    MalformedMessage,
    NoConnection,
)
from .log import GenericLogger, Logger, LogLevel, get_logger, logger, set_global_logger
