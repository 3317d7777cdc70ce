from .action import Action
from .echo import Echo
from .event import WILDCARD_KEY, Event, EventKey, classify, get_detail_type
