"""Event history and live fan-out."""

from agentviz.hub.core import DEFAULT_CAPACITY, BroadcastCore
from agentviz.hub.registry import Subscriber, SubscriberRegistry, SubscriberState

__all__ = [
    "DEFAULT_CAPACITY",
    "BroadcastCore",
    "Subscriber",
    "SubscriberRegistry",
    "SubscriberState",
]
