"""Broadcast core: bounded event history plus live fan-out."""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any

from agentviz.events.models import Event
from agentviz.hub.registry import Subscriber, SubscriberRegistry

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


class BroadcastCore:
    """Authoritative in-process event log and fan-out trigger.

    All access to the history buffer and the subscriber set goes through
    ``record``, ``snapshot``, ``join`` and ``leave``. One lock covers both so a
    joining subscriber can never miss or double-receive an event that is
    recorded concurrently.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        registry: SubscriberRegistry | None = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self._capacity = capacity
        self._history: deque[Event] = deque(maxlen=capacity)
        self._registry = registry if registry is not None else SubscriberRegistry()
        self._lock = threading.Lock()
        self._recorded_total = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return self._registry.count

    @property
    def recorded_total(self) -> int:
        return self._recorded_total

    def __len__(self) -> int:
        with self._lock:
            return len(self._history)

    def record(self, event: Event) -> int:
        """Append ``event`` and push it to every open subscriber.

        Returns the number of subscribers the event was queued for.
        """
        with self._lock:
            # maxlen evicts from the head
            self._history.append(event)
            self._recorded_total += 1
            delivered = self._registry.broadcast({"type": "event", "event": event.to_wire()})
        logger.info(
            "[%s] %s",
            event.type,
            getattr(event, "tool", None) or event.hook_type,
        )
        return delivered

    def snapshot(self) -> list[dict[str, Any]]:
        """Current history, oldest first, as fresh wire dicts."""
        with self._lock:
            return [event.to_wire() for event in self._history]

    def join(self, subscriber: Subscriber | None = None) -> Subscriber:
        """Register a subscriber and queue the history message as its first message."""
        subscriber = subscriber or Subscriber()
        with self._lock:
            self._registry.add(subscriber)
            subscriber.deliver(
                {"type": "history", "events": [event.to_wire() for event in self._history]}
            )
            active = self._registry.count
        logger.info("Client connected (%d total)", active)
        return subscriber

    def leave(self, subscriber: Subscriber) -> None:
        with self._lock:
            removed = self._registry.remove(subscriber)
            active = self._registry.count
        if removed:
            logger.info("Client disconnected (%d total)", active)

    def close(self) -> None:
        """Close every subscriber; used on shutdown."""
        with self._lock:
            self._registry.clear()
