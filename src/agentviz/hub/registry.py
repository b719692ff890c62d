"""Subscriber registry: the set of live feed connections."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

from agentviz.ids import new_id

logger = logging.getLogger(__name__)


class SubscriberState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class Subscriber:
    """One live connection's outbound mailbox.

    Messages are queued without blocking; the transport drains ``queue`` at
    its own pace. Once closed, deliveries are silently ignored.
    """

    def __init__(self, subscriber_id: str | None = None) -> None:
        self.id = subscriber_id or new_id("sub")
        self.state = SubscriberState.CONNECTING
        # None is the end-of-stream marker put by shutdown()
        self.queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue()

    @property
    def is_open(self) -> bool:
        return self.state is SubscriberState.OPEN

    def open(self) -> None:
        if self.state is SubscriberState.CONNECTING:
            self.state = SubscriberState.OPEN

    def close(self) -> None:
        self.state = SubscriberState.CLOSED

    def shutdown(self) -> None:
        """Close and wake whoever is waiting on the queue."""
        self.close()
        self.queue.put_nowait(None)

    def deliver(self, message: dict[str, Any]) -> bool:
        if not self.is_open:
            return False
        self.queue.put_nowait(message)
        return True

    def pending(self) -> list[dict[str, Any]]:
        """Drain and return everything queued so far."""
        drained: list[dict[str, Any]] = []
        while True:
            try:
                message = self.queue.get_nowait()
            except asyncio.QueueEmpty:
                return drained
            if message is not None:
                drained.append(message)


class SubscriberRegistry:
    def __init__(self) -> None:
        # dict keeps registration order for fan-out
        self._subscribers: dict[str, Subscriber] = {}

    @property
    def count(self) -> int:
        return len(self._subscribers)

    def __contains__(self, subscriber: object) -> bool:
        return isinstance(subscriber, Subscriber) and subscriber.id in self._subscribers

    def add(self, subscriber: Subscriber) -> None:
        subscriber.open()
        self._subscribers[subscriber.id] = subscriber

    def remove(self, subscriber: Subscriber) -> bool:
        """Close and forget a subscriber. Returns False if it was already gone."""
        subscriber.close()
        return self._subscribers.pop(subscriber.id, None) is not None

    def broadcast(self, message: dict[str, Any]) -> int:
        """Queue ``message`` for every open subscriber; returns how many got it."""
        delivered = 0
        for subscriber in list(self._subscribers.values()):
            if subscriber.deliver(message):
                delivered += 1
            else:
                self._subscribers.pop(subscriber.id, None)
                logger.debug("Pruned closed subscriber %s", subscriber.id)
        return delivered

    def clear(self) -> None:
        for subscriber in self._subscribers.values():
            subscriber.shutdown()
        self._subscribers.clear()
