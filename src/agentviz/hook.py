"""Producer side: turn one hook notification into a journaled, broadcast event.

Nothing in here may raise into the agent that invoked the hook. Failures are
logged to stderr and dropped.
"""

from __future__ import annotations

import json
import logging

import httpx

from agentviz.config import Settings
from agentviz.errors import DeliveryError, NormalizationError
from agentviz.events.journal import append_event
from agentviz.events.models import Event
from agentviz.events.normalizer import normalize

logger = logging.getLogger(__name__)


def _post_json(url: str, payload: dict[str, object], *, timeout_s: float) -> None:
    with httpx.Client(timeout=timeout_s) as client:
        response = client.post(url, json=payload)
    if response.status_code >= 400:
        raise DeliveryError(f"server rejected event ({response.status_code})", retryable=False)


def send_event(event: Event, url: str, *, timeout_s: float) -> bool:
    """Best-effort POST of one event. Returns whether the server accepted it."""
    try:
        _post_json(url, event.to_wire(), timeout_s=timeout_s)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.debug("Event %s not delivered: %s", event.id, exc)
        return False
    except DeliveryError as exc:
        logger.warning("Event %s not delivered: %s", event.id, exc)
        return False
    return True


def decode_notification(raw: str) -> dict[str, object]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise NormalizationError(f"hook input is not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise NormalizationError("hook input must be a JSON object")
    return data


def run_hook(raw: str, settings: Settings) -> Event | None:
    """Normalize, journal and send one notification. Never raises."""
    try:
        event = normalize(decode_notification(raw))
    except NormalizationError as exc:
        logger.warning("Dropping hook notification: %s", exc)
        return None
    except Exception:
        logger.exception("Unexpected error normalizing hook notification")
        return None

    try:
        append_event(settings.events_file, event)
    except OSError as exc:
        logger.warning("Could not append to %s: %s", settings.events_file, exc)

    send_event(event, settings.server_url, timeout_s=settings.send_timeout_seconds)
    return event
