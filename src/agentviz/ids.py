"""Identifier helpers."""

from uuid import uuid4


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex}"


def new_event_id(session_id: str, timestamp: int) -> str:
    """Best-effort unique id; collisions are possible and tolerated downstream."""
    return f"{session_id}-{timestamp}-{uuid4().hex[:6]}"
