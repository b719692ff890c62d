"""Event record definitions.

One frozen model per normalized category, joined into a discriminated union on
``type``. Wire form uses camelCase keys and omits fields that were never set.
"""

from __future__ import annotations

import json
import math
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from agentviz.errors import MalformedEventError

EVENT_TYPES = (
    "tool_start",
    "tool_end",
    "prompt",
    "stop",
    "notification",
    "compact",
    "other",
)


class EventBase(BaseModel):
    # extra keys are kept so an ingested record is stored exactly as sent
    model_config = ConfigDict(
        frozen=True, extra="allow", populate_by_name=True, allow_inf_nan=False
    )

    id: str
    timestamp: int
    session_id: str = Field(alias="sessionId")
    cwd: str = ""
    hook_type: str = Field(alias="hookType")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ToolStartEvent(EventBase):
    type: Literal["tool_start"]
    tool: str
    tool_input: dict[str, Any] = Field(alias="toolInput", default_factory=dict)


class ToolEndEvent(EventBase):
    type: Literal["tool_end"]
    tool: str
    success: bool = True
    duration: int | float | None = None


class PromptEvent(EventBase):
    type: Literal["prompt"]
    prompt_length: int = Field(alias="promptLength")
    prompt_preview: str = Field(alias="promptPreview")


class StopEvent(EventBase):
    type: Literal["stop"]
    is_subagent: bool = Field(alias="isSubagent", default=False)


class NotificationEvent(EventBase):
    type: Literal["notification"]
    message: str | None = None


class CompactEvent(EventBase):
    type: Literal["compact"]
    trigger: str = "unknown"


class OtherEvent(EventBase):
    type: Literal["other"]


Event = Annotated[
    Union[
        ToolStartEvent,
        ToolEndEvent,
        PromptEvent,
        StopEvent,
        NotificationEvent,
        CompactEvent,
        OtherEvent,
    ],
    Field(discriminator="type"),
]

_event_adapter: TypeAdapter[Event] = TypeAdapter(Event)


def parse_event(payload: Any) -> Event:
    """Validate a decoded JSON value as an event record."""
    if not isinstance(payload, dict):
        raise MalformedEventError("event payload must be a JSON object")
    try:
        return _event_adapter.validate_python(payload)
    except ValidationError as exc:
        raise MalformedEventError(_summarize(exc)) from exc


def _reject_constant(token: str) -> float:
    raise MalformedEventError(f"non-finite number {token} is not valid JSON")


def _finite_float(token: str) -> float:
    value = float(token)
    if not math.isfinite(value):
        raise MalformedEventError(f"number {token} is out of range")
    return value


def parse_event_json(raw: bytes | str) -> Event:
    """Decode and validate a raw request body.

    NaN and Infinity are refused here, before validation, since extra keys would
    otherwise carry them into history where they cannot be serialized.
    """
    try:
        payload = json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError as exc:
        raise MalformedEventError(f"body is not valid JSON: {exc}") from exc
    return parse_event(payload)


def _summarize(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors()[:3]:
        loc = ".".join(str(item) for item in err.get("loc", ())) or "body"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)
