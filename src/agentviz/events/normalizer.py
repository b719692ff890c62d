"""Hook notification -> normalized event record."""

from __future__ import annotations

import math
import time
from typing import Any

from agentviz.errors import NormalizationError
from agentviz.events.models import (
    CompactEvent,
    Event,
    NotificationEvent,
    OtherEvent,
    PromptEvent,
    StopEvent,
    ToolEndEvent,
    ToolStartEvent,
)
from agentviz.ids import new_event_id

PROMPT_PREVIEW_CHARS = 100
SHORT_FIELD_CHARS = 50
LONG_FIELD_CHARS = 100

# tool_input keys forwarded to the feed, with their length cap
TOOL_INPUT_FIELDS: dict[str, int] = {
    "file_path": LONG_FIELD_CHARS,
    "command": SHORT_FIELD_CHARS,
    "pattern": LONG_FIELD_CHARS,
    "query": SHORT_FIELD_CHARS,
    "url": LONG_FIELD_CHARS,
    "prompt": SHORT_FIELD_CHARS,
    "subagent_type": LONG_FIELD_CHARS,
    "description": LONG_FIELD_CHARS,
}


def now_ms() -> int:
    return int(time.time() * 1000)


def summarize_input(tool_input: Any) -> dict[str, str]:
    """Keep whitelisted keys only, each truncated, so full file or command bodies never leave the host."""
    if not isinstance(tool_input, dict):
        return {}
    summary: dict[str, str] = {}
    for key, limit in TOOL_INPUT_FIELDS.items():
        value = tool_input.get(key)
        if not value:
            continue
        summary[key] = str(value)[:limit]
    return summary


def normalize(data: dict[str, Any], *, timestamp: int | None = None) -> Event:
    """Map one raw hook notification to exactly one event record."""
    if not isinstance(data, dict):
        raise NormalizationError("hook payload must be a JSON object")

    ts = now_ms() if timestamp is None else timestamp
    hook_name = data.get("hook_event_name")
    session_id = str(data.get("session_id") or "unknown")
    base: dict[str, Any] = {
        "id": new_event_id(session_id, ts),
        "timestamp": ts,
        "sessionId": session_id,
        "cwd": str(data.get("cwd") or ""),
        "hookType": str(hook_name or "unknown"),
    }

    if hook_name == "PreToolUse":
        return ToolStartEvent(
            **base,
            type="tool_start",
            tool=str(data.get("tool_name") or "unknown"),
            toolInput=summarize_input(data.get("tool_input")),
        )
    if hook_name == "PostToolUse":
        response = data.get("tool_response")
        if not isinstance(response, dict):
            response = {}
        fields: dict[str, Any] = {
            "tool": str(data.get("tool_name") or "unknown"),
            "success": response.get("success") is not False,
        }
        duration = response.get("duration_ms")
        if isinstance(duration, (int, float)) and math.isfinite(duration):
            fields["duration"] = duration
        return ToolEndEvent(**base, type="tool_end", **fields)
    if hook_name == "UserPromptSubmit":
        prompt = str(data.get("prompt") or "")
        return PromptEvent(
            **base,
            type="prompt",
            promptLength=len(prompt),
            promptPreview=prompt[:PROMPT_PREVIEW_CHARS],
        )
    if hook_name in ("Stop", "SubagentStop"):
        return StopEvent(**base, type="stop", isSubagent=hook_name == "SubagentStop")
    if hook_name == "Notification":
        message = data.get("message")
        if message is None:
            return NotificationEvent(**base, type="notification")
        return NotificationEvent(**base, type="notification", message=str(message))
    if hook_name == "PreCompact":
        return CompactEvent(**base, type="compact", trigger=str(data.get("trigger") or "unknown"))
    return OtherEvent(**base, type="other")
