"""Local JSONL journal of every event the hook produced."""

import json
from pathlib import Path
from typing import Any

from agentviz.events.models import Event


def append_event(path: Path, event: Event) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    line = json.dumps(event.to_wire(), separators=(",", ":"))
    with path.open("a", encoding="utf-8") as handle:
        handle.write(line + "\n")


def read_events(path: Path, *, limit: int | None = None) -> list[dict[str, Any]]:
    """Return journal entries oldest first, skipping lines that do not decode."""
    if not path.exists():
        return []
    rows: list[dict[str, Any]] = []
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            try:
                row = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(row, dict):
                rows.append(row)
    if limit is not None:
        return rows[-limit:] if limit > 0 else []
    return rows
