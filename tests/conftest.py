import logging
import os
from pathlib import Path

import pytest

from agentviz.config import get_settings


@pytest.fixture(autouse=True)
def test_env(tmp_path: Path):
    os.environ["APP_ENV"] = "test"
    os.environ["AGENTVIZ_DATA_DIR"] = str(tmp_path / "data")
    os.environ["AGENTVIZ_SERVER_URL"] = "http://127.0.0.1:4242/event"
    os.environ["PUBLIC_DIR"] = str(tmp_path / "public")
    os.environ.pop("HISTORY_CAPACITY", None)
    os.environ.pop("PORT", None)
    get_settings.cache_clear()
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    get_settings.cache_clear()


def _make_event(n: int, **overrides: object) -> dict[str, object]:
    """Wire-form tool_start record numbered ``n``."""
    event: dict[str, object] = {
        "id": f"sess-{1700000000000 + n}-abc{n:03d}",
        "timestamp": 1700000000000 + n,
        "sessionId": "sess",
        "cwd": "/work",
        "hookType": "PreToolUse",
        "type": "tool_start",
        "tool": "Bash",
        "toolInput": {"command": f"echo {n}"},
    }
    event.update(overrides)
    return event


@pytest.fixture
def make_event():
    return _make_event
