"""FastAPI dependencies resolving per-app state."""

from fastapi import Request

from agentviz.hub import BroadcastCore


def get_core(request: Request) -> BroadcastCore:
    return request.app.state.core
