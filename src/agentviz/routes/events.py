"""Event ingestion and history routes."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from agentviz.dependencies import get_core
from agentviz.events.models import parse_event_json
from agentviz.hub import BroadcastCore

router = APIRouter(tags=["events"])


@router.post("/event")
async def ingest_event(
    request: Request,
    core: BroadcastCore = Depends(get_core),  # noqa: B008
) -> JSONResponse:
    # MalformedEventError is mapped to 400 before anything is recorded
    event = parse_event_json(await request.body())
    core.record(event)
    return JSONResponse({"ok": True})


@router.get("/history")
async def history(core: BroadcastCore = Depends(get_core)) -> JSONResponse:  # noqa: B008
    return JSONResponse(core.snapshot())
