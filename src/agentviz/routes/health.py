"""Health route."""

from fastapi import APIRouter, Depends

from agentviz.dependencies import get_core
from agentviz.hub import BroadcastCore

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz(core: BroadcastCore = Depends(get_core)) -> dict[str, object]:  # noqa: B008
    return {
        "ok": True,
        "subscribers": core.subscriber_count,
        "history": len(core),
        "recorded_total": core.recorded_total,
    }
