"""FastAPI entrypoint."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from agentviz import __version__
from agentviz.config import Settings, get_settings, validate_settings_for_env
from agentviz.errors import AssetReadError, MalformedEventError
from agentviz.hub import BroadcastCore
from agentviz.logging import configure_logging
from agentviz.routes.events import router as events_router
from agentviz.routes.health import router as health_router
from agentviz.routes.static import router as static_router
from agentviz.routes.ws import router as ws_router

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    logger.info(
        "agentviz listening on http://%s:%d (events: POST /event)",
        settings.bind_host,
        settings.port,
    )
    yield
    app.state.core.close()


async def _cors(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    if request.method == "OPTIONS":
        response: Response = Response(status_code=204)
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


async def _malformed_event_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "invalid event", "detail": str(exc)})


async def _asset_read_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.error("Asset read failed for %s: %s", request.url.path, exc)
    return PlainTextResponse("Server error", status_code=500)


def create_app(
    settings: Settings | None = None,
    *,
    core: BroadcastCore | None = None,
    public_dir: Path | None = None,
) -> FastAPI:
    """Build an app with its own broadcast core.

    Each call returns an independent instance; nothing is shared between apps.
    """
    settings = settings or get_settings()
    validate_settings_for_env(settings)

    app = FastAPI(title="agentviz", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.core = core if core is not None else BroadcastCore(settings.history_capacity)
    app.state.public_dir = public_dir or Path(settings.public_dir)

    app.middleware("http")(_cors)
    app.add_exception_handler(MalformedEventError, _malformed_event_handler)
    app.add_exception_handler(AssetReadError, _asset_read_handler)

    app.include_router(health_router)
    app.include_router(events_router)
    app.include_router(ws_router)
    # catch-all GET, must stay last
    app.include_router(static_router)
    return app
