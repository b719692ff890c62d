"""Static assets for the visualization client."""

import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from agentviz.errors import AssetReadError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["static"])

MIME_TYPES = {
    ".html": "text/html",
    ".js": "application/javascript",
    ".css": "text/css",
    ".json": "application/json",
    ".png": "image/png",
    ".svg": "image/svg+xml",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"
INDEX_FILE = "index.html"


def content_type_for(path: Path) -> str:
    return MIME_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_asset(root: Path, asset_path: str) -> Path | None:
    """Map a request path onto a file under ``root``; None if missing or outside it."""
    try:
        base = root.resolve()
        candidate = (base / asset_path.lstrip("/")).resolve()
        if not candidate.is_relative_to(base):
            return None
        if candidate.is_dir():
            candidate = candidate / INDEX_FILE
        if not candidate.is_file():
            return None
    except (OSError, ValueError) as exc:
        # NUL bytes, over-long names: not a file we could serve
        logger.debug("Unresolvable asset path %r: %s", asset_path, exc)
        return None
    return candidate


@router.get("/{asset_path:path}")
async def serve_asset(asset_path: str, request: Request) -> Response:
    root = Path(request.app.state.public_dir)
    path = resolve_asset(root, asset_path)
    if path is None:
        return PlainTextResponse("Not found", status_code=404)
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise AssetReadError(f"could not read {path}: {exc}") from exc
    return Response(content=content, media_type=content_type_for(path))
