"""Live event feed over WebSocket."""

import asyncio
import logging

from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect, WebSocketState

from agentviz.hub import BroadcastCore, Subscriber
from agentviz.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ws"])


async def _pump(websocket: WebSocket, subscriber: Subscriber) -> None:
    while True:
        message = await subscriber.queue.get()
        if message is None:
            return
        await websocket.send_json(message)


async def _drain_inbound(websocket: WebSocket) -> None:
    # the feed is one-way; inbound frames are read only to notice the close
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/")
@router.websocket("/ws")
async def websocket_feed(websocket: WebSocket) -> None:
    core: BroadcastCore = websocket.app.state.core
    # joined before accept so the history message reflects everything
    # recorded up to the moment the client sees the connection open
    subscriber = core.join()
    bind_context(subscriber_id=subscriber.id)
    try:
        await websocket.accept()
        tasks = [
            asyncio.create_task(_pump(websocket, subscriber)),
            asyncio.create_task(_drain_inbound(websocket)),
        ]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, WebSocketDisconnect):
                continue
            if isinstance(result, Exception):
                logger.debug("Dropping subscriber after send error: %r", result)
    finally:
        core.leave(subscriber)
        if (
            websocket.client_state == WebSocketState.CONNECTED
            and websocket.application_state == WebSocketState.CONNECTED
        ):
            try:
                await websocket.close()
            except (RuntimeError, OSError) as exc:
                logger.debug("Close after disconnect ignored: %s", exc)
        clear_context()
