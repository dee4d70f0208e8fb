"""WebSocket push channel"""
import asyncio
import logging

from fastapi import APIRouter, WebSocket, status

from ytzip.notify import Listener, notifier

router = APIRouter()
_logger = logging.getLogger("ytzip")


async def _pump(websocket: WebSocket, listener: Listener) -> None:
    while True:
        frame = await listener.get()
        if frame is None:
            _logger.info("Closing push channel for slow listener")
            await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
            return
        await websocket.send_json(frame)


@router.websocket("/ws")
async def progress_socket(websocket: WebSocket):
    # Register before accepting so no frame broadcast after the handshake is missed.
    listener = notifier.register()
    await websocket.accept()
    sender = asyncio.create_task(_pump(websocket, listener))
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if sender.done():
                break
    finally:
        notifier.unregister(listener)
        sender.cancel()
        try:
            await sender
        except asyncio.CancelledError:
            pass
        except Exception as exc:
            _logger.warning("Push channel send failed error=%s", exc)
