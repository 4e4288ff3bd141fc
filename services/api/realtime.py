"""
Real-time endpoint: one WebSocket per client, frames fed into the broadcast channel.
"""

from fastapi import APIRouter, WebSocket, status

from utils.broadcast import BroadcastChannel
from utils.config import Settings
from utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def video_events(websocket: WebSocket) -> None:
    channel: BroadcastChannel = websocket.app.state.channel
    settings: Settings = websocket.app.state.settings

    # Browsers always send Origin; non-browser clients may omit it.
    origin = websocket.headers.get("origin")
    if origin is not None and origin != settings.CORS_ORIGIN:
        logger.warning("Rejected WebSocket from origin=%s", origin)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    connection_id = await channel.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.debug(
                    "Client closed connection: %s (code=%s)",
                    connection_id,
                    message.get("code"),
                )
                break

            # Text and binary frames are decoded alike
            frame = message.get("text") or message.get("bytes") or ""
            await channel.relay(frame, sender=connection_id)
    finally:
        channel.disconnect(connection_id)
