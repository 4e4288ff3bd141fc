"""
In-process broadcast channel for real-time video control events.

Every frame a client sends is decoded, and recognised events are relayed to all
currently connected clients, the sender included. Delivery is fire-and-forget:
no acknowledgment, no retry, no history for clients that join later.
"""

import uuid
from typing import Optional, Protocol

import orjson
from pydantic import ValidationError

from utils.logging import get_logger
from utils.schemas import PLAY_VIDEO, STOP_VIDEO, VideoEvent

logger = get_logger(__name__)


class Connection(Protocol):
    """The subset of a WebSocket the channel relies on."""

    async def accept(self) -> None: ...

    async def send_text(self, data: str) -> None: ...

    async def close(self, code: int = 1000) -> None: ...


class BroadcastChannel:
    """Registry of connected clients with fan-out of play/stop events."""

    def __init__(self) -> None:
        self._connections: dict[str, Connection] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, connection: Connection) -> str:
        """
        Accept a client and add it to the active set.

        Returns:
            Connection id used for logging and disconnect
        """
        await connection.accept()
        connection_id = uuid.uuid4().hex
        self._connections[connection_id] = connection

        logger.info(
            "User connected: %s",
            connection_id,
            extra={"connections": len(self._connections)},
        )
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        """Remove a client from the active set. Nothing is broadcast."""
        if self._connections.pop(connection_id, None) is not None:
            logger.info(
                "User disconnected: %s",
                connection_id,
                extra={"connections": len(self._connections)},
            )

    async def relay(self, raw: str | bytes, sender: Optional[str] = None) -> None:
        """
        Decode one inbound frame and broadcast the matching event.

        Args:
            raw: JSON frame as received from a client
            sender: Connection id of the originating client, for logging
        """
        try:
            event = VideoEvent.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValidationError) as e:
            logger.warning(
                "Failed to decode frame, skipping",
                extra={"sender": sender, "error": str(e)},
            )
            return

        if event.event == PLAY_VIDEO:
            logger.info("Received play-video event with videoNum: %s", event.data)
            await self.broadcast(VideoEvent(event=PLAY_VIDEO, data=event.data))
        elif event.event == STOP_VIDEO:
            logger.info("Received stop-video event from client: %s", sender)
            await self.broadcast(VideoEvent(event=STOP_VIDEO))
        else:
            logger.debug("Ignoring event type=%s (sender=%s)", event.event, sender)

    async def broadcast(self, event: VideoEvent) -> None:
        """
        Send an event to every connected client in connection order.

        Clients whose send fails are dropped from the active set.
        """
        frame = orjson.dumps(event.model_dump(exclude_unset=True)).decode("utf-8")

        # Snapshot: peers may disconnect while a send is suspended.
        for connection_id, connection in list(self._connections.items()):
            try:
                await connection.send_text(frame)
            except Exception as e:
                logger.warning(
                    "Dropping client after failed send: %s",
                    connection_id,
                    extra={"error": str(e)},
                )
                self._connections.pop(connection_id, None)

    async def close(self) -> None:
        """Close every connection and clear the active set."""
        connections = list(self._connections.values())
        self._connections.clear()

        for connection in connections:
            try:
                await connection.close()
            except Exception as e:
                logger.debug("Close failed during shutdown", extra={"error": str(e)})

        logger.info("Broadcast channel closed", extra={"closed": len(connections)})
