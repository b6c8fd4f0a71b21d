import json
from typing import Any, Optional, Union

from fastapi import WebSocket
from pydantic import BaseModel
from starlette.websockets import WebSocketDisconnect, WebSocketState

from ..core.debug import logger

Message = Union[BaseModel, dict[str, Any]]


def encode(message: Message) -> str:
    if isinstance(message, BaseModel):
        return message.model_dump_json(by_alias=True)
    return json.dumps(message, default=str)


def is_open(websocket: WebSocket) -> bool:
    return (
        websocket.client_state == WebSocketState.CONNECTED
        and websocket.application_state == WebSocketState.CONNECTED
    )


class ConnectionRegistry:
    """Live websocket connections keyed by client id.

    Created once per application in the lifespan handler. Only touched from
    the event loop, so plain dict operations are enough.
    """

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}

    def register(self, client_id: str, websocket: WebSocket) -> None:
        self._connections[client_id] = websocket
        logger.info(
            f"WebSocket client connected: {client_id} ({len(self)} connected)"
        )

    def unregister(self, client_id: str) -> Optional[WebSocket]:
        websocket = self._connections.pop(client_id, None)
        if websocket is not None:
            logger.info(
                f"WebSocket client disconnected: {client_id} ({len(self)} connected)"
            )
        return websocket

    def get(self, client_id: str) -> Optional[WebSocket]:
        return self._connections.get(client_id)

    def is_open(self, client_id: str) -> bool:
        websocket = self.get(client_id)
        return websocket is not None and is_open(websocket)

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    async def send(self, client_id: str, message: Message) -> bool:
        """Send to one client. Returns False when it is gone or not open."""
        websocket = self.get(client_id)
        if websocket is None or not is_open(websocket):
            return False
        return await self._deliver(client_id, websocket, encode(message))

    async def broadcast(self, message: Message, exclude: Optional[str] = None) -> int:
        """Send to every open connection except ``exclude``.

        Returns the number of connections the message was handed to.
        """
        payload = encode(message)
        delivered = 0
        # snapshot, connections may come and go while we await sends
        for client_id, websocket in list(self._connections.items()):
            if client_id == exclude or not is_open(websocket):
                continue
            if await self._deliver(client_id, websocket, payload):
                delivered += 1
        return delivered

    async def _deliver(self, client_id: str, websocket: WebSocket, payload: str) -> bool:
        try:
            await websocket.send_text(payload)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.warning(f"Could not send to client {client_id}: {e}")
            return False
        return True
