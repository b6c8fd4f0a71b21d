import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.debug import logger
from ..dependencies import get_db, get_connection_registry
from ..realtime.dispatcher import EventDispatcher
from ..realtime.heartbeat import Heartbeat
from ..realtime.registry import ConnectionRegistry, is_open
from ..schemas.events import ConnectionStatus

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def cart_channel(
    websocket: WebSocket,
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[ConnectionRegistry, Depends(get_connection_registry)],
):
    """
    Real-time cart channel shared by scanning devices and browser clients.

    Every connection gets a fresh client id, a ``connection_status``
    acknowledgment and a heartbeat. Inbound frames are handed to the
    ``EventDispatcher``; the connection is unregistered and its heartbeat
    cancelled however the receive loop ends.
    """
    await websocket.accept()
    client_id = str(uuid.uuid4())
    registry.register(client_id, websocket)
    heartbeat = Heartbeat(registry, client_id, settings.heartbeat_interval)

    try:
        await registry.send(client_id, ConnectionStatus(client_id=client_id))
        heartbeat.start()
        dispatcher = EventDispatcher(registry, db, client_id)
        while True:
            raw = await websocket.receive_text()
            await dispatcher.dispatch(raw)
    except WebSocketDisconnect as e:
        logger.debug(f"WebSocket client {client_id} closed with code {e.code}")
    except Exception:
        logger.exception(f"WebSocket error for client {client_id}")
    finally:
        registry.unregister(client_id)
        heartbeat.stop()
        # only still open when the receive loop failed
        if is_open(websocket):
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
