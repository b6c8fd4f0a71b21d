from fastapi import WebSocket

from .db.session import SessionLocal
from .realtime.registry import ConnectionRegistry


def get_db():
    """Manage the database session by creating a new session for each request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_connection_registry(websocket: WebSocket) -> ConnectionRegistry:
    """The application's connection registry, created in the lifespan handler"""
    return websocket.app.state.connections
