import asyncio
from typing import Optional

from ..core.debug import logger
from ..schemas.events import Heartbeat as HeartbeatMessage
from .registry import ConnectionRegistry


class Heartbeat:
    """Periodic ``heartbeat`` message for one connection.

    The loop ends by itself once the client is no longer registered and open;
    ``stop`` cancels it immediately and must be called on close and on error.
    """

    def __init__(
        self, registry: ConnectionRegistry, client_id: str, interval: float = 30.0
    ) -> None:
        self.registry = registry
        self.client_id = client_id
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(
            self._run(), name=f"heartbeat-{self.client_id}"
        )

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            if not self.registry.is_open(self.client_id):
                logger.debug(f"Heartbeat for {self.client_id} stopped, client gone")
                return
            await self.registry.send(self.client_id, HeartbeatMessage())
