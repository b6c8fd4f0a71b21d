import json
from typing import Any, Awaitable, Callable

from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..core.debug import logger
from ..db.enums import InboundMessageType
from ..schemas.events import (
    BudgetUpdated,
    ErrorMessage,
    HardwareStatus,
    HardwareStatusEvent,
    Pong,
    ProductScanned,
    ScanEvent,
    ScannedProduct,
    ScanSuccess,
    UpdateBudgetEvent,
)
from ..services import cart as cart_service
from .registry import ConnectionRegistry, Message

PROCESSING_ERROR = "Failed to process message. Please check format and try again."

Handler = Callable[[dict[str, Any]], Awaitable[None]]


class EventDispatcher:
    """Routes the frames of one connection to the handler for their ``type``.

    Frames are handled one at a time per connection. Database work runs in
    the thread pool so other connections keep being served meanwhile.
    """

    def __init__(self, registry: ConnectionRegistry, db: Session, client_id: str):
        self.registry = registry
        self.db = db
        self.client_id = client_id
        self.handlers: dict[InboundMessageType, Handler] = {
            InboundMessageType.SCAN: self.handle_scan,
            InboundMessageType.HARDWARE_STATUS: self.handle_hardware_status,
            InboundMessageType.PING: self.handle_ping,
            InboundMessageType.UPDATE_BUDGET: self.handle_update_budget,
        }

    async def reply(self, message: Message) -> None:
        await self.registry.send(self.client_id, message)

    async def reply_error(self, message: str) -> None:
        await self.reply(ErrorMessage(message=message))

    async def dispatch(self, raw: str) -> None:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed message from {self.client_id}: {e}")
            await self.reply_error(PROCESSING_ERROR)
            return
        if not isinstance(data, dict):
            logger.warning(f"Non-object message from {self.client_id}")
            await self.reply_error(PROCESSING_ERROR)
            return

        message_type = data.get("type")
        logger.debug(f"WebSocket message received: {message_type}")
        try:
            handler = self.handlers[InboundMessageType(message_type)]
        except (ValueError, TypeError):
            logger.debug(f"Ignoring message of type {message_type!r}")
            return

        try:
            await handler(data)
        except ValidationError as e:
            logger.warning(f"Invalid {message_type} message from {self.client_id}: {e}")
            await self.reply_error(PROCESSING_ERROR)
        except Exception:
            logger.exception(f"Error processing WebSocket message {message_type}")
            await self.reply_error(PROCESSING_ERROR)

    async def handle_scan(self, data: dict[str, Any]) -> None:
        event = ScanEvent.model_validate(data)
        if not event.barcode or not event.cart_id:
            await self.reply_error("Missing required parameters: barcode or cartId")
            return

        try:
            payload = await run_in_threadpool(
                cart_service.scan_product, self.db, event.barcode, event.cart_id
            )
        except (cart_service.ProductNotFound, cart_service.CartNotFound) as e:
            logger.info(str(e))
            await self.reply_error(str(e))
            return

        # terse reply for the scanning device first, then the full state for everyone
        await self.reply(
            ScanSuccess(
                product=ScannedProduct(
                    name=payload.product.name, price=payload.product.price
                ),
                total_amount=payload.cart.total_amount,
                is_budget_exceeded=payload.cart.is_budget_exceeded,
            )
        )
        await self.registry.broadcast(ProductScanned(data=payload))

    async def handle_hardware_status(self, data: dict[str, Any]) -> None:
        event = HardwareStatusEvent.model_validate(data)
        logger.info(f"Hardware status update: {event.status}")
        await self.registry.broadcast(
            HardwareStatus(data=event.status), exclude=self.client_id
        )

    async def handle_ping(self, data: dict[str, Any]) -> None:
        await self.reply(Pong())

    async def handle_update_budget(self, data: dict[str, Any]) -> None:
        event = UpdateBudgetEvent.model_validate(data)
        if not event.cart_id or not event.budget:
            await self.reply_error("Missing required parameters: cartId or budget")
            return

        try:
            await run_in_threadpool(cart_service.get_cart, self.db, str(event.cart_id))
        except cart_service.CartNotFound as e:
            await self.reply_error(str(e))
            return

        # TODO: persist through cart_service.set_budget, this only notifies clients
        # Values go back out exactly as the client sent them
        await self.registry.broadcast(
            BudgetUpdated(cart_id=event.cart_id, budget=event.budget)
        )
