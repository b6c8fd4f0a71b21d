"""Messages exchanged over the ``/ws`` cart channel."""

import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import ConfigDict, Field

from ..db.enums import OutboundMessageType
from .base import CamelModel
from .cart import Cart, CartItemWithProduct
from .products import Product


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


# Inbound


class ScanEvent(CamelModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    barcode: Optional[str] = None
    cart_id: Optional[str] = None


class HardwareStatusEvent(CamelModel):
    status: Any = None


class UpdateBudgetEvent(CamelModel):
    cart_id: Any = None
    budget: Any = None


# Outbound


class ConnectionStatus(CamelModel):
    type: OutboundMessageType = OutboundMessageType.CONNECTION_STATUS
    connected: bool = True
    message: str = "Connected to Smart Shopping Cart server"
    client_id: str


class ErrorMessage(CamelModel):
    type: OutboundMessageType = OutboundMessageType.ERROR
    message: str


class ScannedProduct(CamelModel):
    name: str
    price: Decimal


class ScanSuccess(CamelModel):
    type: OutboundMessageType = OutboundMessageType.SCAN_SUCCESS
    product: ScannedProduct
    total_amount: Decimal
    is_budget_exceeded: bool


class ScanPayload(CamelModel):
    product: Product
    cart: Cart
    items: list[CartItemWithProduct]


class ProductScanned(CamelModel):
    type: OutboundMessageType = OutboundMessageType.PRODUCT_SCANNED
    data: ScanPayload


class HardwareStatus(CamelModel):
    type: OutboundMessageType = OutboundMessageType.HARDWARE_STATUS
    data: Any = None


class Pong(CamelModel):
    type: OutboundMessageType = OutboundMessageType.PONG
    timestamp: datetime.datetime = Field(default_factory=utcnow)


class Heartbeat(CamelModel):
    type: OutboundMessageType = OutboundMessageType.HEARTBEAT
    timestamp: datetime.datetime = Field(default_factory=utcnow)


class BudgetUpdated(CamelModel):
    type: OutboundMessageType = OutboundMessageType.BUDGET_UPDATED
    cart_id: Any
    budget: Any
