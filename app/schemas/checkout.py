from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ..db.enums import OrderStatusType
from .base import CamelModel
from .cart import Cart, CartItemWithProduct


class OrderCreate(CamelModel):
    cart_id: str = Field(title="Cart ID", min_length=1)
    payment_method: Optional[str] = Field(
        default=None, examples=["card", "upi", "cash"]
    )


class OrderStatusUpdate(CamelModel):
    status: OrderStatusType


class Order(CamelModel):
    id: int
    cart_id: int
    total_amount: Decimal
    status: str = OrderStatusType.PENDING.value
    payment_method: Optional[str] = None
    created_at: datetime


class OrderDetail(Order):
    cart: Optional[Cart] = None
    items: list[CartItemWithProduct] = []
