from datetime import datetime
from decimal import Decimal

from pydantic import Field

from .base import CamelModel
from .products import Product


class CartCreate(CamelModel):
    cart_id: str = Field(title="Cart ID", min_length=1, max_length=64)
    budget: Decimal = Field(title="Budget", gt=0, max_digits=10, decimal_places=2)


class BudgetUpdate(CamelModel):
    budget: Decimal = Field(title="Budget", gt=0, max_digits=10, decimal_places=2)


class Cart(CamelModel):
    id: int
    cart_id: str
    budget: Decimal
    total_amount: Decimal = Field(title="Total Amount", decimal_places=2)
    status: str
    created_at: datetime
    is_budget_exceeded: bool = False


class CartItemCreate(CamelModel):
    cart_id: str = Field(title="Cart ID", min_length=1)
    product_id: int
    quantity: int = Field(default=1, title="Quantity of product", ge=1, le=100)


class CartItemQuantity(CamelModel):
    quantity: int = Field(title="Quantity of product", ge=1, le=100)


class CartItem(CamelModel):
    id: int
    cart_id: int
    product_id: int
    quantity: int
    added_at: datetime


class CartItemWithProduct(CartItem):
    product: Product
