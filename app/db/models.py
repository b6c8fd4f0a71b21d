import datetime, decimal
from typing import Optional

from sqlalchemy.orm import mapped_column, Mapped, relationship, validates
from sqlalchemy import ForeignKey, Numeric, func, CheckConstraint

from .base import Base
from .enums import CartStatusType, OrderStatusType


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True)
    barcode: Mapped[str] = mapped_column(nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(nullable=False)
    price: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    image_url: Mapped[str] = mapped_column(nullable=False, insert_default="")
    category: Mapped[str] = mapped_column(nullable=False, index=True)
    description: Mapped[str] = mapped_column(nullable=False, insert_default="")


class Cart(Base):
    __tablename__ = "carts"

    id: Mapped[int] = mapped_column(primary_key=True)
    cart_id: Mapped[str] = mapped_column(
        nullable=False, unique=True, index=True, comment="External cart identifier"
    )
    budget: Mapped[decimal.Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_amount: Mapped[decimal.Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, insert_default=decimal.Decimal("0")
    )
    status: Mapped[str] = mapped_column(
        nullable=False, index=True, insert_default=CartStatusType.ACTIVE.value
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now()
    )
    items: Mapped[list["CartItem"]] = relationship(
        back_populates="cart", cascade="all, delete-orphan", order_by="CartItem.id"
    )
    orders: Mapped[list["Order"]] = relationship(back_populates="cart")

    @validates("status")
    def validate_status(self, key, value):
        if value:
            for enum in CartStatusType:
                if value == enum.value:
                    return value
            raise ValueError(f"Invalid value for {key}: {value}")
        return value


class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (CheckConstraint("quantity >= 1", name="check_quantity"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    cart_id: Mapped[int] = mapped_column(
        ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(nullable=False, insert_default=1)
    added_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now()
    )
    cart: Mapped["Cart"] = relationship(back_populates="items")
    product: Mapped["Product"] = relationship()

    @validates("quantity")
    def validate_quantity(self, key, value):
        if value is not None and value < 1:
            raise ValueError(f"Invalid value for {key}: {value}")
        return value


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(primary_key=True)
    cart_id: Mapped[int] = mapped_column(
        ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    total_amount: Mapped[decimal.Decimal] = mapped_column(
        Numeric(10, 2), nullable=False
    )
    status: Mapped[str] = mapped_column(
        nullable=False, index=True, insert_default=OrderStatusType.PENDING.value
    )
    payment_method: Mapped[Optional[str]] = mapped_column(nullable=True)
    created_at: Mapped[datetime.datetime] = mapped_column(
        nullable=False, insert_default=func.now()
    )
    cart: Mapped["Cart"] = relationship(back_populates="orders")

    @validates("status")
    def validate_status(self, key, value):
        if value:
            for enum in OrderStatusType:
                if value == enum.value:
                    return value
            raise ValueError(f"Invalid value for {key}: {value}")
        return value
