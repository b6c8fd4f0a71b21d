from decimal import Decimal
from typing import Optional

from sqlalchemy.future import select
from sqlalchemy.orm import Session

from ..db.enums import OrderStatusType
from ..db.models import Cart, Order


def create_order(
    db: Session,
    cart: Cart,
    total_amount: Decimal,
    payment_method: Optional[str] = None,
) -> Order:
    order = Order(
        cart_id=cart.id,
        total_amount=total_amount,
        payment_method=payment_method,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def get_order(db: Session, order_id: int) -> Optional[Order]:
    return db.execute(select(Order).filter_by(id=order_id)).scalar_one_or_none()


def get_order_by_cart(db: Session, cart: Cart) -> Optional[Order]:
    return db.execute(
        select(Order).filter_by(cart_id=cart.id).order_by(Order.id.desc())
    ).scalars().first()


def get_latest_order(db: Session) -> Optional[Order]:
    return db.execute(select(Order).order_by(Order.id.desc())).scalars().first()


def update_order_status(
    db: Session, order: Order, status: OrderStatusType
) -> Order:
    order.status = status.value
    db.commit()
    db.refresh(order)
    return order
