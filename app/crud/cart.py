from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.future import select

from ..db.enums import CartStatusType
from ..db.models import Cart, CartItem


def create_cart(db: Session, cart_id: str, budget: Decimal) -> Cart:
    cart = Cart(cart_id=cart_id, budget=budget)
    db.add(cart)
    db.commit()
    db.refresh(cart)
    return cart


def get_cart_by_cart_id(db: Session, cart_id: str) -> Optional[Cart]:
    return db.execute(
        select(Cart).filter(Cart.cart_id == cart_id)
    ).scalar_one_or_none()


def update_cart_total(db: Session, cart: Cart, total_amount: Decimal) -> Cart:
    cart.total_amount = total_amount
    db.commit()
    db.refresh(cart)
    return cart


def update_cart_status(db: Session, cart: Cart, status: CartStatusType) -> Cart:
    cart.status = status.value
    db.commit()
    db.refresh(cart)
    return cart


def update_cart_budget(db: Session, cart: Cart, budget: Decimal) -> Cart:
    cart.budget = budget
    db.commit()
    db.refresh(cart)
    return cart


def add_product_to_cart(
    db: Session, cart: Cart, product_id: int, quantity: int = 1
) -> CartItem:
    cart_item = CartItem(cart_id=cart.id, product_id=product_id, quantity=quantity)
    db.add(cart_item)
    db.commit()
    db.refresh(cart_item)
    return cart_item


def get_cart_item(db: Session, cart_item_id: int) -> Optional[CartItem]:
    return db.execute(
        select(CartItem).filter(
            CartItem.id == cart_item_id,
        )
    ).scalar_one_or_none()


def remove_product_from_cart(db: Session, cart_item: CartItem) -> None:
    db.delete(cart_item)
    db.commit()


def update_cart_item_quantity(
    db: Session, cart_item: CartItem, quantity: int
) -> CartItem:
    cart_item.quantity = quantity
    db.commit()
    db.refresh(cart_item)
    return cart_item


def get_cart_items(db: Session, cart: Cart) -> list[CartItem]:
    return (
        db.execute(
            select(CartItem)
            .filter(
                CartItem.cart_id == cart.id,
            )
            .order_by(CartItem.id)
        )
        .scalars()
        .all()
    )


def get_cart_item_by_product_id(
    db: Session, cart: Cart, product_id: int
) -> Optional[CartItem]:
    return db.execute(
        select(CartItem).filter(
            CartItem.cart_id == cart.id,
            CartItem.product_id == product_id,
        )
    ).scalar_one_or_none()


def get_cart_summary(db: Session, cart: Cart) -> tuple[Decimal, int]:
    cart_items: list[CartItem] = get_cart_items(db, cart)
    total: Decimal = Decimal(0)
    count: int = 0
    for cart_item in cart_items:
        if cart_item.product is None:
            continue
        total +=cart_item.product.price * cart_item.quantity
        count += 1
    return total, count
