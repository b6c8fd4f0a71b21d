"""Cart mutations shared by the REST routes and the websocket channel.

Every function that reads cart items and writes back a derived value holds
the cart's lock from ``cart_locks`` for the whole read-modify-write, and
expires the session on entry so it works from committed rows.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from ..core.debug import logger
from ..core.locks import KeyedLock
from ..core.utils import round_money
from ..crud import cart as cart_crud, order as order_crud, products as product_crud
from ..db.enums import CartStatusType
from ..db.models import (
    Cart as CartModel,
    CartItem as CartItemModel,
    Order as OrderModel,
    Product as ProductModel,
)
from ..schemas.cart import Cart, CartItemWithProduct
from ..schemas.events import ScanPayload
from ..schemas.products import Product

cart_locks = KeyedLock()


class ProductNotFound(ValueError):
    pass


class CartNotFound(ValueError):
    pass


class CartItemNotFound(ValueError):
    pass


class OrderAlreadyPlaced(ValueError):
    pass


def is_budget_exceeded(total_amount: Decimal, budget: Optional[Decimal]) -> bool:
    if budget is None:
        return False
    return total_amount > budget


def get_cart(db: Session, cart_id: str) -> CartModel:
    if (cart := cart_crud.get_cart_by_cart_id(db, cart_id)) is None:
        raise CartNotFound(f"Cart not found with ID: {cart_id}")
    return cart


def get_cart_item(db: Session, cart_item_id: int) -> CartItemModel:
    if (cart_item := cart_crud.get_cart_item(db, cart_item_id)) is None:
        raise CartItemNotFound(f"Cart item not found with ID: {cart_item_id}")
    return cart_item


def recompute_cart_total(db: Session, cart: CartModel) -> Decimal:
    """Sum price * quantity over the cart's items and store it on the cart.

    Callers must hold the cart's lock.
    """
    total, _ = cart_crud.get_cart_summary(db, cart)
    total = round_money(total)
    cart_crud.update_cart_total(db, cart, total)
    return total


def serialize_cart(cart: CartModel) -> Cart:
    view = Cart.model_validate(cart)
    view.is_budget_exceeded = is_budget_exceeded(cart.total_amount, cart.budget)
    return view


def serialize_items(db: Session, cart: CartModel) -> list[CartItemWithProduct]:
    return [
        CartItemWithProduct.model_validate(item)
        for item in cart_crud.get_cart_items(db, cart)
        if item.product is not None
    ]


def scan_product(db: Session, barcode: str, cart_id: str) -> ScanPayload:
    """
    Add one unit of the product with ``barcode`` to the cart ``cart_id``.

    Args:
        db (Session): The database session.
        barcode (str): The scanned barcode.
        cart_id (str): The external cart identifier.

    Returns:
        ScanPayload: The product, the cart with its new total and the full item list.

    Raises:
        ProductNotFound: No product has this barcode. Nothing is written.
        CartNotFound: No cart has this identifier. Nothing is written.
    """
    product = product_crud.get_product_by_barcode(db, barcode)
    if product is None:
        raise ProductNotFound(f"Product not found for barcode: {barcode}")
    cart = get_cart(db, cart_id)

    with cart_locks.hold(cart.id):
        db.expire_all()
        _add_units(db, cart, product, 1)
        recompute_cart_total(db, cart)
        return ScanPayload(
            product=Product.model_validate(product),
            cart=serialize_cart(cart),
            items=serialize_items(db, cart),
        )


def _add_units(
    db: Session, cart: CartModel, product: ProductModel, quantity: int
) -> CartItemModel:
    if (
        cart_item := cart_crud.get_cart_item_by_product_id(db, cart, product.id)
    ) is not None:
        cart_item = cart_crud.update_cart_item_quantity(
            db, cart_item, cart_item.quantity + quantity
        )
        logger.info(f"Updated quantity for {product.name} in cart {cart.cart_id}")
        return cart_item
    cart_item = cart_crud.add_product_to_cart(db, cart, product.id, quantity)
    logger.info(f"Added new product {product.name} to cart {cart.cart_id}")
    return cart_item


def add_item(
    db: Session, cart: CartModel, product: ProductModel, quantity: int = 1
) -> CartItemModel:
    """Add ``quantity`` units of a product, merging into an existing line."""
    with cart_locks.hold(cart.id):
        db.expire_all()
        cart_item = _add_units(db, cart, product, quantity)
        recompute_cart_total(db, cart)
        db.refresh(cart_item)
        return cart_item


def change_item_quantity(
    db: Session, cart_item: CartItemModel, quantity: int
) -> CartItemModel:
    cart_item_id = cart_item.id
    with cart_locks.hold(cart_item.cart_id):
        db.expire_all()
        # the line may have been removed while we waited for the lock
        cart_item = get_cart_item(db, cart_item_id)
        cart_item = cart_crud.update_cart_item_quantity(db, cart_item, quantity)
        recompute_cart_total(db, cart_item.cart)
        db.refresh(cart_item)
        return cart_item


def remove_item(db: Session, cart_item: CartItemModel) -> None:
    cart_item_id = cart_item.id
    with cart_locks.hold(cart_item.cart_id):
        db.expire_all()
        cart_item = get_cart_item(db, cart_item_id)
        cart = cart_item.cart
        cart_crud.remove_product_from_cart(db, cart_item)
        recompute_cart_total(db, cart)


def set_budget(db: Session, cart: CartModel, budget: Decimal) -> CartModel:
    with cart_locks.hold(cart.id):
        db.expire_all()
        return cart_crud.update_cart_budget(db, cart, budget)


def place_order(
    db: Session, cart: CartModel, payment_method: Optional[str] = None
) -> OrderModel:
    """
    Snapshot the cart into an order and mark the cart completed.

    Raises:
        OrderAlreadyPlaced: The cart already has an order.
    """
    with cart_locks.hold(cart.id):
        db.expire_all()
        if order_crud.get_order_by_cart(db, cart) is not None:
            raise OrderAlreadyPlaced(f"An order already exists for cart {cart.cart_id}")
        total_amount = recompute_cart_total(db, cart)
        order = order_crud.create_order(db, cart, total_amount, payment_method)
        cart_crud.update_cart_status(db, cart, CartStatusType.COMPLETED)
        logger.info(f"Order {order.id} placed for cart {cart.cart_id}")
        return order
