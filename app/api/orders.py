from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status, Path, Body
from sqlalchemy.orm import Session

from ..crud import order as order_crud
from ..db.models import Order as OrderModel
from ..dependencies import get_db
from ..schemas.checkout import (
    Order,
    OrderCreate,
    OrderDetail,
    OrderStatusUpdate,
)
from ..services import cart as cart_service
from .cart import get_cart_or_404

router = APIRouter(tags=["orders"], prefix="/api/orders")


def order_detail(db: Session, order: OrderModel) -> OrderDetail:
    cart = order.cart
    return OrderDetail(
        **Order.model_validate(order).model_dump(),
        cart=cart_service.serialize_cart(cart),
        items=cart_service.serialize_items(db, cart),
    )


@router.post(
    "/",
    response_model=Order,
    status_code=status.HTTP_201_CREATED,
    summary="Place an order for a cart",
)
def create_order(
    order: Annotated[OrderCreate, Body()],
    db: Annotated[Session, Depends(get_db)],
) -> Order:
    """
    Check a cart out.

    The order total is the cart's recomputed total, and the cart is marked
    completed.

    Args:
        order (OrderCreate): The cart ID and an optional payment method.
        db (Session): The database session.

    Returns:
        Order: The new pending order.

    Raises:
        HTTPException: 404 - Not Found if the cart is not found.
        HTTPException: 409 - Conflict if the cart has already been ordered.
    """
    cart = get_cart_or_404(db, order.cart_id)
    try:
        return cart_service.place_order(db, cart, order.payment_method)
    except cart_service.OrderAlreadyPlaced as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get(
    "/latest",
    response_model=OrderDetail,
    summary="Get the most recent order",
)
def read_latest_order(db: Annotated[Session, Depends(get_db)]) -> OrderDetail:
    if (order := order_crud.get_latest_order(db)) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No orders found"
        )
    return order_detail(db, order)


@router.get(
    "/cart/{cart_id}",
    response_model=Order,
    summary="Get the order of a cart",
)
def read_cart_order(
    cart_id: Annotated[str, Path(title="Cart ID")],
    db: Annotated[Session, Depends(get_db)],
) -> Order:
    cart = get_cart_or_404(db, cart_id)
    if (order := order_crud.get_order_by_cart(db, cart)) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Order not found"
        )
    return order


@router.patch(
    "/cart/{cart_id}",
    response_model=Order,
    summary="Update the status of a cart's order",
)
def update_cart_order_status(
    cart_id: Annotated[str, Path(title="Cart ID")],
    update: Annotated[OrderStatusUpdate, Body()],
    db: Annotated[Session, Depends(get_db)],
) -> Order:
    """
    Update the status of a cart's order (pending, paid or cancelled).

    Raises:
        HTTPException: 404 - Not Found if the cart or its order is not found.
    """
    cart = get_cart_or_404(db, cart_id)
    if (order := order_crud.get_order_by_cart(db, cart)) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Order not found"
        )
    return order_crud.update_order_status(db, order, update.status)


@router.get(
    "/{order_id}",
    response_model=OrderDetail,
    summary="Get an order",
)
def read_order(
    order_id: Annotated[int, Path(title="Order ID")],
    db: Annotated[Session, Depends(get_db)],
) -> OrderDetail:
    """
    Get an order together with its cart and line items.

    Raises:
        HTTPException: 404 - Not Found if the order is not found.
    """
    if (order := order_crud.get_order(db, order_id)) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Order not found"
        )
    return order_detail(db, order)
