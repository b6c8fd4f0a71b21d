from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status, Path, Body
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.debug import logger
from ..crud import cart as cart_crud
from ..dependencies import get_db
from ..schemas.cart import BudgetUpdate, Cart, CartCreate, CartItemWithProduct
from ..services import cart as cart_service

router = APIRouter(tags=["cart"], prefix="/api/carts")


def get_cart_or_404(db: Session, cart_id: str):
    try:
        return cart_service.get_cart(db, cart_id)
    except cart_service.CartNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Cart not found"
        )


@router.post(
    "/",
    response_model=Cart,
    status_code=status.HTTP_201_CREATED,
    summary="Create a cart",
)
def create_cart(
    cart: Annotated[CartCreate, Body()],
    db: Annotated[Session, Depends(get_db)],
) -> Cart:
    """
    Open a shopping session against a budget.

    Args:
        cart (CartCreate): The external cart ID and the budget.
        db (Session): The database session.

    Returns:
        Cart: The new, empty cart.

    Raises:
        HTTPException: 400 - Bad Request if the cart ID is already in use.

    """
    try:
        db_cart = cart_crud.create_cart(db, cart.cart_id, cart.budget)
    except IntegrityError as e:
        logger.error(f"Error creating cart: {e}")
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cart ID already in use",
        )
    return cart_service.serialize_cart(db_cart)


@router.get(
    "/{cart_id}",
    response_model=Cart,
    summary="Get a cart",
    status_code=status.HTTP_200_OK,
)
def read_cart(
    cart_id: Annotated[str, Path(title="Cart ID")],
    db: Annotated[Session, Depends(get_db)],
) -> Cart:
    """
    Get a cart by its external ID, with its budget status.

    Raises:
        HTTPException: 404 - Not Found if the cart is not found.

    """
    return cart_service.serialize_cart(get_cart_or_404(db, cart_id))


@router.patch(
    "/{cart_id}/budget",
    response_model=Cart,
    summary="Update the budget of a cart",
    status_code=status.HTTP_200_OK,
)
def update_cart_budget(
    cart_id: Annotated[str, Path(title="Cart ID")],
    update: Annotated[BudgetUpdate, Body()],
    db: Annotated[Session, Depends(get_db)],
) -> Cart:
    cart = get_cart_or_404(db, cart_id)
    cart = cart_service.set_budget(db, cart, update.budget)
    return cart_service.serialize_cart(cart)


@router.get(
    "/{cart_id}/items",
    response_model=list[CartItemWithProduct],
    summary="Get the items in a cart",
    status_code=status.HTTP_200_OK,
)
def read_cart_items(
    cart_id: Annotated[str, Path(title="Cart ID")],
    db: Annotated[Session, Depends(get_db)],
) -> list[CartItemWithProduct]:
    """
    Get the items in a cart with their product details.

    Args:
        cart_id (str): The external cart ID.
        db (Session): The database session.

    Returns:
        list[CartItemWithProduct]: The cart's line items.

    """
    return cart_service.serialize_items(db, get_cart_or_404(db, cart_id))
