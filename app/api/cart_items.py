from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status, Path, Body
from sqlalchemy.orm import Session

from ..crud import products as product_crud
from ..dependencies import get_db
from ..schemas.cart import CartItem, CartItemCreate, CartItemQuantity
from ..services import cart as cart_service
from .cart import get_cart_or_404

router = APIRouter(tags=["cart"], prefix="/api/cart-items")


def get_cart_item_or_404(db: Session, cart_item_id: int):
    try:
        return cart_service.get_cart_item(db, cart_item_id)
    except cart_service.CartItemNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Cart item not found"
        )


@router.post(
    "/",
    response_model=CartItem,
    status_code=status.HTTP_201_CREATED,
    summary="Add product to cart",
)
def add_product_to_cart(
    cart_item: Annotated[CartItemCreate, Body()],
    db: Annotated[Session, Depends(get_db)],
) -> CartItem:
    """
    Add a product to a cart.

    Args:
        cart_item (CartItemCreate): The cart ID, product ID and quantity.
        db (Session): The database session.

    Returns:
        CartItem: The updated cart item, or the newly created cart item.

    Raises:
        HTTPException: 404 - Not Found if the cart or the product is not found.

    """
    cart = get_cart_or_404(db, cart_item.cart_id)
    if (product := product_crud.get_product(db, cart_item.product_id)) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return cart_service.add_item(db, cart, product, cart_item.quantity)


@router.patch(
    "/{cart_item_id}/quantity",
    response_model=CartItem,
    summary="Update the quantity of a product in a cart",
    status_code=status.HTTP_200_OK,
)
def update_cart_item_quantity(
    cart_item_id: Annotated[int, Path(title="Cart Item ID")],
    update: Annotated[CartItemQuantity, Body()],
    db: Annotated[Session, Depends(get_db)],
) -> CartItem:
    """
    Update the quantity of a product in a cart.

    Raises:
        HTTPException: 404 - Not Found if the cart item is not found.

    """
    cart_item = get_cart_item_or_404(db, cart_item_id)
    try:
        return cart_service.change_item_quantity(db, cart_item, update.quantity)
    except cart_service.CartItemNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Cart item not found"
        )


@router.delete(
    "/{cart_item_id}", response_model=None, status_code=status.HTTP_204_NO_CONTENT
)
def remove_product_from_cart(
    cart_item_id: Annotated[int, Path(title="Cart Item ID")],
    db: Annotated[Session, Depends(get_db)],
) -> None:
    cart_item = get_cart_item_or_404(db, cart_item_id)
    try:
        cart_service.remove_item(db, cart_item)
    except cart_service.CartItemNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Cart item not found"
        )
