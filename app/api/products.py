from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, status, Path, Query
from sqlalchemy.orm import Session

from ..crud.products import get_product, get_product_by_barcode, list_products
from ..dependencies import get_db
from ..schemas.products import Product


router = APIRouter(prefix="/api/products", tags=["products"])


@router.get(
    "/",
    response_model=list[Product],
    summary="Get all products",
)
def read_products(
    db: Annotated[Session, Depends(get_db)],
    category: Annotated[Optional[str], Query(title="Category")] = None,
):
    """
    Endpoint to get all products.

    Parameters:
    - db: Session - The database session.
    - category: str - Only return products in this category.

    Returns:
    - The products in the catalog.
    """
    return list_products(db, category)


@router.get(
    "/category/{category}",
    response_model=list[Product],
    summary="Get products by category",
)
def read_products_by_category(
    category: Annotated[str, Path(title="Category")],
    db: Annotated[Session, Depends(get_db)],
):
    return list_products(db, category)


@router.get(
    "/barcode/{barcode}",
    response_model=Product,
    summary="Get a product by barcode",
)
def read_product_by_barcode(
    barcode: Annotated[str, Path(title="Barcode")],
    db: Annotated[Session, Depends(get_db)],
):
    """
    Endpoint to look a product up by its barcode.

    Parameters:
    - barcode: str - The scanned barcode.
    - db: Session - The database session.

    Returns:
    - The product.

    Raises:
    - HTTPException: 404 - Not Found if no product has this barcode.
    """
    if (product := get_product_by_barcode(db, barcode)) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return product


@router.get(
    "/{product_id}",
    response_model=Product,
    summary="Get a product",
)
def read_product(
    product_id: Annotated[int, Path(title="Product ID")],
    db: Annotated[Session, Depends(get_db)],
):
    if (product := get_product(db, product_id)) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
        )
    return product
