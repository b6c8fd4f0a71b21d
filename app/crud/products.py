from decimal import Decimal
from typing import Optional

from sqlalchemy import delete, func
from sqlalchemy.future import select
from sqlalchemy.orm import Session

from ..db.models import Product


def create_product(
    db: Session,
    barcode: str,
    name: str,
    price: Decimal,
    category: str,
    description: str = "",
    image_url: str = "",
) -> Product:
    """Create a new product."""
    product = Product(
        barcode=barcode,
        name=name,
        price=price,
        category=category,
        description=description,
        image_url=image_url,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def get_product(db: Session, product_id: int) -> Optional[Product]:
    """Get a product by ID."""
    return db.execute(
        select(Product).filter(Product.id == product_id)
    ).scalar_one_or_none()


def get_product_by_barcode(db: Session, barcode: str) -> Optional[Product]:
    """Get a product by its barcode."""
    return db.execute(
        select(Product).filter(Product.barcode == barcode)
    ).scalar_one_or_none()


def list_products(db: Session, category: Optional[str] = None) -> list[Product]:
    """List all products, optionally restricted to one category."""
    query = select(Product).order_by(Product.id)
    if category is not None:
        query = query.filter(Product.category == category)
    return db.execute(query).scalars().all()


def count_products(db: Session) -> int:
    return db.execute(select(func.count(Product.id))).scalar_one()


def delete_products(db: Session) -> int:
    """Delete every product in the catalog."""
    result = db.execute(delete(Product))
    db.commit()
    return result.rowcount
