from decimal import Decimal

from sqlalchemy.orm import Session

from .base import Base
from .session import engine

SAMPLE_PRODUCTS: list[dict] = [
    {
        "barcode": "8901063010631",
        "name": "Tata Salt",
        "price": Decimal("25.00"),
        "category": "Groceries",
        "description": "Iodized table salt",
    },
    {
        "barcode": "8901725134235",
        "name": "Maggi 2-Minute Noodles",
        "price": Decimal("14.00"),
        "category": "Instant Food",
        "description": "Instant noodles, ready in 2 minutes",
    },
    {
        "barcode": "8901030667947",
        "name": "Colgate MaxFresh Toothpaste",
        "price": Decimal("110.00"),
        "category": "Personal Care",
        "description": "Toothpaste for fresh breath",
    },
    {
        "barcode": "8901138511975",
        "name": "Parle-G Biscuits",
        "price": Decimal("10.00"),
        "category": "Snacks",
        "description": "Glucose biscuits - India's favorite",
    },
    {
        "barcode": "8901088046057",
        "name": "Tata Salt",
        "price": Decimal("20.00"),
        "category": "Groceries",
        "description": "Vacuum evaporated iodized salt - 1kg",
    },
    {
        "barcode": "8901058110339",
        "name": "Maggi 2-Minute Noodles",
        "price": Decimal("14.00"),
        "category": "Instant Food",
        "description": "Instant noodles with masala flavor - quick and easy meal",
    },
    {
        "barcode": "8901314010551",
        "name": "Colgate MaxFresh Toothpaste",
        "price": Decimal("95.00"),
        "category": "Personal Care",
        "description": "Toothpaste with cooling crystals for fresh breath - 150g",
    },
]


def init_db():
    from . import models  # Import models here to ensure they are registered correctly

    Base.metadata.create_all(bind=engine)


def seed_products(db: Session) -> int:
    """Insert the sample catalog when the products table is empty.

    Returns the number of products inserted.
    """
    from ..crud import products as product_crud

    if product_crud.count_products(db):
        return 0
    for data in SAMPLE_PRODUCTS:
        product_crud.create_product(db, **data)
    return len(SAMPLE_PRODUCTS)
