import decimal

from .base import CamelModel


class ProductBase(CamelModel):
    barcode: str
    name: str
    price: decimal.Decimal
    image_url: str = ""
    category: str
    description: str = ""


class Product(ProductBase):
    id: int
