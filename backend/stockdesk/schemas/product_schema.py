# backend/stockdesk/schemas/product_schema.py
from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API payloads: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ProductIn(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    sku: str = Field(..., min_length=1, max_length=50)
    price: Decimal = Field(..., gt=0, lt=Decimal("1000000"), decimal_places=2)
    stock: int = Field(..., ge=0, le=999999, strict=True)

    @property
    def price_cents(self) -> int:
        return int(self.price * 100)


class ProductOut(CamelModel):
    id: int
    sku: str
    name: str
    price: float
    price_cents: int
    stock: int
    created_at: datetime


class ProductList(CamelModel):
    items: List[ProductOut]
    total: int
