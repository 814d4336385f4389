from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from stockdesk.config import settings
from stockdesk.schemas.product_schema import CamelModel


class OrderItemIn(CamelModel):
    product_id: int = Field(..., gt=0, strict=True)
    quantity: int = Field(..., gt=0, le=999999, strict=True)


class CreateOrderIn(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    customer_name: str = Field(..., min_length=1, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)
    items: List[OrderItemIn] = Field(..., min_length=1, max_length=settings.MAX_ORDER_ITEMS)


class OrderCreated(CamelModel):
    message: str
    order_id: int
    total: float
    total_cents: int


class OrderLineOut(CamelModel):
    id: int
    product_id: int
    product_name: str
    product_sku: str
    quantity: int
    unit_price: float
    line_total: float


class OrderOut(CamelModel):
    id: int
    customer_name: str
    notes: Optional[str] = None
    created_at: datetime
    items: List[OrderLineOut]
    item_count: int
    total: float
    total_cents: int


class OrderList(CamelModel):
    items: List[OrderOut]
    total: int
