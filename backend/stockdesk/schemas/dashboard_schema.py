from typing import List

from stockdesk.schemas.product_schema import CamelModel


class LowStockProduct(CamelModel):
    id: int
    sku: str
    name: str
    price: float
    stock: int
    status: str  # "out_of_stock" | "low_stock"


class DashboardStats(CamelModel):
    total_products: int
    total_orders: int
    total_revenue: float
    low_stock_threshold: int
    low_stock_products: List[LowStockProduct]
