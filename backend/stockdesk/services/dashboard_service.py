from typing import Dict

from sqlalchemy.orm import Session

from stockdesk.config import settings
from stockdesk.repositories.order_repo import OrderRepository
from stockdesk.repositories.product_repo import ProductRepository


class DashboardService:
    def __init__(self, db: Session, low_stock_threshold: int = None):
        self.db = db
        self.products = ProductRepository(db)
        self.orders = OrderRepository(db)
        self.low_stock_threshold = (
            settings.LOW_STOCK_THRESHOLD if low_stock_threshold is None else low_stock_threshold
        )

    def stats(self) -> Dict:
        low = self.products.low_stock(self.low_stock_threshold)
        return {
            "total_products": self.products.count(),
            "total_orders": self.orders.count(),
            "total_revenue": self.orders.revenue_cents() / 100,
            "low_stock_threshold": self.low_stock_threshold,
            "low_stock_products": [
                {
                    "id": p.id,
                    "sku": p.sku,
                    "name": p.name,
                    "price": p.price,
                    "stock": p.stock,
                    "status": "out_of_stock" if p.stock == 0 else "low_stock",
                }
                for p in low
            ],
        }
