from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from stockdesk.db import Base

class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price_cents >= 0", name="ck_products_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String(50), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    price_cents = Column(Integer, nullable=False, default=0)
    stock = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    # no cascade: products with order history are never deleted
    order_items = relationship("OrderItem", back_populates="product", passive_deletes="all")

    @property
    def price(self) -> float:
        return (self.price_cents or 0) / 100

    def __repr__(self):
        return f"<Product sku={self.sku} name={self.name} stock={self.stock}>"


# OrderItem must be registered before the mapper above is configured
import stockdesk.models.order  # noqa: E402,F401
