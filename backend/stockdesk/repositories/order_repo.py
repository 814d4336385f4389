from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from stockdesk.models.order import Order, OrderItem


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, order_id: int) -> Optional[Order]:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
            .filter(Order.id == order_id)
            .first()
        )

    def list(self, page: int = 1, size: int = 20) -> Tuple[List[Order], int]:
        total = self.db.query(func.count(Order.id)).scalar() or 0
        items = (
            self.db.query(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset((page - 1) * size)
            .limit(size)
            .all()
        )
        return items, total

    def count(self) -> int:
        return self.db.query(func.count(Order.id)).scalar() or 0

    def revenue_cents(self) -> int:
        return (
            self.db.query(
                func.coalesce(func.sum(OrderItem.quantity * OrderItem.unit_price_cents), 0)
            ).scalar()
            or 0
        )

    def add(self, customer_name: str, notes: Optional[str]) -> Order:
        order = Order(customer_name=customer_name, notes=notes)
        self.db.add(order)
        self.db.flush()  # assigns order.id
        return order

    def add_item(self, order: Order, product_id: int, quantity: int, unit_price_cents: int) -> OrderItem:
        item = OrderItem(
            order_id=order.id,
            product_id=product_id,
            quantity=quantity,
            unit_price_cents=unit_price_cents,
        )
        self.db.add(item)
        order.items.append(item)
        return item
