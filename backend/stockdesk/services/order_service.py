from typing import Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stockdesk.models.order import Order
from stockdesk.repositories.order_repo import OrderRepository
from stockdesk.repositories.product_repo import ProductRepository
from stockdesk.utils.logging import get_logger

log = get_logger("orders")


class OrderServiceException(Exception):
    pass


class OrderNotFoundError(OrderServiceException):
    pass


class OrderRejected(OrderServiceException):
    """
    The order references missing products or asks for more than is in stock.
    `problems` lists every offending line, not just the first one.
    """

    def __init__(self, problems: List[Dict]):
        self.problems = problems
        super().__init__("; ".join(p["message"] for p in problems))


def _not_found(product_id: int) -> Dict:
    return {
        "productId": product_id,
        "reason": "not_found",
        "message": f"Product with ID {product_id} not found",
    }


def _insufficient(product, requested: int) -> Dict:
    available = product.stock
    return {
        "productId": product.id,
        "reason": "insufficient_stock",
        "available": available,
        "requested": requested,
        "message": (
            f'Insufficient stock for product "{product.name}". '
            f"Available: {available}, Requested: {requested}"
        ),
    }


def order_to_dict(order: Order) -> Dict:
    lines = []
    for it in order.items:
        lines.append(
            {
                "id": it.id,
                "product_id": it.product_id,
                "product_name": it.product.name,
                "product_sku": it.product.sku,
                "quantity": it.quantity,
                "unit_price": it.unit_price_cents / 100,
                "line_total": it.line_total_cents / 100,
            }
        )
    total_cents = order.total_cents
    return {
        "id": order.id,
        "customer_name": order.customer_name,
        "notes": order.notes,
        "created_at": order.created_at,
        "items": lines,
        "item_count": len(lines),
        "total": total_cents / 100,
        "total_cents": total_cents,
    }


class OrderService:
    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepository(db)
        self.products = ProductRepository(db)

    def create_order(
        self,
        customer_name: str,
        items: List[Dict],
        notes: Optional[str] = None,
    ) -> Order:
        """
        items: list of {product_id: int, quantity: int}

        All lines are checked against current stock before anything is
        written. On success the order, its items (at the current unit
        prices) and the stock decrements are committed together; on any
        failure the transaction is rolled back and nothing is persisted.
        """
        # quantities per product, in first-seen order, so repeated lines
        # for one product are checked against its stock as a whole
        requested: Dict[int, int] = {}
        for it in items:
            pid = int(it["product_id"])
            requested[pid] = requested.get(pid, 0) + int(it["quantity"])

        try:
            product_map = self.products.get_many_for_update(requested.keys())

            problems = []
            for pid, qty in requested.items():
                prod = product_map.get(pid)
                if prod is None:
                    problems.append(_not_found(pid))
                elif prod.stock < qty:
                    problems.append(_insufficient(prod, qty))
            if problems:
                raise OrderRejected(problems)

            order = self.orders.add(customer_name, notes or None)
            for it in items:
                prod = product_map[int(it["product_id"])]
                self.orders.add_item(order, prod.id, int(it["quantity"]), prod.price_cents)

            for pid, qty in requested.items():
                if not self.products.decrement_stock(pid, qty):
                    # stock moved between our read and the write
                    prod = product_map[pid]
                    self.db.refresh(prod)
                    raise OrderRejected([_insufficient(prod, qty)])

            self.db.commit()
        except OrderRejected as e:
            self.db.rollback()
            log.warning("Order for %r rejected: %s", customer_name, e)
            raise
        except SQLAlchemyError:
            self.db.rollback()
            log.exception("Order for %r failed in storage", customer_name)
            raise

        self.db.refresh(order)
        log.info(
            "Created order id=%s customer=%r lines=%d total_cents=%d",
            order.id,
            order.customer_name,
            len(order.items),
            order.total_cents,
        )
        return order

    def get_order(self, order_id: int) -> Order:
        order = self.orders.get(order_id)
        if not order:
            raise OrderNotFoundError(f"Order {order_id} not found")
        return order

    def list_orders(self, page: int = 1, size: int = 20) -> Tuple[List[Order], int]:
        return self.orders.list(page=page, size=size)
