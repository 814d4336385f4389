from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from stockdesk.models.order import OrderItem
from stockdesk.models.product import Product


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: int) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return self.db.query(Product).filter(Product.sku == sku).first()

    def get_many_for_update(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Load the given products keyed by id, locking the rows where the
        dialect supports SELECT ... FOR UPDATE (SQLite silently ignores it).
        Missing ids are simply absent from the result.
        """
        ids = set(product_ids)
        if not ids:
            return {}
        rows = (
            self.db.query(Product)
            .filter(Product.id.in_(ids))
            .order_by(Product.id)
            .with_for_update()
            .all()
        )
        return {p.id: p for p in rows}

    def list(
        self, q: Optional[str] = None, page: int = 1, size: int = 20
    ) -> Tuple[List[Product], int]:
        query = self.db.query(Product)
        if q:
            like = f"%{q}%"
            query = query.filter((Product.name.ilike(like)) | (Product.sku.ilike(like)))
        total = query.order_by(None).count()
        items = query.order_by(Product.name).offset((page - 1) * size).limit(size).all()
        return items, total

    def count(self) -> int:
        return self.db.query(func.count(Product.id)).scalar() or 0

    def low_stock(self, threshold: int) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.stock < threshold)
            .order_by(Product.stock, Product.name)
            .all()
        )

    def has_order_history(self, product_id: int) -> bool:
        return (
            self.db.query(OrderItem.id).filter(OrderItem.product_id == product_id).first()
            is not None
        )

    def decrement_stock(self, product_id: int, qty: int) -> bool:
        """
        Guarded decrement: only succeeds while stock >= qty.
        Returns False if the row no longer has enough stock (or is gone),
        which means another transaction consumed it after our read.
        """
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= qty)
            .values(stock=Product.stock - qty)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def add(self, product: Product) -> Product:
        self.db.add(product)
        self.db.flush()
        return product

    def delete(self, product: Product):
        self.db.delete(product)
        self.db.flush()

    def create_or_update(
        self,
        sku: str,
        name: str,
        price_cents: int,
        stock: int = 0,
    ) -> Product:
        p = self.get_by_sku(sku)
        if p:
            p.name = name
            p.price_cents = price_cents
            p.stock = stock
        else:
            p = Product(sku=sku, name=name, price_cents=price_cents, stock=stock)
            self.db.add(p)
        self.db.flush()
        return p
