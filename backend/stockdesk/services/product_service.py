from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockdesk.models.product import Product
from stockdesk.repositories.product_repo import ProductRepository
from stockdesk.utils.logging import get_logger

log = get_logger("products")


class ProductServiceException(Exception):
    pass


class ProductNotFoundError(ProductServiceException):
    pass


class DuplicateSkuError(ProductServiceException):
    pass


class ProductInUseError(ProductServiceException):
    pass


class ProductService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepository(db)

    def get(self, product_id: int) -> Product:
        p = self.repo.get(product_id)
        if not p:
            raise ProductNotFoundError(f"Product {product_id} not found")
        return p

    def list(self, q: Optional[str] = None, page: int = 1, size: int = 20) -> Tuple[List[Product], int]:
        return self.repo.list(q=q, page=page, size=size)

    def create(self, name: str, sku: str, price_cents: int, stock: int) -> Product:
        if self.repo.get_by_sku(sku):
            raise DuplicateSkuError(f"SKU {sku!r} already exists")
        p = Product(name=name, sku=sku, price_cents=price_cents, stock=stock)
        try:
            self.repo.add(p)
            self.db.commit()
        except IntegrityError:
            # lost a race with another insert of the same SKU
            self.db.rollback()
            raise DuplicateSkuError(f"SKU {sku!r} already exists")
        self.db.refresh(p)
        log.info("Created product id=%s sku=%s", p.id, p.sku)
        return p

    def update(self, product_id: int, name: str, sku: str, price_cents: int, stock: int) -> Product:
        p = self.get(product_id)
        other = self.repo.get_by_sku(sku)
        if other is not None and other.id != p.id:
            raise DuplicateSkuError(f"SKU {sku!r} already exists")
        p.name = name
        p.sku = sku
        p.price_cents = price_cents
        p.stock = stock
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateSkuError(f"SKU {sku!r} already exists")
        self.db.refresh(p)
        log.info("Updated product id=%s sku=%s", p.id, p.sku)
        return p

    def delete(self, product_id: int):
        """
        Delete a product that has never been ordered. Products referenced
        by order items are kept so historical orders stay intact.
        """
        p = self.get(product_id)
        if self.repo.has_order_history(product_id):
            raise ProductInUseError(
                "Cannot delete product. It is referenced in order(s). "
                "Products with order history cannot be deleted for data integrity."
            )
        try:
            self.repo.delete(p)
            self.db.commit()
        except IntegrityError:
            # an order referencing it was committed after our check
            self.db.rollback()
            raise ProductInUseError("Cannot delete product. It is referenced in order(s).")
        log.info("Deleted product id=%s", product_id)
