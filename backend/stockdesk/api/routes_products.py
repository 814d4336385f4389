from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from stockdesk.db import get_db
from stockdesk.schemas.product_schema import ProductIn, ProductList, ProductOut
from stockdesk.services.product_service import (
    DuplicateSkuError,
    ProductInUseError,
    ProductNotFoundError,
    ProductService,
)
from stockdesk.utils.logging import get_logger

router = APIRouter(tags=["products"])
log = get_logger("api")


@router.get("", summary="List products", response_model=ProductList)
def list_products(
    q: Optional[str] = Query(None, description="search name or SKU"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
):
    try:
        items, total = ProductService(db).list(q=q, page=page, size=size)
    except SQLAlchemyError:
        log.exception("list_products failed")
        raise HTTPException(status_code=500, detail="Failed to fetch products")
    return {"items": items, "total": total}


@router.get("/{product_id}", summary="Get product", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return ProductService(db).get(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        log.exception("get_product failed for id=%s", product_id)
        raise HTTPException(status_code=500, detail="Failed to fetch product")


@router.post("", summary="Create product", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    svc = ProductService(db)
    try:
        return svc.create(payload.name, payload.sku, payload.price_cents, payload.stock)
    except DuplicateSkuError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SQLAlchemyError:
        log.exception("create_product failed")
        raise HTTPException(status_code=500, detail="Failed to create product")


@router.put("/{product_id}", summary="Update product", response_model=ProductOut)
def update_product(product_id: int, payload: ProductIn, db: Session = Depends(get_db)):
    svc = ProductService(db)
    try:
        return svc.update(product_id, payload.name, payload.sku, payload.price_cents, payload.stock)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateSkuError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SQLAlchemyError:
        log.exception("update_product failed for id=%s", product_id)
        raise HTTPException(status_code=500, detail="Failed to update product")


@router.delete("/{product_id}", summary="Delete product without order history")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    svc = ProductService(db)
    try:
        svc.delete(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ProductInUseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SQLAlchemyError:
        log.exception("delete_product failed for id=%s", product_id)
        raise HTTPException(status_code=500, detail="Failed to delete product")
    return {"message": "Product deleted successfully"}
