from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from stockdesk.db import get_db
from stockdesk.schemas.order_schema import CreateOrderIn, OrderCreated, OrderList, OrderOut
from stockdesk.services.order_service import (
    OrderNotFoundError,
    OrderRejected,
    OrderService,
    order_to_dict,
)
from stockdesk.utils.logging import get_logger

router = APIRouter(tags=["orders"])
log = get_logger("api")


@router.post(
    "",
    summary="Create order",
    response_model=OrderCreated,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Validation failed, missing product or insufficient stock"}},
)
def create_order(payload: CreateOrderIn, db: Session = Depends(get_db)):
    svc = OrderService(db)
    try:
        order = svc.create_order(
            payload.customer_name,
            [it.model_dump() for it in payload.items],
            notes=payload.notes,
        )
    except OrderRejected as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": str(e), "problems": e.problems},
        )
    except SQLAlchemyError:
        # already logged with traceback by the service; keep internals out of the response
        raise HTTPException(status_code=500, detail="Failed to create order")
    return {
        "message": "Order created successfully",
        "order_id": order.id,
        "total": order.total_cents / 100,
        "total_cents": order.total_cents,
    }


@router.get("", summary="List orders with totals", response_model=OrderList)
def list_orders(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
):
    try:
        orders, total = OrderService(db).list_orders(page=page, size=size)
    except SQLAlchemyError:
        log.exception("list_orders failed")
        raise HTTPException(status_code=500, detail="Failed to fetch orders")
    return {"items": [order_to_dict(o) for o in orders], "total": total}


@router.get("/{order_id}", summary="Get order detail", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    try:
        order = OrderService(db).get_order(order_id)
    except OrderNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SQLAlchemyError:
        log.exception("get_order failed for id=%s", order_id)
        raise HTTPException(status_code=500, detail="Failed to fetch order details")
    return order_to_dict(order)
