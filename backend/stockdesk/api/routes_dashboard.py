from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stockdesk.db import get_db
from stockdesk.schemas.dashboard_schema import DashboardStats
from stockdesk.services.dashboard_service import DashboardService
from stockdesk.utils.logging import get_logger

router = APIRouter(tags=["dashboard"])
log = get_logger("api")


@router.get("", summary="Shop overview: counts, revenue, low stock", response_model=DashboardStats)
def dashboard(db: Session = Depends(get_db)):
    try:
        return DashboardService(db).stats()
    except SQLAlchemyError:
        log.exception("dashboard stats failed")
        raise HTTPException(status_code=500, detail="Failed to load dashboard")
