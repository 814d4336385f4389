from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockdesk.api.errors import register_exception_handlers
from stockdesk.api.health import router as health_router
from stockdesk.api.routes_dashboard import router as dashboard_router
from stockdesk.api.routes_order import router as order_router
from stockdesk.api.routes_products import router as products_router
from stockdesk.config import settings
from stockdesk.db import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    # RESET_DB=1 drops and recreates all tables
    init_db(reset=settings.RESET_DB)
    yield


app = FastAPI(title="Stockdesk - Inventory & Orders", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(products_router, prefix="/api/products", tags=["products"])

app.include_router(order_router, prefix="/api/orders", tags=["orders"])

app.include_router(dashboard_router, prefix="/api/dashboard", tags=["dashboard"])


def run():
    uvicorn.run("stockdesk.main:app", host=settings.APP_HOST, port=settings.APP_PORT)


if __name__ == "__main__":
    run()
