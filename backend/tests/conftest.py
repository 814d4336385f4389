import os
import tempfile

# must be set before stockdesk.config is imported
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(tempfile.gettempdir(), "stockdesk_test.db")

import pytest
from fastapi.testclient import TestClient

from stockdesk.db import SessionLocal, init_db
from stockdesk.main import app
from stockdesk.models.product import Product


@pytest.fixture(autouse=True)
def reset_db():
    # fresh tables for every test
    init_db(reset=True)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def make_product(db):
    def _make(sku, name=None, price_cents=1000, stock=10):
        p = Product(sku=sku, name=name or sku, price_cents=price_cents, stock=stock)
        db.add(p)
        db.commit()
        db.refresh(p)
        return p

    return _make
