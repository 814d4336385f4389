from sqlalchemy.exc import OperationalError

from stockdesk.models.order import Order, OrderItem
from stockdesk.models.product import Product
from stockdesk.repositories.product_repo import ProductRepository


def _stock(db, product_id):
    db.expire_all()
    return db.get(Product, product_id).stock


def test_create_order_computes_total_and_decrements_stock(client, db, make_product):
    a = make_product("PROD-A", "Product A", price_cents=1000, stock=5)
    b = make_product("PROD-B", "Product B", price_cents=2000, stock=3)

    payload = {
        "customerName": "Jane Doe",
        "notes": "leave at the door",
        "items": [
            {"productId": a.id, "quantity": 3},
            {"productId": b.id, "quantity": 1},
        ],
    }
    r = client.post("/api/orders", json=payload)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["message"] == "Order created successfully"
    assert body["total"] == 50.0
    assert body["totalCents"] == 5000

    assert _stock(db, a.id) == 2
    assert _stock(db, b.id) == 2

    detail = client.get(f"/api/orders/{body['orderId']}").json()
    assert detail["customerName"] == "Jane Doe"
    assert detail["notes"] == "leave at the door"
    assert detail["itemCount"] == 2
    lines = {it["productSku"]: it for it in detail["items"]}
    assert lines["PROD-A"]["unitPrice"] == 10.0
    assert lines["PROD-A"]["lineTotal"] == 30.0
    assert lines["PROD-B"]["productName"] == "Product B"
    assert lines["PROD-B"]["lineTotal"] == 20.0
    assert detail["total"] == sum(it["quantity"] * it["unitPrice"] for it in detail["items"])


def test_insufficient_stock_aborts_whole_order(client, db, make_product):
    ok = make_product("OK-1", "Plenty", price_cents=500, stock=10)
    short = make_product("SHORT-1", "Scarce", price_cents=700, stock=3)

    payload = {
        "customerName": "Bob",
        "items": [
            {"productId": ok.id, "quantity": 2},
            {"productId": short.id, "quantity": 4},
        ],
    }
    r = client.post("/api/orders", json=payload)
    assert r.status_code == 400
    body = r.json()
    assert 'Insufficient stock for product "Scarce". Available: 3, Requested: 4' in body["detail"]
    assert body["problems"] == [
        {
            "productId": short.id,
            "reason": "insufficient_stock",
            "available": 3,
            "requested": 4,
            "message": 'Insufficient stock for product "Scarce". Available: 3, Requested: 4',
        }
    ]

    # nothing persisted, valid line included
    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0
    assert _stock(db, ok.id) == 10
    assert _stock(db, short.id) == 3


def test_missing_product_reported_with_all_problems(client, db, make_product):
    short = make_product("SHORT-2", "Scarce", stock=1)

    payload = {
        "customerName": "Bob",
        "items": [
            {"productId": 9999, "quantity": 1},
            {"productId": short.id, "quantity": 2},
        ],
    }
    r = client.post("/api/orders", json=payload)
    assert r.status_code == 400
    body = r.json()
    reasons = [p["reason"] for p in body["problems"]]
    assert reasons == ["not_found", "insufficient_stock"]
    assert "Product with ID 9999 not found" in body["detail"]
    assert db.query(Order).count() == 0
    assert _stock(db, short.id) == 1


def test_repeated_lines_are_checked_against_combined_quantity(client, db, make_product):
    p = make_product("DUP-1", "Twice", price_cents=100, stock=5)
    payload = {
        "customerName": "Carol",
        "items": [
            {"productId": p.id, "quantity": 3},
            {"productId": p.id, "quantity": 3},
        ],
    }
    r = client.post("/api/orders", json=payload)
    assert r.status_code == 400
    assert "Available: 5, Requested: 6" in r.json()["detail"]
    assert _stock(db, p.id) == 5


def test_order_with_exact_stock_empties_product(client, db, make_product):
    p = make_product("EXACT-1", stock=3, price_cents=250)
    r = client.post(
        "/api/orders",
        json={"customerName": "Dan", "items": [{"productId": p.id, "quantity": 3}]},
    )
    assert r.status_code == 201
    assert r.json()["total"] == 7.5
    assert _stock(db, p.id) == 0


def test_unit_price_is_captured_at_order_time(client, db, make_product):
    p = make_product("PRICE-1", "Jam", price_cents=400, stock=10)
    r = client.post(
        "/api/orders",
        json={"customerName": "Eve", "items": [{"productId": p.id, "quantity": 2}]},
    )
    order_id = r.json()["orderId"]

    upd = client.put(
        f"/api/products/{p.id}",
        json={"name": "Jam", "sku": "PRICE-1", "price": 9.99, "stock": 8},
    )
    assert upd.status_code == 200

    detail = client.get(f"/api/orders/{order_id}").json()
    assert detail["items"][0]["unitPrice"] == 4.0
    assert detail["total"] == 8.0


def test_validation_errors_are_field_level_400(client, make_product):
    p = make_product("VAL-1")
    payload = {
        "customerName": "   ",
        "items": [{"productId": p.id, "quantity": 0}],
    }
    r = client.post("/api/orders", json=payload)
    assert r.status_code == 400
    body = r.json()
    assert body["detail"] == "Validation failed"
    fields = {e["field"] for e in body["errors"]}
    assert "customerName" in fields
    assert "items.0.quantity" in fields


def test_empty_and_oversized_item_lists_rejected(client, make_product):
    p = make_product("VAL-2", stock=1000)
    r = client.post("/api/orders", json={"customerName": "X", "items": []})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "items"

    items = [{"productId": p.id, "quantity": 1}] * 51
    r = client.post("/api/orders", json={"customerName": "X", "items": items})
    assert r.status_code == 400


def test_list_orders_newest_first_with_totals(client, make_product):
    p = make_product("LIST-1", price_cents=150, stock=20)
    for name, qty in (("First", 1), ("Second", 4)):
        r = client.post(
            "/api/orders",
            json={"customerName": name, "items": [{"productId": p.id, "quantity": qty}]},
        )
        assert r.status_code == 201

    body = client.get("/api/orders").json()
    assert body["total"] == 2
    assert [o["customerName"] for o in body["items"]] == ["Second", "First"]
    assert body["items"][0]["total"] == 6.0
    assert body["items"][0]["items"][0]["lineTotal"] == 6.0


def test_get_unknown_order_is_404(client):
    r = client.get("/api/orders/12345")
    assert r.status_code == 404


def test_get_order_with_bad_id_is_400(client):
    r = client.get("/api/orders/abc")
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "order_id"


def test_storage_failure_is_generic_500_and_rolls_back(client, db, make_product, monkeypatch):
    p = make_product("FAIL-1", price_cents=300, stock=5)

    def broken_decrement(self, product_id, qty):
        raise OperationalError("UPDATE products", {}, Exception("disk I/O error"))

    monkeypatch.setattr(ProductRepository, "decrement_stock", broken_decrement)

    r = client.post(
        "/api/orders",
        json={"customerName": "Frank", "items": [{"productId": p.id, "quantity": 2}]},
    )
    assert r.status_code == 500
    assert r.json() == {"detail": "Failed to create order"}
    assert "disk" not in r.text
    assert "UPDATE" not in r.text

    db.expire_all()
    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0
    assert _stock(db, p.id) == 5


def test_customer_name_and_notes_length_limits(client, make_product):
    p = make_product("LEN-1")
    item = [{"productId": p.id, "quantity": 1}]

    r = client.post("/api/orders", json={"customerName": "x" * 101, "items": item})
    assert r.status_code == 400
    assert "customerName" in {e["field"] for e in r.json()["errors"]}

    r = client.post("/api/orders", json={"customerName": "Gina", "notes": "n" * 501, "items": item})
    assert r.status_code == 400
    assert "notes" in {e["field"] for e in r.json()["errors"]}

    r = client.post("/api/orders", json={"customerName": "x" * 100, "notes": "n" * 500, "items": item})
    assert r.status_code == 201


def test_item_numbers_must_be_json_integers(client, db, make_product):
    p = make_product("STRICT-1", stock=10)
    for bad in (
        {"productId": str(p.id), "quantity": 1},
        {"productId": p.id, "quantity": "3"},
        {"productId": p.id, "quantity": 3.0},
    ):
        r = client.post("/api/orders", json={"customerName": "Hal", "items": [bad]})
        assert r.status_code == 400, bad
    assert db.query(Order).count() == 0
