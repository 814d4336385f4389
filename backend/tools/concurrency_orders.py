"""
Fire concurrent order requests at a running server and check that stock
is never oversold.

    python tools/concurrency_orders.py --product-id 1 --qty 1 --workers 8
"""
import argparse
import concurrent.futures
import os

import requests

BASE = os.environ.get("STOCKDESK_BASE", "http://127.0.0.1:8000")


def order_task(i, product_id, qty):
    payload = {
        "customerName": f"load-test-{i}",
        "items": [{"productId": product_id, "quantity": qty}],
    }
    try:
        r = requests.post(f"{BASE}/api/orders", json=payload, timeout=20)
        return (i, r.status_code, r.text)
    except requests.RequestException as e:
        return (i, "ERR", str(e))


def product_stock(product_id):
    r = requests.get(f"{BASE}/api/products/{product_id}", timeout=10)
    r.raise_for_status()
    return r.json()["stock"]


def run_order_concurrent(workers, product_id, qty):
    before = product_stock(product_id)
    print(f"Running order test: workers={workers}, product_id={product_id}, qty={qty}, stock={before}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(order_task, i, product_id, qty) for i in range(workers)]
        results = [f.result() for f in futures]
    for r in results:
        print(r)
    created = sum(1 for r in results if r[1] == 201)
    after = product_stock(product_id)
    print(f"Orders created: {created}, stock before={before} after={after}")
    if after != before - created * qty or after < 0:
        print("MISMATCH: stock does not match the number of created orders")
        return 1
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Concurrent order creation smoke test.")
    parser.add_argument("--product-id", type=int, required=True)
    parser.add_argument("--qty", type=int, default=1)
    parser.add_argument("--workers", type=int, default=8)
    args = parser.parse_args()
    raise SystemExit(run_order_concurrent(args.workers, args.product_id, args.qty))
