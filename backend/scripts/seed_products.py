#!/usr/bin/env python3
"""
Seed products from a JSON file (scripts/sample_products.json by default).

Accepts either a list of product entries or an object with an "items" list.
Each entry needs a sku and name; price may be given as "price" (decimal) or
"price_cents" (integer). Existing SKUs are updated in place.

Usage:
    python scripts/seed_products.py --file scripts/sample_products.json
"""
import argparse
import json
import os
import sys
from decimal import Decimal, InvalidOperation

from stockdesk.db import SessionLocal, init_db
from stockdesk.repositories.product_repo import ProductRepository
from stockdesk.utils.logging import get_logger

log = get_logger("seed")

DEFAULT_SOURCE = os.path.join(os.path.dirname(__file__), "sample_products.json")


def _price_cents(entry) -> int:
    if entry.get("price_cents") is not None:
        return int(entry["price_cents"])
    try:
        return int(Decimal(str(entry.get("price", 0))) * 100)
    except InvalidOperation:
        raise ValueError(f"Invalid price for sku={entry.get('sku')!r}: {entry.get('price')!r}")


def _normalize_entry(entry):
    """Return a dict with keys: sku, name, price_cents, stock"""
    return {
        "sku": (entry.get("sku") or "").strip(),
        "name": (entry.get("name") or "").strip(),
        "price_cents": _price_cents(entry),
        "stock": int(entry.get("stock", 0) or 0),
    }


def load_entries(path: str):
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("items", [])
    return [_normalize_entry(e) for e in data]


def seed_from_file(path: str) -> int:
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    entries = load_entries(path)

    init_db()
    db = SessionLocal()
    repo = ProductRepository(db)
    seeded = 0
    try:
        for entry in entries:
            if not entry["sku"] or not entry["name"]:
                log.warning("Skipping entry without sku/name: %r", entry)
                continue
            if entry["price_cents"] < 0 or entry["stock"] < 0:
                log.warning("Skipping %s: negative price or stock", entry["sku"])
                continue
            repo.create_or_update(**entry)
            seeded += 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
    log.info("Seeded %d products from %s", seeded, path)
    return seeded


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed products from a JSON file.")
    parser.add_argument("--file", "-f", default=DEFAULT_SOURCE, help="Path to a JSON list of products")
    args = parser.parse_args()
    if not os.path.exists(args.file):
        print("File not found:", args.file)
        sys.exit(1)
    seed_from_file(args.file)
