#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
from pathlib import Path


ITEMS = [
    {"id": "kb-1", "name": "Mechanical Keyboard", "price": "89.99", "weight": "1.5", "category": "electronics"},
    {"id": "mug-1", "name": "Ceramic Mug", "price": "12.50", "weight": "0.4", "category": "kitchen", "fragile": True},
    {"id": "wine-1", "name": "Red Wine", "price": "24.00", "weight": "1.2", "category": "grocery", "age_restricted": True, "taxable": False},
]


def build_items(quantity: int) -> list[dict]:
    return [dict(item, quantity=quantity) for item in ITEMS]


def main() -> None:
    parser = argparse.ArgumentParser(description="Write a sample cart as JSON for POST /api/carts/{id}/items")
    parser.add_argument("--output", required=True, help="output file path (.json)")
    parser.add_argument("--quantity", type=int, default=1, help="quantity for every item")
    args = parser.parse_args()

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(build_items(args.quantity), indent=2), encoding="utf-8")

    print(f"sample cart written: {output}")


if __name__ == "__main__":
    main()
