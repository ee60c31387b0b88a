from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from rollup.core.csvio import write_records_to_csv
from rollup.core.schema import Item

logger = logging.getLogger(__name__)

CART_COLUMNS = ["id", "name", "category", "price", "quantity", "line_total", "weight", "taxable"]


def export_cart_lines(path: Path, items: Iterable[Item]) -> Path:
    records = []
    for item in items:
        records.append({
            "id": item.id,
            "name": item.name,
            "category": item.category,
            "price": item.price,
            "quantity": item.quantity,
            "line_total": item.price * item.quantity,
            "weight": item.weight * item.quantity,
            "taxable": item.taxable,
        })
    logger.info("exporting %d cart lines to %s", len(records), path)
    return write_records_to_csv(path, records, CART_COLUMNS)
