from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from rollup.core.catalog import compute_catalog_view
from rollup.core.schema import CatalogQuery, Product

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.post("/view")
async def catalog_view(payload: dict) -> dict:
    """Derive a filtered, sorted product listing from the submitted catalog."""
    raw_products = payload.get("products") or []
    if not isinstance(raw_products, list):
        raise HTTPException(status_code=400, detail="products must be a list")
    try:
        products = [Product.model_validate(row) for row in raw_products]
        query = CatalogQuery.model_validate(payload.get("query") or {})
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
    return compute_catalog_view(products, query).model_dump(mode="json")
