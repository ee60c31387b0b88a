from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import FileResponse
from pydantic import BaseModel, ValidationError

from rollup.application import get_snapshot_service
from rollup.core.exports import export_path
from rollup.core.schema import Item, ShippingMethod
from rollup.exporters.cart_csv import export_cart_lines

router = APIRouter(prefix="/carts", tags=["carts"])


def _items_payload(cart_id: str, items: list[Item]) -> dict:
    return {"cart_id": cart_id, "items": [item.model_dump(mode="json") for item in items]}


@router.get("")
async def list_carts() -> dict:
    service = get_snapshot_service()
    return {"items": service.list_carts()}


@router.get("/{cart_id}/items")
async def list_items(cart_id: str) -> dict:
    service = get_snapshot_service()
    return _items_payload(cart_id, service.list_items(cart_id))


@router.post("/{cart_id}/items")
async def add_item(cart_id: str, payload: dict) -> dict:
    try:
        item = Item.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
    service = get_snapshot_service()
    return _items_payload(cart_id, service.add_item(cart_id, item))


class QuantityChange(BaseModel):
    quantity: int


@router.patch("/{cart_id}/items/{item_id}")
async def update_quantity(cart_id: str, item_id: str, payload: dict) -> dict:
    try:
        change = QuantityChange.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
    service = get_snapshot_service()
    try:
        items = service.update_quantity(cart_id, item_id, change.quantity)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="item not found") from exc
    return _items_payload(cart_id, items)


@router.delete("/{cart_id}/items/{item_id}")
async def remove_item(cart_id: str, item_id: str) -> dict:
    service = get_snapshot_service()
    try:
        items = service.remove_item(cart_id, item_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="item not found") from exc
    return _items_payload(cart_id, items)


@router.delete("/{cart_id}/items")
async def clear_cart(cart_id: str) -> dict:
    service = get_snapshot_service()
    service.clear_cart(cart_id)
    return _items_payload(cart_id, [])


@router.get("/{cart_id}/summary")
async def get_summary(
    cart_id: str,
    coupon: str = Query(default=""),
    shipping: ShippingMethod = Query(default=ShippingMethod.STANDARD),
) -> dict:
    service = get_snapshot_service()
    summary = service.cart_summary(cart_id, coupon, shipping)
    return summary.model_dump(mode="json")


@router.get("/{cart_id}/export")
async def export_cart(cart_id: str) -> FileResponse:
    service = get_snapshot_service()
    path = export_cart_lines(export_path("carts", cart_id, "lines"), service.list_items(cart_id))
    return FileResponse(path, media_type="text/csv", filename=path.name)
