from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from rollup.core.ordering import unique_in_order
from rollup.core.schema import CatalogQuery, CatalogView, PriceRange, Product

DEFAULT_PRICE_RANGE = PriceRange(min=Decimal("0"), max=Decimal("1000"))


def _matches(product: Product, query: CatalogQuery) -> bool:
    if query.in_stock_only and not product.in_stock:
        return False
    if query.category and product.category != query.category:
        return False
    if query.brand and product.brand != query.brand:
        return False
    if query.min_price is not None and product.price < query.min_price:
        return False
    if query.max_price is not None and product.price > query.max_price:
        return False
    return True


def _sorted(products: list[Product], sort_by: str) -> list[Product]:
    if sort_by == "price-low":
        return sorted(products, key=lambda p: p.price)
    if sort_by == "price-high":
        return sorted(products, key=lambda p: p.price, reverse=True)
    if sort_by == "rating":
        return sorted(products, key=lambda p: p.rating, reverse=True)
    return sorted(products, key=lambda p: p.name.casefold())


def compute_catalog_view(products: Sequence[Product], query: CatalogQuery | None = None) -> CatalogView:
    """Filter and sort ``products``; facets and price stats cover the full input."""

    query = query or CatalogQuery()
    selected = _sorted([p for p in products if _matches(p, query)], query.sort_by)

    if products:
        prices = [p.price for p in products]
        price_range = PriceRange(min=min(prices), max=max(prices))
        average = sum(prices, Decimal("0")) / len(prices)
    else:
        price_range = DEFAULT_PRICE_RANGE
        average = Decimal("0")

    return CatalogView(
        products=selected,
        result_count=len(selected),
        categories=unique_in_order(p.category for p in products),
        brands=unique_in_order(p.brand for p in products),
        price_range=price_range,
        average_price=average,
    )
