from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from rollup.core.ordering import unique_in_order
from rollup.core.schema import CartSummary, Item, ShippingMethod, ShippingOption
from rollup.core.settings import EngineSettings, get_settings

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass
class AggregatedItems:
    item_count: int = 0
    subtotal: Decimal = ZERO
    total_weight: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    has_fragile: bool = False
    requires_special_handling: bool = False
    has_age_restricted: bool = False
    has_unavailable: bool = False


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _aggregate_items(items: Sequence[Item]) -> AggregatedItems:
    agg = AggregatedItems()
    for item in items:
        line_total = item.price * item.quantity
        agg.item_count += item.quantity
        agg.subtotal += line_total
        agg.total_weight += item.weight * item.quantity
        if item.taxable:
            agg.taxable_amount += line_total
        agg.has_fragile = agg.has_fragile or item.fragile
        agg.requires_special_handling = agg.requires_special_handling or item.special_handling
        agg.has_age_restricted = agg.has_age_restricted or item.age_restricted
        agg.has_unavailable = agg.has_unavailable or not item.available
    return agg


def _apply_coupon(code: str, subtotal: Decimal, settings: EngineSettings) -> tuple[Decimal, Decimal]:
    """Return ``(discount_amount, discount_percentage)`` for ``code``."""

    coupon = settings.coupons.get(code)
    if coupon is None:
        return ZERO, ZERO
    if coupon.kind == "percent":
        return _quantize(subtotal * coupon.value / HUNDRED), coupon.value
    return min(coupon.value, subtotal), ZERO


def _shipping_cost(method: ShippingMethod, total_weight: Decimal, settings: EngineSettings) -> Decimal:
    rate = settings.shipping.rates.get(method.value)
    if rate is None:
        return ZERO
    return rate.heavy if total_weight > settings.shipping.heavy_threshold else rate.base


def _method_gates(agg: AggregatedItems, settings: EngineSettings) -> dict[ShippingMethod, bool]:
    rules = settings.shipping
    return {
        ShippingMethod.STANDARD: True,
        ShippingMethod.EXPRESS: not agg.has_fragile and agg.total_weight <= rules.express_weight_cap,
        ShippingMethod.OVERNIGHT: (
            not agg.has_fragile
            and not agg.requires_special_handling
            and agg.total_weight <= rules.overnight_weight_cap
        ),
    }


def _shipping_options(
    agg: AggregatedItems, gates: dict[ShippingMethod, bool], settings: EngineSettings
) -> list[ShippingOption]:
    options: list[ShippingOption] = []
    for method in ShippingMethod:
        rate = settings.shipping.rates.get(method.value)
        label = rate.label if rate else method.value.title()
        options.append(
            ShippingOption(
                method=method,
                label=label,
                available=gates[method],
                cost=_shipping_cost(method, agg.total_weight, settings),
            )
        )
    return options


def compute_cart_summary(
    items: Sequence[Item],
    coupon_code: str = "",
    shipping_method: ShippingMethod | str = ShippingMethod.STANDARD,
    settings: EngineSettings | None = None,
) -> CartSummary:
    """Derive every cart figure from the current items, coupon and shipping method.

    The result is a pure function of the arguments: nothing is cached and no
    input is modified, so it is safe to call on every change. Unknown coupon
    codes simply yield no discount.
    """

    settings = settings or get_settings()
    method = ShippingMethod(shipping_method)
    code = (coupon_code or "").strip().upper()

    agg = _aggregate_items(items)
    gates = _method_gates(agg, settings)
    shipping_cost = _shipping_cost(method, agg.total_weight, settings)
    rate = settings.shipping.rates.get(method.value)

    if not items:
        return CartSummary(
            coupon_code=code,
            shipping_method=method,
            shipping_cost=ZERO,
            final_shipping_cost=ZERO,
            estimated_delivery=rate.delivery if rate else "",
            available_shipping_methods=_shipping_options(agg, gates, settings),
        )

    # max/min keep the first of equal elements, so ties resolve by input order
    most_expensive = max(items, key=lambda item: item.price)
    least_expensive = min(items, key=lambda item: item.price)

    discount, discount_pct = _apply_coupon(code, agg.subtotal, settings)
    free_shipping = agg.subtotal > settings.free_shipping_threshold
    final_shipping = ZERO if free_shipping else shipping_cost
    tax = _quantize(agg.taxable_amount * settings.tax_rate)
    average = _quantize(agg.subtotal / agg.item_count)
    total = _quantize(agg.subtotal - discount + tax + final_shipping)

    return CartSummary(
        item_count=agg.item_count,
        unique_item_count=len(items),
        subtotal=agg.subtotal,
        total_weight=agg.total_weight,
        average_item_price=average,
        most_expensive_item=most_expensive,
        least_expensive_item=least_expensive,
        categories=unique_in_order(item.category for item in items),
        has_fragile=agg.has_fragile,
        requires_special_handling=agg.requires_special_handling,
        has_age_restricted=agg.has_age_restricted,
        has_unavailable=agg.has_unavailable,
        is_over_weight_limit=agg.total_weight > settings.weight_limit,
        coupon_code=code,
        discount_amount=discount,
        discount_percentage=discount_pct,
        shipping_method=method,
        shipping_cost=shipping_cost,
        final_shipping_cost=final_shipping,
        estimated_delivery=rate.delivery if rate else "",
        can_use_express_shipping=gates[ShippingMethod.EXPRESS],
        can_use_overnight_shipping=gates[ShippingMethod.OVERNIGHT],
        available_shipping_methods=_shipping_options(agg, gates, settings),
        free_shipping_eligible=free_shipping,
        taxable_amount=agg.taxable_amount,
        tax=tax,
        final_total=total,
        is_empty=False,
    )
