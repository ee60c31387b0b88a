"""Rule constants used by the derivation engine, loaded from YAML."""

from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
DEFAULT_RULES_PATH = CONFIG_DIR / "rules.yaml"


class Coupon(BaseModel):
    kind: Literal["percent", "flat"]
    value: Decimal = Field(ge=0)


class ShippingRate(BaseModel):
    label: str
    base: Decimal = Field(ge=0)
    heavy: Decimal = Field(ge=0)
    delivery: str = ""


def _default_coupons() -> dict[str, Coupon]:
    return {
        "SAVE10": Coupon(kind="percent", value=Decimal("10")),
        "SAVE20": Coupon(kind="percent", value=Decimal("20")),
        "FLAT50": Coupon(kind="flat", value=Decimal("50")),
    }


def _default_rates() -> dict[str, ShippingRate]:
    return {
        "standard": ShippingRate(label="Standard", base=Decimal("10"), heavy=Decimal("15"), delivery="5-7 business days"),
        "express": ShippingRate(label="Express", base=Decimal("20"), heavy=Decimal("25"), delivery="2-3 business days"),
        "overnight": ShippingRate(label="Overnight", base=Decimal("35"), heavy=Decimal("40"), delivery="1 business day"),
    }


class ShippingRules(BaseModel):
    rates: dict[str, ShippingRate] = Field(default_factory=_default_rates)
    heavy_threshold: Decimal = Decimal("10")
    express_weight_cap: Decimal = Decimal("30")
    overnight_weight_cap: Decimal = Decimal("20")


class EngineSettings(BaseModel):
    coupons: dict[str, Coupon] = Field(default_factory=_default_coupons)
    shipping: ShippingRules = Field(default_factory=ShippingRules)
    free_shipping_threshold: Decimal = Decimal("100")
    tax_rate: Decimal = Decimal("0.08")
    weight_limit: Decimal = Decimal("50")
    active_user_window_days: int = Field(default=7, ge=0)
    activity_window_days: int = Field(default=7, ge=0)
    recent_task_limit: int = Field(default=10, ge=0)


def load_settings(path: Path | str | None = None) -> EngineSettings:
    """Read rule constants from ``path`` (or ``ROLLUP_RULES_PATH``).

    A missing file falls back to the built-in defaults, mirroring how the
    rules behaved before they were made configurable.
    """

    if path is None:
        path = os.getenv("ROLLUP_RULES_PATH") or DEFAULT_RULES_PATH
    path = Path(path)
    if not path.exists():
        return EngineSettings()
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    return EngineSettings.model_validate(data)


_settings: EngineSettings | None = None


def get_settings() -> EngineSettings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Utility used in tests to drop the cached settings."""

    global _settings
    _settings = None
