from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TaskStatus = Literal["todo", "in-progress", "review", "completed"]
ProjectStatus = Literal["planning", "active", "completed", "cancelled"]
Priority = Literal["low", "medium", "high", "critical"]
SortOption = Literal["name", "price-low", "price-high", "rating"]


class ShippingMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    OVERNIGHT = "overnight"


class SourceEntity(BaseModel):
    """Caller-owned input. Frozen so that derivations cannot modify it; unknown keys are rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class Item(SourceEntity):
    id: str
    name: str = ""
    price: Decimal = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    weight: Decimal = Field(default=Decimal("0"), ge=0)
    category: str = ""
    tags: tuple[str, ...] = ()
    fragile: bool = False
    special_handling: bool = False
    age_restricted: bool = False
    available: bool = True
    taxable: bool = True


class Task(SourceEntity):
    id: str
    title: str = ""
    project_id: str | None = None
    assigned_to: str | None = None
    status: TaskStatus = "todo"
    priority: Priority = "medium"
    due_date: datetime | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None
    estimated_hours: Decimal | None = Field(default=None, ge=0)
    actual_hours: Decimal | None = Field(default=None, ge=0)

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"


class Project(SourceEntity):
    id: str
    name: str = ""
    status: ProjectStatus = "planning"
    priority: Priority = "medium"
    due_date: datetime | None = None


class User(SourceEntity):
    id: str
    name: str = ""
    last_active: datetime | None = None


class Product(SourceEntity):
    id: str
    name: str
    category: str = ""
    brand: str = ""
    price: Decimal = Field(ge=0)
    rating: float = Field(default=0.0, ge=0)
    in_stock: bool = True


# ---------------------------------------------------------------------------
# derived bundles
# ---------------------------------------------------------------------------


class ShippingOption(BaseModel):
    method: ShippingMethod
    label: str
    available: bool
    cost: Decimal


class CartSummary(BaseModel):
    item_count: int = 0
    unique_item_count: int = 0
    subtotal: Decimal = Decimal("0")
    total_weight: Decimal = Decimal("0")
    average_item_price: Decimal = Decimal("0")
    most_expensive_item: Item | None = None
    least_expensive_item: Item | None = None
    categories: list[str] = Field(default_factory=list)

    has_fragile: bool = False
    requires_special_handling: bool = False
    has_age_restricted: bool = False
    has_unavailable: bool = False
    is_over_weight_limit: bool = False

    coupon_code: str = ""
    discount_amount: Decimal = Decimal("0")
    discount_percentage: Decimal = Decimal("0")

    shipping_method: ShippingMethod = ShippingMethod.STANDARD
    shipping_cost: Decimal = Decimal("0")
    final_shipping_cost: Decimal = Decimal("0")
    estimated_delivery: str = ""
    can_use_express_shipping: bool = True
    can_use_overnight_shipping: bool = True
    available_shipping_methods: list[ShippingOption] = Field(default_factory=list)
    free_shipping_eligible: bool = False

    taxable_amount: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    final_total: Decimal = Decimal("0")

    is_empty: bool = True


class ProjectStatistics(BaseModel):
    project_id: str
    name: str = ""
    status: ProjectStatus
    task_count: int = 0
    completed_count: int = 0
    progress: float = 0.0
    estimated_hours: Decimal = Decimal("0")
    actual_hours: Decimal = Decimal("0")
    assigned_user_ids: list[str] = Field(default_factory=list)
    is_overdue: bool = False


class UserStatistics(BaseModel):
    user_id: str
    name: str = ""
    assigned_task_count: int = 0
    completed_count: int = 0
    completion_rate: float = 0.0
    overdue_count: int = 0
    workload: int = 0
    project_ids: list[str] = Field(default_factory=list)


class ProjectRollup(BaseModel):
    total: int = 0
    active: int = 0
    completed: int = 0
    overdue: int = 0
    completion_rate: float = 0.0


class TaskRollup(BaseModel):
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    overdue: int = 0
    completion_rate: float = 0.0


class UserRollup(BaseModel):
    total: int = 0
    active: int = 0


class AnalyticsBundle(BaseModel):
    projects: list[ProjectStatistics] = Field(default_factory=list)
    users: list[UserStatistics] = Field(default_factory=list)
    project_totals: ProjectRollup = Field(default_factory=ProjectRollup)
    task_totals: TaskRollup = Field(default_factory=TaskRollup)
    user_totals: UserRollup = Field(default_factory=UserRollup)


class ActivityFeed(BaseModel):
    recent_tasks: list[Task] = Field(default_factory=list)
    upcoming_deadlines: list[Task] = Field(default_factory=list)


class CatalogQuery(BaseModel):
    category: str | None = None
    brand: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    sort_by: SortOption = "name"
    in_stock_only: bool = False


class PriceRange(BaseModel):
    min: Decimal
    max: Decimal


class CatalogView(BaseModel):
    products: list[Product] = Field(default_factory=list)
    result_count: int = 0
    categories: list[str] = Field(default_factory=list)
    brands: list[str] = Field(default_factory=list)
    price_range: PriceRange
    average_price: Decimal = Decimal("0")
