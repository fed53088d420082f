"""Request schemas for Invoice Drafts API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from src.app.drafting import (
    BillingMode,
    BillingPeriod,
    GroupSort,
    ItemOverride,
    PeriodMatchPolicy,
)


class DraftRequestSchema(BaseModel):
    """
    Request schema for previewing and generating invoice drafts

    Used for POST /billing/drafts/preview and /billing/drafts/generate.

    For recurring runs the period is either given explicitly
    (period_start + period_end) or derived from cadence: the Monday-Friday
    week, or the calendar month, containing period_start (default today).
    """

    mode: BillingMode = Field(
        ...,
        description="Billing mode: recurring, event or hub"
    )

    cadence: Optional[Literal["weekly", "monthly"]] = Field(
        default=None,
        description="Recurring mode: weekly or monthly services"
    )

    service_code: Optional[str] = Field(
        default=None,
        description="Recurring mode: restrict to one service code"
    )

    period_start: Optional[date] = Field(
        default=None,
        description="Billing period start (recurring mode)"
    )

    period_end: Optional[date] = Field(
        default=None,
        description="Billing period end (recurring mode)"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Invoice due date (defaults to the Monday after the period / today)"
    )

    note: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Invoice note (recurring mode; defaults to the period description)"
    )

    overrides: Dict[str, ItemOverride] = Field(
        default_factory=dict,
        description="Per-item quantity/unit_price overrides keyed by item_id"
    )

    amount_overrides: Dict[str, str] = Field(
        default_factory=dict,
        description="Per-item typed line totals keyed by item_id"
    )

    global_quantities: Dict[str, Decimal] = Field(
        default_factory=dict,
        description="Quantity applied to every item of a service code"
    )

    selected_item_ids: Optional[List[str]] = Field(
        default=None,
        description="Explicit selection; omit for the default selection"
    )

    sort_by: GroupSort = Field(default=GroupSort.NAME)
    descending: bool = Field(default=False)
    match_policy: PeriodMatchPolicy = Field(default=PeriodMatchPolicy.EXACT)

    @field_validator("global_quantities")
    @classmethod
    def validate_global_quantities(cls, v):
        """Quantities must be non-negative"""
        for code, quantity in v.items():
            if quantity < 0:
                raise ValueError(f"Quantity for {code} must not be negative")
        return v

    @model_validator(mode="after")
    def validate_period(self):
        if (self.period_start is None) != (self.period_end is None) and self.cadence is None:
            raise ValueError("period_start and period_end must be given together")
        if self.period_start and self.period_end and self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self

    def to_period(self) -> Optional[BillingPeriod]:
        """Billing period for recurring runs, None otherwise"""
        if self.mode != BillingMode.RECURRING:
            return None

        if self.period_start and self.period_end:
            period = BillingPeriod.for_range(self.period_start, self.period_end)
        elif self.cadence == "weekly":
            period = BillingPeriod.for_week(self.period_start or date.today())
        elif self.cadence == "monthly":
            period = BillingPeriod.for_month(self.period_start or date.today())
        else:
            return None

        updates = {}
        if self.due_date:
            updates["due_date"] = self.due_date
        if self.note:
            updates["note"] = self.note
        return period.model_copy(update=updates) if updates else period

    class Config:
        json_schema_extra = {
            "example": {
                "mode": "recurring",
                "cadence": "weekly",
                "period_start": "2025-01-06",
                "period_end": "2025-01-10",
                "overrides": {"enrollment:12": {"quantity": "3"}},
                "amount_overrides": {"enrollment:15": "$250.00"},
                "global_quantities": {"eaton_online": "2"},
            }
        }


class LinkSourcesRequestSchema(BaseModel):
    """
    Request schema for linking unlinked event orders / hub bookings

    Used for POST /billing/drafts/link endpoint.
    """

    customer_id: int = Field(..., gt=0, description="Family to link to")
    event_order_ids: List[int] = Field(default_factory=list)
    hub_booking_ids: List[int] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 42,
                "event_order_ids": [7, 9],
                "hub_booking_ids": [],
            }
        }
