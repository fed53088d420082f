"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field

from src.app.drafting import (
    BillingMode,
    BillingPeriod,
    CustomerDraftGroup,
    GroupSort,
    ItemOverride,
    PeriodMatchPolicy,
)


class PreviewDraftsCommandDTO(BaseModel):
    """
    Command DTO for previewing invoice drafts

    Used as input to PreviewDrafts (and, extended, GenerateDrafts).
    """

    mode: BillingMode = Field(
        ...,
        description="Billing mode: recurring, event or hub"
    )

    period: Optional[BillingPeriod] = Field(
        default=None,
        description="Billing period (required for recurring mode, ignored otherwise)"
    )

    cadence: Optional[Literal["weekly", "monthly"]] = Field(
        default=None,
        description="Recurring mode only: keep weekly-billed or monthly-billed services"
    )

    service_code: Optional[str] = Field(
        default=None,
        description="Recurring mode only: keep one service"
    )

    overrides: Dict[str, ItemOverride] = Field(
        default_factory=dict,
        description="Per-item quantity/unit price overrides keyed by item_id"
    )

    amount_overrides: Dict[str, str] = Field(
        default_factory=dict,
        description="Per-item typed line totals keyed by item_id (e.g. '$50.00')"
    )

    global_quantities: Dict[str, Decimal] = Field(
        default_factory=dict,
        description="Service-wide quantity keyed by service code (e.g. bill 4 weeks)"
    )

    selected_item_ids: Optional[List[str]] = Field(
        default=None,
        description="Explicit selection; omit to use the default selection"
    )

    sort_by: GroupSort = Field(
        default=GroupSort.NAME,
        description="Group ordering: name or total"
    )

    descending: bool = Field(
        default=False,
        description="Reverse the group ordering"
    )

    match_policy: PeriodMatchPolicy = Field(
        default=PeriodMatchPolicy.EXACT,
        description="How an existing invoice's period must match to count as a duplicate"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "mode": "recurring",
                "period": {
                    "start": "2025-01-06",
                    "end": "2025-01-10",
                    "due_date": "2025-01-13",
                    "note": "For the week of 01/06/2025 - 01/10/2025",
                },
                "cadence": "weekly",
                "overrides": {"enrollment:12": {"quantity": "3"}},
                "global_quantities": {"eaton_online": "2"},
            }
        }


class DraftPreviewDTO(BaseModel):
    """
    Response DTO for a draft preview

    groups holds every eligible item; selected_item_ids is the selection
    that was applied to compute the group totals.
    """

    mode: BillingMode
    period: Optional[BillingPeriod] = None
    groups: List[CustomerDraftGroup] = Field(default_factory=list)
    selected_item_ids: List[str] = Field(default_factory=list)
    duplicate_customer_ids: List[int] = Field(default_factory=list)
    unlinked_count: int = 0
    selected_count: int = 0
    selected_total: Decimal = Decimal("0.00")


class GenerateDraftsCommandDTO(PreviewDraftsCommandDTO):
    """
    Command DTO for creating invoices from the current selection

    due_date applies to event and hub invoices; recurring invoices use
    the period's due date.
    """

    due_date: Optional[date] = Field(
        default=None,
        description="Due date for event/hub invoices (defaults to next Monday)"
    )


class LinkSourcesCommandDTO(BaseModel):
    """Command DTO for linking unlinked event orders / hub bookings to a family"""

    customer_id: int = Field(..., description="Family to link to")

    event_order_ids: List[int] = Field(
        default_factory=list,
        description="Event orders to link"
    )

    hub_booking_ids: List[int] = Field(
        default_factory=list,
        description="Hub bookings to link"
    )


class LinkSourcesResponseDTO(BaseModel):
    customer_id: int
    linked_event_orders: int = 0
    linked_hub_bookings: int = 0
