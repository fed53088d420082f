"""Draft engine value models"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field

from libs.money import multiply_money
from .sources import BillableSource, SourceKind


class BillingMode(str, Enum):
    """Which kind of billable source a draft run works on"""
    RECURRING = "recurring"
    EVENT = "event"
    HUB = "hub"


class PriceQuote(BaseModel):
    """Base (quantity, unit_price) pair produced by the pricing resolver"""

    quantity: Decimal = Field(..., ge=0)
    unit_price: Decimal = Field(..., ge=0)

    class Config:
        frozen = True

    @property
    def final_amount(self) -> Decimal:
        return multiply_money(self.quantity, self.unit_price)


class AppliedPrice(PriceQuote):
    """Quote after overrides; is_overridden only reflects explicit per-item edits"""

    is_overridden: bool = False


class ItemOverride(BaseModel):
    """Explicit per-item override; either field may be left unset"""

    quantity: Optional[Decimal] = Field(default=None, ge=0)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)

    @property
    def is_empty(self) -> bool:
        return self.quantity is None and self.unit_price is None


class PricedItem(BaseModel):
    """A billable source with its final quantity, unit price and amount"""

    item_id: str
    kind: SourceKind
    source: Optional[BillableSource] = Field(default=None, exclude=True)
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    service_code: Optional[str] = None
    quantity: Decimal = Field(..., ge=0)
    unit_price: Decimal = Field(..., ge=0)
    final_amount: Decimal = Field(..., ge=0)
    description: str
    is_overridden: bool = False

    class Config:
        frozen = True

    @property
    def is_linked(self) -> bool:
        return self.customer_id is not None

    @property
    def source_id(self) -> int:
        """Record id of the underlying enrollment, event order or hub booking"""
        return int(self.item_id.split(":", 1)[1])


class CustomerDraftGroup(BaseModel):
    """All eligible items of one customer, with the selected subset totalled"""

    customer_id: Optional[int]
    customer_name: str
    items: List[PricedItem]
    selected_item_ids: List[str]
    total_amount: Decimal
    has_existing_invoice_for_period: bool = False

    @property
    def selected_items(self) -> List[PricedItem]:
        selected = set(self.selected_item_ids)
        return [item for item in self.items if item.item_id in selected]

    @property
    def all_selected(self) -> bool:
        return bool(self.items) and len(self.selected_item_ids) == len(self.items)

    @property
    def some_selected(self) -> bool:
        return bool(self.selected_item_ids)


class ExistingInvoice(BaseModel):
    """Invoice already on file, as seen by the duplicate detector"""

    customer_id: int
    period_start: Optional[date] = None
    period_end: Optional[date] = None


class CustomerFailure(BaseModel):
    customer_id: int
    customer_name: Optional[str] = None
    reason: str


class CreatedInvoice(BaseModel):
    invoice_id: int
    invoice_number: str
    customer_id: int
    total_amount: Decimal
    line_count: int


class BatchStatus(str, Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"
    EMPTY = "empty"


class BatchResult(BaseModel):
    """
    Outcome of one batch submission

    succeeded and failed are in submission order. unlinked lists the item ids
    that were never attempted because they have no owning customer.
    error is only set when a recurring (all-or-nothing) batch failed.
    """

    mode: BillingMode
    succeeded: List[int] = Field(default_factory=list)
    failed: List[CustomerFailure] = Field(default_factory=list)
    unlinked: List[str] = Field(default_factory=list)
    invoices: List[CreatedInvoice] = Field(default_factory=list)
    error: Optional[str] = None

    @computed_field
    @property
    def status(self) -> BatchStatus:
        if self.succeeded and self.failed:
            return BatchStatus.PARTIAL
        if self.succeeded:
            return BatchStatus.SUCCESS
        if self.failed or self.error:
            return BatchStatus.FAILED
        return BatchStatus.EMPTY

    @computed_field
    @property
    def message(self) -> str:
        status = self.status
        if status == BatchStatus.PARTIAL:
            return f"{len(self.succeeded)} succeeded, {len(self.failed)} failed"
        if status == BatchStatus.SUCCESS:
            noun = "invoice" if len(self.invoices) == 1 else "invoices"
            return f"Created {len(self.invoices)} {noun}"
        if status == BatchStatus.FAILED:
            if self.error:
                return f"Failed to create any invoices: {self.error}"
            reasons = "; ".join(
                f"{failure.customer_name or failure.customer_id}: {failure.reason}"
                for failure in self.failed
            )
            return f"Failed to create any invoices: {reasons}"
        if self.unlinked:
            return f"Nothing to invoice; {len(self.unlinked)} unlinked items need a customer first"
        return "Nothing to invoice"

    @computed_field
    @property
    def unlinked_count(self) -> int:
        return len(self.unlinked)

    @property
    def is_complete(self) -> bool:
        return len(self.succeeded) > 0
