"""Invoice draft-generation engine"""
from .errors import DraftValidationError
from .sources import (
    BillableSource,
    EventOrderSource,
    HubSessionSource,
    RecurringEnrollment,
    ServiceDefinition,
    SourceKind,
)
from .models import (
    AppliedPrice,
    BatchResult,
    BatchStatus,
    BillingMode,
    CreatedInvoice,
    CustomerDraftGroup,
    CustomerFailure,
    ExistingInvoice,
    ItemOverride,
    PriceQuote,
    PricedItem,
)
from .period import BillingPeriod, month_bounds, next_monday, week_bounds
from .pricing import DEFAULT_HUB_SESSION_RATE, resolve
from .overrides import (
    apply_override,
    implied_unit_price,
    override_from_amount,
    price_source,
    price_sources,
)
from .descriptions import build_description
from .duplicates import PeriodMatchPolicy, exclude_consumed, mark_duplicates
from .grouping import GroupSort, default_selection, group
from .registration_fees import (
    PendingRegistrationFee,
    RegistrationFeeLine,
    elective_enrollments,
    match_registration_fees,
)
from .selection import SelectionTracker

__all__ = [
    "DraftValidationError",
    "BillableSource",
    "EventOrderSource",
    "HubSessionSource",
    "RecurringEnrollment",
    "ServiceDefinition",
    "SourceKind",
    "AppliedPrice",
    "BatchResult",
    "BatchStatus",
    "BillingMode",
    "CreatedInvoice",
    "CustomerDraftGroup",
    "CustomerFailure",
    "ExistingInvoice",
    "ItemOverride",
    "PriceQuote",
    "PricedItem",
    "BillingPeriod",
    "month_bounds",
    "next_monday",
    "week_bounds",
    "DEFAULT_HUB_SESSION_RATE",
    "resolve",
    "apply_override",
    "implied_unit_price",
    "override_from_amount",
    "price_source",
    "price_sources",
    "build_description",
    "PeriodMatchPolicy",
    "exclude_consumed",
    "mark_duplicates",
    "GroupSort",
    "default_selection",
    "group",
    "SelectionTracker",
    "PendingRegistrationFee",
    "RegistrationFeeLine",
    "elective_enrollments",
    "match_registration_fees",
]
