"""PreviewDrafts Use Case

Builds per-customer invoice drafts for one billing mode without writing
anything.
"""

import logging
from typing import Dict, List, Set

from libs.money import sum_money
from libs.result import Result, Return, Error
from src.app.drafting import (
    BillableSource,
    BillingMode,
    DraftValidationError,
    ItemOverride,
    PricedItem,
    default_selection,
    group,
    mark_duplicates,
    override_from_amount,
    price_sources,
)
from src.app.repositories.billable_source_repository import BillableSourceRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from .dtos import DraftPreviewDTO, PreviewDraftsCommandDTO

logger = logging.getLogger(__name__)


class PreviewDrafts:
    """
    Use Case: Preview invoice drafts for a billing mode

    Business Rules:
    1. Sources are read fresh on every call
    2. Recurring mode needs a billing period; customers already invoiced
       for it are flagged and left out of the default selection
    3. Event and hub modes bill discrete bookings; already-invoiced orders
       and bookings are not pending and never appear
    4. Unlinked items are shown but never selected by default

    Flow:
    1. Fetch billable sources for the mode and filters
    2. Fetch existing invoices for the period (recurring only)
    3. Resolve prices and apply overrides
    4. Apply the selection and group by customer
    """

    def __init__(
        self,
        source_repo: BillableSourceRepository,
        invoice_repo: InvoiceRepository,
    ):
        self.source_repo = source_repo
        self.invoice_repo = invoice_repo

    async def execute(self, command: PreviewDraftsCommandDTO) -> Result[DraftPreviewDTO]:
        """
        Execute draft preview

        Args:
            command: PreviewDraftsCommandDTO with mode, period, filters and overrides

        Returns:
            Result[DraftPreviewDTO]: Success with groups and selection or error
        """
        try:
            return Return.ok(await self.build(command))
        except DraftValidationError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=str(e)))
        except Exception as e:
            return Return.err(
                Error(
                    code="LOAD_SOURCES_FAILED",
                    message="Failed to load billable sources",
                    reason=str(e),
                )
            )

    async def build(self, command: PreviewDraftsCommandDTO) -> DraftPreviewDTO:
        """
        Build the preview, raising instead of returning a Result

        Raises:
            DraftValidationError: missing period or invalid override
        """
        if command.mode == BillingMode.RECURRING and command.period is None:
            raise DraftValidationError("Recurring invoices need a billing period", code="MISSING_PERIOD")

        # Step 1: Fetch billable sources
        sources = await self._load_sources(command)

        # Step 2: Flag customers already invoiced for the period
        duplicates: Set[int] = set()
        if command.mode == BillingMode.RECURRING:
            period = command.period
            existing = await self.invoice_repo.list_invoices_for_period(period.start, period.end)
            duplicates = mark_duplicates(
                (source.customer_id for source in sources),
                existing,
                period,
                command.match_policy,
            )

        # Step 3: Price
        items = self._price(sources, command)

        # Step 4: Select and group
        if command.selected_item_ids is None:
            selected = default_selection(items, duplicates)
        else:
            known = {item.item_id for item in items}
            selected = set(command.selected_item_ids) & known

        groups = group(items, selected, duplicates, command.sort_by, command.descending)
        selected_items = [item for g in groups for item in g.selected_items]

        logger.debug(
            f"Preview {command.mode.value}: {len(items)} item(s), "
            f"{len(groups)} customer(s), {len(duplicates)} duplicate(s)"
        )

        return DraftPreviewDTO(
            mode=command.mode,
            period=command.period if command.mode == BillingMode.RECURRING else None,
            groups=groups,
            selected_item_ids=[item.item_id for item in selected_items],
            duplicate_customer_ids=sorted(duplicates),
            unlinked_count=sum(1 for item in items if not item.is_linked),
            selected_count=len(selected_items),
            selected_total=sum_money(item.final_amount for item in selected_items),
        )

    async def _load_sources(self, command: PreviewDraftsCommandDTO) -> List[BillableSource]:
        if command.mode == BillingMode.RECURRING:
            return await self.source_repo.list_billable_enrollments(
                cadence=command.cadence, service_code=command.service_code
            )
        if command.mode == BillingMode.EVENT:
            return await self.source_repo.list_event_orders_pending()
        return await self.source_repo.list_hub_sessions_pending()

    @staticmethod
    def _price(sources: List[BillableSource], command: PreviewDraftsCommandDTO) -> List[PricedItem]:
        items = price_sources(sources, command.overrides, command.global_quantities)
        if not command.amount_overrides:
            return items

        # Typed totals keep the item's current quantity and imply a unit price
        overrides: Dict[str, ItemOverride] = dict(command.overrides)
        for item in items:
            amount = command.amount_overrides.get(item.item_id)
            if amount is not None:
                overrides[item.item_id] = override_from_amount(amount, item.quantity)

        return price_sources(sources, overrides, command.global_quantities)
