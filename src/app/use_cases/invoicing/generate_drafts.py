"""GenerateDrafts Use Case

Creates draft invoices from the current selection and reports the outcome.
"""

import logging
from datetime import date
from typing import Awaitable, Callable, List, Optional, Sequence

from libs.result import Result, Return, Error
from src.app.drafting import (
    BatchResult,
    BillingMode,
    DraftValidationError,
    PricedItem,
    RegistrationFeeLine,
    elective_enrollments,
    match_registration_fees,
    next_monday,
)
from src.app.repositories.billable_source_repository import BillableSourceRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.event_publisher import EventPublisher, INVOICE_CREATION_EVENTS
from src.app.services.unit_of_work import UnitOfWork
from .batch_invoice_creator import BatchInvoiceCreator
from .dtos import GenerateDraftsCommandDTO
from .preview_drafts import PreviewDrafts

logger = logging.getLogger(__name__)

OnComplete = Callable[[BatchResult], Awaitable[None]]


class GenerateDrafts:
    """
    Use Case: Create draft invoices for the selected items of a billing mode

    Business Rules:
    1. Sources are re-read and re-priced at submit time; the submitted
       selection is applied to that fresh read
    2. An empty selection or a recurring run without a period is rejected
       before anything is written
    3. Per-customer and batch failures are reported in the BatchResult,
       never as an error Result
    4. Cache-invalidation events are published once any invoice was created
    5. on_complete runs only when at least one customer succeeded
    6. Monthly (or mixed-cadence) recurring runs fold each family's pending
       class registration fees into its invoice

    Flow:
    1. Rebuild the preview (fetch, detect duplicates, price, group)
    2. Validate the selection
    3. Look up class registration fees (recurring, not weekly)
    4. Submit the selected items to the BatchInvoiceCreator
    5. Publish invoices/dashboard/roster change events
    6. Invoke on_complete
    """

    def __init__(
        self,
        uow: UnitOfWork,
        source_repo: BillableSourceRepository,
        invoice_repo: InvoiceRepository,
        event_publisher: EventPublisher,
        creator: Optional[BatchInvoiceCreator] = None,
    ):
        self.uow = uow
        self.source_repo = source_repo
        self.preview = PreviewDrafts(source_repo, invoice_repo)
        self.event_publisher = event_publisher
        self.creator = creator or BatchInvoiceCreator(uow, invoice_repo)

    async def execute(
        self,
        command: GenerateDraftsCommandDTO,
        on_complete: Optional[OnComplete] = None,
    ) -> Result[BatchResult]:
        """
        Execute draft generation

        Args:
            command: GenerateDraftsCommandDTO with mode, period, overrides and selection
            on_complete: Awaited with the BatchResult when at least one invoice was created

        Returns:
            Result[BatchResult]: Success with the batch outcome (possibly partial
            or failed) or error for validation and load failures
        """
        # Step 1: Rebuild the preview from fresh data
        try:
            preview = await self.preview.build(command)
        except DraftValidationError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=str(e)))
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="LOAD_SOURCES_FAILED",
                    message="Failed to load billable sources",
                    reason=str(e),
                )
            )

        # Step 2: Validate the selection
        selected_items = [item for g in preview.groups for item in g.selected_items]
        if not selected_items:
            return Return.err(
                Error(
                    code="EMPTY_SELECTION",
                    message="Select at least one item to invoice",
                    reason=f"{command.mode.value} run with no selected items",
                )
            )

        if command.selected_item_ids is not None:
            stale = set(command.selected_item_ids) - set(preview.selected_item_ids)
            if stale:
                logger.warning(f"Ignoring {len(stale)} selected item(s) no longer eligible: {sorted(stale)}")

        flagged = sorted(
            {item.customer_id for item in selected_items} & set(preview.duplicate_customer_ids)
        )
        if flagged:
            logger.warning(f"Re-invoicing customers already invoiced for the period: {flagged}")

        # Step 3: Registration fees
        registration_fees: List[RegistrationFeeLine] = []
        if command.mode == BillingMode.RECURRING and command.cadence != "weekly":
            try:
                registration_fees = await self._registration_fees(selected_items)
            except Exception as e:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="LOAD_SOURCES_FAILED",
                        message="Failed to load class registration fees",
                        reason=str(e),
                    )
                )

        # Step 4: Submit
        if command.mode == BillingMode.RECURRING:
            due_date = command.period.due_date
        else:
            due_date = command.due_date or next_monday(date.today())

        try:
            result = await self.creator.create_drafts(
                selected_items, preview.period, command.mode, due_date, registration_fees
            )
        except DraftValidationError as e:
            return Return.err(Error(code=e.code, message=e.message, reason=str(e)))

        # Step 5: Publish cache invalidation
        if result.invoices:
            try:
                await self.event_publisher.publish(INVOICE_CREATION_EVENTS)
            except Exception as e:
                logger.error(f"Failed to publish invoice events: {e}")

        # Step 6: Completion callback
        if result.is_complete and on_complete is not None:
            try:
                await on_complete(result)
            except Exception as e:
                logger.error(f"on_complete callback failed: {e}")

        return Return.ok(result)

    async def _registration_fees(self, selected_items: Sequence[PricedItem]) -> List[RegistrationFeeLine]:
        enrollments = elective_enrollments(selected_items)
        if not enrollments:
            return []

        family_ids = sorted({enrollment.customer_id for enrollment in enrollments})
        pending = await self.source_repo.list_class_registration_fees(family_ids)
        fees = match_registration_fees(selected_items, pending)
        if fees:
            logger.info(f"Adding {len(fees)} class registration fee(s) to recurring invoices")
        return fees
