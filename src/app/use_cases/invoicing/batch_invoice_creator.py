"""Batch Invoice Creator

Turns the selected priced items into draft invoices.
"""

import logging
from collections import Counter
from datetime import date
from functools import reduce
from typing import Dict, List, Optional, Sequence, Set, Union

from src.app.drafting import (
    BatchResult,
    BatchStatus,
    BillingMode,
    BillingPeriod,
    CreatedInvoice,
    CustomerFailure,
    DraftValidationError,
    PricedItem,
    RegistrationFeeLine,
    exclude_consumed,
)
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.invoice import Invoice

logger = logging.getLogger(__name__)

Outcome = Union[CreatedInvoice, CustomerFailure]


def _created(invoice: Invoice, line_count: int) -> CreatedInvoice:
    return CreatedInvoice(
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        customer_id=invoice.family_id,
        total_amount=invoice.total_amount,
        line_count=line_count,
    )


def _fold(result: BatchResult, outcome: Outcome) -> BatchResult:
    if isinstance(outcome, CustomerFailure):
        return result.model_copy(update={"failed": [*result.failed, outcome]})
    return result.model_copy(
        update={
            "succeeded": [*result.succeeded, outcome.customer_id],
            "invoices": [*result.invoices, outcome],
        }
    )


class BatchInvoiceCreator:
    """
    Create draft invoices for a batch of selected items

    Business Rules:
    1. Unlinked items are never attempted; they are reported as unlinked
    2. Recurring mode is one all-or-nothing call, committed once
    3. Event and hub modes create one invoice per customer, strictly one
       after another, each committed on its own
    4. A failing customer is rolled back and recorded with the underlying
       error message; the remaining customers are still attempted
    5. Items already invoiced by this creator are never invoiced again
    6. Recurring registration fees are written with their customer's
       invoice, inside the same all-or-nothing call
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self._consumed: Set[str] = set()

    async def create_drafts(
        self,
        selected_items: Sequence[PricedItem],
        period: Optional[BillingPeriod],
        mode: BillingMode,
        due_date: Optional[date] = None,
        registration_fees: Sequence[RegistrationFeeLine] = (),
    ) -> BatchResult:
        """
        Submit the selected items

        Args:
            selected_items: Priced items chosen for invoicing
            period: Billing period (required in recurring mode)
            mode: Billing mode
            due_date: Due date for event/hub invoices
            registration_fees: Class registration fees to fold into recurring invoices

        Returns:
            BatchResult; per-customer and batch failures are reported, not raised

        Raises:
            DraftValidationError: recurring mode without a period
        """
        if mode == BillingMode.RECURRING and period is None:
            raise DraftValidationError("Recurring invoices need a billing period", code="MISSING_PERIOD")

        linked = [item for item in selected_items if item.is_linked]
        unlinked = [item.item_id for item in selected_items if not item.is_linked]
        if unlinked:
            logger.info(f"Skipping {len(unlinked)} unlinked item(s): {unlinked}")

        if mode == BillingMode.RECURRING:
            result = await self._create_recurring(linked, period, unlinked, list(registration_fees))
        else:
            result = await self._create_per_customer(
                exclude_consumed(linked, self._consumed), mode, due_date, unlinked
            )

        self._log_summary(result)
        return result

    async def _create_recurring(
        self,
        items: List[PricedItem],
        period: BillingPeriod,
        unlinked: List[str],
        registration_fees: List[RegistrationFeeLine],
    ) -> BatchResult:
        if not items:
            return BatchResult(mode=BillingMode.RECURRING, unlinked=unlinked)

        line_counts = Counter(item.customer_id for item in items)
        line_counts.update(fee.customer_id for fee in registration_fees)
        try:
            invoices = await self.invoice_repo.create_invoice_batch(items, period, registration_fees)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Recurring batch for {period.start} - {period.end} failed: {e}")
            return BatchResult(
                mode=BillingMode.RECURRING,
                unlinked=unlinked,
                error=str(e) or type(e).__name__,
            )

        return BatchResult(
            mode=BillingMode.RECURRING,
            succeeded=[invoice.family_id for invoice in invoices],
            invoices=[_created(invoice, line_counts[invoice.family_id]) for invoice in invoices],
            unlinked=unlinked,
        )

    async def _create_per_customer(
        self,
        items: List[PricedItem],
        mode: BillingMode,
        due_date: Optional[date],
        unlinked: List[str],
    ) -> BatchResult:
        by_customer: Dict[int, List[PricedItem]] = {}
        for item in items:
            by_customer.setdefault(item.customer_id, []).append(item)

        # One customer at a time, in submission order
        outcomes = [
            await self._attempt(customer_id, customer_items, due_date)
            for customer_id, customer_items in by_customer.items()
        ]
        return reduce(_fold, outcomes, BatchResult(mode=mode, unlinked=unlinked))

    async def _attempt(
        self, customer_id: int, items: List[PricedItem], due_date: Optional[date]
    ) -> Outcome:
        try:
            invoice = await self.invoice_repo.create_invoice_for_customer(customer_id, items, due_date)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create invoice for customer {customer_id}: {e}")
            return CustomerFailure(
                customer_id=customer_id,
                customer_name=items[0].customer_name,
                reason=str(e) or type(e).__name__,
            )

        self._consumed.update(item.item_id for item in items)
        return _created(invoice, len(items))

    @staticmethod
    def _log_summary(result: BatchResult):
        if result.status == BatchStatus.PARTIAL:
            logger.warning(f"Batch {result.mode.value}: {result.message}")
        elif result.status == BatchStatus.FAILED:
            logger.error(f"Batch {result.mode.value}: {result.message}")
        else:
            logger.info(f"Batch {result.mode.value}: {result.message}")
