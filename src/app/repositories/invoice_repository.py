"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Sequence
from datetime import date
from src.app.drafting import BillingPeriod, ExistingInvoice, PricedItem, RegistrationFeeLine
from src.domain.invoice import Invoice


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Write operations flush but never commit; the caller's unit of work
    owns the transaction.
    """

    @abstractmethod
    async def list_invoices_for_period(self, start: date, end: date) -> List[ExistingInvoice]:
        """
        List non-void invoices whose period intersects [start, end]

        Used to detect customers already invoiced for a period.

        Args:
            start: Period start
            end: Period end

        Returns:
            Existing invoices as (customer_id, period_start, period_end)
        """
        pass

    @abstractmethod
    async def create_invoice_batch(
        self,
        items: Sequence[PricedItem],
        period: BillingPeriod,
        registration_fees: Sequence[RegistrationFeeLine] = (),
    ) -> List[Invoice]:
        """
        Create one draft invoice per customer from recurring items

        Registration fees are appended to their customer's invoice and
        their event orders are stamped with the invoice ID.

        Args:
            items: Selected priced items (all linked)
            period: Billing period; its due_date and note go on every invoice
            registration_fees: Class registration fees of customers in items

        Returns:
            Created invoices, one per customer in first-appearance order
        """
        pass

    @abstractmethod
    async def create_invoice_for_customer(
        self, customer_id: int, items: Sequence[PricedItem], due_date: Optional[date] = None
    ) -> Invoice:
        """
        Create one draft invoice for a customer's event orders or hub sessions

        Consumed event orders are stamped with the invoice ID; consumed hub
        bookings are stamped and moved to completed.

        Args:
            customer_id: Family the invoice is addressed to
            items: The customer's selected priced items
            due_date: Optional due date

        Returns:
            Created Invoice
        """
        pass

    @abstractmethod
    async def generate_invoice_number(self) -> str:
        """
        Generate a unique invoice number

        Format: INV-YYYY-NNNNNN (e.g., INV-2025-000001)

        Returns:
            Unique invoice number string
        """
        pass
