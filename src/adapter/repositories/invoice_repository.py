"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

import logging
from typing import Dict, Optional, List, Sequence
from datetime import date
from decimal import Decimal
from sqlalchemy import update
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from libs.money import add_money, format_currency, sum_money
from src.app.drafting import BillingPeriod, ExistingInvoice, PricedItem, RegistrationFeeLine, SourceKind
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.base import utc_now
from src.domain.event_order import EventOrder
from src.domain.hub_booking import HubBooking, HubBookingStatus
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine

logger = logging.getLogger(__name__)


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations. Writes are flushed so
    generated IDs are available, and committed by the unit of work.
    """

    def __init__(self, session: AsyncSession, number_prefix: str = "INV"):
        self.session = session
        self.number_prefix = number_prefix

    async def list_invoices_for_period(self, start: date, end: date) -> List[ExistingInvoice]:
        statement = (
            select(Invoice.family_id, Invoice.period_start, Invoice.period_end)
            .where(Invoice.status != InvoiceStatus.VOID)
            .where(Invoice.period_start <= end)
            .where(Invoice.period_end >= start)
        )
        result = await self.session.execute(statement)
        return [
            ExistingInvoice(customer_id=family_id, period_start=period_start, period_end=period_end)
            for family_id, period_start, period_end in result.all()
        ]

    async def create_invoice_batch(
        self,
        items: Sequence[PricedItem],
        period: BillingPeriod,
        registration_fees: Sequence[RegistrationFeeLine] = (),
    ) -> List[Invoice]:
        """
        Create one draft invoice per customer from recurring items

        Business Rules:
        - Items are split by customer, in first-appearance order
        - Every invoice carries the period, its due date and note
        - Registration fees follow their customer's items on the same
          invoice; their event orders are stamped with the invoice ID
        - Unlinked items and fees of customers outside the batch are
          rejected; nothing is written for the batch
        """
        by_customer: Dict[int, List[PricedItem]] = {}
        for item in items:
            if item.customer_id is None:
                raise ValueError(f"Item {item.item_id} has no customer")
            by_customer.setdefault(item.customer_id, []).append(item)

        fees_by_customer: Dict[int, List[RegistrationFeeLine]] = {}
        for fee in registration_fees:
            if fee.customer_id not in by_customer:
                raise ValueError(
                    f"Registration fee for order {fee.order_id} has no invoice in this batch"
                )
            fees_by_customer.setdefault(fee.customer_id, []).append(fee)

        invoices = []
        for customer_id, customer_items in by_customer.items():
            fees = fees_by_customer.get(customer_id, [])
            invoice = await self._create_invoice(
                customer_id,
                customer_items,
                due_date=period.due_date,
                period_start=period.start,
                period_end=period.end,
                notes=period.note or None,
                registration_fees=fees,
            )
            if fees:
                await self.session.execute(
                    update(EventOrder)
                    .where(EventOrder.id.in_([fee.order_id for fee in fees]))
                    .values(invoice_id=invoice.id)
                )
            invoices.append(invoice)
        await self.session.flush()

        logger.info(
            f"Created {len(invoices)} recurring invoice(s) for {period.start} - {period.end}"
        )
        return invoices

    async def create_invoice_for_customer(
        self, customer_id: int, items: Sequence[PricedItem], due_date: Optional[date] = None
    ) -> Invoice:
        """
        Create one draft invoice for a customer's event orders or hub sessions

        Business Rules:
        - Every item must belong to customer_id
        - Event orders are stamped with the invoice ID
        - Hub bookings are stamped and moved to completed
        """
        if not items:
            raise ValueError(f"No items to invoice for customer {customer_id}")

        foreign = [item.item_id for item in items if item.customer_id != customer_id]
        if foreign:
            raise ValueError(f"Items {foreign} do not belong to customer {customer_id}")

        invoice = await self._create_invoice(customer_id, items, due_date=due_date)

        order_ids = [item.source_id for item in items if item.kind == SourceKind.EVENT_ORDER]
        booking_ids = [item.source_id for item in items if item.kind == SourceKind.HUB_SESSION]

        if order_ids:
            await self.session.execute(
                update(EventOrder)
                .where(EventOrder.id.in_(order_ids))
                .values(invoice_id=invoice.id)
            )
        if booking_ids:
            await self.session.execute(
                update(HubBooking)
                .where(HubBooking.id.in_(booking_ids))
                .values(invoice_id=invoice.id, status=HubBookingStatus.COMPLETED)
            )
        await self.session.flush()

        return invoice

    async def generate_invoice_number(self) -> str:
        """
        Generate a unique invoice number

        Format: INV-YYYY-NNNNNN (e.g., INV-2025-000001)

        Returns:
            Unique invoice number string
        """
        year = utc_now().year
        prefix = f"{self.number_prefix}-{year}-"

        # Get the highest invoice number for this year
        statement = (
            select(func.max(Invoice.invoice_number))
            .where(Invoice.invoice_number.like(f"{prefix}%"))
        )
        result = await self.session.execute(statement)
        max_number = result.scalar_one_or_none()

        if max_number:
            sequence = int(max_number.split("-")[-1]) + 1
        else:
            sequence = 1

        return f"{prefix}{sequence:06d}"

    async def _create_invoice(
        self,
        customer_id: int,
        items: Sequence[PricedItem],
        due_date: Optional[date] = None,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        notes: Optional[str] = None,
        registration_fees: Sequence[RegistrationFeeLine] = (),
    ) -> Invoice:
        total = add_money(
            sum_money(item.final_amount for item in items),
            sum_money(fee.amount for fee in registration_fees),
        )
        invoice = Invoice(
            family_id=customer_id,
            invoice_number=await self.generate_invoice_number(),
            status=InvoiceStatus.DRAFT,
            invoice_date=date.today(),
            due_date=due_date,
            period_start=period_start,
            period_end=period_end,
            subtotal=total,
            total_amount=total,
            notes=notes,
        )
        self.session.add(invoice)
        await self.session.flush()

        for sort_order, item in enumerate(items):
            self.session.add(
                InvoiceLine(
                    invoice_id=invoice.id,
                    enrollment_id=item.source_id if item.kind == SourceKind.ENROLLMENT else None,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    amount=item.final_amount,
                    sort_order=sort_order,
                )
            )
        for sort_order, fee in enumerate(registration_fees, start=len(items)):
            self.session.add(
                InvoiceLine(
                    invoice_id=invoice.id,
                    description=fee.description,
                    quantity=Decimal("1"),
                    unit_price=fee.amount,
                    amount=fee.amount,
                    sort_order=sort_order,
                )
            )
        await self.session.flush()
        await self.session.refresh(invoice)

        logger.debug(
            f"Created invoice {invoice.invoice_number} for family {customer_id} "
            f"with {len(items) + len(registration_fees)} line(s), total {format_currency(total)}"
        )
        return invoice
