"""Integration tests for SqlAlchemyInvoiceRepository"""

import pytest
from datetime import date
from decimal import Decimal
from sqlmodel import select

from src.adapter.repositories import SqlAlchemyBillableSourceRepository, SqlAlchemyInvoiceRepository
from src.app.drafting import BillingPeriod, RegistrationFeeLine, price_sources
from src.domain import EventOrder, HubBooking, HubBookingStatus, Invoice, InvoiceLine, InvoiceStatus

PERIOD = BillingPeriod.for_week(date(2025, 1, 8))


async def _lines(db_session, invoice_id):
    result = await db_session.execute(
        select(InvoiceLine).where(InvoiceLine.invoice_id == invoice_id).order_by(InvoiceLine.sort_order)
    )
    return list(result.scalars().all())


@pytest.mark.asyncio
class TestCreateInvoiceBatch:
    async def test_one_invoice_per_family(self, db_session, seed):
        """
        Given: Weekly enrollments of two families
        When: A recurring batch is created
        Then: Each family gets one draft with the period, due date and note
        """
        # Arrange
        sources = await SqlAlchemyBillableSourceRepository(db_session).list_billable_enrollments()
        repo = SqlAlchemyInvoiceRepository(db_session, number_prefix="TST")

        # Act
        invoices = await repo.create_invoice_batch(price_sources(sources), PERIOD)
        await db_session.commit()

        # Assert
        assert [invoice.family_id for invoice in invoices] == [seed["jones"].id, seed["smith"].id]
        smith_invoice = invoices[1]
        assert smith_invoice.status == InvoiceStatus.DRAFT
        assert smith_invoice.total_amount == Decimal("410.00")
        assert smith_invoice.period_start == date(2025, 1, 6)
        assert smith_invoice.period_end == date(2025, 1, 10)
        assert smith_invoice.due_date == date(2025, 1, 13)
        assert smith_invoice.notes == "For the week of 01/06/2025 - 01/10/2025"

        lines = await _lines(db_session, smith_invoice.id)
        assert [line.sort_order for line in lines] == [0, 1]
        assert [line.enrollment_id for line in lines] == [e.id for e in seed["enrollments"][:2]]
        assert lines[1].description == "Ava Smith - Academic Coaching: 4 hrs × $65.00"

    async def test_invoice_numbers_are_sequential(self, db_session, seed):
        sources = await SqlAlchemyBillableSourceRepository(db_session).list_billable_enrollments()
        repo = SqlAlchemyInvoiceRepository(db_session, number_prefix="TST")

        invoices = await repo.create_invoice_batch(price_sources(sources), PERIOD)

        year = date.today().year
        assert [invoice.invoice_number for invoice in invoices] == [
            f"TST-{year}-000001",
            f"TST-{year}-000002",
        ]
        assert await repo.generate_invoice_number() == f"TST-{year}-000003"

    async def test_unlinked_item_rejected(self, db_session, seed):
        orders = await SqlAlchemyBillableSourceRepository(db_session).list_event_orders_pending()
        repo = SqlAlchemyInvoiceRepository(db_session)

        with pytest.raises(ValueError):
            await repo.create_invoice_batch(price_sources(orders), PERIOD)

        result = await db_session.execute(select(Invoice))
        assert result.scalars().all() == []


@pytest.mark.asyncio
class TestRegistrationFeesOnBatch:
    async def test_fee_line_appended_and_order_stamped(self, db_session, seed, class_registration):
        """
        Given: Smith's monthly enrollments and one matched class registration fee
        When: The recurring batch is created with the fee
        Then: The fee is the last line of Smith's invoice and the order points at it
        """
        # Arrange
        month = BillingPeriod.for_month(date(2025, 2, 1))
        sources = await SqlAlchemyBillableSourceRepository(db_session).list_billable_enrollments(cadence="monthly")
        order = class_registration["orders"][0]
        fee = RegistrationFeeLine(order_id=order.id, customer_id=seed["smith"].id,
                                  description="Ava Smith - Registration Fee: Spring Robotics Club",
                                  amount=Decimal("75.00"))
        repo = SqlAlchemyInvoiceRepository(db_session)

        # Act
        invoices = await repo.create_invoice_batch(price_sources(sources), month, [fee])
        await db_session.commit()

        # Assert
        assert len(invoices) == 1
        invoice = invoices[0]
        assert invoice.total_amount == Decimal("455.00")  # 4 x 65 coaching + 120 elective + 75 fee
        assert invoice.notes == "For February 2025"
        lines = await _lines(db_session, invoice.id)
        assert [line.sort_order for line in lines] == [0, 1, 2]
        assert lines[-1].description == "Ava Smith - Registration Fee: Spring Robotics Club"
        assert (lines[-1].quantity, lines[-1].unit_price, lines[-1].amount) == (
            Decimal("1"), Decimal("75.00"), Decimal("75.00")
        )
        assert lines[-1].enrollment_id is None
        result = await db_session.execute(select(EventOrder.invoice_id).where(EventOrder.id == order.id))
        assert result.scalar_one() == invoice.id

    async def test_fee_without_an_invoice_in_the_batch_is_rejected(self, db_session, seed, class_registration):
        sources = await SqlAlchemyBillableSourceRepository(db_session).list_billable_enrollments(cadence="monthly")
        fee = RegistrationFeeLine(order_id=class_registration["orders"][2].id, customer_id=seed["jones"].id,
                                  description="Leo Jones - Registration Fee: Spring Robotics Club",
                                  amount=Decimal("75.00"))
        repo = SqlAlchemyInvoiceRepository(db_session)

        with pytest.raises(ValueError):
            await repo.create_invoice_batch(price_sources(sources), PERIOD, [fee])

        result = await db_session.execute(select(Invoice))
        assert result.scalars().all() == []


@pytest.mark.asyncio
class TestCreateInvoiceForCustomer:
    async def test_event_orders_are_stamped(self, db_session, seed):
        orders = await SqlAlchemyBillableSourceRepository(db_session).list_event_orders_pending()
        items = [item for item in price_sources(orders) if item.is_linked]
        repo = SqlAlchemyInvoiceRepository(db_session)

        invoice = await repo.create_invoice_for_customer(seed["smith"].id, items, due_date=date(2025, 2, 17))
        await db_session.commit()

        assert invoice.total_amount == Decimal("50.00")
        assert invoice.due_date == date(2025, 2, 17)
        assert invoice.period_start is None
        result = await db_session.execute(select(EventOrder.invoice_id).where(EventOrder.id == seed["orders"][0].id))
        assert result.scalar_one() == invoice.id
        lines = await _lines(db_session, invoice.id)
        assert lines[0].enrollment_id is None
        assert lines[0].quantity == Decimal("2")
        assert lines[0].unit_price == Decimal("25.00")

    async def test_uneven_ticket_split_is_stored_as_one_line(self, db_session, seed):
        """
        Given: $10.00 for 3 tickets
        When: The order is invoiced
        Then: The stored line is 1 x $10.00, so quantity x unit price matches the amount
        """
        db_session.add(EventOrder(event_title="Gala", family_id=seed["jones"].id,
                                  purchaser_email="sam@example.com", quantity=3, total_cents=1000))
        await db_session.commit()
        orders = await SqlAlchemyBillableSourceRepository(db_session).list_event_orders_pending()
        items = [item for item in price_sources(orders) if item.customer_id == seed["jones"].id]
        repo = SqlAlchemyInvoiceRepository(db_session)

        invoice = await repo.create_invoice_for_customer(seed["jones"].id, items)
        await db_session.commit()

        lines = await _lines(db_session, invoice.id)
        assert (lines[0].quantity, lines[0].unit_price, lines[0].amount) == (
            Decimal("1"), Decimal("10.00"), Decimal("10.00")
        )
        assert lines[0].description == "Gala - Registration Fee: 3 tickets"

    async def test_hub_bookings_are_completed(self, db_session, seed):
        sessions = await SqlAlchemyBillableSourceRepository(db_session).list_hub_sessions_pending()
        jones_items = [item for item in price_sources(sessions) if item.customer_id == seed["jones"].id]
        repo = SqlAlchemyInvoiceRepository(db_session)

        invoice = await repo.create_invoice_for_customer(seed["jones"].id, jones_items)
        await db_session.commit()

        assert invoice.total_amount == Decimal("80.00")
        result = await db_session.execute(
            select(HubBooking.status, HubBooking.invoice_id).where(HubBooking.id == seed["bookings"][1].id)
        )
        assert tuple(result.one()) == (HubBookingStatus.COMPLETED, invoice.id)
        pending = await SqlAlchemyBillableSourceRepository(db_session).list_hub_sessions_pending()
        assert [s.id for s in pending] == [seed["bookings"][0].id]

    async def test_items_of_another_customer_rejected(self, db_session, seed):
        sessions = await SqlAlchemyBillableSourceRepository(db_session).list_hub_sessions_pending()
        repo = SqlAlchemyInvoiceRepository(db_session)

        with pytest.raises(ValueError):
            await repo.create_invoice_for_customer(seed["jones"].id, price_sources(sessions))

    async def test_no_items_rejected(self, db_session, seed):
        repo = SqlAlchemyInvoiceRepository(db_session)

        with pytest.raises(ValueError):
            await repo.create_invoice_for_customer(seed["jones"].id, [])


@pytest.mark.asyncio
class TestListInvoicesForPeriod:
    async def test_overlapping_non_void_invoices(self, db_session, seed):
        db_session.add_all([
            Invoice(family_id=seed["smith"].id, invoice_number="INV-2025-000001",
                    invoice_date=date(2025, 1, 6), period_start=date(2025, 1, 6), period_end=date(2025, 1, 10),
                    subtotal=Decimal("150.00"), total_amount=Decimal("150.00")),
            Invoice(family_id=seed["jones"].id, invoice_number="INV-2025-000002", status=InvoiceStatus.VOID,
                    invoice_date=date(2025, 1, 6), period_start=date(2025, 1, 6), period_end=date(2025, 1, 10),
                    subtotal=Decimal("150.00"), total_amount=Decimal("150.00")),
            Invoice(family_id=seed["jones"].id, invoice_number="INV-2025-000003",
                    invoice_date=date(2024, 12, 30), period_start=date(2024, 12, 30), period_end=date(2025, 1, 3),
                    subtotal=Decimal("150.00"), total_amount=Decimal("150.00")),
        ])
        await db_session.commit()
        repo = SqlAlchemyInvoiceRepository(db_session)

        existing = await repo.list_invoices_for_period(PERIOD.start, PERIOD.end)

        assert [(e.customer_id, e.period_start) for e in existing] == [(seed["smith"].id, date(2025, 1, 6))]
