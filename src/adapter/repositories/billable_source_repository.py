"""SQLAlchemy Billable Source Repository Implementation

Reads enrollments, pending event orders and pending hub bookings as
billable-source snapshots.
"""

import logging
from typing import List, Optional, Sequence
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.drafting import (
    EventOrderSource,
    HubSessionSource,
    PendingRegistrationFee,
    RecurringEnrollment,
    ServiceDefinition,
)
from src.app.repositories.billable_source_repository import BillableSourceRepository
from src.domain.enrollment import Enrollment, EnrollmentStatus
from src.domain.event_order import EventOrder, EventOrderPaymentStatus, EventType
from src.domain.family import Family, FamilyStatus
from src.domain.hub_booking import HubBooking, HubBookingStatus
from src.domain.service import BillingFrequency, Service
from src.domain.student import Student

logger = logging.getLogger(__name__)


class SqlAlchemyBillableSourceRepository(BillableSourceRepository):
    """
    SQLAlchemy implementation of BillableSourceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_billable_enrollments(
        self, cadence: Optional[str] = None, service_code: Optional[str] = None
    ) -> List[RecurringEnrollment]:
        statement = (
            select(Enrollment, Service, Family, Student)
            .join(Service, Enrollment.service_id == Service.id)
            .join(Family, Enrollment.family_id == Family.id)
            .outerjoin(Student, Enrollment.student_id == Student.id)
            .where(Enrollment.status == EnrollmentStatus.ACTIVE)
            .where(Family.status == FamilyStatus.ACTIVE)
        )

        if cadence == "weekly":
            statement = statement.where(Service.billing_frequency == BillingFrequency.WEEKLY)
        elif cadence == "monthly":
            statement = statement.where(Service.billing_frequency != BillingFrequency.WEEKLY)
        elif cadence is not None:
            raise ValueError(f"Unknown cadence: {cadence}")

        if service_code:
            statement = statement.where(Service.code == service_code)

        statement = statement.order_by(Family.display_name, Enrollment.id)

        result = await self.session.execute(statement)
        return [
            RecurringEnrollment(
                id=enrollment.id,
                customer_id=family.id,
                customer_name=family.display_name,
                student_id=student.id if student else None,
                student_name=student.full_name if student else None,
                service=ServiceDefinition(
                    code=service.code,
                    name=service.name,
                    billing_frequency=service.billing_frequency,
                ),
                hourly_rate=enrollment.hourly_rate_customer,
                hours_per_week=enrollment.hours_per_week,
                weekly_tuition=enrollment.weekly_tuition,
                monthly_rate=enrollment.monthly_rate,
                daily_rate=enrollment.daily_rate,
                class_title=enrollment.class_title,
            )
            for enrollment, service, family, student in result.all()
        ]

    async def list_event_orders_pending(self) -> List[EventOrderSource]:
        statement = (
            select(EventOrder, Family)
            .outerjoin(Family, EventOrder.family_id == Family.id)
            .where(EventOrder.payment_status == EventOrderPaymentStatus.PENDING)
            .where(EventOrder.invoice_id.is_(None))
            .order_by(EventOrder.event_date, EventOrder.id)
        )
        result = await self.session.execute(statement)
        return [
            EventOrderSource(
                id=order.id,
                customer_id=order.family_id,
                customer_name=family.display_name if family else None,
                event_title=order.event_title,
                event_date=order.event_date,
                quantity=order.quantity,
                total_cents=order.total_cents,
            )
            for order, family in result.all()
        ]

    async def list_class_registration_fees(
        self, family_ids: Sequence[int]
    ) -> List[PendingRegistrationFee]:
        if not family_ids:
            return []
        statement = (
            select(EventOrder)
            .where(EventOrder.family_id.in_(list(family_ids)))
            .where(EventOrder.event_type == EventType.CLASS)
            .where(EventOrder.payment_status == EventOrderPaymentStatus.STEPUP_PENDING)
            .where(EventOrder.invoice_id.is_(None))
            .order_by(EventOrder.id)
        )
        result = await self.session.execute(statement)
        return [
            PendingRegistrationFee(
                order_id=order.id,
                customer_id=order.family_id,
                event_title=order.event_title,
                total_cents=order.total_cents,
            )
            for order in result.scalars().all()
        ]

    async def list_hub_sessions_pending(self) -> List[HubSessionSource]:
        statement = (
            select(HubBooking, Family)
            .outerjoin(Family, HubBooking.family_id == Family.id)
            .where(HubBooking.status == HubBookingStatus.SCHEDULED)
            .where(HubBooking.invoice_id.is_(None))
            .order_by(HubBooking.session_date, HubBooking.id)
        )
        result = await self.session.execute(statement)
        return [
            HubSessionSource(
                id=booking.id,
                customer_id=booking.family_id,
                customer_name=family.display_name if family else None,
                student_name=booking.student_name,
                session_date=booking.session_date,
                daily_rate=booking.daily_rate,
            )
            for booking, family in result.all()
        ]

    async def link_event_orders(self, order_ids: Sequence[int], family_id: int) -> int:
        if not order_ids:
            return 0
        # Already-invoiced orders keep their family
        statement = (
            update(EventOrder)
            .where(EventOrder.id.in_(list(order_ids)))
            .where(EventOrder.invoice_id.is_(None))
            .values(family_id=family_id)
        )
        result = await self.session.execute(statement)
        await self.session.flush()
        logger.info(f"Linked {result.rowcount} event order(s) to family {family_id}")
        return result.rowcount

    async def link_hub_bookings(self, booking_ids: Sequence[int], family_id: int) -> int:
        if not booking_ids:
            return 0
        statement = (
            update(HubBooking)
            .where(HubBooking.id.in_(list(booking_ids)))
            .where(HubBooking.invoice_id.is_(None))
            .values(family_id=family_id)
        )
        result = await self.session.execute(statement)
        await self.session.flush()
        logger.info(f"Linked {result.rowcount} hub booking(s) to family {family_id}")
        return result.rowcount
