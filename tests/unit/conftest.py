import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.drafting import (
    EventOrderSource,
    HubSessionSource,
    RecurringEnrollment,
    ServiceDefinition,
)
from src.domain.service import BillingFrequency


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def make_enrollment():
    """Factory for RecurringEnrollment snapshots"""

    def _make(
        id=1,
        customer_id=10,
        customer_name="Smith Family",
        student_name="Ava Smith",
        code="academic_coaching",
        service_name="Academic Coaching",
        frequency=BillingFrequency.MONTHLY,
        class_title=None,
        **rates,
    ):
        return RecurringEnrollment(
            id=id,
            customer_id=customer_id,
            customer_name=customer_name,
            student_name=student_name,
            service=ServiceDefinition(code=code, name=service_name, billing_frequency=frequency),
            class_title=class_title,
            **{key: Decimal(str(value)) for key, value in rates.items()},
        )

    return _make


@pytest.fixture
def make_hub_session():
    """Factory for HubSessionSource snapshots"""

    def _make(id=1, customer_id=10, customer_name="Smith Family", daily_rate=None, **kwargs):
        return HubSessionSource(
            id=id,
            customer_id=customer_id,
            customer_name=customer_name,
            student_name=kwargs.get("student_name", "Ava Smith"),
            session_date=kwargs.get("session_date", date(2025, 1, 6)),
            daily_rate=Decimal(str(daily_rate)) if daily_rate is not None else None,
        )

    return _make


@pytest.fixture
def make_event_order():
    """Factory for EventOrderSource snapshots"""

    def _make(id=1, customer_id=10, customer_name="Smith Family", quantity=1, total_cents=2500, **kwargs):
        return EventOrderSource(
            id=id,
            customer_id=customer_id,
            customer_name=customer_name,
            event_title=kwargs.get("event_title", "Science Night"),
            event_date=kwargs.get("event_date", date(2025, 2, 14)),
            quantity=quantity,
            total_cents=total_cents,
        )

    return _make
