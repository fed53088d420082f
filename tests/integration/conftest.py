import pytest_asyncio
from datetime import date
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from src.adapter.services.event_publisher import LoggingEventPublisher
from src.depends import get_event_publisher, get_session
from src.domain import (
    BillingFrequency,
    Enrollment,
    EventOrder,
    EventOrderPaymentStatus,
    EventType,
    Family,
    FamilyStatus,
    HubBooking,
    Service,
    Student,
)


@pytest_asyncio.fixture(scope="function")
async def engine():
    """In-memory SQLite database shared by every connection of one test"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def seed(db_session):
    """
    A small roster:
    - Smith (active): weekly online tuition and hourly coaching
    - Jones (active): weekly online tuition
    - Brown (inactive): weekly online tuition, never billed
    - Two pending event orders (one unlinked) and two scheduled hub bookings
    """
    smith = Family(display_name="Smith Family")
    jones = Family(display_name="Jones Family")
    brown = Family(display_name="Brown Family", status=FamilyStatus.INACTIVE)
    online = Service(code="eaton_online", name="Eaton Online", billing_frequency=BillingFrequency.WEEKLY)
    coaching = Service(code="academic_coaching", name="Academic Coaching")
    db_session.add_all([smith, jones, brown, online, coaching])
    await db_session.flush()

    ava = Student(family_id=smith.id, full_name="Ava Smith")
    leo = Student(family_id=jones.id, full_name="Leo Jones")
    db_session.add_all([ava, leo])
    await db_session.flush()

    enrollments = [
        Enrollment(family_id=smith.id, student_id=ava.id, service_id=online.id,
                   weekly_tuition=Decimal("150.00")),
        Enrollment(family_id=smith.id, student_id=ava.id, service_id=coaching.id,
                   hourly_rate_customer=Decimal("65.00"), hours_per_week=Decimal("4")),
        Enrollment(family_id=jones.id, student_id=leo.id, service_id=online.id,
                   weekly_tuition=Decimal("150.00")),
        Enrollment(family_id=brown.id, service_id=online.id, weekly_tuition=Decimal("150.00")),
    ]
    orders = [
        EventOrder(event_title="Science Night", event_date=date(2025, 2, 14), family_id=smith.id,
                   purchaser_email="jane@example.com", quantity=2, total_cents=5000),
        EventOrder(event_title="Science Night", event_date=date(2025, 2, 14),
                   purchaser_email="guest@example.com", quantity=1, total_cents=2500),
    ]
    bookings = [
        HubBooking(family_id=smith.id, student_name="Ava Smith", session_date=date(2025, 1, 6)),
        HubBooking(family_id=jones.id, student_name="Leo Jones", session_date=date(2025, 1, 7),
                   daily_rate=Decimal("80.00")),
    ]
    db_session.add_all(enrollments + orders + bookings)
    await db_session.commit()

    return {
        "smith": smith,
        "jones": jones,
        "brown": brown,
        "enrollments": enrollments,
        "orders": orders,
        "bookings": bookings,
    }


@pytest_asyncio.fixture
async def class_registration(db_session, seed):
    """
    Ava Smith takes the Robotics elective (monthly, $120). Class orders:
    - Smith, "Spring Robotics Club", awaiting the monthly invoice (matches)
    - Smith, "Pottery", awaiting the monthly invoice (no matching enrollment)
    - Jones, "Spring Robotics Club", awaiting the monthly invoice (Jones takes no elective)
    - Smith, "Robotics Kit Night", a regular pending event order (billed in event runs)
    """
    smith_id = seed["smith"].id
    electives = Service(code="elective_classes", name="Elective Classes")
    db_session.add(electives)
    await db_session.flush()

    enrollment = Enrollment(family_id=smith_id, student_id=seed["enrollments"][0].student_id,
                            service_id=electives.id, monthly_rate=Decimal("120.00"), class_title="Robotics")
    class_orders = [
        EventOrder(event_title="Spring Robotics Club", event_type=EventType.CLASS, family_id=smith_id,
                   purchaser_email="jane@example.com", total_cents=7500,
                   payment_status=EventOrderPaymentStatus.STEPUP_PENDING),
        EventOrder(event_title="Pottery", event_type=EventType.CLASS, family_id=smith_id,
                   purchaser_email="jane@example.com", total_cents=4000,
                   payment_status=EventOrderPaymentStatus.STEPUP_PENDING),
        EventOrder(event_title="Spring Robotics Club", event_type=EventType.CLASS, family_id=seed["jones"].id,
                   purchaser_email="sam@example.com", total_cents=7500,
                   payment_status=EventOrderPaymentStatus.STEPUP_PENDING),
        EventOrder(event_title="Robotics Kit Night", family_id=smith_id,
                   purchaser_email="jane@example.com", total_cents=3000),
    ]
    db_session.add_all([enrollment] + class_orders)
    await db_session.commit()

    return {"enrollment": enrollment, "orders": class_orders}


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_event_publisher] = LoggingEventPublisher

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
