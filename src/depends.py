from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.event_publisher import create_event_publisher
from src.app.services.event_publisher import EventPublisher

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_event_publisher() -> EventPublisher:
    return create_event_publisher(
        ApplicationConfig.EVENTS_WEBHOOK_URL,
        timeout=ApplicationConfig.EVENTS_WEBHOOK_TIMEOUT,
    )
