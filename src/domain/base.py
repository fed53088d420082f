from datetime import datetime, timezone
from sqlalchemy import BigInteger, Integer
from sqlmodel import SQLModel

# SQLite only autoincrements INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer, "sqlite")


def utc_now() -> datetime:
    """Timezone-aware current time; timestamp columns store UTC"""
    return datetime.now(timezone.utc)


class BaseModel(SQLModel):
    """Base class for all record-store entities"""
