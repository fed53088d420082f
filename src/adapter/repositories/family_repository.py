from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.family_repository import FamilyRepository
from src.domain.family import Family


class SqlAlchemyFamilyRepository(FamilyRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, family_id: int) -> Optional[Family]:
        statement = select(Family).where(Family.id == family_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()
