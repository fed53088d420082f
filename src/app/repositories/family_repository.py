"""Family Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.family import Family


class FamilyRepository(ABC):
    @abstractmethod
    async def get_by_id(self, family_id: int) -> Optional[Family]:
        """
        Retrieve family by ID

        Args:
            family_id: Family ID

        Returns:
            Family if found, None otherwise
        """
        pass
