"""User Profile Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.user_profile import UserProfile


class UserProfileRepository(ABC):
    """Repository interface for UserProfile lookups"""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        pass
