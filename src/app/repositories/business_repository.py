"""Business Repository Interface

Issuer profiles and the memberships that grant users access to them.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.business import Business, BusinessMember


class BusinessRepository(ABC):
    """
    Repository interface for Business persistence

    Membership lookups are the authorization source for document
    operations: a user acts on a business's documents only through a
    BusinessMember row.
    """

    @abstractmethod
    async def get_by_id(self, business_id: str) -> Optional[Business]:
        """
        Retrieve business by ID

        Args:
            business_id: Business ID

        Returns:
            Business if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_membership(self, business_id: str, user_id: str) -> Optional[BusinessMember]:
        """
        Retrieve the membership of a user in a business

        Args:
            business_id: Business ID
            user_id: User profile ID

        Returns:
            BusinessMember if the user belongs to the business, None otherwise
        """
        pass
