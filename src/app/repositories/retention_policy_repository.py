"""Retention Policy Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.retention_policy import RetentionPolicy


class RetentionPolicyRepository(ABC):
    """Repository interface for RetentionPolicy lookups"""

    @abstractmethod
    async def get_policy(self, jurisdiction: str, entity_type: str) -> Optional[RetentionPolicy]:
        """
        Retrieve the newest policy for a jurisdiction and entity type

        Args:
            jurisdiction: Two-letter jurisdiction code
            entity_type: Document type value

        Returns:
            RetentionPolicy if one is configured, None otherwise
        """
        pass
