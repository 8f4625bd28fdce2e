"""Client Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.client import Client


class ClientRepository(ABC):
    """Repository interface for Client lookups"""

    @abstractmethod
    async def get_by_id(self, client_id: str) -> Optional[Client]:
        pass
