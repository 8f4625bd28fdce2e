"""Payment Method Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.payment_method import PaymentMethod


class PaymentMethodRepository(ABC):
    """Repository interface for PaymentMethod lookups"""

    @abstractmethod
    async def get_by_id(self, payment_method_id: str) -> Optional[PaymentMethod]:
        pass
