"""Receipt Repository Interface

Defines the contract for receipt persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Tuple
from datetime import date
from src.domain.receipt import Receipt


class ReceiptRepository(ABC):
    """
    Repository interface for Receipt persistence

    At most one receipt exists per payment (unique payment_id).
    """

    @abstractmethod
    async def create(self, receipt: Receipt) -> Receipt:
        pass

    @abstractmethod
    async def get_by_id(self, receipt_id: str) -> Optional[Receipt]:
        pass

    @abstractmethod
    async def get_by_payment_id(self, payment_id: str) -> Optional[Receipt]:
        """
        Retrieve the receipt issued for a payment

        Used to keep receipt issuance idempotent per payment.
        """
        pass

    @abstractmethod
    async def get_by_verification_id(self, verification_id: str) -> Optional[Receipt]:
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: str) -> List[Receipt]:
        pass

    @abstractmethod
    async def list_expired(
        self,
        today: date,
        limit: int = 500,
        after: Optional[Tuple[date, str]] = None,
    ) -> List[Receipt]:
        """
        List receipts whose retention_locked_until is strictly before today,
        ordered by (retention_locked_until, id) and starting after the cursor
        """
        pass

    @abstractmethod
    async def delete(self, receipt: Receipt) -> None:
        pass
