"""Credit Note Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional, List, Tuple
from datetime import date
from src.domain.credit_note import CreditNote


class CreditNoteRepository(ABC):
    """
    Repository interface for CreditNote persistence

    Credit notes always reference the invoice they reverse.
    """

    @abstractmethod
    async def create(self, credit_note: CreditNote) -> CreditNote:
        pass

    @abstractmethod
    async def get_by_id(self, credit_note_id: str) -> Optional[CreditNote]:
        pass

    @abstractmethod
    async def get_by_verification_id(self, verification_id: str) -> Optional[CreditNote]:
        pass

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: str) -> List[CreditNote]:
        """
        Retrieve credit notes raised against an invoice

        Args:
            invoice_id: Original invoice ID

        Returns:
            List of CreditNote
        """
        pass

    @abstractmethod
    async def list_expired(
        self,
        today: date,
        limit: int = 500,
        after: Optional[Tuple[date, str]] = None,
    ) -> List[CreditNote]:
        pass

    @abstractmethod
    async def delete(self, credit_note: CreditNote) -> None:
        pass
