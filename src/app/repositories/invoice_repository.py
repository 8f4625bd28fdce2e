"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Tuple
from datetime import date
from src.domain.invoice import Invoice


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    get_by_id(for_update=True) takes a row lock so that concurrent issuance,
    payment and void requests on the same invoice are serialized.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: str, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_verification_id(self, verification_id: str) -> Optional[Invoice]:
        """
        Retrieve invoice by its public verification token

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass

    @abstractmethod
    async def list_expired(
        self,
        today: date,
        limit: int = 500,
        after: Optional[Tuple[date, str]] = None,
    ) -> List[Invoice]:
        """
        List invoices whose retention_locked_until is strictly before today

        Args:
            today: Reference date
            limit: Maximum number of invoices to return
            after: Keyset cursor (retention_locked_until, id) of the last row
                of the previous page

        Returns:
            List of invoices, oldest retention date first
        """
        pass

    @abstractmethod
    async def delete(self, invoice: Invoice) -> None:
        pass
