"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List, Tuple
from datetime import date, datetime
from sqlalchemy import and_, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE (no-op on SQLite)
    - Deletes go through the ORM so immutability guards run
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice
        """
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: str, for_update: bool = False) -> Optional[Invoice]:
        """
        Retrieve invoice by ID with optional row-level locking

        Args:
            invoice_id: Invoice ID
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            Invoice if found, None otherwise
        """
        statement = select(Invoice).where(Invoice.id == invoice_id)

        if for_update:
            statement = statement.with_for_update()

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_verification_id(self, verification_id: str) -> Optional[Invoice]:
        statement = select(Invoice).where(Invoice.verification_id == verification_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        invoice.updated_at = datetime.utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def list_expired(
        self,
        today: date,
        limit: int = 500,
        after: Optional[Tuple[date, str]] = None,
    ) -> List[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.retention_locked_until.is_not(None))
            .where(Invoice.retention_locked_until < today)
        )

        if after:
            locked_until, last_id = after
            statement = statement.where(
                or_(
                    Invoice.retention_locked_until > locked_until,
                    and_(Invoice.retention_locked_until == locked_until, Invoice.id > last_id),
                )
            )

        statement = statement.order_by(Invoice.retention_locked_until, Invoice.id).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def delete(self, invoice: Invoice) -> None:
        await self.session.delete(invoice)
        await self.session.flush()
