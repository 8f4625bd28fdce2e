"""SQLAlchemy Credit Note Repository Implementation"""

from typing import Optional, List, Tuple
from datetime import date
from sqlalchemy import and_, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.credit_note_repository import CreditNoteRepository
from src.domain.credit_note import CreditNote


class SqlAlchemyCreditNoteRepository(CreditNoteRepository):
    """SQLAlchemy implementation of CreditNoteRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, credit_note: CreditNote) -> CreditNote:
        self.session.add(credit_note)
        await self.session.flush()
        await self.session.refresh(credit_note)
        return credit_note

    async def get_by_id(self, credit_note_id: str) -> Optional[CreditNote]:
        statement = select(CreditNote).where(CreditNote.id == credit_note_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_verification_id(self, verification_id: str) -> Optional[CreditNote]:
        statement = select(CreditNote).where(CreditNote.verification_id == verification_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_invoice_id(self, invoice_id: str) -> List[CreditNote]:
        statement = select(CreditNote).where(CreditNote.original_invoice_id == invoice_id)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list_expired(
        self,
        today: date,
        limit: int = 500,
        after: Optional[Tuple[date, str]] = None,
    ) -> List[CreditNote]:
        statement = (
            select(CreditNote)
            .where(CreditNote.retention_locked_until.is_not(None))
            .where(CreditNote.retention_locked_until < today)
        )

        if after:
            locked_until, last_id = after
            statement = statement.where(
                or_(
                    CreditNote.retention_locked_until > locked_until,
                    and_(CreditNote.retention_locked_until == locked_until, CreditNote.id > last_id),
                )
            )

        statement = statement.order_by(CreditNote.retention_locked_until, CreditNote.id).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def delete(self, credit_note: CreditNote) -> None:
        await self.session.delete(credit_note)
        await self.session.flush()
