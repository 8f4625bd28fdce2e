"""SQLAlchemy Receipt Repository Implementation"""

from typing import Optional, List, Tuple
from datetime import date
from sqlalchemy import and_, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.receipt_repository import ReceiptRepository
from src.domain.receipt import Receipt


class SqlAlchemyReceiptRepository(ReceiptRepository):
    """
    SQLAlchemy implementation of ReceiptRepository

    Receipts are inserted already issued and are never updated.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, receipt: Receipt) -> Receipt:
        self.session.add(receipt)
        await self.session.flush()
        await self.session.refresh(receipt)
        return receipt

    async def get_by_id(self, receipt_id: str) -> Optional[Receipt]:
        statement = select(Receipt).where(Receipt.id == receipt_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_payment_id(self, payment_id: str) -> Optional[Receipt]:
        statement = select(Receipt).where(Receipt.payment_id == payment_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_verification_id(self, verification_id: str) -> Optional[Receipt]:
        statement = select(Receipt).where(Receipt.verification_id == verification_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_invoice_id(self, invoice_id: str) -> List[Receipt]:
        statement = select(Receipt).where(Receipt.invoice_id == invoice_id)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list_expired(
        self,
        today: date,
        limit: int = 500,
        after: Optional[Tuple[date, str]] = None,
    ) -> List[Receipt]:
        statement = (
            select(Receipt)
            .where(Receipt.retention_locked_until.is_not(None))
            .where(Receipt.retention_locked_until < today)
        )

        if after:
            locked_until, last_id = after
            statement = statement.where(
                or_(
                    Receipt.retention_locked_until > locked_until,
                    and_(Receipt.retention_locked_until == locked_until, Receipt.id > last_id),
                )
            )

        statement = statement.order_by(Receipt.retention_locked_until, Receipt.id).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def delete(self, receipt: Receipt) -> None:
        await self.session.delete(receipt)
        await self.session.flush()
