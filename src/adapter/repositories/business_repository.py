"""SQLAlchemy Business Repository Implementation"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.business_repository import BusinessRepository
from src.domain.business import Business, BusinessMember


class SqlAlchemyBusinessRepository(BusinessRepository):
    """SQLAlchemy implementation of BusinessRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, business_id: str) -> Optional[Business]:
        statement = select(Business).where(Business.id == business_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_membership(self, business_id: str, user_id: str) -> Optional[BusinessMember]:
        statement = (
            select(BusinessMember)
            .where(BusinessMember.business_id == business_id)
            .where(BusinessMember.user_id == user_id)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()
