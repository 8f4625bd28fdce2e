"""SQLAlchemy Retention Policy Repository Implementation"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.retention_policy_repository import RetentionPolicyRepository
from src.domain.retention_policy import RetentionPolicy


class SqlAlchemyRetentionPolicyRepository(RetentionPolicyRepository):
    """SQLAlchemy implementation of RetentionPolicyRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_policy(self, jurisdiction: str, entity_type: str) -> Optional[RetentionPolicy]:
        """
        Retrieve the newest policy for a jurisdiction and entity type

        Args:
            jurisdiction: Two-letter jurisdiction code
            entity_type: Document type value

        Returns:
            RetentionPolicy if configured, None otherwise
        """
        statement = (
            select(RetentionPolicy)
            .where(RetentionPolicy.jurisdiction == jurisdiction)
            .where(RetentionPolicy.entity_type == entity_type)
            .order_by(RetentionPolicy.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalars().first()
