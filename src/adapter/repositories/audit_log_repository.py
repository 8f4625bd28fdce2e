"""SQLAlchemy Audit Log Repository Implementation

Insert-only. Updates and deletes of audit rows are rejected by the ORM
guards in src.adapter.services.immutability.
"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.audit_log_repository import AuditLogRepository
from src.domain.audit_log import AuditLog, AuditEventType


class SqlAlchemyAuditLogRepository(AuditLogRepository):
    """SQLAlchemy implementation of AuditLogRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: AuditLog) -> AuditLog:
        """
        Append an audit entry

        Args:
            entry: AuditLog entity to persist

        Returns:
            Created AuditLog
        """
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_for_entity(
        self,
        entity_type: str,
        entity_id: str,
        event_type: Optional[AuditEventType] = None,
    ) -> List[AuditLog]:
        statement = (
            select(AuditLog)
            .where(AuditLog.entity_type == entity_type)
            .where(AuditLog.entity_id == entity_id)
        )

        if event_type:
            statement = statement.where(AuditLog.event_type == event_type)

        statement = statement.order_by(AuditLog.created_at)
        result = await self.session.execute(statement)
        return list(result.scalars().all())
