"""Audit Log Repository Interface

Append-only: there is deliberately no update or delete method.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.audit_log import AuditLog, AuditEventType


class AuditLogRepository(ABC):
    """
    Repository interface for AuditLog persistence
    """

    @abstractmethod
    async def create(self, entry: AuditLog) -> AuditLog:
        """
        Append an audit entry

        Args:
            entry: AuditLog entity to persist

        Returns:
            Created AuditLog
        """
        pass

    @abstractmethod
    async def list_for_entity(
        self,
        entity_type: str,
        entity_id: str,
        event_type: Optional[AuditEventType] = None,
    ) -> List[AuditLog]:
        """
        List audit entries for an entity, oldest first

        Args:
            entity_type: Kind of entity
            entity_id: Entity ID
            event_type: Optional filter by event type

        Returns:
            List of AuditLog
        """
        pass
