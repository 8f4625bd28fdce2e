"""Best-effort audit writer

Used where an audit entry must not decide the outcome of the operation that
triggered it (public verification views). The write gets its own Result so
callers can log a failure and carry on.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.audit_log_repository import AuditLogRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.audit_log import AuditLog

logger = logging.getLogger(__name__)


class BestEffortAuditWriter:
    def __init__(self, uow: UnitOfWork, audit_repo: AuditLogRepository):
        self.uow = uow
        self.audit_repo = audit_repo

    async def write(self, entry: AuditLog) -> Result[AuditLog]:
        """
        Persist and commit a single audit entry

        Returns:
            Result[AuditLog]: the stored entry, or AUDIT_WRITE_FAILED
        """
        try:
            created = await self.audit_repo.create(entry)
            await self.uow.commit()
            return Return.ok(created)
        except Exception as e:
            await self.uow.rollback()
            logger.error(
                f"Audit write failed for {entry.event_type.value} "
                f"({entry.entity_type}/{entry.entity_id}): {e}"
            )
            return Return.err(
                Error(
                    code="AUDIT_WRITE_FAILED",
                    message="Failed to write audit entry",
                    reason=str(e),
                )
            )
