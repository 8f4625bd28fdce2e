"""SQLAlchemy Document Sequence Repository Implementation

Allocates document numbers with a single atomic UPDATE ... RETURNING so the
database, not the application, serializes concurrent issuances.
"""

import logging
from datetime import datetime
from typing import Optional
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.document_sequence_repository import (
    DocumentSequenceRepository,
    SequenceConflictError,
)
from src.domain.document_sequence import DocumentSequence

logger = logging.getLogger(__name__)


class SqlAlchemyDocumentSequenceRepository(DocumentSequenceRepository):
    """
    SQLAlchemy implementation of DocumentSequenceRepository

    Features:
    - Atomic increment: the UPDATE takes the row lock and returns the new
      value in one statement, so no two transactions see the same number
    - First allocation in a scope inserts the row inside a savepoint; if a
      concurrent transaction inserted it first, the unique constraint
      rejects ours and we retry the increment
    - Runs inside the caller's transaction: a rollback returns the number
    """

    def __init__(self, session: AsyncSession, max_attempts: int = 3):
        self.session = session
        self.max_attempts = max_attempts

    async def allocate(self, business_id: str, document_type: str, scope: str) -> int:
        """
        Allocate the next number in a scope

        Args:
            business_id: Issuing business
            document_type: Document type value
            scope: Numbering scope (calendar year)

        Returns:
            Allocated sequence value, starting at 1

        Raises:
            SequenceConflictError: If the scope row could not be created or incremented
        """
        for attempt in range(1, self.max_attempts + 1):
            allocated = await self._increment(business_id, document_type, scope)
            if allocated is not None:
                return allocated

            try:
                async with self.session.begin_nested():
                    self.session.add(
                        DocumentSequence(
                            business_id=business_id,
                            document_type=document_type,
                            scope=scope,
                            next_value=2,
                        )
                    )
                return 1
            except IntegrityError:
                logger.info(
                    f"Sequence {business_id}/{document_type}/{scope} created concurrently, "
                    f"retrying (attempt {attempt})"
                )

        raise SequenceConflictError(
            f"Could not allocate {document_type} number for business {business_id} in {scope}"
        )

    async def _increment(self, business_id: str, document_type: str, scope: str) -> Optional[int]:
        statement = (
            update(DocumentSequence)
            .where(DocumentSequence.business_id == business_id)
            .where(DocumentSequence.document_type == document_type)
            .where(DocumentSequence.scope == scope)
            .values(
                next_value=DocumentSequence.next_value + 1,
                updated_at=datetime.utcnow(),
            )
            .returning(DocumentSequence.next_value)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        row = result.first()
        if row is None:
            return None
        return row[0] - 1
