"""Document Issuer

Finalizes any issuable document inside the caller's unit of work:
number allocation, verification id, snapshot, hash and retention date.
Callers set their own status and write their own audit entry, then commit.
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Any, Optional

from src.app.repositories.document_sequence_repository import DocumentSequenceRepository
from src.app.services.document_hasher import canonical_fields_for, compute_document_hash
from src.app.services.retention_calculator import RetentionCalculator
from src.app.services.verification_tokens import new_verification_id
from src.domain.document_status import DocumentType
from src.domain.issuable_document import IssuableDocument, SNAPSHOT_VERSION

logger = logging.getLogger(__name__)

_NUMBER_PREFIXES = {
    DocumentType.INVOICE: "",
    DocumentType.RECEIPT: "RCP-",
    DocumentType.CREDIT_NOTE: "CN-",
}


class AlreadyIssuedError(Exception):
    """Raised when issuance is attempted on a document that already has a hash"""


def format_document_number(
    document_type: DocumentType,
    business_prefix: str,
    scope: str,
    sequence: int,
    padding: int = 6,
) -> str:
    """
    Human-readable document number

    Examples: INV-2026-000001, RCP-INV-2026-000001, CN-INV-2026-000001
    """
    return f"{_NUMBER_PREFIXES[document_type]}{business_prefix}-{scope}-{sequence:0{padding}d}"


class DocumentIssuer:
    """
    Applies the write-once integrity fields to a document

    Order matters: the verification id and number are assigned first so the
    snapshot can reference them, the hash is computed over the finished
    snapshot, and nothing is written that a later step could invalidate.
    """

    def __init__(
        self,
        sequence_repo: DocumentSequenceRepository,
        retention: RetentionCalculator,
        number_padding: int = 6,
    ):
        self.sequence_repo = sequence_repo
        self.retention = retention
        self.number_padding = number_padding

    async def issue(
        self,
        document: IssuableDocument,
        build_snapshot: Callable[[IssuableDocument], Dict[str, Any]],
        business_prefix: str,
        jurisdiction: Optional[str],
        actor_id: Optional[str],
        issued_at: Optional[datetime] = None,
    ) -> IssuableDocument:
        """
        Issue a document in place

        Args:
            document: Invoice, Receipt or CreditNote not yet issued
            build_snapshot: Called with the numbered document, returns its snapshot
            business_prefix: Business document prefix (e.g. "INV")
            jurisdiction: Issuer jurisdiction, drives the retention policy
            actor_id: User performing the issuance
            issued_at: Issuance timestamp (defaults to now, UTC)

        Returns:
            The same document with integrity fields populated

        Raises:
            AlreadyIssuedError: If the document already carries issuance data
        """
        if document.is_issued or document.document_hash is not None:
            raise AlreadyIssuedError(f"{document.document_type.value} {document.id} is already issued")

        issued_at = issued_at or datetime.utcnow()
        document_type = document.document_type
        scope = str(issued_at.year)

        sequence = await self.sequence_repo.allocate(document.business_id, document_type.value, scope)

        document.document_number = format_document_number(
            document_type, business_prefix, scope, sequence, self.number_padding
        )
        document.verification_id = new_verification_id()
        document.issued_at = issued_at
        document.issued_by = actor_id

        snapshot = build_snapshot(document)
        document.snapshot = snapshot
        document.snapshot_version = snapshot.get("snapshot_version", SNAPSHOT_VERSION)

        document.document_hash = compute_document_hash(canonical_fields_for(document))
        document.retention_locked_until = await self.retention.locked_until(
            jurisdiction, document_type, issued_at.date()
        )

        logger.info(
            f"Issued {document_type.value} {document.id} as {document.document_number} "
            f"(retained until {document.retention_locked_until})"
        )
        return document
