"""VerifyDocument Use Case

Public, unauthenticated verification of an issued document by its
verification id. Everything returned comes from the document's snapshot
and integrity columns, never from live joins.
"""

import logging
from typing import Optional, List, Tuple
from libs.result import Result, Return, Error
from src.app.services.audit_writer import BestEffortAuditWriter
from src.app.services.document_hasher import (
    canonical_fields_for,
    verify_document_hash,
    normalize_amount,
)
from src.app.services.snapshot_builder import read_snapshot, UNKNOWN_ISSUER
from src.app.services.verification_tokens import is_valid_verification_id
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.receipt_repository import ReceiptRepository
from src.app.repositories.credit_note_repository import CreditNoteRepository
from src.app.repositories.business_repository import BusinessRepository
from src.domain.audit_log import AuditLog, AuditEventType
from src.domain.document_status import DocumentType, InvoiceStatus, status_label
from .dtos import VerificationRecordDTO, VerificationResultDTO

logger = logging.getLogger(__name__)

_VIEWED_EVENTS = {
    DocumentType.INVOICE: AuditEventType.INVOICE_VIEWED,
    DocumentType.RECEIPT: AuditEventType.RECEIPT_VIEWED,
    DocumentType.CREDIT_NOTE: AuditEventType.CREDIT_NOTE_VIEWED,
}


class VerifyDocument:
    """
    Use Case: Verify a document by its public verification id

    Business Rules:
    1. Malformed ids are rejected before any lookup (INVALID_VERIFICATION_ID)
    2. Unknown ids and drafts are indistinguishable (DOCUMENT_NOT_FOUND)
    3. Issuer name, number, amount and currency come from the snapshot;
       documents issued before snapshots existed fall back to the live
       business with a logged warning
    4. The hash is recomputed and reported as integrity_valid
    5. A view is audited best-effort; a failed audit write never fails
       the verification

    Flow:
    1. Validate verification id shape
    2. Look up invoice, receipt and credit note (or only the requested type)
    3. Treat drafts as not found
    4. Read snapshot (legacy fallback if absent)
    5. Recompute hash
    6. Audit view
    7. Return response
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        receipt_repo: ReceiptRepository,
        credit_note_repo: CreditNoteRepository,
        business_repo: BusinessRepository,
        audit_writer: BestEffortAuditWriter,
    ):
        self.invoice_repo = invoice_repo
        self.receipt_repo = receipt_repo
        self.credit_note_repo = credit_note_repo
        self.business_repo = business_repo
        self.audit_writer = audit_writer

    async def execute(
        self,
        verification_id: str,
        document_type: Optional[DocumentType] = None,
    ) -> Result[VerificationResultDTO]:
        """
        Execute document verification

        Args:
            verification_id: Public verification token
            document_type: Optional restriction to one kind of document

        Returns:
            Result[VerificationResultDTO]: Verified record or error
        """
        # Step 1: Validate shape
        if not is_valid_verification_id(verification_id):
            return Return.err(
                Error(
                    code="INVALID_VERIFICATION_ID",
                    message="Invalid verification ID format",
                    reason="Verification id is not a UUID",
                )
            )

        verification_id = verification_id.lower()

        try:
            # Step 2: Look up
            document = None
            for _, lookup in self._lookups(document_type):
                document = await lookup(verification_id)
                if document is not None:
                    break

            # Step 3: Drafts are not verifiable
            if document is None or not self._is_issued(document):
                await self._audit_not_found(verification_id, document_type)
                return Return.err(
                    Error(
                        code="DOCUMENT_NOT_FOUND",
                        message="Document not found",
                        reason=f"No issued document for verification id {verification_id}",
                    )
                )

            # Step 4: Read snapshot
            snapshot = read_snapshot(document.snapshot)
            snapshot_used = snapshot is not None
            if snapshot_used:
                issuer_name = snapshot.issuer_name
                amount = snapshot.total_amount or normalize_amount(document.total_amount)
                currency = snapshot.currency or document.currency
            else:
                issuer_name = await self._legacy_issuer_name(document)
                amount = normalize_amount(document.total_amount)
                currency = document.currency

            # Step 5: Recompute hash
            integrity_valid = verify_document_hash(
                canonical_fields_for(document), document.document_hash
            )
            if not integrity_valid:
                logger.warning(
                    f"Integrity check failed for {document.document_type.value} {document.id}"
                )

            status = document.status.value
            record = VerificationRecordDTO(
                document_type=document.document_type.value,
                number=document.document_number,
                issued_at=document.issued_at,
                issuer_name=issuer_name,
                status=status,
                status_label=status_label(document.document_type, status),
                amount=amount,
                currency=currency,
                integrity_valid=integrity_valid,
            )

            # Step 6: Audit view
            await self.audit_writer.write(
                AuditLog(
                    event_type=_VIEWED_EVENTS[document.document_type],
                    entity_type=document.document_type.value,
                    entity_id=document.id,
                    business_id=document.business_id,
                    event_metadata={
                        "verification_id": verification_id,
                        "snapshot_used": snapshot_used,
                        "integrity_valid": integrity_valid,
                    },
                )
            )

            # Step 7: Build response
            return Return.ok(VerificationResultDTO(verified=True, record=record))

        except Exception as e:
            logger.error(f"Verification of {verification_id} failed: {e}")
            return Return.err(
                Error(
                    code="VERIFICATION_FAILED",
                    message="Verification is temporarily unavailable",
                    reason=str(e),
                )
            )

    def _lookups(self, document_type: Optional[DocumentType]) -> List[Tuple[DocumentType, object]]:
        lookups = [
            (DocumentType.INVOICE, self.invoice_repo.get_by_verification_id),
            (DocumentType.RECEIPT, self.receipt_repo.get_by_verification_id),
            (DocumentType.CREDIT_NOTE, self.credit_note_repo.get_by_verification_id),
        ]
        if document_type is None:
            return lookups
        return [entry for entry in lookups if entry[0] == document_type]

    @staticmethod
    def _is_issued(document) -> bool:
        if document.document_type == DocumentType.INVOICE and document.status == InvoiceStatus.DRAFT:
            return False
        return document.is_issued and document.document_hash is not None

    async def _legacy_issuer_name(self, document) -> str:
        logger.warning(
            f"{document.document_type.value} {document.id} has no snapshot, "
            f"falling back to live business {document.business_id}"
        )
        business = await self.business_repo.get_by_id(document.business_id)
        if business is None:
            return UNKNOWN_ISSUER
        return business.legal_name or business.name or UNKNOWN_ISSUER

    async def _audit_not_found(self, verification_id: str, document_type: Optional[DocumentType]):
        await self.audit_writer.write(
            AuditLog(
                event_type=AuditEventType.VERIFICATION_NOT_FOUND,
                entity_type=document_type.value if document_type else "document",
                entity_id=None,
                event_metadata={"verification_id": verification_id, "found": False},
            )
        )
