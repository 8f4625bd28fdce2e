"""VoidInvoice Use Case

Voids an issued invoice by issuing a linked credit note. The invoice keeps
its number, snapshot and hash; it is never returned to draft.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.document_issuer import DocumentIssuer
from src.app.services.snapshot_builder import build_credit_note_snapshot
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.credit_note_repository import CreditNoteRepository
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.audit_log_repository import AuditLogRepository
from src.app.repositories.document_sequence_repository import SequenceConflictError
from src.domain.audit_log import AuditLog, AuditEventType
from src.domain.credit_note import CreditNote
from src.domain.document_status import OPEN_INVOICE_STATUSES
from src.domain.invoice import InvoiceStatus
from .access import check_document_access, document_not_found
from .dtos import VoidInvoiceCommandDTO, VoidInvoiceResponseDTO
from .issue_invoice import to_issued_document_dto

logger = logging.getLogger(__name__)

MIN_VOID_REASON_LENGTH = 10


class VoidInvoice:
    """
    Use Case: Void an issued invoice

    Business Rules:
    1. Reason is required, at least 10 characters
    2. Only issued, sent or viewed invoices can be voided (paid invoices cannot)
    3. A credit note for the full invoice total is issued and linked
    4. Invoice moves to voided with voided_at, voided_by and void_reason

    Flow:
    1. Validate reason
    2. Load invoice with row lock and check access
    3. Check status
    4. Issue credit note
    5. Void invoice
    6. Write INVOICE_VOIDED and CREDIT_NOTE_ISSUED audit entries
    7. Commit transaction
    8. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        credit_note_repo: CreditNoteRepository,
        business_repo: BusinessRepository,
        client_repo: ClientRepository,
        audit_repo: AuditLogRepository,
        issuer: DocumentIssuer,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.credit_note_repo = credit_note_repo
        self.business_repo = business_repo
        self.client_repo = client_repo
        self.audit_repo = audit_repo
        self.issuer = issuer

    async def execute(self, command: VoidInvoiceCommandDTO) -> Result[VoidInvoiceResponseDTO]:
        try:
            # Step 1: Validate reason
            reason = (command.reason or "").strip()
            if len(reason) < MIN_VOID_REASON_LENGTH:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message=f"Void reason must be at least {MIN_VOID_REASON_LENGTH} characters",
                        reason="Void reason too short",
                    )
                )

            # Step 2: Load invoice with row lock and check access
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if invoice is None:
                return Return.err(document_not_found(command.invoice_id))

            denied = await check_document_access(
                self.business_repo, invoice.business_id, command.actor_id
            )
            if denied:
                return Return.err(denied)

            # Step 3: Check status
            if invoice.status not in OPEN_INVOICE_STATUSES:
                return Return.err(
                    Error(
                        code="INVALID_DOCUMENT_STATUS",
                        message=f"A {invoice.status.value} invoice cannot be voided",
                        reason="Invoice must be issued, sent or viewed",
                    )
                )

            business = await self.business_repo.get_by_id(invoice.business_id)
            client = await self.client_repo.get_by_id(invoice.client_id) if invoice.client_id else None

            # Step 4: Issue credit note
            credit_note = CreditNote(
                business_id=invoice.business_id,
                original_invoice_id=invoice.id,
                reason=reason,
                currency=invoice.currency,
                total_amount=invoice.total_amount,
            )
            await self.issuer.issue(
                credit_note,
                lambda document: build_credit_note_snapshot(document, business, client, invoice),
                business_prefix=business.document_prefix,
                jurisdiction=business.jurisdiction,
                actor_id=command.actor_id,
            )
            credit_note = await self.credit_note_repo.create(credit_note)

            # Step 5: Void invoice
            previous_status = invoice.status
            invoice.status = InvoiceStatus.VOIDED
            invoice.voided_at = datetime.utcnow()
            invoice.voided_by = command.actor_id
            invoice.void_reason = reason
            updated_invoice = await self.invoice_repo.update(invoice)

            # Step 6: Audit
            await self.audit_repo.create(
                AuditLog(
                    event_type=AuditEventType.INVOICE_VOIDED,
                    entity_type="invoice",
                    entity_id=invoice.id,
                    actor_id=command.actor_id,
                    business_id=invoice.business_id,
                    previous_state={"status": previous_status.value},
                    new_state={"status": InvoiceStatus.VOIDED.value, "void_reason": reason},
                    event_metadata={"credit_note_id": credit_note.id},
                )
            )
            await self.audit_repo.create(
                AuditLog(
                    event_type=AuditEventType.CREDIT_NOTE_ISSUED,
                    entity_type="credit_note",
                    entity_id=credit_note.id,
                    actor_id=command.actor_id,
                    business_id=credit_note.business_id,
                    new_state={
                        "document_number": credit_note.document_number,
                        "document_hash": credit_note.document_hash,
                        "verification_id": credit_note.verification_id,
                    },
                    event_metadata={"original_invoice_id": invoice.id},
                )
            )

            # Step 7: Commit transaction
            await self.uow.commit()

            # Step 8: Build response
            return Return.ok(
                VoidInvoiceResponseDTO(
                    invoice_id=updated_invoice.id,
                    status=updated_invoice.status.value,
                    voided_at=updated_invoice.voided_at,
                    credit_note=to_issued_document_dto(credit_note),
                )
            )

        except SequenceConflictError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SEQUENCE_CONFLICT",
                    message="Could not allocate a credit note number, please retry",
                    reason=str(e),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Voiding invoice {command.invoice_id} failed: {e}")
            return Return.err(
                Error(
                    code="VOID_INVOICE_FAILED",
                    message="Failed to void invoice",
                    reason=str(e),
                )
            )
