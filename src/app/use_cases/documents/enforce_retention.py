"""EnforceRetention Use Case

Permanently deletes issued documents whose retention period has elapsed.
Runs on a schedule; never triggered by end users.
"""

import logging
from datetime import date, datetime
from typing import AsyncIterator, Dict, List, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.receipt_repository import ReceiptRepository
from src.app.repositories.credit_note_repository import CreditNoteRepository
from src.app.repositories.audit_log_repository import AuditLogRepository
from src.domain.audit_log import AuditLog, AuditEventType
from src.domain.document_status import DocumentType
from .dtos import RetentionErrorDTO, RetentionSweepResultDTO

logger = logging.getLogger(__name__)


class EnforceRetention:
    """
    Use Case: Retention sweep

    Business Rules:
    1. Only documents with retention_locked_until strictly before today are
       eligible; a document issued today can never be selected
    2. An invoice is deleted together with its receipts, credit notes,
       payments and line items, children first, in one transaction
    3. An expired invoice whose receipt or credit note is still locked is
       deferred to a later run
    4. A failure rolls back that document only and is reported in errors
    5. Exactly one RETENTION_CLEANUP audit entry is written per run, also
       when nothing was deleted or some deletions failed
    6. Running twice in a row deletes nothing the second time
    7. Candidates are read in pages of batch_size ordered by
       (retention_locked_until, id); deferred or failed documents are paged
       past, so they never hold back later expired documents

    Flow:
    1. Delete expired invoices with dependents
    2. Delete expired receipts whose invoice is still retained
    3. Delete expired credit notes whose invoice is still retained
    4. Write RETENTION_CLEANUP audit entry
    5. Commit and return summary
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        payment_repo: PaymentRepository,
        receipt_repo: ReceiptRepository,
        credit_note_repo: CreditNoteRepository,
        audit_repo: AuditLogRepository,
        batch_size: int = 500,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.payment_repo = payment_repo
        self.receipt_repo = receipt_repo
        self.credit_note_repo = credit_note_repo
        self.audit_repo = audit_repo
        self.batch_size = batch_size

    async def execute(self, today: Optional[date] = None) -> Result[RetentionSweepResultDTO]:
        """
        Execute one retention sweep

        Args:
            today: Reference date (defaults to current UTC date)

        Returns:
            Result[RetentionSweepResultDTO]: Counts, deferrals and per-document errors
        """
        started_at = datetime.utcnow()
        today = today or started_at.date()
        counts: Dict[str, int] = {
            DocumentType.INVOICE.value: 0,
            DocumentType.RECEIPT.value: 0,
            DocumentType.CREDIT_NOTE.value: 0,
            "payment": 0,
            "invoice_line": 0,
        }
        errors: List[RetentionErrorDTO] = []
        deferred = 0

        try:
            # Step 1: Invoices with dependents
            async for invoice_id in self._expired_ids(self.invoice_repo, today):
                try:
                    deleted = await self._delete_invoice(invoice_id, today)
                    if deleted is None:
                        deferred += 1
                        continue
                    await self.uow.commit()
                    for key, value in deleted.items():
                        counts[key] += value
                except Exception as e:
                    await self.uow.rollback()
                    logger.error(f"Retention: failed to delete invoice {invoice_id}: {e}")
                    errors.append(self._error(DocumentType.INVOICE, invoice_id, e))

            # Step 2: Receipts
            async for receipt_id in self._expired_ids(self.receipt_repo, today):
                try:
                    receipt = await self.receipt_repo.get_by_id(receipt_id)
                    if receipt is None:
                        continue
                    await self.receipt_repo.delete(receipt)
                    await self.uow.commit()
                    counts[DocumentType.RECEIPT.value] += 1
                except Exception as e:
                    await self.uow.rollback()
                    logger.error(f"Retention: failed to delete receipt {receipt_id}: {e}")
                    errors.append(self._error(DocumentType.RECEIPT, receipt_id, e))

            # Step 3: Credit notes
            async for credit_note_id in self._expired_ids(self.credit_note_repo, today):
                try:
                    credit_note = await self.credit_note_repo.get_by_id(credit_note_id)
                    if credit_note is None:
                        continue
                    await self.credit_note_repo.delete(credit_note)
                    await self.uow.commit()
                    counts[DocumentType.CREDIT_NOTE.value] += 1
                except Exception as e:
                    await self.uow.rollback()
                    logger.error(f"Retention: failed to delete credit note {credit_note_id}: {e}")
                    errors.append(self._error(DocumentType.CREDIT_NOTE, credit_note_id, e))

            completed_at = datetime.utcnow()

            # Step 4: Audit
            await self.audit_repo.create(
                AuditLog(
                    event_type=AuditEventType.RETENTION_CLEANUP,
                    entity_type="retention_cleanup",
                    entity_id=None,
                    event_metadata={
                        "cutoff_date": today.isoformat(),
                        "started_at": started_at.isoformat(),
                        "completed_at": completed_at.isoformat(),
                        "deleted_counts_by_type": counts,
                        "deferred": deferred,
                        "errors": [error.model_dump() for error in errors],
                    },
                )
            )

            # Step 5: Commit and return summary
            await self.uow.commit()

            logger.info(
                f"Retention sweep for {today}: deleted {counts}, "
                f"deferred {deferred}, errors {len(errors)}"
            )

            return Return.ok(
                RetentionSweepResultDTO(
                    started_at=started_at,
                    completed_at=completed_at,
                    deleted_counts_by_type=counts,
                    deferred=deferred,
                    errors=errors,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Retention sweep failed: {e}")
            return Return.err(
                Error(
                    code="RETENTION_SWEEP_FAILED",
                    message="Retention sweep failed",
                    reason=str(e),
                )
            )

    async def _expired_ids(self, repo, today: date) -> AsyncIterator[str]:
        """
        Yield ids of expired documents one page at a time

        The cursor is taken before the page is processed, so deleted rows
        don't shift it and kept rows are not read again.
        """
        cursor = None
        while True:
            page = await repo.list_expired(today, self.batch_size, after=cursor)
            if not page:
                return
            cursor = (page[-1].retention_locked_until, page[-1].id)
            ids = [document.id for document in page]
            for document_id in ids:
                yield document_id
            if len(page) < self.batch_size:
                return

    async def _delete_invoice(self, invoice_id: str, today: date) -> Optional[Dict[str, int]]:
        """
        Delete one invoice and everything hanging off it

        Returns:
            Deleted row counts by type, or None if the invoice was deferred
        """
        invoice = await self.invoice_repo.get_by_id(invoice_id, for_update=True)
        if invoice is None:
            return {}

        receipts = await self.receipt_repo.get_by_invoice_id(invoice_id)
        credit_notes = await self.credit_note_repo.get_by_invoice_id(invoice_id)
        still_locked = [
            document
            for document in [*receipts, *credit_notes]
            if document.retention_locked_until is not None and document.retention_locked_until >= today
        ]
        if still_locked:
            logger.info(
                f"Retention: invoice {invoice_id} deferred, "
                f"{len(still_locked)} dependent document(s) still retained"
            )
            return None

        for receipt in receipts:
            await self.receipt_repo.delete(receipt)
        for credit_note in credit_notes:
            await self.credit_note_repo.delete(credit_note)
        payments = await self.payment_repo.delete_by_invoice_id(invoice_id)
        lines = await self.invoice_line_repo.delete_by_invoice_id(invoice_id)
        await self.invoice_repo.delete(invoice)

        return {
            DocumentType.RECEIPT.value: len(receipts),
            DocumentType.CREDIT_NOTE.value: len(credit_notes),
            "payment": payments,
            "invoice_line": lines,
            DocumentType.INVOICE.value: 1,
        }

    @staticmethod
    def _error(document_type: DocumentType, document_id: str, exc: Exception) -> RetentionErrorDTO:
        return RetentionErrorDTO(
            document_type=document_type.value,
            document_id=document_id,
            message=str(exc),
        )
