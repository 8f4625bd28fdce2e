"""RecordPayment Use Case

Records a payment against an issued invoice and issues its receipt in the
same transaction.
"""

import logging
from datetime import datetime
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.document_issuer import DocumentIssuer
from src.app.services.snapshot_builder import build_receipt_snapshot
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.repositories.receipt_repository import ReceiptRepository
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.audit_log_repository import AuditLogRepository
from src.app.repositories.document_sequence_repository import SequenceConflictError
from src.domain.audit_log import AuditLog, AuditEventType
from src.domain.document_status import OPEN_INVOICE_STATUSES
from src.domain.invoice import InvoiceStatus
from src.domain.payment import Payment
from src.domain.receipt import Receipt
from .access import check_document_access, document_not_found
from .dtos import RecordPaymentCommandDTO, RecordPaymentResponseDTO
from .issue_invoice import to_issued_document_dto

logger = logging.getLogger(__name__)

MAX_PAYMENT_AMOUNT = Decimal("999999999.99")


class RecordPayment:
    """
    Use Case: Record a payment and issue its receipt

    Business Rules:
    1. 0 < amount <= 999999999.99 and amount <= outstanding balance
    2. Invoice must be issued, sent or viewed
    3. amount_paid accumulates; the invoice becomes paid once fully covered
    4. Exactly one receipt is issued per payment, with its own number,
       snapshot, hash, verification id and retention date

    Flow:
    1. Validate amount
    2. Load invoice with row lock and check access
    3. Check status and outstanding balance
    4. Create payment
    5. Update amount_paid and status
    6. Issue receipt
    7. Write PAYMENT_RECORDED and RECEIPT_ISSUED audit entries
    8. Commit transaction
    9. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
        receipt_repo: ReceiptRepository,
        business_repo: BusinessRepository,
        client_repo: ClientRepository,
        audit_repo: AuditLogRepository,
        issuer: DocumentIssuer,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.receipt_repo = receipt_repo
        self.business_repo = business_repo
        self.client_repo = client_repo
        self.audit_repo = audit_repo
        self.issuer = issuer

    async def execute(self, command: RecordPaymentCommandDTO) -> Result[RecordPaymentResponseDTO]:
        """
        Execute payment recording

        Args:
            command: RecordPaymentCommandDTO with invoice, amount and payment details

        Returns:
            Result[RecordPaymentResponseDTO]: Payment, updated invoice totals and receipt
        """
        try:
            # Step 1: Validate amount
            if command.amount <= 0 or command.amount > MAX_PAYMENT_AMOUNT:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message=f"Payment amount must be greater than 0 and at most {MAX_PAYMENT_AMOUNT}",
                        reason=f"Invalid amount {command.amount}",
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

            # Step 3: Check status and outstanding balance
            if invoice.status not in OPEN_INVOICE_STATUSES:
                return Return.err(
                    Error(
                        code="INVALID_DOCUMENT_STATUS",
                        message=f"Payments cannot be recorded on a {invoice.status.value} invoice",
                        reason="Invoice must be issued, sent or viewed",
                    )
                )

            outstanding = invoice.total_amount - invoice.amount_paid
            if command.amount > outstanding:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message=f"Payment exceeds the outstanding balance of {outstanding}",
                        reason=f"Amount {command.amount} > outstanding {outstanding}",
                    )
                )

            business = await self.business_repo.get_by_id(invoice.business_id)
            payer = await self.client_repo.get_by_id(invoice.client_id) if invoice.client_id else None

            # Step 4: Create payment
            payment = await self.payment_repo.create(
                Payment(
                    invoice_id=invoice.id,
                    amount=command.amount,
                    payment_method=command.payment_method,
                    payment_reference=command.payment_reference,
                    payment_date=command.payment_date or datetime.utcnow().date(),
                    notes=command.notes,
                    recorded_by=command.actor_id,
                )
            )

            # Step 5: Update amount_paid and status
            previous_status = invoice.status
            invoice.amount_paid = invoice.amount_paid + command.amount
            if invoice.amount_paid >= invoice.total_amount:
                invoice.status = InvoiceStatus.PAID
            updated_invoice = await self.invoice_repo.update(invoice)

            # Step 6: Issue receipt (one per payment)
            receipt = await self.receipt_repo.get_by_payment_id(payment.id)
            if receipt is None:
                receipt = Receipt(
                    business_id=invoice.business_id,
                    invoice_id=invoice.id,
                    payment_id=payment.id,
                    currency=invoice.currency,
                    total_amount=command.amount,
                )
                await self.issuer.issue(
                    receipt,
                    lambda document: build_receipt_snapshot(document, business, payer, invoice, payment),
                    business_prefix=business.document_prefix,
                    jurisdiction=business.jurisdiction,
                    actor_id=command.actor_id,
                )
                receipt = await self.receipt_repo.create(receipt)

            payment.retention_locked_until = receipt.retention_locked_until

            # Step 7: Audit
            await self.audit_repo.create(
                AuditLog(
                    event_type=AuditEventType.PAYMENT_RECORDED,
                    entity_type="invoice",
                    entity_id=invoice.id,
                    actor_id=command.actor_id,
                    business_id=invoice.business_id,
                    previous_state={"status": previous_status.value},
                    new_state={
                        "status": updated_invoice.status.value,
                        "amount_paid": str(updated_invoice.amount_paid),
                    },
                    event_metadata={"payment_id": payment.id, "amount": str(command.amount)},
                )
            )
            await self.audit_repo.create(
                AuditLog(
                    event_type=AuditEventType.RECEIPT_ISSUED,
                    entity_type="receipt",
                    entity_id=receipt.id,
                    actor_id=command.actor_id,
                    business_id=receipt.business_id,
                    new_state={
                        "document_number": receipt.document_number,
                        "document_hash": receipt.document_hash,
                        "verification_id": receipt.verification_id,
                    },
                    event_metadata={"invoice_id": invoice.id, "payment_id": payment.id},
                )
            )

            # Step 8: Commit transaction
            await self.uow.commit()

            # Step 9: Build response
            return Return.ok(
                RecordPaymentResponseDTO(
                    payment_id=payment.id,
                    invoice_id=updated_invoice.id,
                    amount=payment.amount,
                    amount_paid=updated_invoice.amount_paid,
                    invoice_status=updated_invoice.status.value,
                    receipt=to_issued_document_dto(receipt),
                )
            )

        except SequenceConflictError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SEQUENCE_CONFLICT",
                    message="Could not allocate a receipt number, please retry",
                    reason=str(e),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Recording payment on invoice {command.invoice_id} failed: {e}")
            return Return.err(
                Error(
                    code="RECORD_PAYMENT_FAILED",
                    message="Failed to record payment",
                    reason=str(e),
                )
            )
