"""MarkInvoiceSent Use Case

Records that an issued invoice was delivered to its recipient.
"""

from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.audit_log_repository import AuditLogRepository
from src.domain.audit_log import AuditLog, AuditEventType
from src.domain.document_status import can_transition
from src.domain.invoice import InvoiceStatus
from .access import check_document_access, document_not_found
from .dtos import InvoiceActionCommandDTO, InvoiceStatusResponseDTO


class MarkInvoiceSent:
    """
    Use Case: Mark an issued invoice as sent

    Business Rules:
    1. Allowed from issued and viewed; re-sending a sent invoice is allowed
    2. Drafts must be issued first
    3. Only status changes; integrity fields are untouched
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        business_repo: BusinessRepository,
        audit_repo: AuditLogRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.business_repo = business_repo
        self.audit_repo = audit_repo

    async def execute(self, command: InvoiceActionCommandDTO) -> Result[InvoiceStatusResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if invoice is None:
                return Return.err(document_not_found(command.invoice_id))

            denied = await check_document_access(
                self.business_repo, invoice.business_id, command.actor_id
            )
            if denied:
                return Return.err(denied)

            previous_status = invoice.status
            if previous_status != InvoiceStatus.SENT and not can_transition(previous_status, InvoiceStatus.SENT):
                return Return.err(
                    Error(
                        code="INVALID_DOCUMENT_STATUS",
                        message=f"Invoice cannot be sent while {previous_status.value}",
                        reason=f"Transition {previous_status.value} -> sent not allowed",
                    )
                )

            invoice.status = InvoiceStatus.SENT
            updated_invoice = await self.invoice_repo.update(invoice)

            await self.audit_repo.create(
                AuditLog(
                    event_type=AuditEventType.INVOICE_SENT,
                    entity_type="invoice",
                    entity_id=invoice.id,
                    actor_id=command.actor_id,
                    business_id=invoice.business_id,
                    previous_state={"status": previous_status.value},
                    new_state={"status": InvoiceStatus.SENT.value},
                )
            )

            await self.uow.commit()

            return Return.ok(
                InvoiceStatusResponseDTO(
                    invoice_id=updated_invoice.id,
                    status=updated_invoice.status.value,
                    updated_at=updated_invoice.updated_at or datetime.utcnow(),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SEND_INVOICE_FAILED",
                    message="Failed to mark invoice as sent",
                    reason=str(e),
                )
            )
