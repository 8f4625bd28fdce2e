"""IssueInvoice Use Case

Turns a draft invoice into an immutable, verifiable record.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.document_issuer import DocumentIssuer, AlreadyIssuedError
from src.app.services.snapshot_builder import build_invoice_snapshot
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.user_profile_repository import UserProfileRepository
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.payment_method_repository import PaymentMethodRepository
from src.app.repositories.tax_schema_repository import TaxSchemaRepository
from src.app.repositories.audit_log_repository import AuditLogRepository
from src.app.repositories.document_sequence_repository import SequenceConflictError
from src.domain.audit_log import AuditLog, AuditEventType
from src.domain.invoice import Invoice, InvoiceStatus
from .access import check_document_access, check_verified_identity, document_not_found
from .dtos import IssueInvoiceCommandDTO, IssuedDocumentDTO

logger = logging.getLogger(__name__)


def already_issued(reason: str) -> Error:
    return Error(
        code="ALREADY_ISSUED",
        message="Document has already been issued",
        reason=reason,
    )


def to_issued_document_dto(document) -> IssuedDocumentDTO:
    return IssuedDocumentDTO(
        document_id=document.id,
        document_type=document.document_type.value,
        document_number=document.document_number,
        verification_id=document.verification_id,
        issued_at=document.issued_at,
        document_hash=document.document_hash,
        retention_locked_until=document.retention_locked_until,
        status=document.status.value,
    )


class IssueInvoice:
    """
    Use Case: Issue a draft invoice

    Business Rules:
    1. Invoice must exist and belong to a business the actor may issue for
    2. Actor must have a verified email (when required by configuration)
    3. Only drafts can be issued; a second issue call fails with ALREADY_ISSUED
       and changes nothing
    4. Number, snapshot, hash, verification id, retention date, status flip
       and audit entry commit together or not at all

    Flow:
    1. Load invoice with row lock
    2. Check access and identity
    3. Check status is draft
    4. Load snapshot sources (business, client, lines, payment method, tax schema)
    5. Issue (number, verification id, snapshot, hash, retention date)
    6. Set status=issued and persist
    7. Write INVOICE_ISSUED audit entry
    8. Commit transaction
    9. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        business_repo: BusinessRepository,
        user_repo: UserProfileRepository,
        client_repo: ClientRepository,
        payment_method_repo: PaymentMethodRepository,
        tax_schema_repo: TaxSchemaRepository,
        audit_repo: AuditLogRepository,
        issuer: DocumentIssuer,
        require_verified_email: bool = True,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.business_repo = business_repo
        self.user_repo = user_repo
        self.client_repo = client_repo
        self.payment_method_repo = payment_method_repo
        self.tax_schema_repo = tax_schema_repo
        self.audit_repo = audit_repo
        self.issuer = issuer
        self.require_verified_email = require_verified_email

    async def execute(self, command: IssueInvoiceCommandDTO) -> Result[IssuedDocumentDTO]:
        """
        Execute invoice issuance

        Args:
            command: IssueInvoiceCommandDTO with invoice_id and actor_id

        Returns:
            Result[IssuedDocumentDTO]: Integrity fields of the issued invoice or error
        """
        try:
            # Step 1: Load invoice with row lock
            invoice = await self.invoice_repo.get_by_id(command.invoice_id, for_update=True)
            if invoice is None:
                return Return.err(document_not_found(command.invoice_id))

            # Step 2: Check access and identity
            denied = await check_document_access(
                self.business_repo, invoice.business_id, command.actor_id
            )
            if denied:
                return Return.err(denied)

            if self.require_verified_email:
                unverified = await check_verified_identity(self.user_repo, command.actor_id)
                if unverified:
                    return Return.err(unverified)

            # Step 3: Only drafts can be issued
            if invoice.status != InvoiceStatus.DRAFT or invoice.is_issued:
                return Return.err(already_issued(f"Invoice {invoice.id} is in status {invoice.status.value}"))

            # Step 4: Load snapshot sources
            business = await self.business_repo.get_by_id(invoice.business_id)
            if business is None:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message="Issuing business profile is missing",
                        reason=f"Business {invoice.business_id} not found",
                    )
                )

            client = await self.client_repo.get_by_id(invoice.client_id) if invoice.client_id else None
            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            payment_method = (
                await self.payment_method_repo.get_by_id(invoice.payment_method_id)
                if invoice.payment_method_id else None
            )
            tax_schema = (
                await self.tax_schema_repo.get_by_id(invoice.tax_schema_id)
                if invoice.tax_schema_id else None
            )

            # Step 5: Issue
            issued_at = datetime.utcnow()
            if invoice.issue_date is None:
                invoice.issue_date = issued_at.date()

            await self.issuer.issue(
                invoice,
                lambda document: build_invoice_snapshot(
                    document, business, client, lines, payment_method, tax_schema
                ),
                business_prefix=business.document_prefix,
                jurisdiction=business.jurisdiction,
                actor_id=command.actor_id,
                issued_at=issued_at,
            )

            # Step 6: Status flip
            invoice.status = InvoiceStatus.ISSUED
            updated_invoice = await self.invoice_repo.update(invoice)

            # Step 7: Audit
            await self.audit_repo.create(self._audit_entry(updated_invoice, command.actor_id))

            # Step 8: Commit transaction
            await self.uow.commit()

            # Step 9: Build response
            return Return.ok(to_issued_document_dto(updated_invoice))

        except AlreadyIssuedError as e:
            await self.uow.rollback()
            return Return.err(already_issued(str(e)))

        except SequenceConflictError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SEQUENCE_CONFLICT",
                    message="Could not allocate a document number, please retry",
                    reason=str(e),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Issuing invoice {command.invoice_id} failed: {e}")
            return Return.err(
                Error(
                    code="ISSUE_INVOICE_FAILED",
                    message="Failed to issue invoice",
                    reason=str(e),
                )
            )

    def _audit_entry(self, invoice: Invoice, actor_id: str) -> AuditLog:
        return AuditLog(
            event_type=AuditEventType.INVOICE_ISSUED,
            entity_type="invoice",
            entity_id=invoice.id,
            actor_id=actor_id,
            business_id=invoice.business_id,
            previous_state={"status": InvoiceStatus.DRAFT.value},
            new_state={
                "status": invoice.status.value,
                "document_number": invoice.document_number,
                "document_hash": invoice.document_hash,
                "verification_id": invoice.verification_id,
                "issued_at": invoice.issued_at.isoformat(),
                "retention_locked_until": invoice.retention_locked_until.isoformat(),
            },
        )
