"""CreateDraftInvoice Use Case

Creates a draft invoice with its line items and computed totals.
Drafts are freely editable and carry no integrity fields.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import List, Tuple
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.app.repositories.business_repository import BusinessRepository
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.audit_log_repository import AuditLogRepository
from src.domain.audit_log import AuditLog, AuditEventType
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine
from .access import check_document_access
from .dtos import CreateDraftInvoiceCommandDTO, DraftInvoiceResponseDTO, DraftLineItemDTO

_CENT = Decimal("0.01")
_HUNDRED = Decimal("100")


def price_line(item: DraftLineItemDTO) -> Tuple[Decimal, Decimal]:
    """Return (amount after line discount, tax on that amount), rounded to cents"""
    gross = item.quantity * item.unit_price
    amount = (gross * (_HUNDRED - item.discount_percent) / _HUNDRED).quantize(_CENT, rounding=ROUND_HALF_UP)
    tax = (amount * item.tax_rate / _HUNDRED).quantize(_CENT, rounding=ROUND_HALF_UP)
    return amount, tax


class CreateDraftInvoice:
    """
    Use Case: Create a draft invoice

    Business Rules:
    1. Actor must be a member of the business with an issuing role
    2. Client, if given, must belong to the same business
    3. Totals are computed from line items: total = subtotal + tax - discount
    4. Total must not be negative
    5. Invoice is created with status=draft and no document number

    Flow:
    1. Check access
    2. Validate client
    3. Price line items
    4. Create invoice and lines
    5. Write INVOICE_CREATED audit entry
    6. Commit transaction
    7. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        business_repo: BusinessRepository,
        client_repo: ClientRepository,
        audit_repo: AuditLogRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.business_repo = business_repo
        self.client_repo = client_repo
        self.audit_repo = audit_repo

    async def execute(self, command: CreateDraftInvoiceCommandDTO) -> Result[DraftInvoiceResponseDTO]:
        try:
            # Step 1: Check access
            denied = await check_document_access(
                self.business_repo, command.business_id, command.actor_id
            )
            if denied:
                return Return.err(denied)

            # Step 2: Validate client
            if command.client_id:
                client = await self.client_repo.get_by_id(command.client_id)
                if client is None or client.business_id != command.business_id:
                    return Return.err(
                        Error(
                            code="VALIDATION_ERROR",
                            message="Client not found for this business",
                            reason=f"Client {command.client_id} missing or owned by another business",
                        )
                    )

            # Step 3: Price line items
            priced: List[Tuple[DraftLineItemDTO, Decimal, Decimal]] = []
            for item in command.line_items:
                amount, tax = price_line(item)
                priced.append((item, amount, tax))

            subtotal = sum((amount for _, amount, _ in priced), Decimal("0"))
            tax_amount = sum((tax for _, _, tax in priced), Decimal("0"))
            discount_amount = command.discount_amount.quantize(_CENT, rounding=ROUND_HALF_UP)
            total_amount = subtotal + tax_amount - discount_amount

            if total_amount < 0:
                return Return.err(
                    Error(
                        code="VALIDATION_ERROR",
                        message="Discount cannot exceed the invoice amount",
                        reason=f"Computed total {total_amount} is negative",
                    )
                )

            # Step 4: Create invoice and lines
            invoice = Invoice(
                business_id=command.business_id,
                client_id=command.client_id,
                created_by=command.actor_id,
                status=InvoiceStatus.DRAFT,
                currency=command.currency.upper(),
                subtotal=subtotal,
                tax_amount=tax_amount,
                discount_amount=discount_amount,
                total_amount=total_amount,
                issue_date=command.issue_date,
                due_date=command.due_date,
                notes=command.notes,
                terms=command.terms,
                payment_method_id=command.payment_method_id,
                tax_schema_id=command.tax_schema_id,
            )
            created_invoice = await self.invoice_repo.create(invoice)

            for position, (item, amount, _) in enumerate(priced):
                await self.invoice_line_repo.create(
                    InvoiceLine(
                        invoice_id=created_invoice.id,
                        description=item.description,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        tax_rate=item.tax_rate,
                        discount_percent=item.discount_percent,
                        amount=amount,
                        sort_order=position,
                    )
                )

            # Step 5: Audit
            await self.audit_repo.create(
                AuditLog(
                    event_type=AuditEventType.INVOICE_CREATED,
                    entity_type="invoice",
                    entity_id=created_invoice.id,
                    actor_id=command.actor_id,
                    business_id=command.business_id,
                    new_state={"status": InvoiceStatus.DRAFT.value, "total_amount": str(total_amount)},
                )
            )

            # Step 6: Commit transaction
            await self.uow.commit()

            # Step 7: Build response
            return Return.ok(
                DraftInvoiceResponseDTO(
                    invoice_id=created_invoice.id,
                    business_id=created_invoice.business_id,
                    client_id=created_invoice.client_id,
                    status=created_invoice.status.value,
                    subtotal=created_invoice.subtotal,
                    tax_amount=created_invoice.tax_amount,
                    discount_amount=created_invoice.discount_amount,
                    total_amount=created_invoice.total_amount,
                    currency=created_invoice.currency,
                    created_at=created_invoice.created_at,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )
