"""Invoice API Routes

FastAPI routes for drafting, issuing and operating on invoices.
"""

import base64
from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_current_actor
from src.api.error import ClientError
from src.api.schemas.document_request import (
    CreateInvoiceRequestSchema,
    RecordPaymentRequestSchema,
    VoidInvoiceRequestSchema,
)
from src.app.services.document_issuer import DocumentIssuer
from src.app.services.retention_calculator import RetentionCalculator
from src.app.use_cases.documents.dtos import (
    CreateDraftInvoiceCommandDTO,
    DocumentPdfDTO,
    DraftInvoiceResponseDTO,
    DraftLineItemDTO,
    IssueInvoiceCommandDTO,
    IssuedDocumentDTO,
    InvoiceActionCommandDTO,
    InvoiceStatusResponseDTO,
    RecordPaymentCommandDTO,
    RecordPaymentResponseDTO,
    VoidInvoiceCommandDTO,
    VoidInvoiceResponseDTO,
)
from src.app.use_cases.documents.create_draft_invoice import CreateDraftInvoice
from src.app.use_cases.documents.issue_invoice import IssueInvoice
from src.app.use_cases.documents.mark_invoice_sent import MarkInvoiceSent
from src.app.use_cases.documents.record_payment import RecordPayment
from src.app.use_cases.documents.void_invoice import VoidInvoice
from src.app.use_cases.documents.generate_document_pdf import GenerateDocumentPdf
from src.adapter.repositories import (
    SqlAlchemyInvoiceRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyReceiptRepository,
    SqlAlchemyCreditNoteRepository,
    SqlAlchemyBusinessRepository,
    SqlAlchemyUserProfileRepository,
    SqlAlchemyClientRepository,
    SqlAlchemyPaymentMethodRepository,
    SqlAlchemyTaxSchemaRepository,
    SqlAlchemyDocumentSequenceRepository,
    SqlAlchemyRetentionPolicyRepository,
    SqlAlchemyAuditLogRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.adapter.services.pdf_service import ReportLabPdfService
from src.depends import get_session, get_config

router = APIRouter(prefix="/invoices", tags=["Invoices"])

_ERROR_RESPONSES = {
    403: {
        "description": "Not a member of the business, or email not verified",
        "content": {
            "application/json": {
                "example": {"error": {"code": "ACCESS_DENIED", "message": "You do not have access to this document"}}
            }
        },
    },
    404: {
        "description": "Invoice not found",
        "content": {
            "application/json": {
                "example": {"error": {"code": "DOCUMENT_NOT_FOUND", "message": "Document not found"}}
            }
        },
    },
    409: {
        "description": "Invoice is in the wrong status",
        "content": {
            "application/json": {
                "example": {"error": {"code": "ALREADY_ISSUED", "message": "Document has already been issued"}}
            }
        },
    },
}


def build_document_issuer(session: AsyncSession, config) -> DocumentIssuer:
    retention = RetentionCalculator(
        SqlAlchemyRetentionPolicyRepository(session),
        default_years=config.DEFAULT_RETENTION_YEARS,
        default_jurisdiction=config.DEFAULT_JURISDICTION,
    )
    return DocumentIssuer(
        SqlAlchemyDocumentSequenceRepository(session),
        retention,
        number_padding=config.DOCUMENT_NUMBER_PADDING,
    )


def build_pdf_use_case(session: AsyncSession, config) -> GenerateDocumentPdf:
    return GenerateDocumentPdf(
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        invoice_line_repo=SqlAlchemyInvoiceLineRepository(session),
        receipt_repo=SqlAlchemyReceiptRepository(session),
        credit_note_repo=SqlAlchemyCreditNoteRepository(session),
        business_repo=SqlAlchemyBusinessRepository(session),
        client_repo=SqlAlchemyClientRepository(session),
        pdf_service=ReportLabPdfService(),
        verification_base_url=config.VERIFICATION_BASE_URL,
    )


def pdf_response(pdf: DocumentPdfDTO) -> Response:
    return Response(
        content=base64.b64decode(pdf.pdf_base64),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={pdf.filename}"},
    )


@router.post(
    "",
    response_model=DraftInvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={403: _ERROR_RESPONSES[403]},
)
async def create_invoice(
    request: CreateInvoiceRequestSchema,
    actor_id: str = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
):
    """
    Create a draft invoice.

    Drafts can be edited and previewed as proforma; they get a number,
    snapshot, hash and verification id only when issued.

    **Returns:**
    - 201: Draft created
    - 400: Invalid request
    - 403: Caller cannot create invoices for this business
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = CreateDraftInvoiceCommandDTO(
        business_id=request.business_id,
        actor_id=actor_id,
        client_id=request.client_id,
        currency=request.currency,
        issue_date=request.issue_date,
        due_date=request.due_date,
        notes=request.notes,
        terms=request.terms,
        payment_method_id=request.payment_method_id,
        tax_schema_id=request.tax_schema_id,
        discount_amount=request.discount_amount,
        line_items=[DraftLineItemDTO(**item.model_dump()) for item in request.line_items],
    )

    use_case = CreateDraftInvoice(
        uow,
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        SqlAlchemyBusinessRepository(session),
        SqlAlchemyClientRepository(session),
        SqlAlchemyAuditLogRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{invoice_id}/issue",
    response_model=IssuedDocumentDTO,
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
)
async def issue_invoice(
    invoice_id: str,
    actor_id: str = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Issue a draft invoice.

    Allocates the invoice number, freezes the snapshot, computes the
    document hash and retention date, and returns the public verification id.
    Issuing twice is rejected with ALREADY_ISSUED.

    **Example response:**
    ```json
    {
      "document_id": "0b6f0f7e-59b5-4a4f-8b52-0b1f8c1d9c11",
      "document_number": "INV-2026-000001",
      "verification_id": "5c3e8d2a-1b4f-4c6e-9a7d-2e1f0b3c4d5e",
      "issued_at": "2026-01-15T10:00:00Z",
      "document_hash": "9f86d0...0a08"
    }
    ```

    **Returns:**
    - 200: Invoice issued
    - 403: No access, or email not verified
    - 404: Invoice not found
    - 409: Invoice already issued
    """
    use_case = IssueInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        invoice_line_repo=SqlAlchemyInvoiceLineRepository(session),
        business_repo=SqlAlchemyBusinessRepository(session),
        user_repo=SqlAlchemyUserProfileRepository(session),
        client_repo=SqlAlchemyClientRepository(session),
        payment_method_repo=SqlAlchemyPaymentMethodRepository(session),
        tax_schema_repo=SqlAlchemyTaxSchemaRepository(session),
        audit_repo=SqlAlchemyAuditLogRepository(session),
        issuer=build_document_issuer(session, config),
        require_verified_email=config.REQUIRE_VERIFIED_EMAIL,
    )
    result = await use_case.execute(IssueInvoiceCommandDTO(invoice_id=invoice_id, actor_id=actor_id))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{invoice_id}/send",
    response_model=InvoiceStatusResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
)
async def send_invoice(
    invoice_id: str,
    actor_id: str = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
):
    """Mark an issued invoice as sent to its recipient."""
    use_case = MarkInvoiceSent(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyBusinessRepository(session),
        SqlAlchemyAuditLogRepository(session),
    )
    result = await use_case.execute(InvoiceActionCommandDTO(invoice_id=invoice_id, actor_id=actor_id))

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{invoice_id}/payments",
    response_model=RecordPaymentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def record_payment(
    invoice_id: str,
    request: RecordPaymentRequestSchema,
    actor_id: str = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Record a payment against an issued invoice.

    A receipt is issued for the payment in the same transaction; the
    response carries its number, hash and verification id.

    **Returns:**
    - 201: Payment recorded and receipt issued
    - 400: Invalid amount or amount exceeds the outstanding balance
    - 404: Invoice not found
    - 409: Invoice is not open for payment
    """
    use_case = RecordPayment(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
        receipt_repo=SqlAlchemyReceiptRepository(session),
        business_repo=SqlAlchemyBusinessRepository(session),
        client_repo=SqlAlchemyClientRepository(session),
        audit_repo=SqlAlchemyAuditLogRepository(session),
        issuer=build_document_issuer(session, config),
    )
    command = RecordPaymentCommandDTO(
        invoice_id=invoice_id,
        actor_id=actor_id,
        amount=request.amount,
        payment_method=request.payment_method,
        payment_reference=request.payment_reference,
        payment_date=request.payment_date,
        notes=request.notes,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{invoice_id}/void",
    response_model=VoidInvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=_ERROR_RESPONSES,
)
async def void_invoice(
    invoice_id: str,
    request: VoidInvoiceRequestSchema,
    actor_id: str = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Void an issued invoice.

    The invoice keeps its number and hash and moves to voided; a credit
    note referencing it is issued in the same transaction.
    """
    use_case = VoidInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        credit_note_repo=SqlAlchemyCreditNoteRepository(session),
        business_repo=SqlAlchemyBusinessRepository(session),
        client_repo=SqlAlchemyClientRepository(session),
        audit_repo=SqlAlchemyAuditLogRepository(session),
        issuer=build_document_issuer(session, config),
    )
    command = VoidInvoiceCommandDTO(invoice_id=invoice_id, actor_id=actor_id, reason=request.reason)
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{invoice_id}/pdf",
    responses={
        200: {"content": {"application/pdf": {}}, "description": "PDF document"},
        403: _ERROR_RESPONSES[403],
        404: _ERROR_RESPONSES[404],
    },
)
async def download_invoice_pdf(
    invoice_id: str,
    actor_id: str = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Download an invoice as PDF.

    Issued invoices are rendered from their snapshot and carry the document
    hash and verification link; drafts render as a proforma.
    """
    use_case = build_pdf_use_case(session, config)
    result = await use_case.execute(invoice_id, actor_id)

    if result.is_err():
        raise ClientError(result.error)

    return pdf_response(result.value)
