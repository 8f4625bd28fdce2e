"""Verification API Routes

Public endpoint used by recipients, auditors and tax authorities to check
that a document was issued by the business named on it.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ERROR_STATUS_CODES
from src.app.services.audit_writer import BestEffortAuditWriter
from src.app.use_cases.documents.dtos import VerificationResultDTO
from src.app.use_cases.documents.verify_document import VerifyDocument
from src.adapter.repositories import (
    SqlAlchemyInvoiceRepository,
    SqlAlchemyReceiptRepository,
    SqlAlchemyCreditNoteRepository,
    SqlAlchemyBusinessRepository,
    SqlAlchemyAuditLogRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.document_status import DocumentType
from src.depends import get_session

router = APIRouter(prefix="/verify", tags=["Verification"])


@router.get(
    "",
    response_model=VerificationResultDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: {
            "description": "Malformed verification id",
            "content": {
                "application/json": {
                    "example": {"verified": False, "error": "Invalid verification ID format"}
                }
            },
        },
        404: {
            "description": "No issued document with this verification id",
            "content": {
                "application/json": {
                    "example": {"verified": False, "error": "Document not found"}
                }
            },
        },
    },
)
async def verify_document(
    verification_id: str = Query(..., description="Verification id printed on the document"),
    document_type: Optional[DocumentType] = Query(default=None, description="Restrict lookup to one type"),
    session: AsyncSession = Depends(get_session),
):
    """
    Verify a document.

    No authentication required. Returns the issuer, number, amount and
    status recorded at issuance, and whether the stored hash still matches.
    Unknown ids and drafts both return 404.

    **Example response:**
    ```json
    {
      "verified": true,
      "record": {
        "document_type": "invoice",
        "number": "INV-2026-000001",
        "issuer_name": "Acme Ltd",
        "status": "paid",
        "status_label": "Paid",
        "amount": "100.00",
        "currency": "USD",
        "integrity_valid": true
      }
    }
    ```
    """
    audit_writer = BestEffortAuditWriter(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyAuditLogRepository(session),
    )
    use_case = VerifyDocument(
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyReceiptRepository(session),
        SqlAlchemyCreditNoteRepository(session),
        SqlAlchemyBusinessRepository(session),
        audit_writer,
    )
    result = await use_case.execute(verification_id, document_type)

    if result.is_err():
        status_code = ERROR_STATUS_CODES.get(result.error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        message = result.error.message
        if status_code >= 500:
            message = "Verification is temporarily unavailable"
        return JSONResponse(
            status_code=status_code,
            content={"verified": False, "record": None, "error": message},
        )

    return result.value
