"""Receipt and Credit Note API Routes

Receipts and credit notes are issued by the invoice payment and void
endpoints; these routes only render them.
"""

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import get_current_actor
from src.api.error import ClientError
from src.api.routes.invoices import build_pdf_use_case, pdf_response
from src.domain.document_status import DocumentType
from src.depends import get_session, get_config

router = APIRouter(tags=["Documents"])

_PDF_RESPONSES = {
    200: {"content": {"application/pdf": {}}, "description": "PDF document"},
    403: {
        "description": "Not a member of the business",
        "content": {
            "application/json": {
                "example": {"error": {"code": "ACCESS_DENIED", "message": "You do not have access to this document"}}
            }
        },
    },
    404: {
        "description": "Document not found",
        "content": {
            "application/json": {
                "example": {"error": {"code": "DOCUMENT_NOT_FOUND", "message": "Document not found"}}
            }
        },
    },
}


@router.get("/receipts/{receipt_id}/pdf", responses=_PDF_RESPONSES)
async def download_receipt_pdf(
    receipt_id: str,
    actor_id: str = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Download a receipt as PDF.

    Rendered from the receipt snapshot: payer, the invoice paid and the
    payment details, with the document hash and verification link.
    """
    result = await build_pdf_use_case(session, config).execute(receipt_id, actor_id, DocumentType.RECEIPT)

    if result.is_err():
        raise ClientError(result.error)

    return pdf_response(result.value)


@router.get("/credit-notes/{credit_note_id}/pdf", responses=_PDF_RESPONSES)
async def download_credit_note_pdf(
    credit_note_id: str,
    actor_id: str = Depends(get_current_actor),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """Download a credit note as PDF, rendered from its snapshot."""
    result = await build_pdf_use_case(session, config).execute(credit_note_id, actor_id, DocumentType.CREDIT_NOTE)

    if result.is_err():
        raise ClientError(result.error)

    return pdf_response(result.value)
