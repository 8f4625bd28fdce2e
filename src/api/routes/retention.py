"""Retention API Routes

Internal endpoint for triggering a retention sweep from a scheduler.
Not exposed to end users.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.auth import require_service_token
from src.api.error import ClientError
from src.app.use_cases.documents.dtos import RetentionSweepResultDTO
from src.app.use_cases.documents.enforce_retention import EnforceRetention
from src.adapter.repositories import (
    SqlAlchemyInvoiceRepository,
    SqlAlchemyInvoiceLineRepository,
    SqlAlchemyPaymentRepository,
    SqlAlchemyReceiptRepository,
    SqlAlchemyCreditNoteRepository,
    SqlAlchemyAuditLogRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session

router = APIRouter(prefix="/internal/retention", tags=["Retention"])


@router.post(
    "/sweep",
    response_model=RetentionSweepResultDTO,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_service_token)],
)
async def run_retention_sweep(session: AsyncSession = Depends(get_session)):
    """
    Run one retention sweep.

    Deletes documents whose retention period ended before today and
    reports counts per document type plus any per-document failures.
    Requires the X-Service-Token header.
    """
    use_case = EnforceRetention(
        uow=SqlAlchemyUnitOfWork(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        invoice_line_repo=SqlAlchemyInvoiceLineRepository(session),
        payment_repo=SqlAlchemyPaymentRepository(session),
        receipt_repo=SqlAlchemyReceiptRepository(session),
        credit_note_repo=SqlAlchemyCreditNoteRepository(session),
        audit_repo=SqlAlchemyAuditLogRepository(session),
    )
    result = await use_case.execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value
