"""Credit Note Domain Entity

Credit notes are created when an issued invoice is voided. The original
invoice is never returned to draft; the correction is a new linked document.
"""

from typing import ClassVar, Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, String, UniqueConstraint
from src.domain.document_status import DocumentType, IssuedDocumentStatus
from src.domain.issuable_document import IssuableDocument


class CreditNote(IssuableDocument, table=True):
    """
    Credit Note - Reverses the amount of a voided invoice

    Domain Rules:
    - Always references the invoice it reverses
    - Created already issued, with its own number, snapshot, hash and verification id
    """

    __tablename__ = "credit_notes"
    __table_args__ = (
        UniqueConstraint('business_id', 'document_number', name='uq_credit_notes_business_number'),
    )

    document_type: ClassVar[DocumentType] = DocumentType.CREDIT_NOTE

    original_invoice_id: str = Field(
        sa_column=Column(String(36), ForeignKey("invoices.id"), nullable=False, index=True),
        description="Invoice reversed by this credit note"
    )

    reason: Optional[str] = Field(
        default=None,
        description="Reason for the credit"
    )

    status: IssuedDocumentStatus = Field(
        default=IssuedDocumentStatus.ISSUED,
        description="Credit note status"
    )
