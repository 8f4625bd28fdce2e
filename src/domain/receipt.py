"""Receipt Domain Entity

Receipts are issued automatically for each recorded payment and are
immutable from the moment they are created.
"""

from typing import ClassVar
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, String, UniqueConstraint
from src.domain.document_status import DocumentType, IssuedDocumentStatus
from src.domain.issuable_document import IssuableDocument


class Receipt(IssuableDocument, table=True):
    """
    Receipt - Proof of a payment against an invoice

    Domain Rules:
    - Exactly one receipt per payment (payment_id is unique)
    - Created already issued: number, snapshot, hash and verification id are
      set in the same unit of work as the payment
    """

    __tablename__ = "receipts"
    __table_args__ = (
        UniqueConstraint('business_id', 'document_number', name='uq_receipts_business_number'),
    )

    document_type: ClassVar[DocumentType] = DocumentType.RECEIPT

    invoice_id: str = Field(
        sa_column=Column(String(36), ForeignKey("invoices.id"), nullable=False, index=True),
        description="Invoice the payment was made against"
    )

    payment_id: str = Field(
        sa_column=Column(String(36), ForeignKey("payments.id"), nullable=False, unique=True),
        description="Payment this receipt acknowledges"
    )

    status: IssuedDocumentStatus = Field(
        default=IssuedDocumentStatus.ISSUED,
        description="Receipt status"
    )
