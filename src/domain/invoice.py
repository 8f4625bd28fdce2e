"""Invoice Domain Entity

Tracks invoices from draft through issuance and their operational statuses.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import ClassVar, Optional
from sqlmodel import Field, Index
from sqlalchemy import Numeric, UniqueConstraint
from src.domain.document_status import InvoiceStatus, DocumentType
from src.domain.issuable_document import IssuableDocument


class Invoice(IssuableDocument, table=True):
    """
    Invoice - Financial record billed by a business to a client

    Domain Rules:
    - Created in draft, mutable while draft
    - Transitions to issued exactly once (see IssueInvoice); never back to draft
    - invoice number is unique per business and allocated at issuance
    - amount_paid and status may change after issuance without affecting the hash
    - Voiding creates a linked CreditNote; the invoice itself is never reset
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_status', 'status'),
        UniqueConstraint('business_id', 'document_number', name='uq_invoices_business_number'),
    )

    document_type: ClassVar[DocumentType] = DocumentType.INVOICE

    client_id: Optional[str] = Field(
        default=None,
        foreign_key="clients.id",
        description="Recipient client"
    )

    created_by: Optional[str] = Field(
        default=None,
        description="User who created the draft"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status (draft, issued, sent, viewed, paid, voided, credited)"
    )

    subtotal: Decimal = Field(
        default=Decimal("0"),
        sa_type=Numeric(18, 2),
        description="Sum of line amounts before tax and discount"
    )

    tax_amount: Decimal = Field(
        default=Decimal("0"),
        sa_type=Numeric(18, 2),
        description="Total tax"
    )

    discount_amount: Decimal = Field(
        default=Decimal("0"),
        sa_type=Numeric(18, 2),
        description="Total discount"
    )

    amount_paid: Decimal = Field(
        default=Decimal("0"),
        sa_type=Numeric(18, 2),
        description="Sum of recorded payments (operational, not hashed)"
    )

    issue_date: Optional[date] = Field(
        default=None,
        description="Date printed on the invoice"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Payment due date"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes printed on the invoice"
    )

    terms: Optional[str] = Field(
        default=None,
        description="Payment terms printed on the invoice"
    )

    payment_method_id: Optional[str] = Field(
        default=None,
        foreign_key="payment_methods.id",
        description="Payment instructions shown on the invoice"
    )

    tax_schema_id: Optional[str] = Field(
        default=None,
        foreign_key="tax_schemas.id",
        description="Tax schema applied when the draft was priced"
    )

    voided_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp when the invoice was voided"
    )

    voided_by: Optional[str] = Field(
        default=None,
        description="User who voided the invoice"
    )

    void_reason: Optional[str] = Field(
        default=None,
        description="Reason given for voiding"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "0b6f0f7e-59b5-4a4f-8b52-0b1f8c1d9c11",
                "business_id": "b7a1c2d3-0000-4000-8000-000000000001",
                "document_number": "INV-2026-000001",
                "status": "issued",
                "total_amount": "100.00",
                "currency": "USD",
                "issued_at": "2026-01-15T10:00:00Z",
                "document_hash": "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08",
                "verification_id": "5c3e8d2a-1b4f-4c6e-9a7d-2e1f0b3c4d5e",
                "retention_locked_until": "2033-01-15",
            }
        }
