"""Data Transfer Objects for Document Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List, Dict

from pydantic import BaseModel, Field


class DraftLineItemDTO(BaseModel):
    """Line item of a draft invoice"""

    description: str = Field(..., description="What is being billed")
    quantity: Decimal = Field(..., gt=0, description="Quantity (must be > 0)")
    unit_price: Decimal = Field(..., ge=0, description="Price per unit")
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, description="Tax rate in percent")
    discount_percent: Decimal = Field(
        default=Decimal("0"), ge=0, le=100, description="Line discount in percent"
    )


class CreateDraftInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating a draft invoice

    Used as input to CreateDraftInvoice use case.
    """

    business_id: str = Field(..., description="Issuing business")
    actor_id: str = Field(..., description="Authenticated user creating the draft")
    client_id: Optional[str] = Field(default=None, description="Recipient client")
    currency: str = Field(default="USD", min_length=3, max_length=3, description="ISO 4217 code")
    issue_date: Optional[date] = Field(default=None)
    due_date: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    terms: Optional[str] = Field(default=None)
    payment_method_id: Optional[str] = Field(default=None)
    tax_schema_id: Optional[str] = Field(default=None)
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0, description="Invoice-level discount")
    line_items: List[DraftLineItemDTO] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "business_id": "b7a1c2d3-0000-4000-8000-000000000001",
                "actor_id": "u1a2b3c4-0000-4000-8000-000000000001",
                "client_id": "c1d2e3f4-0000-4000-8000-000000000001",
                "currency": "USD",
                "line_items": [
                    {"description": "Consulting", "quantity": "2", "unit_price": "50.00"}
                ],
            }
        }


class DraftInvoiceResponseDTO(BaseModel):
    """Response DTO for a created draft invoice"""

    invoice_id: str
    business_id: str
    client_id: Optional[str] = None
    status: str
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    currency: str
    created_at: datetime


class IssueInvoiceCommandDTO(BaseModel):
    """
    Command DTO for issuing an invoice

    Used as input to IssueInvoice use case.
    """

    invoice_id: str = Field(..., description="Invoice to issue")
    actor_id: str = Field(..., description="Authenticated user issuing the invoice")


class IssuedDocumentDTO(BaseModel):
    """
    Integrity fields of a freshly issued document

    verification_id is the only identifier meant to be shared publicly.
    """

    document_id: str
    document_type: str
    document_number: str
    verification_id: str
    issued_at: datetime
    document_hash: str
    retention_locked_until: date
    status: str

    class Config:
        json_schema_extra = {
            "example": {
                "document_id": "0b6f0f7e-59b5-4a4f-8b52-0b1f8c1d9c11",
                "document_type": "invoice",
                "document_number": "INV-2026-000001",
                "verification_id": "5c3e8d2a-1b4f-4c6e-9a7d-2e1f0b3c4d5e",
                "issued_at": "2026-01-15T10:00:00Z",
                "document_hash": "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08",
                "retention_locked_until": "2033-01-15",
                "status": "issued",
            }
        }


class InvoiceActionCommandDTO(BaseModel):
    """Command DTO for status-only actions on an invoice (send)"""

    invoice_id: str
    actor_id: str


class InvoiceStatusResponseDTO(BaseModel):
    invoice_id: str
    status: str
    updated_at: datetime


class RecordPaymentCommandDTO(BaseModel):
    """
    Command DTO for recording a payment against an issued invoice

    Used as input to RecordPayment use case.
    """

    invoice_id: str
    actor_id: str
    amount: Decimal = Field(..., description="Amount received (0 < amount <= 999999999.99)")
    payment_method: Optional[str] = Field(default=None, description="e.g. bank_transfer, cash")
    payment_reference: Optional[str] = Field(default=None, description="Bank or provider reference")
    payment_date: Optional[date] = Field(default=None, description="Defaults to today")
    notes: Optional[str] = Field(default=None)


class RecordPaymentResponseDTO(BaseModel):
    payment_id: str
    invoice_id: str
    amount: Decimal
    amount_paid: Decimal
    invoice_status: str
    receipt: IssuedDocumentDTO


class VoidInvoiceCommandDTO(BaseModel):
    """
    Command DTO for voiding an issued invoice

    Used as input to VoidInvoice use case.
    """

    invoice_id: str
    actor_id: str
    reason: str = Field(..., description="Why the invoice is voided (at least 10 characters)")


class VoidInvoiceResponseDTO(BaseModel):
    invoice_id: str
    status: str
    voided_at: datetime
    credit_note: IssuedDocumentDTO


class VerificationRecordDTO(BaseModel):
    """Publicly visible facts about a verified document"""

    document_type: str
    number: Optional[str]
    issued_at: Optional[datetime]
    issuer_name: str
    status: str
    status_label: str
    amount: Optional[str]
    currency: Optional[str]
    integrity_valid: bool


class VerificationResultDTO(BaseModel):
    """
    Response DTO for public verification

    Failures carry only a generic message, never internal error text.
    """

    verified: bool
    record: Optional[VerificationRecordDTO] = None
    error: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "verified": True,
                "record": {
                    "document_type": "invoice",
                    "number": "INV-2026-000001",
                    "issued_at": "2026-01-15T10:00:00Z",
                    "issuer_name": "Acme Trading Ltd",
                    "status": "issued",
                    "status_label": "Issued - Awaiting Payment",
                    "amount": "100.00",
                    "currency": "USD",
                    "integrity_valid": True,
                },
            }
        }


class RetentionErrorDTO(BaseModel):
    document_type: str
    document_id: str
    message: str


class RetentionSweepResultDTO(BaseModel):
    """Response DTO for one retention sweep run"""

    started_at: datetime
    completed_at: datetime
    deleted_counts_by_type: Dict[str, int]
    deferred: int = Field(default=0, description="Expired invoices kept because a dependent is still locked")
    errors: List[RetentionErrorDTO] = Field(default_factory=list)

    @property
    def total_deleted(self) -> int:
        return sum(self.deleted_counts_by_type.values())


class DocumentPdfDTO(BaseModel):
    """Response DTO for a rendered invoice, receipt or credit note PDF"""

    document_id: str
    document_type: str
    document_number: Optional[str]
    filename: str
    is_proforma: bool
    pdf_base64: str
    generated_at: datetime
