from .base import BaseModel, generate_uuid
from .document_status import (
    DocumentType,
    InvoiceStatus,
    IssuedDocumentStatus,
    can_transition,
    status_label,
)
from .issuable_document import IssuableDocument, SNAPSHOT_VERSION, INTEGRITY_FIELDS
from .business import Business, BusinessMember, BusinessRole, ISSUING_ROLES
from .user_profile import UserProfile
from .client import Client
from .payment_method import PaymentMethod
from .tax_schema import TaxSchema
from .invoice import Invoice
from .invoice_line import InvoiceLine
from .payment import Payment
from .receipt import Receipt
from .credit_note import CreditNote
from .document_sequence import DocumentSequence
from .retention_policy import RetentionPolicy
from .audit_log import AuditLog, AuditEventType

__all__ = [
    "BaseModel",
    "generate_uuid",
    "DocumentType",
    "InvoiceStatus",
    "IssuedDocumentStatus",
    "can_transition",
    "status_label",
    "IssuableDocument",
    "SNAPSHOT_VERSION",
    "INTEGRITY_FIELDS",
    "Business",
    "BusinessMember",
    "BusinessRole",
    "ISSUING_ROLES",
    "UserProfile",
    "Client",
    "PaymentMethod",
    "TaxSchema",
    "Invoice",
    "InvoiceLine",
    "Payment",
    "Receipt",
    "CreditNote",
    "DocumentSequence",
    "RetentionPolicy",
    "AuditLog",
    "AuditEventType",
]
