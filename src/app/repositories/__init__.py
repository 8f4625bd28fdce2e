from .invoice_repository import InvoiceRepository
from .invoice_line_repository import InvoiceLineRepository
from .payment_repository import PaymentRepository
from .receipt_repository import ReceiptRepository
from .credit_note_repository import CreditNoteRepository
from .business_repository import BusinessRepository
from .user_profile_repository import UserProfileRepository
from .client_repository import ClientRepository
from .payment_method_repository import PaymentMethodRepository
from .tax_schema_repository import TaxSchemaRepository
from .document_sequence_repository import DocumentSequenceRepository
from .retention_policy_repository import RetentionPolicyRepository
from .audit_log_repository import AuditLogRepository

__all__ = [
    "InvoiceRepository",
    "InvoiceLineRepository",
    "PaymentRepository",
    "ReceiptRepository",
    "CreditNoteRepository",
    "BusinessRepository",
    "UserProfileRepository",
    "ClientRepository",
    "PaymentMethodRepository",
    "TaxSchemaRepository",
    "DocumentSequenceRepository",
    "RetentionPolicyRepository",
    "AuditLogRepository",
]
