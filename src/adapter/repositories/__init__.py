from .invoice_repository import SqlAlchemyInvoiceRepository
from .invoice_line_repository import SqlAlchemyInvoiceLineRepository
from .payment_repository import SqlAlchemyPaymentRepository
from .receipt_repository import SqlAlchemyReceiptRepository
from .credit_note_repository import SqlAlchemyCreditNoteRepository
from .business_repository import SqlAlchemyBusinessRepository
from .reference_data_repository import (
    SqlAlchemyUserProfileRepository,
    SqlAlchemyClientRepository,
    SqlAlchemyPaymentMethodRepository,
    SqlAlchemyTaxSchemaRepository,
)
from .document_sequence_repository import SqlAlchemyDocumentSequenceRepository
from .retention_policy_repository import SqlAlchemyRetentionPolicyRepository
from .audit_log_repository import SqlAlchemyAuditLogRepository

__all__ = [
    "SqlAlchemyInvoiceRepository",
    "SqlAlchemyInvoiceLineRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyReceiptRepository",
    "SqlAlchemyCreditNoteRepository",
    "SqlAlchemyBusinessRepository",
    "SqlAlchemyUserProfileRepository",
    "SqlAlchemyClientRepository",
    "SqlAlchemyPaymentMethodRepository",
    "SqlAlchemyTaxSchemaRepository",
    "SqlAlchemyDocumentSequenceRepository",
    "SqlAlchemyRetentionPolicyRepository",
    "SqlAlchemyAuditLogRepository",
]
