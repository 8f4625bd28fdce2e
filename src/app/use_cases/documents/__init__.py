"""Document issuance, verification and retention use cases"""
from .create_draft_invoice import CreateDraftInvoice
from .issue_invoice import IssueInvoice
from .mark_invoice_sent import MarkInvoiceSent
from .record_payment import RecordPayment
from .void_invoice import VoidInvoice
from .verify_document import VerifyDocument
from .enforce_retention import EnforceRetention
from .generate_document_pdf import GenerateDocumentPdf
from .dtos import (
    DraftLineItemDTO,
    CreateDraftInvoiceCommandDTO,
    DraftInvoiceResponseDTO,
    IssueInvoiceCommandDTO,
    IssuedDocumentDTO,
    InvoiceActionCommandDTO,
    InvoiceStatusResponseDTO,
    RecordPaymentCommandDTO,
    RecordPaymentResponseDTO,
    VoidInvoiceCommandDTO,
    VoidInvoiceResponseDTO,
    VerificationRecordDTO,
    VerificationResultDTO,
    RetentionErrorDTO,
    RetentionSweepResultDTO,
    DocumentPdfDTO,
)

__all__ = [
    "CreateDraftInvoice",
    "IssueInvoice",
    "MarkInvoiceSent",
    "RecordPayment",
    "VoidInvoice",
    "VerifyDocument",
    "EnforceRetention",
    "GenerateDocumentPdf",
    "DraftLineItemDTO",
    "CreateDraftInvoiceCommandDTO",
    "DraftInvoiceResponseDTO",
    "IssueInvoiceCommandDTO",
    "IssuedDocumentDTO",
    "InvoiceActionCommandDTO",
    "InvoiceStatusResponseDTO",
    "RecordPaymentCommandDTO",
    "RecordPaymentResponseDTO",
    "VoidInvoiceCommandDTO",
    "VoidInvoiceResponseDTO",
    "VerificationRecordDTO",
    "VerificationResultDTO",
    "RetentionErrorDTO",
    "RetentionSweepResultDTO",
    "DocumentPdfDTO",
]
