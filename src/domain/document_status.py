"""Document lifecycle states and transition rules

Issuance (draft -> issued) is one-way. After issuance a document only moves
forward or sideways through operational statuses; nothing returns to draft.
"""

from enum import Enum
from typing import Dict, FrozenSet


class DocumentType(str, Enum):
    """Kinds of issuable financial documents"""
    INVOICE = "invoice"
    RECEIPT = "receipt"
    CREDIT_NOTE = "credit_note"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states"""
    DRAFT = "draft"
    ISSUED = "issued"
    SENT = "sent"
    # Reserved for external writers (recipient portal, partial credit
    # tooling); no use case here moves an invoice to viewed or credited.
    # Public verification stays read-only and only audits the view.
    VIEWED = "viewed"
    PAID = "paid"
    VOIDED = "voided"
    CREDITED = "credited"


class IssuedDocumentStatus(str, Enum):
    """Receipts and credit notes are created already issued"""
    ISSUED = "issued"


INVOICE_TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.ISSUED}),
    InvoiceStatus.ISSUED: frozenset({
        InvoiceStatus.SENT,
        InvoiceStatus.VIEWED,
        InvoiceStatus.PAID,
        InvoiceStatus.VOIDED,
        InvoiceStatus.CREDITED,
    }),
    InvoiceStatus.SENT: frozenset({
        InvoiceStatus.VIEWED,
        InvoiceStatus.PAID,
        InvoiceStatus.VOIDED,
        InvoiceStatus.CREDITED,
    }),
    InvoiceStatus.VIEWED: frozenset({
        InvoiceStatus.SENT,
        InvoiceStatus.PAID,
        InvoiceStatus.VOIDED,
        InvoiceStatus.CREDITED,
    }),
    InvoiceStatus.PAID: frozenset({InvoiceStatus.CREDITED}),
    InvoiceStatus.VOIDED: frozenset(),
    InvoiceStatus.CREDITED: frozenset(),
}

# Statuses that accept payments or can be voided
OPEN_INVOICE_STATUSES = frozenset({
    InvoiceStatus.ISSUED,
    InvoiceStatus.SENT,
    InvoiceStatus.VIEWED,
})

_STATUS_LABELS = {
    "issued": "Issued - Awaiting Payment",
    "sent": "Sent - Awaiting Payment",
    "viewed": "Viewed - Awaiting Payment",
    "paid": "Paid",
    "voided": "Voided",
    "credited": "Credited",
}


def can_transition(current: InvoiceStatus, target: InvoiceStatus) -> bool:
    """Return True if an invoice may move from current to target status"""
    return target in INVOICE_TRANSITIONS.get(current, frozenset())


def status_label(document_type: DocumentType, status: str) -> str:
    """Human-readable status shown on the public verification portal"""
    if document_type != DocumentType.INVOICE and status == "issued":
        return "Issued"
    return _STATUS_LABELS.get(status, "Unknown")
