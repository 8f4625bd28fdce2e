"""Snapshot Builder

Point-in-time copies of everything an issued document needs to be rendered
and verified without joining live tables. Builders only project: they copy
source fields, stringify money, and turn absent fields into null. They never
compute totals, taxes or labels.
"""

import copy
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from src.domain.business import Business
from src.domain.client import Client
from src.domain.credit_note import CreditNote
from src.domain.document_status import DocumentType
from src.domain.invoice import Invoice
from src.domain.invoice_line import InvoiceLine
from src.domain.issuable_document import SNAPSHOT_VERSION
from src.domain.payment import Payment
from src.domain.payment_method import PaymentMethod
from src.domain.receipt import Receipt
from src.domain.tax_schema import TaxSchema

UNKNOWN_ISSUER = "Unknown Business"


def _money(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return format(Decimal(str(value)).quantize(Decimal("0.01")), "f")


def _number(value: Optional[Decimal]) -> Optional[str]:
    if value is None:
        return None
    return format(Decimal(str(value)).normalize(), "f")


def _date(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def _json(value: Any) -> Any:
    # Detach nested JSON so later edits to the source object cannot leak in
    return copy.deepcopy(value) if value is not None else None


def build_issuer_snapshot(business: Optional[Business]) -> Optional[Dict[str, Any]]:
    """Legal identity of the issuing business as it stands right now"""
    if business is None:
        return None
    return {
        "business_id": business.id,
        "name": business.name,
        "legal_name": business.legal_name,
        "tax_id": business.tax_id,
        "registration_number": business.registration_number,
        "vat_registration_number": business.vat_registration_number,
        "is_vat_registered": business.is_vat_registered,
        "contact_email": business.contact_email,
        "contact_phone": business.contact_phone,
        "address": _json(business.address),
        "logo_url": business.logo_url,
        "jurisdiction": business.jurisdiction,
    }


def build_recipient_snapshot(client: Optional[Client]) -> Optional[Dict[str, Any]]:
    """Counterparty details (invoice recipient, receipt payer)"""
    if client is None:
        return None
    return {
        "client_id": client.id,
        "name": client.name,
        "email": client.email,
        "phone": client.phone,
        "address": _json(client.address),
        "contact_person": client.contact_person,
        "client_type": client.client_type,
        "tax_id": client.tax_id,
        "registration_number": client.registration_number,
    }


def build_line_items_snapshot(items: List[InvoiceLine]) -> List[Dict[str, Any]]:
    ordered = sorted(items, key=lambda item: (item.sort_order, item.created_at or datetime.min))
    return [
        {
            "description": item.description,
            "quantity": _number(item.quantity),
            "unit_price": _money(item.unit_price),
            "tax_rate": _number(item.tax_rate),
            "discount_percent": _number(item.discount_percent),
            "amount": _money(item.amount),
            "sort_order": item.sort_order,
        }
        for item in ordered
    ]


def build_payment_method_snapshot(payment_method: Optional[PaymentMethod]) -> Optional[Dict[str, Any]]:
    if payment_method is None:
        return None
    return {
        "provider_type": payment_method.provider_type,
        "display_name": payment_method.display_name,
        "instructions": _json(payment_method.instructions),
    }


def build_tax_schema_snapshot(tax_schema: Optional[TaxSchema]) -> Optional[Dict[str, Any]]:
    if tax_schema is None:
        return None
    return {
        "name": tax_schema.name,
        "version": tax_schema.version,
        "jurisdiction": tax_schema.jurisdiction,
        "rates": _json(tax_schema.rates),
        "rules": _json(tax_schema.rules),
    }


def build_invoice_snapshot(
    invoice: Invoice,
    business: Business,
    client: Optional[Client],
    items: List[InvoiceLine],
    payment_method: Optional[PaymentMethod] = None,
    tax_schema: Optional[TaxSchema] = None,
) -> Dict[str, Any]:
    """
    Full snapshot of an invoice at issuance

    Args:
        invoice: Invoice being issued (number and verification id already assigned)
        business: Issuing business
        client: Recipient, may be None for walk-in invoices
        items: Invoice line items
        payment_method: Payment instructions shown on the invoice
        tax_schema: Tax schema the draft was priced with

    Returns:
        JSON-serializable snapshot dict
    """
    return {
        "snapshot_version": SNAPSHOT_VERSION,
        "document_type": DocumentType.INVOICE.value,
        "issuer": build_issuer_snapshot(business),
        "recipient": build_recipient_snapshot(client),
        "line_items": build_line_items_snapshot(items),
        "payment_method": build_payment_method_snapshot(payment_method),
        "tax_schema": build_tax_schema_snapshot(tax_schema),
        "totals": {
            "subtotal": _money(invoice.subtotal),
            "tax_amount": _money(invoice.tax_amount),
            "discount_amount": _money(invoice.discount_amount),
            "total_amount": _money(invoice.total_amount),
            "currency": invoice.currency,
        },
        "dates": {
            "issue_date": _date(invoice.issue_date),
            "due_date": _date(invoice.due_date),
        },
        "notes": invoice.notes,
        "terms": invoice.terms,
        "references": {
            "document_id": invoice.id,
            "business_id": invoice.business_id,
            "client_id": invoice.client_id,
            "verification_id": invoice.verification_id,
        },
    }


def build_receipt_snapshot(
    receipt: Receipt,
    business: Business,
    payer: Optional[Client],
    invoice: Invoice,
    payment: Payment,
) -> Dict[str, Any]:
    """
    Full snapshot of a receipt at issuance

    The invoice section is copied from the invoice's own snapshot where it
    has one, so a receipt never shows invoice data newer than what was issued.
    """
    invoice_totals = (invoice.snapshot or {}).get("totals") or {}
    invoice_dates = (invoice.snapshot or {}).get("dates") or {}
    return {
        "snapshot_version": SNAPSHOT_VERSION,
        "document_type": DocumentType.RECEIPT.value,
        "issuer": build_issuer_snapshot(business),
        "payer": build_recipient_snapshot(payer),
        "invoice": {
            "invoice_number": invoice.document_number,
            "total_amount": invoice_totals.get("total_amount", _money(invoice.total_amount)),
            "issue_date": invoice_dates.get("issue_date", _date(invoice.issue_date)),
            "due_date": invoice_dates.get("due_date", _date(invoice.due_date)),
            "currency": invoice.currency,
        },
        "payment": {
            "amount": _money(payment.amount),
            "payment_method": payment.payment_method,
            "payment_reference": payment.payment_reference,
            "payment_date": _date(payment.payment_date),
            "notes": payment.notes,
        },
        "totals": {
            "total_amount": _money(receipt.total_amount),
            "currency": receipt.currency,
        },
        "references": {
            "document_id": receipt.id,
            "business_id": receipt.business_id,
            "invoice_id": receipt.invoice_id,
            "payment_id": receipt.payment_id,
            "verification_id": receipt.verification_id,
        },
    }


def build_credit_note_snapshot(
    credit_note: CreditNote,
    business: Business,
    client: Optional[Client],
    invoice: Invoice,
) -> Dict[str, Any]:
    """Full snapshot of a credit note reversing an issued invoice"""
    invoice_snapshot = invoice.snapshot or {}
    return {
        "snapshot_version": SNAPSHOT_VERSION,
        "document_type": DocumentType.CREDIT_NOTE.value,
        "issuer": build_issuer_snapshot(business),
        "recipient": build_recipient_snapshot(client),
        "original_invoice": {
            "invoice_number": invoice.document_number,
            "issued_at": invoice.issued_at.isoformat() if invoice.issued_at else None,
            "total_amount": (invoice_snapshot.get("totals") or {}).get(
                "total_amount", _money(invoice.total_amount)
            ),
            "currency": invoice.currency,
        },
        "line_items": _json(invoice_snapshot.get("line_items")) or [],
        "reason": credit_note.reason,
        "totals": {
            "total_amount": _money(credit_note.total_amount),
            "currency": credit_note.currency,
        },
        "references": {
            "document_id": credit_note.id,
            "business_id": credit_note.business_id,
            "original_invoice_id": credit_note.original_invoice_id,
            "client_id": invoice.client_id,
            "verification_id": credit_note.verification_id,
        },
    }


@dataclass
class DocumentSnapshot:
    """
    Read view over a stored snapshot of any version

    Missing sections read as None (or empty), unknown keys are kept in raw
    and otherwise ignored.
    """

    version: int
    issuer: Optional[Dict[str, Any]] = None
    counterparty: Optional[Dict[str, Any]] = None
    line_items: List[Dict[str, Any]] = field(default_factory=list)
    totals: Dict[str, Any] = field(default_factory=dict)
    references: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def issuer_name(self) -> str:
        issuer = self.issuer or {}
        return issuer.get("legal_name") or issuer.get("name") or UNKNOWN_ISSUER

    @property
    def total_amount(self) -> Optional[str]:
        return self.totals.get("total_amount")

    @property
    def currency(self) -> Optional[str]:
        return self.totals.get("currency")

    def section(self, name: str) -> Optional[Dict[str, Any]]:
        return self.raw.get(name)


def read_snapshot(raw: Optional[Dict[str, Any]]) -> Optional[DocumentSnapshot]:
    """
    Wrap a stored snapshot in a DocumentSnapshot

    Returns None only when there is no snapshot at all (legacy documents).
    """
    if raw is None:
        return None

    version = raw.get("snapshot_version") or 1
    # Version 1 is the only layout so far; later versions add sections but
    # keep these names.
    return DocumentSnapshot(
        version=version,
        issuer=raw.get("issuer"),
        counterparty=raw.get("recipient") or raw.get("payer"),
        line_items=raw.get("line_items") or [],
        totals=raw.get("totals") or {},
        references=raw.get("references") or {},
        raw=raw,
    )
