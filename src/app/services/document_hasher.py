"""Document Hash Generator

Deterministic SHA-256 digest over the canonical fields of an issued
document. The input is built only from persisted integrity columns and the
snapshot's totals and references, never from layout, template text or live
joins, so re-rendering a document never changes its hash.
"""

import hashlib
import hmac
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Dict, Optional

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class CanonicalFields:
    """Fields covered by the document hash"""

    document_type: str
    document_number: Optional[str]
    currency: Optional[str]
    issued_at: Optional[datetime]
    amounts: Dict[str, Any] = field(default_factory=dict)
    references: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "document_type": self.document_type,
            "document_number": self.document_number,
            "currency": self.currency,
            "issued_at": normalize_timestamp(self.issued_at),
            "amounts": {key: normalize_amount(value) for key, value in self.amounts.items()},
            "references": {key: _text(value) for key, value in self.references.items()},
        }


def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def normalize_amount(value: Any) -> Optional[str]:
    """Render a monetary value as a fixed two-decimal string"""
    if value is None:
        return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not a monetary amount: {value!r}")
    return format(amount.quantize(_CENT, rounding=ROUND_HALF_UP), "f")


def normalize_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 in UTC with microseconds, naive timestamps are taken as UTC"""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="microseconds") + "Z"


def canonical_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def canonical_fields_for(document) -> CanonicalFields:
    """
    Build the canonical fields of an invoice, receipt or credit note

    Amounts, currency and references come from the snapshot, the same values
    verification displays. Documents issued before snapshots existed fall
    back to their own total and currency columns.
    """
    snapshot = document.snapshot or {}
    totals = dict(snapshot.get("totals") or {})
    currency = totals.pop("currency", None) or document.currency
    if not totals:
        totals = {"total_amount": document.total_amount}

    references = dict(snapshot.get("references") or {})
    if not references:
        references = {
            "document_id": document.id,
            "business_id": document.business_id,
            "verification_id": document.verification_id,
        }

    return CanonicalFields(
        document_type=document.document_type.value,
        document_number=document.document_number,
        currency=currency,
        issued_at=document.issued_at,
        amounts=totals,
        references=references,
    )


def compute_document_hash(fields: CanonicalFields) -> str:
    """
    Compute the SHA-256 hex digest of the canonical fields

    Returns:
        Lowercase hex string, 64 characters
    """
    canonical = canonical_json(fields.to_payload())
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def verify_document_hash(fields: CanonicalFields, expected_hash: Optional[str]) -> bool:
    """Recompute and compare in constant time"""
    if not isinstance(expected_hash, str) or len(expected_hash) != 64:
        return False
    actual = compute_document_hash(fields)
    return hmac.compare_digest(actual, expected_hash.lower())
