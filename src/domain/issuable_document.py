"""Issuable Document Mixin

Columns shared by every document that goes through issuance (invoices,
receipts, credit notes). Integrity fields are written exactly once, at
issuance, and are guarded against later updates by the ORM listeners in
src.adapter.services.immutability.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional, Dict, Any
from sqlmodel import Field
from sqlalchemy import JSON, Numeric
from src.domain.base import BaseModel, generate_uuid

# Current layout of the snapshot JSON. Readers must accept every older version.
SNAPSHOT_VERSION = 1

# Fields that become immutable once a document leaves draft
INTEGRITY_FIELDS = (
    "document_number",
    "issued_at",
    "issued_by",
    "document_hash",
    "verification_id",
    "retention_locked_until",
    "snapshot",
    "snapshot_version",
    "total_amount",
    "currency",
)


class IssuableDocument(BaseModel):
    """
    Fields common to invoices, receipts and credit notes

    Domain Rules:
    - id is an internal key; verification_id is the only identifier shared publicly
    - document_number, issued_at, document_hash, snapshot and
      retention_locked_until are null before issuance and never change after it
    - snapshot carries every externally-sourced field needed to render the document
    """

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Opaque internal identifier"
    )

    business_id: str = Field(
        foreign_key="businesses.id",
        index=True,
        description="Issuing business"
    )

    document_number: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Human-readable sequence number, allocated at issuance"
    )

    currency: str = Field(
        default="USD",
        max_length=3,
        description="Currency code (ISO 4217)"
    )

    total_amount: Decimal = Field(
        default=Decimal("0"),
        sa_type=Numeric(18, 2),
        description="Document total (precision: 18,2)"
    )

    issued_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of issuance (UTC)"
    )

    issued_by: Optional[str] = Field(
        default=None,
        description="User who issued the document"
    )

    document_hash: Optional[str] = Field(
        default=None,
        max_length=64,
        description="SHA-256 hex digest over the canonical fields"
    )

    verification_id: Optional[str] = Field(
        default=None,
        max_length=36,
        unique=True,
        index=True,
        description="Public, unguessable verification token"
    )

    retention_locked_until: Optional[date] = Field(
        default=None,
        index=True,
        description="Date after which the document may be permanently deleted"
    )

    snapshot: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_type=JSON,
        description="Write-once copy of issuer, counterparty, items and terms"
    )

    snapshot_version: Optional[int] = Field(
        default=None,
        description="Layout version of the snapshot"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    @property
    def is_issued(self) -> bool:
        return self.issued_at is not None
