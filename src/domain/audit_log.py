"""Audit Log Domain Entity

Append-only trail written by every state-changing operation on documents.
Rows are never updated or deleted (see src.adapter.services.immutability).
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any
from sqlmodel import Field, Column, Index
from sqlalchemy import JSON
from src.domain.base import BaseModel, generate_uuid


class AuditEventType(str, Enum):
    """Audit event types"""
    INVOICE_CREATED = "INVOICE_CREATED"
    INVOICE_ISSUED = "INVOICE_ISSUED"
    INVOICE_SENT = "INVOICE_SENT"
    INVOICE_VIEWED = "INVOICE_VIEWED"
    INVOICE_VOIDED = "INVOICE_VOIDED"
    PAYMENT_RECORDED = "PAYMENT_RECORDED"
    RECEIPT_ISSUED = "RECEIPT_ISSUED"
    RECEIPT_VIEWED = "RECEIPT_VIEWED"
    CREDIT_NOTE_ISSUED = "CREDIT_NOTE_ISSUED"
    CREDIT_NOTE_VIEWED = "CREDIT_NOTE_VIEWED"
    VERIFICATION_NOT_FOUND = "VERIFICATION_NOT_FOUND"
    RETENTION_CLEANUP = "RETENTION_CLEANUP"


class AuditLog(BaseModel, table=True):
    """
    Audit Log - Immutable record of an event on an entity

    Domain Rules:
    - Append-only: no update or delete path exists
    - actor_id is null for public (unauthenticated) and scheduled events
    - previous_state/new_state hold the relevant slice of the entity, not the full row
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index('ix_audit_logs_entity', 'entity_type', 'entity_id'),
        Index('ix_audit_logs_created_at', 'created_at'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)

    event_type: AuditEventType = Field(
        description="What happened"
    )

    entity_type: str = Field(
        max_length=32,
        description="Kind of entity (invoice, receipt, credit_note, payment, retention_cleanup)"
    )

    entity_id: Optional[str] = Field(
        default=None,
        description="Affected entity, null for batch or not-found events"
    )

    actor_id: Optional[str] = Field(
        default=None,
        description="User who caused the event, null for public or system callers"
    )

    business_id: Optional[str] = Field(
        default=None,
        index=True,
        description="Business the entity belongs to"
    )

    previous_state: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_type=JSON,
    )

    new_state: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_type=JSON,
    )

    event_metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column("metadata", JSON, nullable=True),
        description="Free-form context (verification id, counts, errors)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Event timestamp (immutable)"
    )
