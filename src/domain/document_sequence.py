"""Document Sequence Domain Entity

Durable counter behind document numbering. One row per
(business, document type, scope); incremented atomically inside the
issuance transaction so concurrent issuances never share a number.
"""

from datetime import datetime
from sqlmodel import Field
from sqlalchemy import UniqueConstraint
from src.domain.base import BaseModel, generate_uuid


class DocumentSequence(BaseModel, table=True):
    """
    Document Sequence - Next number to hand out for a numbering scope

    Domain Rules:
    - (business_id, document_type, scope) is unique
    - next_value only ever increases
    - scope is the calendar year of issuance (e.g. "2026")
    """

    __tablename__ = "document_sequences"
    __table_args__ = (
        UniqueConstraint('business_id', 'document_type', 'scope', name='uq_document_sequences_scope'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    business_id: str = Field(foreign_key="businesses.id")
    document_type: str = Field(max_length=32)
    scope: str = Field(max_length=32)
    next_value: int = Field(default=1, description="Next number to allocate")
    updated_at: datetime = Field(default_factory=datetime.utcnow)
