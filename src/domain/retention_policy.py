"""Retention Policy Domain Entity

How long each kind of record must be kept in a jurisdiction.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field
from sqlalchemy import UniqueConstraint
from src.domain.base import BaseModel, generate_uuid


class RetentionPolicy(BaseModel, table=True):
    """
    Retention Policy - (jurisdiction, entity_type) -> retention_years

    Domain Rules:
    - Consulted once, at issuance, to compute retention_locked_until
    - Later edits do not change dates already computed for issued documents
    """

    __tablename__ = "retention_policies"
    __table_args__ = (
        UniqueConstraint('jurisdiction', 'entity_type', name='uq_retention_policies_jurisdiction_entity'),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    jurisdiction: str = Field(max_length=2)
    entity_type: str = Field(max_length=32)
    retention_years: int = Field(default=7, ge=0)
    legal_basis: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)
