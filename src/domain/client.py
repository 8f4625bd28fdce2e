"""Client Domain Entity

Counterparty billed on invoices. Editable at any time; issued documents keep
the copy taken at issuance.
"""

from datetime import datetime
from typing import Optional, Dict, Any
from sqlmodel import Field
from sqlalchemy import JSON
from src.domain.base import BaseModel, generate_uuid


class Client(BaseModel, table=True):
    """Client - Recipient of invoices and payer on receipts"""

    __tablename__ = "clients"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    business_id: str = Field(foreign_key="businesses.id", index=True)
    name: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=64)
    address: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    contact_person: Optional[str] = Field(default=None, max_length=255)
    client_type: Optional[str] = Field(default=None, max_length=32)
    tax_id: Optional[str] = Field(default=None, max_length=64)
    registration_number: Optional[str] = Field(default=None, max_length=64)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
