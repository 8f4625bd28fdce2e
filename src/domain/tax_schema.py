"""Tax Schema Domain Entity

Versioned tax configuration per jurisdiction. Invoices copy the schema into
their snapshot at issuance so later schema edits never change issued documents.
"""

from datetime import datetime
from typing import Optional, Dict, Any
from sqlmodel import Field
from sqlalchemy import JSON
from src.domain.base import BaseModel, generate_uuid


class TaxSchema(BaseModel, table=True):
    """Tax Schema - Named, versioned set of tax rates and rules"""

    __tablename__ = "tax_schemas"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    name: str = Field(max_length=255)
    version: str = Field(max_length=32)
    jurisdiction: str = Field(max_length=2, index=True)
    rates: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    rules: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    created_at: datetime = Field(default_factory=datetime.utcnow)
