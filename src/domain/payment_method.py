"""Payment Method Domain Entity

Payment instructions a business prints on its invoices.
"""

from datetime import datetime
from typing import Optional, Dict, Any
from sqlmodel import Field
from sqlalchemy import JSON
from src.domain.base import BaseModel, generate_uuid


class PaymentMethod(BaseModel, table=True):
    """Payment Method - Bank account, payment link or other instructions"""

    __tablename__ = "payment_methods"

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    business_id: str = Field(foreign_key="businesses.id", index=True)
    provider_type: str = Field(max_length=32, description="bank_transfer, payment_link, ...")
    display_name: str = Field(max_length=255)
    instructions: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    created_at: datetime = Field(default_factory=datetime.utcnow)
