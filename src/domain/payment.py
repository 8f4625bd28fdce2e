"""Payment Domain Entity

Payments recorded against issued invoices. Each payment yields one Receipt.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class Payment(BaseModel, table=True):
    """
    Payment - Money received against an invoice

    Domain Rules:
    - Only invoices in issued, sent or viewed status accept payments
    - amount must be positive
    - Deleted only by the retention sweep together with its invoice
    """

    __tablename__ = "payments"

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique payment identifier"
    )

    invoice_id: str = Field(
        sa_column=Column(String(36), ForeignKey("invoices.id"), nullable=False, index=True),
        description="Invoice this payment settles"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Amount paid (precision: 18,2)"
    )

    payment_method: Optional[str] = Field(
        default=None,
        max_length=100,
        description="How the payment was made (bank transfer, card, ...)"
    )

    payment_reference: Optional[str] = Field(
        default=None,
        max_length=255,
        description="External payment reference"
    )

    payment_date: date = Field(
        default_factory=date.today,
        description="Date the payment was received"
    )

    notes: Optional[str] = Field(
        default=None,
        description="Free-form notes"
    )

    recorded_by: Optional[str] = Field(
        default=None,
        description="User who recorded the payment"
    )

    retention_locked_until: Optional[date] = Field(
        default=None,
        description="Retention date inherited from the receipt issued for this payment"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Record creation timestamp"
    )
