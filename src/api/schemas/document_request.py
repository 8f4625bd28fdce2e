"""Request schemas for Document API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator


class LineItemRequestSchema(BaseModel):
    description: str = Field(..., min_length=1, max_length=500)
    quantity: Decimal = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    discount_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)


class CreateInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating a draft invoice

    Used for POST /invoices endpoint.
    """

    business_id: str = Field(..., min_length=1, description="Issuing business")
    client_id: Optional[str] = Field(default=None, description="Recipient client")
    currency: str = Field(default="USD", min_length=3, max_length=3)
    issue_date: Optional[date] = Field(default=None)
    due_date: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=2000)
    terms: Optional[str] = Field(default=None, max_length=2000)
    payment_method_id: Optional[str] = Field(default=None)
    tax_schema_id: Optional[str] = Field(default=None)
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    line_items: List[LineItemRequestSchema] = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "business_id": "b7a1c2d3-0000-4000-8000-000000000001",
                "client_id": "c1d2e3f4-0000-4000-8000-000000000001",
                "currency": "USD",
                "due_date": "2026-02-15",
                "line_items": [
                    {"description": "Consulting", "quantity": "2", "unit_price": "50.00"}
                ],
            }
        }


class RecordPaymentRequestSchema(BaseModel):
    """
    Request schema for recording a payment

    Used for POST /invoices/{invoice_id}/payments endpoint.
    """

    amount: Decimal = Field(..., gt=0, le=Decimal("999999999.99"), description="Amount received")
    payment_method: Optional[str] = Field(default=None, max_length=100)
    payment_reference: Optional[str] = Field(default=None, max_length=255)
    payment_date: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        """Payments are recorded in whole cents"""
        if v != v.quantize(Decimal("0.01")):
            raise ValueError("Amount must have at most 2 decimal places")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "100.00",
                "payment_method": "bank_transfer",
                "payment_reference": "TRX-4471",
                "payment_date": "2026-01-20",
            }
        }


class VoidInvoiceRequestSchema(BaseModel):
    """
    Request schema for voiding an invoice

    Used for POST /invoices/{invoice_id}/void endpoint.
    """

    reason: str = Field(..., min_length=10, max_length=1000, description="Why the invoice is voided")

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, v):
        if len(v.strip()) < 10:
            raise ValueError("Reason must be at least 10 characters")
        return v.strip()
