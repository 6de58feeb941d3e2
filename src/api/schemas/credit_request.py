"""Request schemas for Customer API

Store credit and customer-level payment allocation.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator


class AddCreditRequestSchema(BaseModel):
    """
    Request schema for adding store credit

    Used for POST /customers/{customer_id}/credit/add endpoint.
    """

    amount: Decimal = Field(..., gt=0, description="Credit amount (must be > 0)")
    description: str = Field(..., min_length=1, max_length=255)
    idempotency_key: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Repeated requests with the same key credit only once"
    )

    @field_validator('amount')
    @classmethod
    def validate_precision(cls, v):
        """Amounts are kept in cents"""
        if v.as_tuple().exponent < -2:
            raise ValueError("Amount must have at most 2 decimal places")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "50.00",
                "description": "Goodwill credit",
                "idempotency_key": "goodwill:2024-03-01:CLI042"
            }
        }


class RemoveCreditRequestSchema(BaseModel):
    """
    Request schema for using store credit

    Used for POST /customers/{customer_id}/credit/remove endpoint.
    """

    amount: Decimal = Field(..., gt=0, description="Credit amount (must be > 0)")
    description: str = Field(default="Credit used", min_length=1, max_length=255)

    @field_validator('amount')
    @classmethod
    def validate_precision(cls, v):
        """Amounts are kept in cents"""
        if v.as_tuple().exponent < -2:
            raise ValueError("Amount must have at most 2 decimal places")
        return v


class AllocatePaymentRequestSchema(BaseModel):
    """
    Request schema for a customer payment split by method

    Used for POST /customers/{customer_id}/payments endpoint.
    """

    cash: Decimal = Field(default=Decimal("0"), ge=0)
    pix: Decimal = Field(default=Decimal("0"), ge=0)
    card: Decimal = Field(default=Decimal("0"), ge=0)
    payment_date: Optional[date] = Field(default=None, description="Defaults to today")
    notes: Optional[str] = None

    @field_validator('cash', 'pix', 'card')
    @classmethod
    def validate_precision(cls, v):
        """Amounts are kept in cents"""
        if v.as_tuple().exponent < -2:
            raise ValueError("Amount must have at most 2 decimal places")
        return v

    @model_validator(mode="after")
    def validate_total(self):
        if self.cash + self.pix + self.card <= 0:
            raise ValueError("At least one payment method must have an amount greater than zero")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "cash": "100.00",
                "pix": "20.00",
                "card": "0",
                "payment_date": "2024-03-01"
            }
        }
