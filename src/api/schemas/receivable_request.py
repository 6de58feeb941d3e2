"""Request schemas for Receivables API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from src.domain.payment import PaymentMethod
from src.domain.receivable import ReceivableSource


class CreateReceivableRequestSchema(BaseModel):
    """
    Request schema for recording a sale

    Used for POST /receivables endpoint.
    """

    customer_id: str = Field(..., min_length=1, description="Customer owing the amount")
    product_id: Optional[str] = Field(default=None, description="Catalog item id (catalog sales)")
    product_name: str = Field(..., min_length=1, max_length=255)
    source: ReceivableSource = Field(default=ReceivableSource.MANUAL)
    total_amount: Decimal = Field(..., gt=0, description="Sale total (must be > 0)")
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0, description="Down payment")
    initial_payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    cost_price: Optional[Decimal] = Field(default=None, ge=0)
    sale_price: Optional[Decimal] = Field(default=None, ge=0)
    coupon_code: Optional[str] = Field(default=None, max_length=50)
    coupon_discount: Optional[Decimal] = Field(default=None, ge=0, le=100)
    due_date: Optional[date] = None
    warranty_period_days: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator('total_amount', 'paid_amount')
    @classmethod
    def validate_precision(cls, v):
        """Amounts are kept in cents"""
        if v.as_tuple().exponent < -2:
            raise ValueError("Amount must have at most 2 decimal places")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "4f1c2a9e-1b7d-4c1e-9a51-2f1f0b7d9c10",
                "product_name": "Phone case",
                "source": "quick",
                "total_amount": "100.00",
                "paid_amount": "20.00",
                "initial_payment_method": "cash",
                "due_date": "2024-04-01"
            }
        }


class AddPaymentRequestSchema(BaseModel):
    """
    Request schema for a payment against a single receivable

    Used for POST /receivables/{receivable_id}/payments endpoint.
    """

    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod
    payment_date: Optional[date] = Field(default=None, description="Defaults to today")
    notes: Optional[str] = None

    @field_validator('amount')
    @classmethod
    def validate_precision(cls, v):
        """Amounts are kept in cents"""
        if v.as_tuple().exponent < -2:
            raise ValueError("Amount must have at most 2 decimal places")
        return v


class UpdateReceivableRequestSchema(BaseModel):
    """
    Request schema for PATCH /receivables/{receivable_id}

    Only the fields present in the body are applied.
    """

    product_id: Optional[str] = None
    product_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    cost_price: Optional[Decimal] = Field(default=None, ge=0)
    sale_price: Optional[Decimal] = Field(default=None, ge=0)
    total_amount: Optional[Decimal] = Field(default=None, gt=0)
    coupon_code: Optional[str] = Field(default=None, max_length=50)
    coupon_discount: Optional[Decimal] = Field(default=None, ge=0, le=100)
    due_date: Optional[date] = None
    warranty_period_days: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator('total_amount')
    @classmethod
    def validate_precision(cls, v):
        if v is not None and v.as_tuple().exponent < -2:
            raise ValueError("Amount must have at most 2 decimal places")
        return v


class RefundRequestSchema(BaseModel):
    """
    Request schema for POST /receivables/{receivable_id}/refund

    keep_as_credit turns the amount already paid into store credit.
    """

    keep_as_credit: bool = False
