"""Receivable Payment Value Object

A single settlement event against a receivable. Payments are embedded in
the receivable row as an ordered JSON list and are never edited in place.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from src.domain.base import generate_uuid


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    CASH = "cash"
    PIX = "pix"
    CARD = "card"


# Order in which a mixed-method payment is allocated
ALLOCATION_METHOD_ORDER = (PaymentMethod.CASH, PaymentMethod.PIX, PaymentMethod.CARD)


class ReceivablePayment(BaseModel):
    """
    Payment - immutable settlement record

    Domain Rules:
    - amount > 0
    - amount never exceeds the receivable's remaining balance at the
      moment the payment is applied
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_uuid)
    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod
    payment_date: date
    notes: Optional[str] = None

    def to_record(self) -> dict:
        """Serialise for the receivable's JSON payments column"""
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls, record: dict) -> "ReceivablePayment":
        return cls.model_validate(record)
