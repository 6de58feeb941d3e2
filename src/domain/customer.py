"""Customer Domain Entity

Only the store-credit aspect of a customer is managed by the ledger.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, Numeric, String
from src.domain.base import BaseModel, generate_uuid


class Customer(BaseModel, table=True):
    """
    Customer - owner of receivables and of a store-credit balance

    Domain Rules:
    - credit_balance must be non-negative
    - credit_balance changes only together with a CreditTransaction
    """

    __tablename__ = "customers"
    __table_args__ = (
        CheckConstraint('credit_balance >= 0', name='credit_balance_non_negative'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
    )

    code: str = Field(
        sa_column=Column(String(20), nullable=False, unique=True),
        description="Human-facing customer code (e.g. CLI042)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    credit_balance: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Store credit available (>= 0)"
    )

    active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    updated_at: datetime = Field(default_factory=datetime.utcnow)
