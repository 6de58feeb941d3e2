"""Credit Transaction Domain Entity

Immutable append-only audit trail of store-credit changes.
Each transaction records balance snapshots with complete context.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Integer, Numeric, String
from src.domain.base import BaseModel


class TransactionType(str, Enum):
    """Credit transaction types"""
    ADD = "add"          # Credit granted (refund kept as credit, overpayment, manual)
    REMOVE = "remove"    # Credit used or withdrawn


class CreditTransaction(BaseModel, table=True):
    """
    Credit Transaction - Immutable audit trail of credit mutations

    Domain Rules:
    - Transactions are immutable (append-only)
    - amount is always positive; transaction_type gives the direction
    - idempotency_key, when present, is unique (prevents double crediting)
    - reference_type/reference_id link to the originating record
      (e.g. "receivable_refund", "payment_allocation")
    """

    __tablename__ = "credit_transactions"
    __table_args__ = (
        Index('ix_credit_transactions_created_at', 'created_at'),
        Index('ix_credit_transactions_reference', 'reference_type', 'reference_id'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
        description="Unique transaction identifier (auto-increment)"
    )

    customer_id: str = Field(
        index=True,
        description="Customer whose balance changed"
    )

    transaction_type: TransactionType = Field(
        description="add or remove"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Credit amount (always > 0)"
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    balance_before: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
    )

    balance_after: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
    )

    reference_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True),
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Transaction timestamp (immutable)"
    )
