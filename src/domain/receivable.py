"""Receivable Domain Entity

One purchase owed by one customer, with its embedded payment history.
Status and remaining amount are derived from total and paid amounts.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Date, JSON, Numeric, String, Text
from src.domain.base import BaseModel, generate_uuid
from src.domain.payment import ReceivablePayment


class ReceivableStatus(str, Enum):
    """Settlement status (derived, never set directly)"""
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class ReceivableSource(str, Enum):
    """Where the sale was recorded"""
    CATALOG = "catalog"
    QUICK = "quick"
    MANUAL = "manual"


class Receivable(BaseModel, table=True):
    """
    Receivable - a debt owed by a customer for one purchase

    Domain Rules:
    - total_amount > 0
    - paid_amount equals the sum of payments
    - remaining_amount = max(0, total_amount - paid_amount)
    - status derived from total_amount and paid_amount
    - payments are append-only
    - sale fields are locked once the first payment exists
    - deleted_at marks a soft delete; payment history is kept
    """

    __tablename__ = "receivables"
    __table_args__ = (
        CheckConstraint('total_amount > 0', name='total_amount_positive'),
        CheckConstraint('paid_amount >= 0', name='paid_amount_non_negative'),
        CheckConstraint('remaining_amount >= 0', name='remaining_amount_non_negative'),
        CheckConstraint('warranty_period_days >= 0', name='warranty_non_negative'),
        Index('ix_receivables_customer_created', 'customer_id', 'created_at'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Opaque receivable identifier"
    )

    customer_id: str = Field(
        index=True,
        description="Owning customer"
    )

    product_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Optional link to an external catalog item"
    )

    product_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Product description shown to the operator"
    )

    source: ReceivableSource = Field(
        default=ReceivableSource.MANUAL,
        description="Origin of the sale (catalog, quick, manual)"
    )

    cost_price: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 2), nullable=True),
    )

    sale_price: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 2), nullable=True),
    )

    profit: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 2), nullable=True),
        description="sale_price - cost_price when both are known"
    )

    coupon_code: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
    )

    coupon_discount: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(5, 2), nullable=True),
        description="Coupon discount in percent"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Sale total owed"
    )

    paid_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Sum of all payments"
    )

    remaining_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="max(0, total_amount - paid_amount)"
    )

    status: ReceivableStatus = Field(
        default=ReceivableStatus.PENDING,
        description="pending, partial or paid"
    )

    payments: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Ordered payment records"
    )

    due_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
    )

    warranty_period_days: int = Field(
        default=0,
        description="Warranty length in days (0 = no warranty)"
    )

    catalog_sale_linked: bool = Field(
        default=False,
        description="Catalog item was marked as sold on credit for this receivable"
    )

    archived: bool = Field(
        default=False,
        description="Manual archive flag"
    )

    archived_at: Optional[datetime] = Field(default=None)

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    deleted_at: Optional[datetime] = Field(
        default=None,
        index=True,
        description="Soft delete timestamp (None = live)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp (drives oldest-first allocation)"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
    )

    def payment_records(self) -> List[ReceivablePayment]:
        return [ReceivablePayment.from_record(p) for p in self.payments or []]

    @property
    def has_payments(self) -> bool:
        return bool(self.payments)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
