"""Data Transfer Objects for Ledger Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.payment import ALLOCATION_METHOD_ORDER, PaymentMethod
from src.domain.receivable import Receivable, ReceivableSource
from src.domain.visibility import derive_visibility, warranty_expires_at


class UnappliedPaymentPolicy(str, Enum):
    """What the allocator does with money left after all debts are settled"""
    REPORT = "report"
    CREDIT = "credit"
    REJECT = "reject"


# ---------------------------------------------------------------------------
# Receivables
# ---------------------------------------------------------------------------


class CreateReceivableCommandDTO(BaseModel):
    """
    Command DTO for recording a sale as a receivable

    paid_amount is an optional down payment; it is recorded as the first
    payment using initial_payment_method.
    """

    customer_id: str = Field(..., min_length=1)
    product_id: Optional[str] = Field(default=None, description="Catalog item id (required for catalog sales)")
    product_name: str = Field(..., min_length=1)
    source: ReceivableSource = ReceivableSource.MANUAL
    total_amount: Decimal = Field(..., gt=0)
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0)
    initial_payment_method: PaymentMethod = PaymentMethod.CASH
    cost_price: Optional[Decimal] = Field(default=None, ge=0)
    sale_price: Optional[Decimal] = Field(default=None, ge=0)
    coupon_code: Optional[str] = None
    coupon_discount: Optional[Decimal] = Field(default=None, ge=0, le=100)
    due_date: Optional[date] = None
    warranty_period_days: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "4f1c2a9e-1b7d-4c1e-9a51-2f1f0b7d9c10",
                "product_id": "prod_123",
                "product_name": "iPhone 13 128GB",
                "source": "catalog",
                "total_amount": "2500.00",
                "paid_amount": "500.00",
                "initial_payment_method": "pix",
                "warranty_period_days": 90
            }
        }


class AddPaymentCommandDTO(BaseModel):
    """Command DTO for a single payment against one receivable"""

    receivable_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    method: PaymentMethod
    payment_date: date
    notes: Optional[str] = None


class AllocatePaymentCommandDTO(BaseModel):
    """
    Command DTO for a customer payment split by method

    Each method amount is distributed over the customer's open receivables,
    oldest first.
    """

    customer_id: str = Field(..., min_length=1)
    cash: Decimal = Field(default=Decimal("0"), ge=0)
    pix: Decimal = Field(default=Decimal("0"), ge=0)
    card: Decimal = Field(default=Decimal("0"), ge=0)
    payment_date: date
    notes: Optional[str] = None

    def amounts_by_method(self) -> Dict[PaymentMethod, Decimal]:
        """Positive amounts in allocation order"""
        amounts = {}
        for method in ALLOCATION_METHOD_ORDER:
            amount = getattr(self, method.value)
            if amount > 0:
                amounts[method] = amount
        return amounts

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "4f1c2a9e-1b7d-4c1e-9a51-2f1f0b7d9c10",
                "cash": "100.00",
                "pix": "20.00",
                "card": "0",
                "payment_date": "2024-03-01",
                "notes": "Paid at the counter"
            }
        }


class UpdateReceivableCommandDTO(BaseModel):
    """
    Command DTO for a partial receivable edit

    Only fields explicitly set are applied.
    """

    receivable_id: str = Field(..., min_length=1)
    product_id: Optional[str] = None
    product_name: Optional[str] = Field(default=None, min_length=1)
    cost_price: Optional[Decimal] = Field(default=None, ge=0)
    sale_price: Optional[Decimal] = Field(default=None, ge=0)
    total_amount: Optional[Decimal] = Field(default=None, gt=0)
    coupon_code: Optional[str] = None
    coupon_discount: Optional[Decimal] = Field(default=None, ge=0, le=100)
    due_date: Optional[date] = None
    warranty_period_days: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"receivable_id"})


class RefundReceivableCommandDTO(BaseModel):
    """Command DTO for refunding (returning) a receivable"""

    receivable_id: str = Field(..., min_length=1)
    keep_as_credit: bool = False


class PaymentDTO(BaseModel):
    id: str
    amount: Decimal
    method: str
    payment_date: date
    notes: Optional[str] = None


class ReceivableResponseDTO(BaseModel):
    """
    Response DTO for a receivable

    visibility and requires_credit_decision are computed at read time.
    """

    id: str
    customer_id: str
    product_id: Optional[str] = None
    product_name: str
    source: str
    cost_price: Optional[Decimal] = None
    sale_price: Optional[Decimal] = None
    profit: Optional[Decimal] = None
    coupon_code: Optional[str] = None
    coupon_discount: Optional[Decimal] = None
    total_amount: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal
    status: str
    payments: List[PaymentDTO]
    due_date: Optional[date] = None
    warranty_period_days: int
    warranty_expires_at: Optional[datetime] = None
    catalog_sale_linked: bool
    archived: bool
    archived_at: Optional[datetime] = None
    visibility: str
    requires_credit_decision: bool
    notes: Optional[str] = None
    deleted_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


def receivable_to_dto(receivable: Receivable, now: Optional[datetime] = None) -> ReceivableResponseDTO:
    """Convert a Receivable entity to its response DTO"""
    return ReceivableResponseDTO(
        id=receivable.id,
        customer_id=receivable.customer_id,
        product_id=receivable.product_id,
        product_name=receivable.product_name,
        source=_enum_value(receivable.source),
        cost_price=receivable.cost_price,
        sale_price=receivable.sale_price,
        profit=receivable.profit,
        coupon_code=receivable.coupon_code,
        coupon_discount=receivable.coupon_discount,
        total_amount=receivable.total_amount,
        paid_amount=receivable.paid_amount,
        remaining_amount=receivable.remaining_amount,
        status=_enum_value(receivable.status),
        payments=[
            PaymentDTO(
                id=p.id,
                amount=p.amount,
                method=p.method.value,
                payment_date=p.payment_date,
                notes=p.notes,
            )
            for p in receivable.payment_records()
        ],
        due_date=receivable.due_date,
        warranty_period_days=receivable.warranty_period_days,
        warranty_expires_at=(
            warranty_expires_at(receivable.created_at, receivable.warranty_period_days)
            if receivable.warranty_period_days
            else None
        ),
        catalog_sale_linked=receivable.catalog_sale_linked,
        archived=receivable.archived,
        archived_at=receivable.archived_at,
        visibility=derive_visibility(receivable, now).value,
        requires_credit_decision=receivable.paid_amount > 0,
        notes=receivable.notes,
        deleted_at=receivable.deleted_at,
        created_at=receivable.created_at,
        updated_at=receivable.updated_at,
    )


def _enum_value(value) -> str:
    return value.value if hasattr(value, "value") else value


class ReceivableListResponseDTO(BaseModel):
    view: str
    customer_id: Optional[str] = None
    items: List[ReceivableResponseDTO]
    count: int
    total_remaining: Decimal


class ReceivablesSummaryDTO(BaseModel):
    """Outstanding totals, optionally for a single customer"""

    customer_id: Optional[str] = None
    total_receivable: Decimal
    pending_count: int
    partial_count: int
    paid_count: int
    overdue_count: int
    overdue_amount: Decimal


# ---------------------------------------------------------------------------
# Payment allocation
# ---------------------------------------------------------------------------


class AllocationDTO(BaseModel):
    """One payment created on one receivable by the allocator"""

    receivable_id: str
    product_name: str
    method: str
    amount: Decimal
    payment_id: str
    remaining_after: Decimal
    status_after: str


class AllocationFailureDTO(BaseModel):
    """
    Where an allocation sequence stopped

    Allocations listed in the response before the failure are committed.
    outstanding holds, per method, the amount that still has to be applied.
    """

    method: str
    receivable_id: Optional[str] = None
    amount: Decimal
    code: str
    message: str
    outstanding: Dict[str, Decimal]


class AllocatePaymentResponseDTO(BaseModel):
    customer_id: str
    applied: List[AllocationDTO]
    total_applied: Decimal
    unapplied_amount: Decimal
    unapplied_by_method: Dict[str, Decimal]
    unapplied_policy: str
    credit_transaction_id: Optional[int] = None
    completed: bool
    failure: Optional[AllocationFailureDTO] = None


# ---------------------------------------------------------------------------
# Refund
# ---------------------------------------------------------------------------


class RefundStepStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class RefundStepDTO(BaseModel):
    name: str
    status: RefundStepStatus
    detail: Optional[str] = None


class RefundResponseDTO(BaseModel):
    """
    Response DTO for a refund

    steps records each independently committed step so a failed restock
    can be retried or handled manually.
    """

    receivable_id: str
    customer_id: str
    paid_amount: Decimal
    credited_amount: Decimal
    credit_transaction_id: Optional[int] = None
    steps: List[RefundStepDTO]


# ---------------------------------------------------------------------------
# Store credit
# ---------------------------------------------------------------------------


class AddCreditCommandDTO(BaseModel):
    """
    Command DTO for granting store credit

    A repeated idempotency_key returns the original transaction.
    """

    customer_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=255)
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    idempotency_key: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "4f1c2a9e-1b7d-4c1e-9a51-2f1f0b7d9c10",
                "amount": "80.00",
                "description": "refund: iPhone 13 128GB",
                "reference_type": "receivable_refund",
                "reference_id": "8b0e5d0c-7c55-4f5e-a0f2-7f7c1f2f0a11",
                "idempotency_key": "refund:8b0e5d0c-7c55-4f5e-a0f2-7f7c1f2f0a11"
            }
        }


class RemoveCreditCommandDTO(BaseModel):
    """Command DTO for using or withdrawing store credit"""

    customer_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    description: str = Field(default="Credit used", min_length=1, max_length=255)
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None


class CreditTransactionResponseDTO(BaseModel):
    """Response DTO for credit add/remove operations"""

    transaction_id: int
    customer_id: str
    transaction_type: str
    amount: Decimal
    description: str
    balance_before: Decimal
    balance_after: Decimal
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    idempotency_key: Optional[str] = None
    created_at: datetime
    replayed: bool = False


class CreditBalanceResponseDTO(BaseModel):
    customer_id: str
    balance: Decimal
    last_updated: datetime


class CreditTransactionDTO(BaseModel):
    id: int
    transaction_type: str
    amount: Decimal
    description: str
    balance_after: Decimal
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    created_at: datetime


class ListCreditTransactionsResponseDTO(BaseModel):
    transactions: List[CreditTransactionDTO]
    total: int
    limit: int
    offset: int


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------


class ReceivableDiscrepancyDTO(BaseModel):
    receivable_id: str
    customer_id: str
    field: str
    stored_value: str
    expected_value: str


class CreditDiscrepancyDTO(BaseModel):
    customer_id: str
    stored_balance: Decimal
    calculated_balance: Decimal
    discrepancy: Decimal


class ReconciliationResultDTO(BaseModel):
    total_receivables_checked: int
    total_customers_checked: int
    discrepancies_found: int
    receivable_discrepancies: List[ReceivableDiscrepancyDTO]
    credit_discrepancies: List[CreditDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int
