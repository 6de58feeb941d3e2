"""Receivable State Machine

Pure functions deriving status and remaining balance from total and paid
amounts. Every code path (create, update, payment, reconciliation) goes
through derive_status so "paid" has exactly one definition.
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union
from src.domain.payment import ReceivablePayment
from src.domain.receivable import Receivable, ReceivableStatus

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Amount = Union[Decimal, int, float, str]


def to_money(value: Amount) -> Decimal:
    """Normalise an amount to cents; sub-cent residuals vanish here"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def derive_remaining(total_amount: Amount, paid_amount: Amount) -> Decimal:
    remaining = to_money(total_amount) - to_money(paid_amount)
    return remaining if remaining > ZERO else ZERO


def derive_status(total_amount: Amount, paid_amount: Amount) -> ReceivableStatus:
    """
    pending: nothing paid
    paid:    nothing left once normalised to cents (covers paid == total)
    partial: anything in between
    """
    if to_money(paid_amount) <= ZERO:
        return ReceivableStatus.PENDING
    if derive_remaining(total_amount, paid_amount) == ZERO:
        return ReceivableStatus.PAID
    return ReceivableStatus.PARTIAL


def sum_payments(payments: Iterable[ReceivablePayment]) -> Decimal:
    return to_money(sum((p.amount for p in payments), ZERO))


def derive_profit(cost_price: Optional[Amount], sale_price: Optional[Amount]) -> Optional[Decimal]:
    if cost_price is None or sale_price is None:
        return None
    return to_money(sale_price) - to_money(cost_price)


def refresh_balances(receivable: Receivable) -> Receivable:
    """Recompute the derived fields of a receivable in place"""
    receivable.total_amount = to_money(receivable.total_amount)
    receivable.paid_amount = to_money(receivable.paid_amount)
    receivable.remaining_amount = derive_remaining(receivable.total_amount, receivable.paid_amount)
    receivable.status = derive_status(receivable.total_amount, receivable.paid_amount)
    return receivable


def record_payment(receivable: Receivable, payment: ReceivablePayment) -> Receivable:
    """
    Append a payment and recompute balances

    The payments list is replaced rather than mutated so the JSON column
    change is picked up by the ORM. Callers validate the amount first.
    """
    receivable.payments = [*(receivable.payments or []), payment.to_record()]
    receivable.paid_amount = to_money(receivable.paid_amount) + to_money(payment.amount)
    receivable.updated_at = datetime.utcnow()
    return refresh_balances(receivable)
