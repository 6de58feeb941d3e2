from .base import BaseModel, generate_uuid
from .customer import Customer
from .credit_transaction import CreditTransaction, TransactionType
from .payment import PaymentMethod, ReceivablePayment, ALLOCATION_METHOD_ORDER
from .receivable import Receivable, ReceivableStatus, ReceivableSource
from .visibility import VisibilityState, ReceivableView

__all__ = [
    "BaseModel",
    "generate_uuid",
    "Customer",
    "CreditTransaction",
    "TransactionType",
    "PaymentMethod",
    "ReceivablePayment",
    "ALLOCATION_METHOD_ORDER",
    "Receivable",
    "ReceivableStatus",
    "ReceivableSource",
    "VisibilityState",
    "ReceivableView",
]
