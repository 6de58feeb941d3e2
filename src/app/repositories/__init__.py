from .receivable_repository import ReceivableRepository
from .customer_repository import CustomerRepository
from .credit_transaction_repository import CreditTransactionRepository

__all__ = [
    "ReceivableRepository",
    "CustomerRepository",
    "CreditTransactionRepository",
]
