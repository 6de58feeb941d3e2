from .receivable_repository import SqlAlchemyReceivableRepository
from .customer_repository import SqlAlchemyCustomerRepository
from .credit_transaction_repository import SqlAlchemyCreditTransactionRepository

__all__ = [
    "SqlAlchemyReceivableRepository",
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyCreditTransactionRepository",
]
