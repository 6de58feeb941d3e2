"""Credit Transaction Repository Interface

Defines the contract for credit transaction persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.credit_transaction import CreditTransaction


class CreditTransactionRepository(ABC):
    """
    Repository interface for CreditTransaction persistence

    Transactions are immutable and append-only for audit trail.
    Idempotency is enforced via unique idempotency_key.
    """

    @abstractmethod
    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        """
        Create a new credit transaction

        Args:
            transaction: CreditTransaction entity to persist

        Returns:
            Created CreditTransaction with generated ID

        Raises:
            IntegrityError: If idempotency_key already exists (duplicate transaction)
        """
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[CreditTransaction]:
        """
        Retrieve transaction by idempotency key

        Used to check if transaction already exists (idempotency check).

        Args:
            idempotency_key: Unique idempotency key

        Returns:
            CreditTransaction if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_customer_id(
        self, customer_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[CreditTransaction], int]:
        """
        Retrieve a customer's transactions, most recent first

        Returns:
            Tuple of (transactions page, total count)
        """
        pass

    @abstractmethod
    async def get_balance_sum_by_customer(self, customer_id: str) -> Decimal:
        """
        Sum of add transactions minus sum of remove transactions

        Used by reconciliation to recompute the expected balance.
        """
        pass
