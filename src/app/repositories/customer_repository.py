"""Customer Repository Interface

Defines the contract for the credit-balance side of customer persistence.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from src.domain.customer import Customer


class CustomerRepository(ABC):
    """
    Repository interface for Customer persistence

    get_by_id supports pessimistic locking (SELECT FOR UPDATE) for
    credit balance changes.
    """

    @abstractmethod
    async def get_by_id(self, customer_id: str, for_update: bool = False) -> Optional[Customer]:
        """
        Retrieve customer by ID

        Args:
            customer_id: Customer identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Customer if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Customer]:
        """
        Retrieve all customers (used by reconciliation)
        """
        pass

    @abstractmethod
    async def create(self, customer: Customer) -> Customer:
        """
        Create a new customer
        """
        pass

    @abstractmethod
    async def update_credit_balance(self, customer_id: str, new_balance: Decimal) -> None:
        """
        Update the stored credit balance

        Args:
            customer_id: Customer identifier
            new_balance: New balance value (>= 0)
        """
        pass
