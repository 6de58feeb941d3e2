"""Catalog Service Interface

Defines the contract for the external product catalog collaborator.
The ledger tells the catalog when a credit sale is recorded against an
item and when that sale is refunded.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class BuyerInfo:
    """Buyer details sent along with a credit sale"""
    customer_id: str
    customer_code: str
    customer_name: str


class CatalogService(ABC):
    """
    Abstract product catalog collaborator

    Implementations never raise: failures are logged and reported as False
    so the financial side of an operation is never blocked by inventory.
    """

    @abstractmethod
    async def mark_sold_on_credit(
        self,
        product_id: str,
        buyer: BuyerInfo,
        amount: Decimal,
        receivable_id: str,
    ) -> bool:
        """
        Mark a catalog item as sold on credit

        Args:
            product_id: Catalog item identifier
            buyer: Customer buying the item
            amount: Sale amount
            receivable_id: Receivable tracking the debt

        Returns:
            True if the catalog accepted the update, False otherwise
        """
        pass

    @abstractmethod
    async def cancel_sale(self, product_id: str) -> bool:
        """
        Cancel a sale and return the item to the catalog (restock)

        Args:
            product_id: Catalog item identifier

        Returns:
            True if the catalog accepted the update, False otherwise
        """
        pass
