"""Receivable Repository Interface

Defines the contract for receivable persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from src.domain.receivable import Receivable


class ReceivableRepository(ABC):
    """
    Repository interface for Receivable persistence

    Soft-deleted receivables are excluded from every read except
    list_deleted and reads made with include_deleted=True.
    """

    @abstractmethod
    async def create(self, receivable: Receivable) -> Receivable:
        """
        Persist a new receivable

        Args:
            receivable: Receivable entity with derived fields already computed

        Returns:
            Created Receivable
        """
        pass

    @abstractmethod
    async def get_by_id(
        self, receivable_id: str, include_deleted: bool = False, for_update: bool = False
    ) -> Optional[Receivable]:
        """
        Retrieve receivable by ID

        Args:
            receivable_id: Receivable ID
            include_deleted: If True, soft-deleted rows are returned too
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Receivable if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_customer(self, customer_id: str) -> List[Receivable]:
        """
        Retrieve all live receivables of a customer, oldest first
        """
        pass

    @abstractmethod
    async def get_open_by_customer(self, customer_id: str) -> List[Receivable]:
        """
        Retrieve live receivables that are not paid, oldest first

        Ordering is created_at ascending with id as tie-break, which is the
        order payments are allocated in.
        """
        pass

    @abstractmethod
    async def list(self, customer_id: Optional[str] = None) -> List[Receivable]:
        """
        Retrieve live receivables, optionally for a single customer

        Returns:
            Receivables ordered by created_at descending
        """
        pass

    @abstractmethod
    async def list_overdue(self, today: date, customer_id: Optional[str] = None) -> List[Receivable]:
        """
        Retrieve live, unpaid receivables whose due_date is before today
        """
        pass

    @abstractmethod
    async def list_deleted(self) -> List[Receivable]:
        """
        Retrieve soft-deleted receivables (recycle bin)
        """
        pass

    @abstractmethod
    async def update(self, receivable: Receivable) -> Receivable:
        """
        Persist changes made to a receivable

        Args:
            receivable: Receivable entity with updated values

        Returns:
            Updated Receivable
        """
        pass

    @abstractmethod
    async def soft_delete(self, receivable_id: str) -> Optional[Receivable]:
        """
        Mark a receivable as deleted, keeping its payment history

        Returns:
            The deleted Receivable, None if not found
        """
        pass

    @abstractmethod
    async def restore(self, receivable_id: str) -> Optional[Receivable]:
        """
        Undo a soft delete

        Returns:
            The restored Receivable, None if not found
        """
        pass

    @abstractmethod
    async def delete_permanently(self, receivable_id: str) -> bool:
        """
        Remove the row and its payment history

        Returns:
            True if a row was removed
        """
        pass
