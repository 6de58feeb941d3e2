"""SQLAlchemy implementation of ReceivableRepository

Soft delete is a deleted_at timestamp; every read filters on it unless
asked otherwise.
"""

from datetime import date, datetime
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.receivable_repository import ReceivableRepository
from src.domain.receivable import Receivable, ReceivableStatus


class SqlAlchemyReceivableRepository(ReceivableRepository):
    """
    SQLAlchemy implementation of ReceivableRepository

    Features:
    - Soft delete with restore
    - Oldest-first ordering for open receivables (allocation order)
    - Row locking of a receivable while a payment is applied
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, receivable: Receivable) -> Receivable:
        self.session.add(receivable)
        await self.session.flush()
        await self.session.refresh(receivable)
        return receivable

    async def get_by_id(
        self, receivable_id: str, include_deleted: bool = False, for_update: bool = False
    ) -> Optional[Receivable]:
        """
        Retrieve receivable by ID

        With for_update the row is locked so concurrent payments to the same
        receivable are applied one after the other. SQLite ignores the lock.
        """
        stmt = select(Receivable).where(Receivable.id == receivable_id)
        if not include_deleted:
            stmt = stmt.where(Receivable.deleted_at.is_(None))
        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_customer(self, customer_id: str) -> List[Receivable]:
        stmt = (
            select(Receivable)
            .where(Receivable.customer_id == customer_id)
            .where(Receivable.deleted_at.is_(None))
            .order_by(Receivable.created_at.asc(), Receivable.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_open_by_customer(self, customer_id: str) -> List[Receivable]:
        stmt = (
            select(Receivable)
            .where(Receivable.customer_id == customer_id)
            .where(Receivable.deleted_at.is_(None))
            .where(Receivable.status != ReceivableStatus.PAID)
            .order_by(Receivable.created_at.asc(), Receivable.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list(self, customer_id: Optional[str] = None) -> List[Receivable]:
        stmt = select(Receivable).where(Receivable.deleted_at.is_(None))
        if customer_id:
            stmt = stmt.where(Receivable.customer_id == customer_id)
        stmt = stmt.order_by(Receivable.created_at.desc(), Receivable.id.desc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_overdue(self, today: date, customer_id: Optional[str] = None) -> List[Receivable]:
        stmt = (
            select(Receivable)
            .where(Receivable.deleted_at.is_(None))
            .where(Receivable.status != ReceivableStatus.PAID)
            .where(Receivable.due_date.is_not(None))
            .where(Receivable.due_date < today)
        )
        if customer_id:
            stmt = stmt.where(Receivable.customer_id == customer_id)
        stmt = stmt.order_by(Receivable.due_date.asc(), Receivable.created_at.asc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_deleted(self) -> List[Receivable]:
        stmt = (
            select(Receivable)
            .where(Receivable.deleted_at.is_not(None))
            .order_by(Receivable.deleted_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, receivable: Receivable) -> Receivable:
        self.session.add(receivable)
        await self.session.flush()
        await self.session.refresh(receivable)
        return receivable

    async def soft_delete(self, receivable_id: str) -> Optional[Receivable]:
        receivable = await self.get_by_id(receivable_id)
        if not receivable:
            return None
        now = datetime.utcnow()
        receivable.deleted_at = now
        receivable.updated_at = now
        return await self.update(receivable)

    async def restore(self, receivable_id: str) -> Optional[Receivable]:
        receivable = await self.get_by_id(receivable_id, include_deleted=True)
        if not receivable:
            return None
        receivable.deleted_at = None
        receivable.updated_at = datetime.utcnow()
        return await self.update(receivable)

    async def delete_permanently(self, receivable_id: str) -> bool:
        receivable = await self.get_by_id(receivable_id, include_deleted=True)
        if not receivable:
            return False
        await self.session.delete(receivable)
        await self.session.flush()
        return True
