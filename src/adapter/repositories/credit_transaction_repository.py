"""SQLAlchemy implementation of CreditTransactionRepository

Provides persistence for CreditTransaction entities with idempotency enforcement
via unique constraint on idempotency_key.
"""

from decimal import Decimal
from typing import List, Optional, Tuple
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import case, func
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_transaction import CreditTransaction, TransactionType


class SqlAlchemyCreditTransactionRepository(CreditTransactionRepository):
    """
    SQLAlchemy implementation of CreditTransactionRepository

    Features:
    - Idempotency enforcement via unique idempotency_key constraint
    - Immutable append-only transactions
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        """
        Create a new credit transaction

        Raises:
            IntegrityError: If idempotency_key already exists (duplicate transaction attempt)
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[CreditTransaction]:
        stmt = select(CreditTransaction).where(
            CreditTransaction.idempotency_key == idempotency_key
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_customer_id(
        self, customer_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[CreditTransaction], int]:
        count_stmt = select(func.count()).select_from(CreditTransaction).where(
            CreditTransaction.customer_id == customer_id
        )
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(CreditTransaction)
            .where(CreditTransaction.customer_id == customer_id)
            .order_by(CreditTransaction.created_at.desc(), CreditTransaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_balance_sum_by_customer(self, customer_id: str) -> Decimal:
        signed_amount = case(
            (CreditTransaction.transaction_type == TransactionType.REMOVE, -CreditTransaction.amount),
            else_=CreditTransaction.amount,
        )
        stmt = select(func.coalesce(func.sum(signed_amount), 0)).where(
            CreditTransaction.customer_id == customer_id
        )
        total = (await self.session.execute(stmt)).scalar_one()
        return Decimal(str(total)).quantize(Decimal("0.01"))
