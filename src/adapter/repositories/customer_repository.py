"""SQLAlchemy implementation of CustomerRepository

Pessimistic locking on the customer row keeps credit balance updates
serialised per customer.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.customer_repository import CustomerRepository
from src.domain.customer import Customer


class SqlAlchemyCustomerRepository(CustomerRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, customer_id: str, for_update: bool = False) -> Optional[Customer]:
        """
        Retrieve customer by ID with optional row-level locking

        Args:
            customer_id: Customer identifier
            for_update: If True, locks the row with SELECT FOR UPDATE (prevents concurrent modifications)

        Returns:
            Customer if found, None otherwise
        """
        stmt = select(Customer).where(Customer.id == customer_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_all(self) -> List[Customer]:
        stmt = select(Customer).order_by(Customer.code)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, customer: Customer) -> Customer:
        self.session.add(customer)
        await self.session.flush()
        await self.session.refresh(customer)
        return customer

    async def update_credit_balance(self, customer_id: str, new_balance: Decimal) -> None:
        """
        Update credit balance and updated_at timestamp

        Note:
            Should be called within a transaction with the customer already locked
        """
        customer = await self.get_by_id(customer_id, for_update=False)
        if customer:
            customer.credit_balance = new_balance
            customer.updated_at = datetime.utcnow()
            self.session.add(customer)
            await self.session.flush()
