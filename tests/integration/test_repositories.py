import pytest
from datetime import date, datetime
from decimal import Decimal

from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyReceivableRepository,
)
from src.domain.credit_transaction import CreditTransaction, TransactionType
from src.domain.receivable import Receivable, ReceivableStatus


def _receivable(receivable_id, created_at, total="10.00", status=ReceivableStatus.PENDING, due_date=None):
    total = Decimal(total)
    paid = total if status == ReceivableStatus.PAID else Decimal("0")
    return Receivable(
        id=receivable_id,
        customer_id="cust_1",
        product_name=f"Item {receivable_id}",
        total_amount=total,
        paid_amount=paid,
        remaining_amount=total - paid,
        status=status,
        payments=[],
        due_date=due_date,
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.mark.asyncio
class TestReceivableRepository:

    async def test_open_receivables_oldest_first(self, db_session, customer):
        repo = SqlAlchemyReceivableRepository(db_session)
        await repo.create(_receivable("b", datetime(2024, 2, 1)))
        await repo.create(_receivable("a", datetime(2024, 1, 1)))
        await repo.create(_receivable("c", datetime(2024, 1, 15), status=ReceivableStatus.PAID))
        await repo.create(_receivable("d", datetime(2024, 1, 1)))
        await db_session.commit()

        open_receivables = await repo.get_open_by_customer("cust_1")

        assert [r.id for r in open_receivables] == ["a", "d", "b"]

    async def test_soft_deleted_receivables_are_hidden(self, db_session, customer):
        repo = SqlAlchemyReceivableRepository(db_session)
        await repo.create(_receivable("a", datetime(2024, 1, 1)))
        await repo.soft_delete("a")
        await db_session.commit()

        assert await repo.get_by_id("a") is None
        assert await repo.list() == []
        assert [r.id for r in await repo.list_deleted()] == ["a"]

        await repo.restore("a")
        await db_session.commit()
        assert (await repo.get_by_id("a")).deleted_at is None

    async def test_overdue_excludes_paid_and_future(self, db_session, customer):
        repo = SqlAlchemyReceivableRepository(db_session)
        await repo.create(_receivable("late", datetime(2024, 1, 1), due_date=date(2024, 2, 1)))
        await repo.create(_receivable("paid", datetime(2024, 1, 1), due_date=date(2024, 2, 1), status=ReceivableStatus.PAID))
        await repo.create(_receivable("future", datetime(2024, 1, 1), due_date=date(2024, 4, 1)))
        await repo.create(_receivable("undated", datetime(2024, 1, 1)))
        await db_session.commit()

        overdue = await repo.list_overdue(date(2024, 3, 1))

        assert [r.id for r in overdue] == ["late"]


@pytest.mark.asyncio
class TestCreditTransactionRepository:

    async def test_balance_sum_subtracts_removals(self, db_session, customer):
        repo = SqlAlchemyCreditTransactionRepository(db_session)
        for transaction_type, amount, before, after in [
            (TransactionType.ADD, "80.00", "0.00", "80.00"),
            (TransactionType.REMOVE, "30.50", "80.00", "49.50"),
            (TransactionType.ADD, "0.50", "49.50", "50.00"),
        ]:
            await repo.create(
                CreditTransaction(
                    customer_id="cust_1",
                    transaction_type=transaction_type,
                    amount=Decimal(amount),
                    description="test",
                    balance_before=Decimal(before),
                    balance_after=Decimal(after),
                )
            )
        await db_session.commit()

        assert await repo.get_balance_sum_by_customer("cust_1") == Decimal("50.00")
        assert await repo.get_balance_sum_by_customer("someone_else") == Decimal("0.00")

        transactions, total = await repo.get_by_customer_id("cust_1", limit=2, offset=0)
        assert total == 3
        assert len(transactions) == 2
