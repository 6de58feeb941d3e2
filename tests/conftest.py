import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from src.domain.customer import Customer
from src.domain.receivable import Receivable
from src.domain.receivable_state import refresh_balances


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def make_customer():
    """Factory for Customer entities"""
    def _make(customer_id="cust_1", code="CLI001", name="Maria Silva", credit_balance="0.00"):
        return Customer(
            id=customer_id,
            code=code,
            name=name,
            credit_balance=Decimal(credit_balance),
        )
    return _make


@pytest.fixture
def make_receivable():
    """Factory for Receivable entities with derived fields computed"""
    def _make(
        receivable_id="rcv_1",
        customer_id="cust_1",
        total="100.00",
        paid="0.00",
        payments=None,
        created_at=None,
        **kwargs,
    ):
        receivable = Receivable(
            id=receivable_id,
            customer_id=customer_id,
            product_name=kwargs.pop("product_name", "Phone case"),
            total_amount=Decimal(total),
            paid_amount=Decimal(paid),
            remaining_amount=Decimal(total),
            payments=payments or [],
            created_at=created_at or datetime(2024, 1, 1, 12, 0, 0),
            **kwargs,
        )
        return refresh_balances(receivable)
    return _make
