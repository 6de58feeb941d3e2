"""Unit tests for AddPayment use case"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.ledger.add_payment import AddPayment
from src.app.use_cases.ledger.dtos import AddPaymentCommandDTO
from src.domain.payment import PaymentMethod


@pytest.fixture
def receivable(make_receivable):
    return make_receivable(total="100.00")


@pytest.fixture
def mock_receivable_repo(receivable):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=receivable)
    repo.update = AsyncMock(side_effect=lambda r: r)
    return repo


@pytest.fixture
def add_payment_use_case(mock_uow, mock_receivable_repo):
    return AddPayment(uow=mock_uow, receivable_repo=mock_receivable_repo)


def _command(amount, method=PaymentMethod.CASH):
    return AddPaymentCommandDTO(
        receivable_id="rcv_1",
        amount=Decimal(amount),
        method=method,
        payment_date=date(2024, 3, 1),
    )


@pytest.mark.asyncio
class TestAddPayment:

    async def test_partial_payment(self, add_payment_use_case, mock_receivable_repo, mock_uow):
        result = await add_payment_use_case.execute(_command("40.00"))

        assert result.is_ok()
        assert result.value.status == "partial"
        assert result.value.paid_amount == Decimal("40.00")
        assert result.value.remaining_amount == Decimal("60.00")
        mock_receivable_repo.get_by_id.assert_called_once_with("rcv_1", for_update=True)
        mock_uow.commit.assert_called_once()

    async def test_exact_payment_settles(self, add_payment_use_case):
        result = await add_payment_use_case.execute(_command("100.00", PaymentMethod.CARD))

        assert result.value.status == "paid"
        assert result.value.remaining_amount == Decimal("0.00")
        assert result.value.payments[-1].method == "card"

    async def test_payment_exceeding_remaining_is_rejected(
        self, add_payment_use_case, receivable, mock_uow
    ):
        """
        Given: A receivable with 100.00 remaining
        When: A payment of 100.01 is added
        Then: PAYMENT_EXCEEDS_BALANCE and nothing changes
        """
        result = await add_payment_use_case.execute(_command("100.01"))

        assert result.is_err()
        assert result.error.code == "PAYMENT_EXCEEDS_BALANCE"
        assert receivable.payments == []
        mock_uow.commit.assert_not_called()

    async def test_unknown_receivable(self, add_payment_use_case, mock_receivable_repo):
        mock_receivable_repo.get_by_id = AsyncMock(return_value=None)

        result = await add_payment_use_case.execute(_command("10.00"))

        assert result.error.code == "RECEIVABLE_NOT_FOUND"

    async def test_sub_cent_amount_is_invalid(self, add_payment_use_case):
        result = await add_payment_use_case.execute(_command("0.004"))

        assert result.error.code == "INVALID_AMOUNT"

    async def test_update_failure_rolls_back(self, add_payment_use_case, mock_receivable_repo, mock_uow):
        mock_receivable_repo.update = AsyncMock(side_effect=Exception("deadlock"))

        result = await add_payment_use_case.execute(_command("10.00"))

        assert result.error.code == "ADD_PAYMENT_FAILED"
        mock_uow.rollback.assert_called_once()
