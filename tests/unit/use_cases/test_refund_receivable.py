"""Unit tests for RefundReceivable use case

Tests cover:
- Store credit for the amount paid
- Catalog restock for linked items
- Step reporting when a step fails
"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.ledger.refund_receivable import RefundReceivable, refund_idempotency_key
from src.app.use_cases.ledger.dtos import (
    CreditTransactionResponseDTO,
    RefundReceivableCommandDTO,
    RefundStepStatus,
)
from libs.result import Return, Error

PAYMENT = {"id": "p1", "amount": "80.00", "method": "pix", "payment_date": "2024-02-01", "notes": None}


@pytest.fixture
def receivable(make_receivable):
    return make_receivable(
        total="100.00",
        paid="80.00",
        payments=[PAYMENT],
        product_id="prod_9",
        product_name="iPhone 13",
        catalog_sale_linked=True,
    )


@pytest.fixture
def mock_receivable_repo(receivable):
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=receivable)
    repo.soft_delete = AsyncMock(return_value=receivable)
    return repo


@pytest.fixture
def mock_catalog_service():
    catalog = MagicMock()
    catalog.cancel_sale = AsyncMock(return_value=True)
    return catalog


@pytest.fixture
def refund_use_case(mock_uow, mock_receivable_repo, mock_catalog_service):
    use_case = RefundReceivable(
        uow=mock_uow,
        receivable_repo=mock_receivable_repo,
        customer_repo=MagicMock(),
        transaction_repo=MagicMock(),
        catalog_service=mock_catalog_service,
    )
    use_case.add_credit.execute = AsyncMock(
        return_value=Return.ok(
            CreditTransactionResponseDTO(
                transaction_id=11,
                customer_id="cust_1",
                transaction_type="add",
                amount=Decimal("80.00"),
                description="refund: iPhone 13",
                balance_before=Decimal("0.00"),
                balance_after=Decimal("80.00"),
                reference_type="receivable_refund",
                reference_id="rcv_1",
                idempotency_key="refund:rcv_1",
                created_at=datetime.utcnow(),
            )
        )
    )
    return use_case


def _steps(response):
    return {step.name: step.status for step in response.steps}


@pytest.mark.asyncio
class TestRefundReceivable:

    async def test_refund_with_credit_and_restock(
        self, refund_use_case, mock_receivable_repo, mock_catalog_service, mock_uow
    ):
        """
        Given: A linked catalog sale with 80 paid
        When: Refunded keeping the money as credit
        Then: 80 credited once, item restocked, receivable soft deleted
        """
        result = await refund_use_case.execute(
            RefundReceivableCommandDTO(receivable_id="rcv_1", keep_as_credit=True)
        )

        assert result.is_ok()
        response = result.value
        assert response.credited_amount == Decimal("80.00")
        assert response.credit_transaction_id == 11
        assert _steps(response) == {
            "credit": RefundStepStatus.SUCCEEDED,
            "restock": RefundStepStatus.SUCCEEDED,
            "soft_delete": RefundStepStatus.SUCCEEDED,
        }

        command = refund_use_case.add_credit.execute.call_args.args[0]
        assert command.amount == Decimal("80.00")
        assert command.description == "refund: iPhone 13"
        assert command.idempotency_key == refund_idempotency_key("rcv_1")
        mock_catalog_service.cancel_sale.assert_called_once_with("prod_9")
        mock_receivable_repo.soft_delete.assert_called_once_with("rcv_1")
        mock_uow.commit.assert_called_once()

    async def test_refund_without_credit_skips_credit_step(self, refund_use_case):
        result = await refund_use_case.execute(
            RefundReceivableCommandDTO(receivable_id="rcv_1", keep_as_credit=False)
        )

        assert result.value.credited_amount == Decimal("0")
        assert _steps(result.value)["credit"] == RefundStepStatus.SKIPPED
        refund_use_case.add_credit.execute.assert_not_called()

    async def test_unpaid_refund_never_credits(self, refund_use_case, mock_receivable_repo, make_receivable):
        mock_receivable_repo.get_by_id = AsyncMock(return_value=make_receivable(total="100.00"))

        result = await refund_use_case.execute(
            RefundReceivableCommandDTO(receivable_id="rcv_1", keep_as_credit=True)
        )

        assert _steps(result.value)["credit"] == RefundStepStatus.SKIPPED
        assert _steps(result.value)["restock"] == RefundStepStatus.SKIPPED

    async def test_restock_failure_does_not_block_refund(
        self, refund_use_case, mock_catalog_service, mock_receivable_repo
    ):
        mock_catalog_service.cancel_sale = AsyncMock(return_value=False)

        result = await refund_use_case.execute(
            RefundReceivableCommandDTO(receivable_id="rcv_1", keep_as_credit=True)
        )

        assert result.is_ok()
        assert _steps(result.value)["restock"] == RefundStepStatus.FAILED
        assert _steps(result.value)["soft_delete"] == RefundStepStatus.SUCCEEDED
        mock_receivable_repo.soft_delete.assert_called_once()

    async def test_credit_failure_aborts_refund(self, refund_use_case, mock_receivable_repo, mock_catalog_service):
        refund_use_case.add_credit.execute = AsyncMock(
            return_value=Return.err(Error(code="ADD_CREDIT_FAILED", message="Failed to add credit"))
        )

        result = await refund_use_case.execute(
            RefundReceivableCommandDTO(receivable_id="rcv_1", keep_as_credit=True)
        )

        assert result.error.code == "ADD_CREDIT_FAILED"
        mock_catalog_service.cancel_sale.assert_not_called()
        mock_receivable_repo.soft_delete.assert_not_called()

    async def test_soft_delete_failure_reports_committed_steps(
        self, refund_use_case, mock_receivable_repo, mock_uow
    ):
        mock_receivable_repo.soft_delete = AsyncMock(side_effect=Exception("lock timeout"))

        result = await refund_use_case.execute(
            RefundReceivableCommandDTO(receivable_id="rcv_1", keep_as_credit=True)
        )

        assert result.error.code == "REFUND_FAILED"
        assert "credit" in result.error.reason
        mock_uow.rollback.assert_called_once()

    async def test_unknown_receivable(self, refund_use_case, mock_receivable_repo):
        mock_receivable_repo.get_by_id = AsyncMock(return_value=None)

        result = await refund_use_case.execute(RefundReceivableCommandDTO(receivable_id="missing"))

        assert result.error.code == "RECEIVABLE_NOT_FOUND"

    async def test_replayed_credit_is_not_counted_again(self, refund_use_case):
        """
        Given: The refund credit was already granted by an earlier attempt
        When: The receivable is refunded again with the same key
        Then: credited_amount is 0 and the credit step points at the original transaction
        """
        original = (await refund_use_case.add_credit.execute(None)).value
        refund_use_case.add_credit.execute = AsyncMock(
            return_value=Return.ok(original.model_copy(update={"replayed": True}))
        )

        result = await refund_use_case.execute(
            RefundReceivableCommandDTO(receivable_id="rcv_1", keep_as_credit=True)
        )

        assert result.is_ok()
        assert result.value.credited_amount == Decimal("0")
        assert result.value.credit_transaction_id == 11
        credit_step = result.value.steps[0]
        assert credit_step.status == RefundStepStatus.SKIPPED
        assert "transaction 11" in credit_step.detail

    async def test_load_failure_is_reported(self, refund_use_case, mock_receivable_repo, mock_uow):
        mock_receivable_repo.get_by_id = AsyncMock(side_effect=Exception("connection reset"))

        result = await refund_use_case.execute(
            RefundReceivableCommandDTO(receivable_id="rcv_1", keep_as_credit=True)
        )

        assert result.error.code == "REFUND_FAILED"
        assert result.error.reason == "connection reset"
        mock_uow.rollback.assert_called_once()
        refund_use_case.add_credit.execute.assert_not_called()
