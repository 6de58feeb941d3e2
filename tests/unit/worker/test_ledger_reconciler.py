"""Unit tests for LedgerReconcilerWorker

Tests cover:
- Worker initialization with configuration
- run_once execution with reconciliation
- Reconciliation disabled scenario
- Error handling scenarios
- run_forever continuous execution and shutdown
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import datetime

from src.worker.ledger_reconciler import LedgerReconcilerWorker
from src.app.use_cases.ledger.dtos import (
    CreditDiscrepancyDTO,
    ReceivableDiscrepancyDTO,
    ReconciliationResultDTO,
)


def _mock_session_factory(mock_sessionmaker):
    mock_session = MagicMock()
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=False)
    mock_sessionmaker.return_value = MagicMock(return_value=mock_session)
    return mock_session


def _mock_use_case(mock_use_case_class, value=None, error_message=None):
    mock_result = MagicMock()
    mock_result.is_err.return_value = error_message is not None
    mock_result.value = value
    if error_message:
        mock_result.error = MagicMock(message=error_message)
    mock_use_case = MagicMock()
    mock_use_case.execute = AsyncMock(return_value=mock_result)
    mock_use_case_class.return_value = mock_use_case
    return mock_use_case


@pytest.fixture
def sample_reconciliation_result():
    return ReconciliationResultDTO(
        total_receivables_checked=12,
        total_customers_checked=4,
        discrepancies_found=0,
        receivable_discrepancies=[],
        credit_discrepancies=[],
        reconciliation_time=datetime.utcnow(),
        execution_time_ms=150,
    )


@pytest.fixture
def sample_discrepancy_result():
    return ReconciliationResultDTO(
        total_receivables_checked=12,
        total_customers_checked=4,
        discrepancies_found=2,
        receivable_discrepancies=[
            ReceivableDiscrepancyDTO(
                receivable_id="rcv_1",
                customer_id="cust_1",
                field="paid_amount",
                stored_value="50.00",
                expected_value="40.00",
            ),
        ],
        credit_discrepancies=[
            CreditDiscrepancyDTO(
                customer_id="cust_2",
                stored_balance=Decimal("100.00"),
                calculated_balance=Decimal("80.00"),
                discrepancy=Decimal("20.00"),
            ),
        ],
        reconciliation_time=datetime.utcnow(),
        execution_time_ms=250,
    )


class TestLedgerReconcilerWorkerInit:

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.create_async_engine")
    def test_initializes_with_default_config(self, mock_create_engine, mock_app_config):
        mock_app_config.DB_URI = "sqlite+aiosqlite:///./default.db"
        mock_create_engine.return_value = MagicMock()

        worker = LedgerReconcilerWorker()

        assert worker.db_uri == "sqlite+aiosqlite:///./default.db"
        mock_create_engine.assert_called_once()

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.create_async_engine")
    def test_initializes_with_custom_db_uri(self, mock_create_engine, mock_app_config):
        mock_app_config.DB_URI = "sqlite+aiosqlite:///./default.db"
        mock_create_engine.return_value = MagicMock()

        worker = LedgerReconcilerWorker(db_uri="postgresql+asyncpg://custom@localhost/ledger")

        assert worker.db_uri == "postgresql+asyncpg://custom@localhost/ledger"


@pytest.mark.asyncio
class TestLedgerReconcilerWorkerRunOnce:

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.ReconcileLedger")
    @patch("src.worker.ledger_reconciler.create_async_engine")
    @patch("src.worker.ledger_reconciler.sessionmaker")
    async def test_run_once_executes_reconciliation(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_use_case_class,
        mock_app_config,
        sample_reconciliation_result,
    ):
        """
        Given: Reconciliation is enabled
        When: run_once is called
        Then: Executes reconciliation use case and returns result
        """
        mock_app_config.RECONCILIATION_ENABLED = True
        _mock_session_factory(mock_sessionmaker)
        mock_use_case = _mock_use_case(mock_use_case_class, value=sample_reconciliation_result)

        worker = LedgerReconcilerWorker()
        result = await worker.run_once()

        assert result.total_receivables_checked == 12
        assert result.total_customers_checked == 4
        assert result.discrepancies_found == 0
        mock_use_case.execute.assert_called_once()

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.ReconcileLedger")
    @patch("src.worker.ledger_reconciler.create_async_engine")
    async def test_run_once_skips_when_disabled(
        self, mock_create_engine, mock_use_case_class, mock_app_config
    ):
        mock_app_config.RECONCILIATION_ENABLED = False
        mock_create_engine.return_value = MagicMock()

        worker = LedgerReconcilerWorker()
        result = await worker.run_once()

        assert result.total_receivables_checked == 0
        assert result.discrepancies_found == 0
        assert result.execution_time_ms == 0
        mock_use_case_class.assert_not_called()

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.ReconcileLedger")
    @patch("src.worker.ledger_reconciler.create_async_engine")
    @patch("src.worker.ledger_reconciler.sessionmaker")
    async def test_run_once_returns_discrepancies(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_use_case_class,
        mock_app_config,
        sample_discrepancy_result,
    ):
        mock_app_config.RECONCILIATION_ENABLED = True
        _mock_session_factory(mock_sessionmaker)
        _mock_use_case(mock_use_case_class, value=sample_discrepancy_result)

        worker = LedgerReconcilerWorker()
        result = await worker.run_once()

        assert result.discrepancies_found == 2
        assert result.receivable_discrepancies[0].field == "paid_amount"
        assert result.credit_discrepancies[0].customer_id == "cust_2"

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.ReconcileLedger")
    @patch("src.worker.ledger_reconciler.create_async_engine")
    @patch("src.worker.ledger_reconciler.sessionmaker")
    async def test_run_once_raises_on_use_case_error(
        self,
        mock_sessionmaker,
        mock_create_engine,
        mock_use_case_class,
        mock_app_config,
    ):
        """
        Given: Reconciliation use case returns error
        When: run_once is called
        Then: Raises RuntimeError
        """
        mock_app_config.RECONCILIATION_ENABLED = True
        _mock_session_factory(mock_sessionmaker)
        _mock_use_case(mock_use_case_class, error_message="Database connection failed")

        worker = LedgerReconcilerWorker()
        with pytest.raises(RuntimeError, match="Reconciliation failed"):
            await worker.run_once()


@pytest.mark.asyncio
class TestLedgerReconcilerWorkerLifecycle:

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.create_async_engine")
    async def test_shutdown_disposes_engine(self, mock_create_engine, mock_app_config):
        mock_engine = MagicMock()
        mock_engine.dispose = AsyncMock()
        mock_create_engine.return_value = mock_engine

        worker = LedgerReconcilerWorker()
        await worker.shutdown()

        mock_engine.dispose.assert_called_once()

    @patch("src.worker.ledger_reconciler.ApplicationConfig")
    @patch("src.worker.ledger_reconciler.asyncio.sleep")
    @patch("src.worker.ledger_reconciler.create_async_engine")
    async def test_run_forever_continues_after_failed_cycle(
        self, mock_create_engine, mock_sleep, mock_app_config
    ):
        """
        Given: The first cycle raises
        When: run_forever is running
        Then: The worker sleeps and runs again
        """
        mock_create_engine.return_value = MagicMock()

        call_count = 0

        async def limited_sleep(seconds):
            nonlocal call_count
            call_count += 1
            if call_count >= 2:
                raise KeyboardInterrupt("Test termination")

        mock_sleep.side_effect = limited_sleep

        worker = LedgerReconcilerWorker()
        worker.run_once = AsyncMock(side_effect=[RuntimeError("boom"), MagicMock()])

        with pytest.raises(KeyboardInterrupt):
            await worker.run_forever(interval_seconds=3600)

        assert worker.run_once.call_count == 2
        mock_sleep.assert_called_with(3600)
