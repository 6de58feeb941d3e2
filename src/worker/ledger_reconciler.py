"""Ledger Reconciliation Background Worker

Periodically checks receivable balances against their payment history and
customer credit balances against their credit transactions.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyCustomerRepository,
    SqlAlchemyReceivableRepository,
)
from src.app.use_cases.ledger import ReconcileLedger, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class LedgerReconcilerWorker:
    """
    Background worker for ledger reconciliation

    Features:
    - Checks paid/remaining/status of every live receivable
    - Checks every customer's credit balance against its history
    - Logs discrepancies for investigation (never repairs them)
    - Can run once or continuously

    Usage:
        worker = LedgerReconcilerWorker()
        result = await worker.run_once()
        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(self, db_uri: Optional[str] = None):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("LedgerReconcilerWorker initialized")

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Run reconciliation once

        Returns:
            ReconciliationResultDTO with reconciliation results
        """
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Ledger reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_receivables_checked=0,
                total_customers_checked=0,
                discrepancies_found=0,
                receivable_discrepancies=[],
                credit_discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = ReconcileLedger(
                receivable_repo=SqlAlchemyReceivableRepository(session),
                customer_repo=SqlAlchemyCustomerRepository(session),
                transaction_repo=SqlAlchemyCreditTransactionRepository(session),
            )

            result = await use_case.execute()

            if result.is_err():
                logger.error(f"Reconciliation failed: {result.error.message}")
                raise RuntimeError(f"Reconciliation failed: {result.error.message}")

            response = result.value

            if response.discrepancies_found > 0:
                logger.error(f"ALERT: {response.discrepancies_found} ledger discrepancies found!")
                for d in response.receivable_discrepancies:
                    logger.error(
                        f"  - Receivable {d.receivable_id} (customer {d.customer_id}): "
                        f"{d.field} stored={d.stored_value}, expected={d.expected_value}"
                    )
                for d in response.credit_discrepancies:
                    logger.error(
                        f"  - Customer {d.customer_id} credit: "
                        f"expected={d.calculated_balance}, actual={d.stored_balance}, "
                        f"diff={d.discrepancy}"
                    )

            return response

    async def run_forever(self, interval_seconds: int = 86400):
        """
        Run reconciliation continuously at specified interval

        Args:
            interval_seconds: Seconds between reconciliation runs (default: 24 hours)
        """
        logger.info(f"Starting continuous ledger reconciliation with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Reconciliation cycle complete. "
                    f"Checked {result.total_receivables_checked} receivables and "
                    f"{result.total_customers_checked} customers, "
                    f"found {result.discrepancies_found} discrepancies "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("LedgerReconcilerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        python -m src.worker.ledger_reconciler --once
        python -m src.worker.ledger_reconciler --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Ledger Reconciliation Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Interval between runs in seconds (default: 86400 = 24 hours)"
    )
    args = parser.parse_args()

    worker = LedgerReconcilerWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Reconciliation complete:")
            print(f"  Receivables checked: {result.total_receivables_checked}")
            print(f"  Customers checked: {result.total_customers_checked}")
            print(f"  Discrepancies found: {result.discrepancies_found}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for d in result.receivable_discrepancies:
                print(f"  - Receivable {d.receivable_id}: {d.field} {d.stored_value} != {d.expected_value}")
            for d in result.credit_discrepancies:
                print(
                    f"  - Customer {d.customer_id}: expected={d.calculated_balance}, "
                    f"actual={d.stored_balance}, diff={d.discrepancy}"
                )
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
