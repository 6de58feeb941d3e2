"""ReconcileLedger Use Case

Checks stored receivable balances and customer credit balances against the
history they are derived from.
"""

import logging
import time
from datetime import datetime
from typing import List
from libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.app.repositories.receivable_repository import ReceivableRepository
from src.domain.receivable import Receivable
from src.domain.receivable_state import derive_remaining, derive_status, sum_payments
from .dtos import CreditDiscrepancyDTO, ReceivableDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile receivables and store credit

    Business Rules:
    1. paid_amount must equal the sum of the receivable's payments
    2. remaining_amount and status must match what paid_amount derives
    3. A customer's credit_balance must equal added minus removed credit
    4. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        receivable_repo: ReceivableRepository,
        customer_repo: CustomerRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.receivable_repo = receivable_repo
        self.customer_repo = customer_repo
        self.transaction_repo = transaction_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting receivables ledger reconciliation")

            receivables = await self.receivable_repo.list()
            receivable_discrepancies: List[ReceivableDiscrepancyDTO] = []
            for receivable in receivables:
                receivable_discrepancies.extend(self._check_receivable(receivable))

            customers = await self.customer_repo.get_all()
            credit_discrepancies: List[CreditDiscrepancyDTO] = []
            for customer in customers:
                calculated = await self.transaction_repo.get_balance_sum_by_customer(customer.id)
                if customer.credit_balance != calculated:
                    discrepancy = customer.credit_balance - calculated
                    credit_discrepancies.append(
                        CreditDiscrepancyDTO(
                            customer_id=customer.id,
                            stored_balance=customer.credit_balance,
                            calculated_balance=calculated,
                            discrepancy=discrepancy,
                        )
                    )
                    logger.warning(
                        f"Credit discrepancy for customer {customer.id}: "
                        f"stored={customer.credit_balance}, calculated={calculated}, "
                        f"discrepancy={discrepancy}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)
            found = len(receivable_discrepancies) + len(credit_discrepancies)

            response = ReconciliationResultDTO(
                total_receivables_checked=len(receivables),
                total_customers_checked=len(customers),
                discrepancies_found=found,
                receivable_discrepancies=receivable_discrepancies,
                credit_discrepancies=credit_discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if found:
                logger.warning(
                    f"Reconciliation complete. Found {found} discrepancies across "
                    f"{len(receivables)} receivables and {len(customers)} customers "
                    f"in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. {len(receivables)} receivables and "
                    f"{len(customers)} customers balanced in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile receivables ledger",
                    reason=str(e),
                )
            )

    def _check_receivable(self, receivable: Receivable) -> List[ReceivableDiscrepancyDTO]:
        expected_paid = sum_payments(receivable.payment_records())
        expected_remaining = derive_remaining(receivable.total_amount, receivable.paid_amount)
        expected_status = derive_status(receivable.total_amount, receivable.paid_amount)

        checks = [
            ("paid_amount", receivable.paid_amount, expected_paid),
            ("remaining_amount", receivable.remaining_amount, expected_remaining),
            ("status", receivable.status, expected_status),
        ]

        found = []
        for field, stored, expected in checks:
            if stored != expected:
                found.append(
                    ReceivableDiscrepancyDTO(
                        receivable_id=receivable.id,
                        customer_id=receivable.customer_id,
                        field=field,
                        stored_value=str(getattr(stored, "value", stored)),
                        expected_value=str(getattr(expected, "value", expected)),
                    )
                )
                logger.warning(
                    f"Receivable {receivable.id} {field} mismatch: stored={stored}, expected={expected}"
                )
        return found
