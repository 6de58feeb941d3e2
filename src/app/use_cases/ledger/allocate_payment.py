"""AllocatePayment Use Case

Distributes a customer payment, split by method, across the customer's open
receivables, oldest first. Every allocation is its own committed payment;
the sequence is not atomic.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.app.repositories.receivable_repository import ReceivableRepository
from src.domain.receivable_state import ZERO, to_money
from .add_credit import AddCredit
from .add_payment import AddPayment
from .dtos import (
    AddCreditCommandDTO,
    AddPaymentCommandDTO,
    AllocatePaymentCommandDTO,
    AllocatePaymentResponseDTO,
    AllocationDTO,
    AllocationFailureDTO,
    UnappliedPaymentPolicy,
)

logger = logging.getLogger(__name__)


class AllocatePayment:
    """
    Use Case: Allocate a mixed-method customer payment

    Business Rules:
    1. Amounts per method are >= 0 and at least one is positive
    2. Methods are allocated in the order cash, pix, card
    3. Each method walks the open receivables oldest first, paying
       min(remaining, amount left) on each until the amount is exhausted
    4. No payment exceeds the remaining balance of its receivable
    5. Money left after every open receivable is settled is unapplied and
       handled by the configured policy (report, credit, reject)
    6. Writes are strictly sequential; open receivables are re-read before
       each method so balances reflect the previous method's payments

    Failure semantics:
    - A failure before any payment is committed returns an error
    - A failure after some payments committed returns the committed
      allocations plus a failure record with the amounts still outstanding
    """

    def __init__(
        self,
        uow: UnitOfWork,
        receivable_repo: ReceivableRepository,
        customer_repo: CustomerRepository,
        transaction_repo: CreditTransactionRepository,
        unapplied_policy: UnappliedPaymentPolicy = UnappliedPaymentPolicy.REPORT,
    ):
        self.uow = uow
        self.receivable_repo = receivable_repo
        self.customer_repo = customer_repo
        self.unapplied_policy = UnappliedPaymentPolicy(unapplied_policy)
        self.add_payment = AddPayment(uow, receivable_repo)
        self.add_credit = AddCredit(uow, customer_repo, transaction_repo)

    async def execute(self, command: AllocatePaymentCommandDTO) -> Result[AllocatePaymentResponseDTO]:
        """
        Execute payment allocation

        Args:
            command: AllocatePaymentCommandDTO with customer_id, per-method amounts, payment_date

        Returns:
            Result[AllocatePaymentResponseDTO]: Allocations made, unapplied remainder,
            and a failure record if the sequence stopped early
        """
        amounts = {method: to_money(amount) for method, amount in command.amounts_by_method().items()}
        amounts = {method: amount for method, amount in amounts.items() if amount > 0}
        if not amounts:
            return Return.err(
                Error(
                    code="INVALID_AMOUNT",
                    message="At least one payment method must have an amount greater than zero",
                )
            )

        customer = await self.customer_repo.get_by_id(command.customer_id)
        if not customer:
            return Return.err(
                Error(
                    code="CUSTOMER_NOT_FOUND",
                    message=f"Customer {command.customer_id} not found",
                )
            )

        # Plain values only from here on: a failed write rolls back the shared
        # session and expires every loaded entity.
        customer_id = customer.id
        customer_name = customer.name

        open_receivables = await self.receivable_repo.get_open_by_customer(customer_id)
        if not open_receivables:
            return Return.err(
                Error(
                    code="NO_OPEN_RECEIVABLES",
                    message=f"Customer {customer_id} has no open receivables",
                )
            )

        total_offered = sum(amounts.values(), ZERO)
        total_due = sum((r.remaining_amount for r in open_receivables), ZERO)
        if self.unapplied_policy == UnappliedPaymentPolicy.REJECT and total_offered > total_due:
            return Return.err(
                Error(
                    code="OVERPAYMENT_REJECTED",
                    message=f"Payment of {total_offered} exceeds the {total_due} owed",
                    reason=f"offered={total_offered}, due={total_due}",
                )
            )

        notes = command.notes or f"Payment from customer {customer_name}"
        applied: List[AllocationDTO] = []
        unapplied_by_method: Dict[str, Decimal] = {}
        outstanding: Dict[str, Decimal] = {method.value: amount for method, amount in amounts.items()}

        for method, amount in amounts.items():
            left = amount
            open_balances = [
                (r.id, r.remaining_amount)
                for r in await self.receivable_repo.get_open_by_customer(customer_id)
            ]
            for receivable_id, remaining in open_balances:
                if left <= 0:
                    break
                if remaining <= 0:
                    continue

                allocation = min(remaining, left)
                result = await self.add_payment.execute(
                    AddPaymentCommandDTO(
                        receivable_id=receivable_id,
                        amount=allocation,
                        method=method,
                        payment_date=command.payment_date,
                        notes=notes,
                    )
                )

                if result.is_err():
                    if not applied:
                        return Return.err(result.error)

                    logger.error(
                        f"Allocation for customer {customer_id} stopped at receivable {receivable_id} "
                        f"({method.value} {allocation}): {result.error.message}. "
                        f"{len(applied)} payments already committed"
                    )
                    failure = AllocationFailureDTO(
                        method=method.value,
                        receivable_id=receivable_id,
                        amount=allocation,
                        code=result.error.code,
                        message=result.error.message,
                        outstanding=dict(outstanding),
                    )
                    return Return.ok(
                        self._build_response(customer_id, applied, unapplied_by_method, failure=failure)
                    )

                left -= allocation
                outstanding[method.value] = left
                updated = result.value
                applied.append(
                    AllocationDTO(
                        receivable_id=updated.id,
                        product_name=updated.product_name,
                        method=method.value,
                        amount=allocation,
                        payment_id=updated.payments[-1].id,
                        remaining_after=updated.remaining_amount,
                        status_after=updated.status,
                    )
                )

            if left > 0:
                unapplied_by_method[method.value] = left
            outstanding[method.value] = ZERO

        unapplied_amount = sum(unapplied_by_method.values(), ZERO)
        if unapplied_amount <= 0:
            return Return.ok(self._build_response(customer_id, applied, unapplied_by_method))

        if self.unapplied_policy != UnappliedPaymentPolicy.CREDIT:
            logger.warning(
                f"{unapplied_amount} of the payment from customer {customer_id} was not applied: "
                f"all open receivables are settled"
            )
            return Return.ok(self._build_response(customer_id, applied, unapplied_by_method))

        credit_result = await self.add_credit.execute(
            AddCreditCommandDTO(
                customer_id=customer_id,
                amount=unapplied_amount,
                description="overpayment: unapplied payment remainder",
                reference_type="payment_allocation",
                reference_id=applied[-1].payment_id if applied else None,
            )
        )
        if credit_result.is_err():
            logger.error(
                f"Failed to convert unapplied {unapplied_amount} to credit for customer "
                f"{customer_id}: {credit_result.error.message}"
            )
            failure = AllocationFailureDTO(
                method="store_credit",
                receivable_id=None,
                amount=unapplied_amount,
                code=credit_result.error.code,
                message=credit_result.error.message,
                outstanding={},
            )
            return Return.ok(
                self._build_response(customer_id, applied, unapplied_by_method, failure=failure)
            )

        return Return.ok(
            self._build_response(
                customer_id,
                applied,
                unapplied_by_method,
                credit_transaction_id=credit_result.value.transaction_id,
            )
        )

    def _build_response(
        self,
        customer_id: str,
        applied: List[AllocationDTO],
        unapplied_by_method: Dict[str, Decimal],
        failure: Optional[AllocationFailureDTO] = None,
        credit_transaction_id: Optional[int] = None,
    ) -> AllocatePaymentResponseDTO:
        return AllocatePaymentResponseDTO(
            customer_id=customer_id,
            applied=applied,
            total_applied=sum((a.amount for a in applied), ZERO),
            unapplied_amount=sum(unapplied_by_method.values(), ZERO),
            unapplied_by_method=unapplied_by_method,
            unapplied_policy=self.unapplied_policy.value,
            credit_transaction_id=credit_transaction_id,
            completed=failure is None,
            failure=failure,
        )
