"""AddCredit Use Case

Grants store credit to a customer. Balance change and credit history entry
are written in the same commit.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.credit_transaction_repository import CreditTransactionRepository
from src.domain.credit_transaction import CreditTransaction, TransactionType
from src.domain.receivable_state import to_money
from .dtos import AddCreditCommandDTO, CreditTransactionResponseDTO

logger = logging.getLogger(__name__)


class AddCredit:
    """
    Use Case: Add store credit to a customer

    Business Rules:
    1. Idempotency: a repeated idempotency_key returns the original transaction
    2. amount > 0
    3. Balance increment: balance += amount
    4. Balance and transaction written in one commit
    5. Pessimistic locking: SELECT FOR UPDATE on the customer row

    Flow:
    1. Check idempotency (return existing if found)
    2. Get customer with lock
    3. Create transaction record (type=ADD)
    4. Update balance
    5. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.uow = uow
        self.customer_repo = customer_repo
        self.transaction_repo = transaction_repo

    async def execute(self, command: AddCreditCommandDTO) -> Result[CreditTransactionResponseDTO]:
        """
        Execute credit addition

        Args:
            command: AddCreditCommandDTO with customer_id, amount, description

        Returns:
            Result[CreditTransactionResponseDTO]: Transaction details or error
        """
        try:
            # Step 1: Check idempotency
            if command.idempotency_key:
                existing = await self.transaction_repo.get_by_idempotency_key(command.idempotency_key)
                if existing:
                    logger.info(
                        f"Credit transaction {existing.id} replayed for idempotency key {command.idempotency_key}"
                    )
                    return Return.ok(to_credit_response_dto(existing, replayed=True))

            amount = to_money(command.amount)
            if amount <= 0:
                return Return.err(
                    Error(
                        code="INVALID_AMOUNT",
                        message="Credit amount must be greater than zero",
                        reason=f"amount={command.amount}",
                    )
                )

            # Step 2: Get customer with pessimistic lock
            customer = await self.customer_repo.get_by_id(command.customer_id, for_update=True)
            if not customer:
                return Return.err(
                    Error(
                        code="CUSTOMER_NOT_FOUND",
                        message=f"Customer {command.customer_id} not found",
                    )
                )

            balance_before = to_money(customer.credit_balance)
            balance_after = balance_before + amount

            # Step 3: Create transaction record with balance snapshots
            transaction = CreditTransaction(
                customer_id=customer.id,
                transaction_type=TransactionType.ADD,
                amount=amount,
                description=command.description,
                balance_before=balance_before,
                balance_after=balance_after,
                reference_type=command.reference_type,
                reference_id=command.reference_id,
                idempotency_key=command.idempotency_key,
            )
            created_transaction = await self.transaction_repo.create(transaction)

            # Step 4: Update balance
            await self.customer_repo.update_credit_balance(customer.id, balance_after)

            # Step 5: Commit
            await self.uow.commit()

            logger.info(
                f"Credit of {amount} added for customer {customer.id}: "
                f"balance {balance_before} -> {balance_after} ({command.description})"
            )

            return Return.ok(to_credit_response_dto(created_transaction))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to add credit for customer {command.customer_id}: {e}")
            return Return.err(
                Error(
                    code="ADD_CREDIT_FAILED",
                    message="Failed to add credit",
                    reason=str(e),
                )
            )


def to_credit_response_dto(
    transaction: CreditTransaction, replayed: bool = False
) -> CreditTransactionResponseDTO:
    """Balance snapshots are stored in the transaction, so replays are exact"""
    return CreditTransactionResponseDTO(
        transaction_id=transaction.id,
        customer_id=transaction.customer_id,
        transaction_type=(
            transaction.transaction_type.value
            if hasattr(transaction.transaction_type, "value")
            else transaction.transaction_type
        ),
        amount=transaction.amount,
        description=transaction.description,
        balance_before=transaction.balance_before,
        balance_after=transaction.balance_after,
        reference_type=transaction.reference_type,
        reference_id=transaction.reference_id,
        idempotency_key=transaction.idempotency_key,
        created_at=transaction.created_at,
        replayed=replayed,
    )
