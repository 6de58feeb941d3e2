"""Get Credit Balance Use Case

Retrieves a customer's current store-credit balance.
"""

from libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from .dtos import CreditBalanceResponseDTO


class GetCreditBalance:
    """
    Get Credit Balance Use Case

    Read-only operation returning the stored balance of a customer.
    """

    def __init__(self, customer_repo: CustomerRepository):
        self.customer_repo = customer_repo

    async def execute(self, customer_id: str) -> Result[CreditBalanceResponseDTO]:
        """
        Execute get balance operation

        Errors:
            CUSTOMER_NOT_FOUND: No customer with this id
        """
        customer = await self.customer_repo.get_by_id(customer_id)

        if not customer:
            return Return.err(
                Error(
                    code="CUSTOMER_NOT_FOUND",
                    message=f"Customer {customer_id} not found",
                )
            )

        return Return.ok(
            CreditBalanceResponseDTO(
                customer_id=customer.id,
                balance=customer.credit_balance,
                last_updated=customer.updated_at,
            )
        )
