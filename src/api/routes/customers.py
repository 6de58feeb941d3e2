"""Customer API Routes

FastAPI routes for customer-level payments and store credit.
"""

from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.api.schemas.credit_request import (
    AddCreditRequestSchema,
    AllocatePaymentRequestSchema,
    RemoveCreditRequestSchema,
)
from src.app.use_cases.ledger import (
    AddCredit,
    AllocatePayment,
    GetCreditBalance,
    ListCreditTransactions,
    RemoveCredit,
)
from src.app.use_cases.ledger.dtos import (
    AddCreditCommandDTO,
    AllocatePaymentCommandDTO,
    AllocatePaymentResponseDTO,
    CreditBalanceResponseDTO,
    CreditTransactionResponseDTO,
    ListCreditTransactionsResponseDTO,
    RemoveCreditCommandDTO,
)
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyCustomerRepository,
    SqlAlchemyReceivableRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.post(
    "/{customer_id}/payments",
    response_model=AllocatePaymentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {"description": "Customer not found"},
        409: {"description": "Payment exceeds the total owed and the reject policy is active"},
        400: {"description": "No open receivables or invalid amounts"},
    }
)
async def allocate_payment(
    customer_id: str,
    request: AllocatePaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Distribute a customer payment across open receivables, oldest first.

    Methods are applied in the order cash, pix, card. Each allocation is
    committed on its own: if the sequence stops early, `completed` is false
    and `failure` tells which method and amounts are still outstanding.

    **Example request:**
    ```json
    {
      "cash": "120.00",
      "payment_date": "2024-03-01"
    }
    ```
    """
    command = AllocatePaymentCommandDTO(
        customer_id=customer_id,
        cash=request.cash,
        pix=request.pix,
        card=request.card,
        payment_date=request.payment_date or date.today(),
        notes=request.notes,
    )
    use_case = AllocatePayment(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyReceivableRepository(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        unapplied_policy=ApplicationConfig.UNAPPLIED_PAYMENT_POLICY,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{customer_id}/credit/add", response_model=CreditTransactionResponseDTO)
async def add_credit(
    customer_id: str,
    request: AddCreditRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Add store credit to a customer.

    Repeated requests with the same `idempotency_key` return the original
    transaction without crediting twice.
    """
    command = AddCreditCommandDTO(
        customer_id=customer_id,
        amount=request.amount,
        description=request.description,
        reference_type="manual",
        idempotency_key=request.idempotency_key,
    )
    use_case = AddCredit(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post(
    "/{customer_id}/credit/remove",
    response_model=CreditTransactionResponseDTO,
    responses={
        402: {
            "description": "Insufficient credit",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_CREDIT",
                            "message": "Insufficient credit. Required: 100.00, Available: 50.00"
                        }
                    }
                }
            }
        }
    }
)
async def remove_credit(
    customer_id: str,
    request: RemoveCreditRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Use or withdraw store credit. The balance never goes below zero."""
    command = RemoveCreditCommandDTO(
        customer_id=customer_id,
        amount=request.amount,
        description=request.description,
        reference_type="manual",
    )
    use_case = RemoveCredit(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{customer_id}/credit", response_model=CreditBalanceResponseDTO)
async def get_credit_balance(customer_id: str, session: AsyncSession = Depends(get_session)):
    use_case = GetCreditBalance(SqlAlchemyCustomerRepository(session))
    result = await use_case.execute(customer_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/{customer_id}/credit/transactions", response_model=ListCreditTransactionsResponseDTO)
async def list_credit_transactions(
    customer_id: str,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    """Store-credit history, most recent first."""
    use_case = ListCreditTransactions(SqlAlchemyCreditTransactionRepository(session))
    result = await use_case.execute(customer_id, limit=limit, offset=offset)
    return result.value
