"""Receivables API Routes

FastAPI routes for recording sales, payments, edits, refunds, archiving
and the recycle bin.
"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.api.schemas.receivable_request import (
    AddPaymentRequestSchema,
    CreateReceivableRequestSchema,
    RefundRequestSchema,
    UpdateReceivableRequestSchema,
)
from src.app.services.catalog_service import CatalogService
from src.app.use_cases.ledger import (
    AddPayment,
    ArchiveReceivable,
    CreateReceivable,
    GetReceivable,
    GetReceivablesSummary,
    ListDeletedReceivables,
    ListOverdueReceivables,
    ListReceivables,
    PurgeReceivable,
    RefundReceivable,
    RestoreReceivable,
    UnarchiveReceivable,
    UpdateReceivable,
)
from src.app.use_cases.ledger.dtos import (
    AddPaymentCommandDTO,
    CreateReceivableCommandDTO,
    ReceivableListResponseDTO,
    ReceivableResponseDTO,
    ReceivablesSummaryDTO,
    RefundReceivableCommandDTO,
    RefundResponseDTO,
    UpdateReceivableCommandDTO,
)
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyCustomerRepository,
    SqlAlchemyReceivableRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_catalog_service, get_session
from src.domain.receivable import ReceivableStatus
from src.domain.visibility import ReceivableView

router = APIRouter(prefix="/receivables", tags=["Receivables"])

NOT_FOUND_RESPONSE = {
    404: {
        "description": "Receivable not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "RECEIVABLE_NOT_FOUND",
                        "message": "Receivable 8b0e5d0c-7c55-4f5e-a0f2-7f7c1f2f0a11 not found"
                    }
                }
            }
        }
    }
}


@router.post(
    "",
    response_model=ReceivableResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"description": "Customer not found"},
        400: {"description": "Validation error (amounts, missing product for catalog sale)"},
    }
)
async def create_receivable(
    request: CreateReceivableRequestSchema,
    session: AsyncSession = Depends(get_session),
    catalog_service: CatalogService = Depends(get_catalog_service),
):
    """
    Record a sale owed by a customer.

    A positive `paid_amount` is stored as the first payment (down payment).
    Catalog sales also mark the catalog item as sold on credit; if the
    catalog is unavailable the receivable is still created with
    `catalog_sale_linked: false`.
    """
    use_case = CreateReceivable(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyReceivableRepository(session),
        SqlAlchemyCustomerRepository(session),
        catalog_service,
        default_warranty_days=ApplicationConfig.DEFAULT_WARRANTY_DAYS,
    )
    result = await use_case.execute(CreateReceivableCommandDTO(**request.model_dump()))

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("", response_model=ReceivableListResponseDTO)
async def list_receivables(
    view: ReceivableView = Query(default=ReceivableView.ACTIVE),
    customer_id: Optional[str] = Query(default=None),
    status_filter: Optional[ReceivableStatus] = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_session),
):
    """
    List live receivables.

    - `view=active`: not manually archived and not (paid with expired warranty)
    - `view=archived`: manually or automatically archived
    - `view=all`: both
    """
    use_case = ListReceivables(SqlAlchemyReceivableRepository(session))
    result = await use_case.execute(view=view, customer_id=customer_id, status=status_filter)
    return result.value


@router.get("/summary", response_model=ReceivablesSummaryDTO)
async def get_summary(
    customer_id: Optional[str] = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    """Total outstanding plus pending / partial / paid / overdue counts."""
    use_case = GetReceivablesSummary(SqlAlchemyReceivableRepository(session))
    result = await use_case.execute(customer_id=customer_id)
    return result.value


@router.get("/overdue", response_model=List[ReceivableResponseDTO])
async def list_overdue(
    customer_id: Optional[str] = Query(default=None),
    session: AsyncSession = Depends(get_session),
):
    """Unpaid receivables whose due date has passed."""
    use_case = ListOverdueReceivables(SqlAlchemyReceivableRepository(session))
    result = await use_case.execute(customer_id=customer_id)
    return result.value


@router.get("/deleted", response_model=List[ReceivableResponseDTO])
async def list_deleted(session: AsyncSession = Depends(get_session)):
    """Recycle bin: soft-deleted receivables."""
    use_case = ListDeletedReceivables(SqlAlchemyReceivableRepository(session))
    result = await use_case.execute()
    return result.value


@router.get("/{receivable_id}", response_model=ReceivableResponseDTO, responses=NOT_FOUND_RESPONSE)
async def get_receivable(receivable_id: str, session: AsyncSession = Depends(get_session)):
    use_case = GetReceivable(SqlAlchemyReceivableRepository(session))
    result = await use_case.execute(receivable_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.patch(
    "/{receivable_id}",
    response_model=ReceivableResponseDTO,
    responses={
        **NOT_FOUND_RESPONSE,
        409: {
            "description": "Sale fields are locked once a payment exists",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "EDIT_LOCKED",
                            "message": "Receivable already has payments; use a payment or a refund instead",
                            "reason": "locked fields: total_amount"
                        }
                    }
                }
            }
        },
    }
)
async def update_receivable(
    receivable_id: str,
    request: UpdateReceivableRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Partially update a receivable.

    `total_amount`, `product_name`, `cost_price` and `sale_price` cannot be
    changed once the receivable has a payment.
    """
    command = UpdateReceivableCommandDTO(
        receivable_id=receivable_id,
        **request.model_dump(exclude_unset=True),
    )
    use_case = UpdateReceivable(SqlAlchemyUnitOfWork(session), SqlAlchemyReceivableRepository(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete(
    "/{receivable_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        **NOT_FOUND_RESPONSE,
        409: {"description": "Receivable has payments and was not refunded"},
    }
)
async def purge_receivable(receivable_id: str, session: AsyncSession = Depends(get_session)):
    """
    Permanently delete a receivable.

    Allowed for soft-deleted receivables and for receivables without payments.
    """
    use_case = PurgeReceivable(SqlAlchemyUnitOfWork(session), SqlAlchemyReceivableRepository(session))
    result = await use_case.execute(receivable_id)

    if result.is_err():
        raise_for_error(result.error)


@router.post(
    "/{receivable_id}/payments",
    response_model=ReceivableResponseDTO,
    responses={
        **NOT_FOUND_RESPONSE,
        400: {
            "description": "Payment exceeds the remaining balance",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PAYMENT_EXCEEDS_BALANCE",
                            "message": "Payment of 80.00 exceeds the remaining balance of 50.00"
                        }
                    }
                }
            }
        },
    }
)
async def add_payment(
    receivable_id: str,
    request: AddPaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Record a payment against one receivable."""
    command = AddPaymentCommandDTO(
        receivable_id=receivable_id,
        amount=request.amount,
        method=request.method,
        payment_date=request.payment_date or date.today(),
        notes=request.notes,
    )
    use_case = AddPayment(SqlAlchemyUnitOfWork(session), SqlAlchemyReceivableRepository(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{receivable_id}/refund", response_model=RefundResponseDTO, responses=NOT_FOUND_RESPONSE)
async def refund_receivable(
    receivable_id: str,
    request: RefundRequestSchema,
    session: AsyncSession = Depends(get_session),
    catalog_service: CatalogService = Depends(get_catalog_service),
):
    """
    Refund (return) a sale.

    With `keep_as_credit` the amount already paid becomes store credit.
    Linked catalog items are restocked and the receivable is soft deleted.
    The response lists the outcome of every step.
    """
    use_case = RefundReceivable(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyReceivableRepository(session),
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        catalog_service,
    )
    result = await use_case.execute(
        RefundReceivableCommandDTO(receivable_id=receivable_id, keep_as_credit=request.keep_as_credit)
    )

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{receivable_id}/archive", response_model=ReceivableResponseDTO, responses=NOT_FOUND_RESPONSE)
async def archive_receivable(receivable_id: str, session: AsyncSession = Depends(get_session)):
    use_case = ArchiveReceivable(SqlAlchemyUnitOfWork(session), SqlAlchemyReceivableRepository(session))
    result = await use_case.execute(receivable_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{receivable_id}/unarchive", response_model=ReceivableResponseDTO, responses=NOT_FOUND_RESPONSE)
async def unarchive_receivable(receivable_id: str, session: AsyncSession = Depends(get_session)):
    use_case = UnarchiveReceivable(SqlAlchemyUnitOfWork(session), SqlAlchemyReceivableRepository(session))
    result = await use_case.execute(receivable_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.post("/{receivable_id}/restore", response_model=ReceivableResponseDTO, responses=NOT_FOUND_RESPONSE)
async def restore_receivable(receivable_id: str, session: AsyncSession = Depends(get_session)):
    """Move a receivable out of the recycle bin."""
    use_case = RestoreReceivable(SqlAlchemyUnitOfWork(session), SqlAlchemyReceivableRepository(session))
    result = await use_case.execute(receivable_id)

    if result.is_err():
        raise_for_error(result.error)
    return result.value
