"""CreateReceivable Use Case

Records a sale owed by a customer. A down payment, if any, becomes the
first payment of the receivable so paid_amount always equals the sum of
its payments.
"""

import logging
from datetime import date
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.catalog_service import BuyerInfo, CatalogService
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.receivable_repository import ReceivableRepository
from src.domain.customer import Customer
from src.domain.payment import ReceivablePayment
from src.domain.receivable import Receivable, ReceivableSource
from src.domain.receivable_state import derive_profit, record_payment, refresh_balances, to_money
from .dtos import CreateReceivableCommandDTO, ReceivableResponseDTO, receivable_to_dto

logger = logging.getLogger(__name__)


class CreateReceivable:
    """
    Use Case: Record a sale as a receivable

    Business Rules:
    1. Customer must exist
    2. Catalog sales must reference a product_id
    3. total_amount > 0 and 0 <= paid_amount <= total_amount
    4. due_date defaults to today
    5. A positive paid_amount is stored as an opening payment
    6. Catalog sales are reported to the catalog after commit; a catalog
       failure leaves the receivable in place with catalog_sale_linked=False

    Flow:
    1. Validate customer and amounts
    2. Build receivable, derive status/remaining
    3. Persist and commit
    4. Mark catalog item as sold on credit (catalog sales only)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        receivable_repo: ReceivableRepository,
        customer_repo: CustomerRepository,
        catalog_service: CatalogService,
        default_warranty_days: int = 0,
    ):
        self.uow = uow
        self.receivable_repo = receivable_repo
        self.customer_repo = customer_repo
        self.catalog_service = catalog_service
        self.default_warranty_days = default_warranty_days

    async def execute(self, command: CreateReceivableCommandDTO) -> Result[ReceivableResponseDTO]:
        try:
            customer = await self.customer_repo.get_by_id(command.customer_id)
            if not customer:
                return Return.err(
                    Error(
                        code="CUSTOMER_NOT_FOUND",
                        message=f"Customer {command.customer_id} not found",
                    )
                )

            if command.source == ReceivableSource.CATALOG and not command.product_id:
                return Return.err(
                    Error(
                        code="PRODUCT_REQUIRED",
                        message="A catalog sale must reference a product",
                    )
                )

            total_amount = to_money(command.total_amount)
            paid_amount = to_money(command.paid_amount)
            if total_amount <= 0:
                return Return.err(
                    Error(
                        code="INVALID_AMOUNT",
                        message="Total amount must be greater than zero",
                        reason=f"total_amount={command.total_amount}",
                    )
                )
            if paid_amount > total_amount:
                return Return.err(
                    Error(
                        code="INVALID_AMOUNT",
                        message="Paid amount cannot exceed the total amount",
                        reason=f"paid_amount={paid_amount}, total_amount={total_amount}",
                    )
                )

            warranty_days = command.warranty_period_days
            if warranty_days is None:
                warranty_days = self.default_warranty_days

            receivable = Receivable(
                customer_id=customer.id,
                product_id=command.product_id,
                product_name=command.product_name,
                source=command.source,
                cost_price=command.cost_price,
                sale_price=command.sale_price,
                profit=derive_profit(command.cost_price, command.sale_price),
                coupon_code=command.coupon_code,
                coupon_discount=command.coupon_discount,
                total_amount=total_amount,
                paid_amount=Decimal("0"),
                remaining_amount=total_amount,
                payments=[],
                due_date=command.due_date or date.today(),
                warranty_period_days=warranty_days,
                notes=command.notes,
            )
            refresh_balances(receivable)

            if paid_amount > 0:
                record_payment(
                    receivable,
                    ReceivablePayment(
                        amount=paid_amount,
                        method=command.initial_payment_method,
                        payment_date=receivable.created_at.date(),
                        notes="Down payment",
                    ),
                )

            created = await self.receivable_repo.create(receivable)
            await self.uow.commit()

            logger.info(
                f"Receivable {created.id} created for customer {created.customer_id}: "
                f"total={created.total_amount}, paid={created.paid_amount}, status={created.status.value}"
            )

            response = receivable_to_dto(created)

            if created.source == ReceivableSource.CATALOG and created.product_id:
                if await self._link_catalog_sale(created, customer):
                    response = response.model_copy(update={"catalog_sale_linked": True})

            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create receivable for customer {command.customer_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_RECEIVABLE_FAILED",
                    message="Failed to create receivable",
                    reason=str(e),
                )
            )

    async def _link_catalog_sale(self, receivable: Receivable, customer: Customer) -> bool:
        """
        Tell the catalog the item was sold on credit

        The receivable is already committed; any failure here is logged and
        reported through catalog_sale_linked only.
        """
        linked = await self.catalog_service.mark_sold_on_credit(
            product_id=receivable.product_id,
            buyer=BuyerInfo(
                customer_id=customer.id,
                customer_code=customer.code,
                customer_name=customer.name,
            ),
            amount=receivable.total_amount,
            receivable_id=receivable.id,
        )
        if not linked:
            logger.warning(
                f"Catalog item {receivable.product_id} was not marked as sold for receivable "
                f"{receivable.id}; inventory must be reconciled manually"
            )
            return False

        try:
            receivable.catalog_sale_linked = True
            await self.receivable_repo.update(receivable)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to flag receivable {receivable.id} as linked to the catalog: {e}")
            return False
        return True
