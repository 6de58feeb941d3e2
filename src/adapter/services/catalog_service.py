"""Catalog Service Implementations

Provides concrete implementations for talking to the product catalog.
"""

import logging
from decimal import Decimal
from typing import Optional
import httpx
from src.app.services.catalog_service import BuyerInfo, CatalogService

logger = logging.getLogger(__name__)


class LoggingCatalogService(CatalogService):
    """
    Catalog service that only logs

    Used when no catalog is configured (development, tests, or a shop that
    tracks inventory elsewhere).
    """

    async def mark_sold_on_credit(
        self,
        product_id: str,
        buyer: BuyerInfo,
        amount: Decimal,
        receivable_id: str,
    ) -> bool:
        logger.info(
            f"[CATALOG] Product {product_id} sold on credit to {buyer.customer_code} "
            f"({buyer.customer_name}) for {amount}, receivable {receivable_id}"
        )
        return True

    async def cancel_sale(self, product_id: str) -> bool:
        logger.info(f"[CATALOG] Sale of product {product_id} cancelled, item restocked")
        return True


class HttpCatalogService(CatalogService):
    """
    Catalog service backed by an HTTP catalog API

    Endpoints:
    - POST {base_url}/products/{product_id}/sell-on-credit
    - POST {base_url}/products/{product_id}/cancel-sale
    """

    def __init__(self, base_url: str, timeout: float = 10.0):
        """
        Initialize HTTP catalog service

        Args:
            base_url: Catalog API root URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def mark_sold_on_credit(
        self,
        product_id: str,
        buyer: BuyerInfo,
        amount: Decimal,
        receivable_id: str,
    ) -> bool:
        payload = {
            "customer_id": buyer.customer_id,
            "customer_code": buyer.customer_code,
            "customer_name": buyer.customer_name,
            "amount": str(amount),
            "receivable_id": receivable_id,
        }
        return await self._post(f"/products/{product_id}/sell-on-credit", payload, product_id)

    async def cancel_sale(self, product_id: str) -> bool:
        return await self._post(f"/products/{product_id}/cancel-sale", {}, product_id)

    async def _post(self, path: str, payload: dict, product_id: str) -> bool:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Catalog call {path} succeeded for product {product_id}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Catalog call {path} failed for product {product_id}: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error calling catalog {path} for product {product_id}: {e}")
            return False


def create_catalog_service(base_url: Optional[str] = None, timeout: float = 10.0) -> CatalogService:
    """
    Factory function to create the catalog service

    Args:
        base_url: Optional catalog API URL. Without it, a log-only catalog is used.
        timeout: Request timeout in seconds for the HTTP catalog

    Returns:
        Configured CatalogService
    """
    if base_url:
        return HttpCatalogService(base_url, timeout=timeout)
    return LoggingCatalogService()
