"""Unit tests for catalog service implementations"""

import json
import pytest
import httpx
from decimal import Decimal
from unittest.mock import patch

from src.adapter.services.catalog_service import (
    HttpCatalogService,
    LoggingCatalogService,
    create_catalog_service,
)
from src.app.services.catalog_service import BuyerInfo

RealAsyncClient = httpx.AsyncClient

BUYER = BuyerInfo(customer_id="cust_1", customer_code="CLI001", customer_name="Maria Silva")


def _client_factory(handler):
    def factory(**kwargs):
        return RealAsyncClient(transport=httpx.MockTransport(handler), **kwargs)
    return factory


class TestCreateCatalogService:

    def test_without_url_logs_only(self):
        assert isinstance(create_catalog_service(), LoggingCatalogService)

    def test_with_url_uses_http(self):
        service = create_catalog_service("http://catalog.local/", timeout=3.0)

        assert isinstance(service, HttpCatalogService)
        assert service.base_url == "http://catalog.local"
        assert service.timeout == 3.0


@pytest.mark.asyncio
class TestHttpCatalogService:

    async def test_mark_sold_on_credit_posts_buyer(self):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        service = HttpCatalogService("http://catalog.local")
        with patch("src.adapter.services.catalog_service.httpx.AsyncClient", side_effect=_client_factory(handler)):
            linked = await service.mark_sold_on_credit("prod_9", BUYER, Decimal("100.00"), "rcv_1")

        assert linked is True
        assert captured["url"] == "http://catalog.local/products/prod_9/sell-on-credit"
        assert captured["body"]["customer_code"] == "CLI001"
        assert captured["body"]["amount"] == "100.00"

    async def test_cancel_sale_returns_false_on_server_error(self):
        service = HttpCatalogService("http://catalog.local")
        with patch(
            "src.adapter.services.catalog_service.httpx.AsyncClient",
            side_effect=_client_factory(lambda request: httpx.Response(503)),
        ):
            restocked = await service.cancel_sale("prod_9")

        assert restocked is False

    async def test_connection_error_returns_false(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        service = HttpCatalogService("http://catalog.local")
        with patch("src.adapter.services.catalog_service.httpx.AsyncClient", side_effect=_client_factory(handler)):
            restocked = await service.cancel_sale("prod_9")

        assert restocked is False


@pytest.mark.asyncio
async def test_logging_catalog_always_succeeds():
    service = LoggingCatalogService()

    assert await service.mark_sold_on_credit("prod_9", BUYER, Decimal("10"), "rcv_1") is True
    assert await service.cancel_sale("prod_9") is True
