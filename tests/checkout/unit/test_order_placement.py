"""
Unit Tests: Order placement adapters

Tests for services/order_placement.py covering:
- StoredProcedureOrderPlacer argument shaping and result handling
- EdgeFunctionOrderPlacer request body, headers and error handling
"""

import json
from contextlib import asynccontextmanager
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
from sqlalchemy.exc import DBAPIError

from enums.draft_status import DraftStatus
from enums.notification_kind import NotificationKind
from enums.order_source import OrderSource
from enums.payment_method import PaymentMethod
from exceptions import BusinessException
from models.checkout import CheckoutCustomerDTO, CheckoutItemDTO, CheckoutPayloadDTO
from services.checkout import CheckoutService
from services.draft_manager import OrderDraftManager
from services.order_placement import EdgeFunctionOrderPlacer, StoredProcedureOrderPlacer


@pytest.fixture
def payload():
    return CheckoutPayloadDTO(
        customer=CheckoutCustomerDTO(full_name="Nguyen Van A", phone="0900000000"),
        selected_customer_id="c1",
        items=(CheckoutItemDTO(product_id="p1", product_name="Áo thun", quantity=2,
                               unit_price=Decimal("50000"), image="a.jpg"),),
        payment_method=PaymentMethod.CASH,
        total_amount=Decimal("100000"),
        order_source=OrderSource.POS,
        creator_id="staff-1",
    )


def session_factory_returning(value):
    session = AsyncMock()
    result = MagicMock()
    result.scalar_one.return_value = value
    session.execute.return_value = result

    @asynccontextmanager
    async def factory():
        yield session

    return factory, session


class TestStoredProcedureOrderPlacer:

    def test_arguments(self, payload):
        arguments = StoredProcedureOrderPlacer.build_arguments(payload)

        assert arguments["p_customer_full_name"] == "Nguyen Van A"
        assert arguments["p_selected_customer_id"] == "c1"
        assert arguments["p_auth_user_id"] is None
        assert arguments["p_total_amount"] == 100000.0
        assert arguments["p_payment_method"] == "cash"
        assert arguments["p_order_source"] == "pos"
        assert arguments["p_creator_profile_id"] == "staff-1"
        assert json.loads(arguments["p_order_items"]) == [
            {"product_id": "p1", "quantity": 2, "unit_price": 50000.0, "product_name": "Áo thun"}
        ]

    @pytest.mark.asyncio
    async def test_success(self, payload):
        factory, session = session_factory_returning({"success": True, "orderId": "o1"})

        result = await StoredProcedureOrderPlacer(factory).place_order(payload)

        assert result.order_id == "o1"
        session.execute.assert_awaited_once()
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_json_text_result(self, payload):
        factory, _ = session_factory_returning('{"success": true, "orderId": "o2"}')

        result = await StoredProcedureOrderPlacer(factory).place_order(payload)

        assert result.order_id == "o2"

    @pytest.mark.asyncio
    async def test_business_rejection_passes_message(self, payload):
        factory, _ = session_factory_returning({"success": False, "error": "Sản phẩm Áo thun không đủ hàng"})

        with pytest.raises(BusinessException) as exc_info:
            await StoredProcedureOrderPlacer(factory).place_order(payload)

        assert exc_info.value.message == "Sản phẩm Áo thun không đủ hàng"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("reply", ["not json", ["o1"], {"success": True}])
    async def test_unreadable_reply(self, payload, reply):
        factory, _ = session_factory_returning(reply)

        with pytest.raises(BusinessException):
            await StoredProcedureOrderPlacer(factory).place_order(payload)

    @pytest.mark.asyncio
    async def test_unreadable_reply_reopens_draft(self, notifier, staff_user, make_product):
        factory, _ = session_factory_returning("not json")
        manager = OrderDraftManager(notifier=notifier)
        manager.update_active_draft(customer={"full_name": "Nguyen Van A", "phone": "0900000000"})
        manager.add_product(make_product(product_id="p1", name="Tea", stock=3))
        checkout = CheckoutService(StoredProcedureOrderPlacer(factory), notifier)

        with pytest.raises(BusinessException):
            await checkout.submit_draft(manager, staff_user)

        assert manager.active_draft.status == DraftStatus.OPEN
        assert notifier.current().kind == NotificationKind.ERROR

    @pytest.mark.asyncio
    async def test_database_error(self, payload):
        factory, session = session_factory_returning(None)
        session.execute.side_effect = DBAPIError("SELECT", {}, Exception("function does not exist"))

        with pytest.raises(BusinessException) as exc_info:
            await StoredProcedureOrderPlacer(factory).place_order(payload)

        assert "function does not exist" in exc_info.value.message


def http_session(body, status=200):
    response = MagicMock()
    response.status = status
    response.reason = "Error" if status >= 400 else "OK"
    response.json = AsyncMock(return_value=body)

    session = MagicMock()
    session.post.return_value.__aenter__.return_value = response
    return session


class TestEdgeFunctionOrderPlacer:

    def test_body(self, payload):
        body = EdgeFunctionOrderPlacer.build_body(payload)

        assert body["profile"] == {"full_name": "Nguyen Van A", "phone": "0900000000", "email": None,
                                   "address": None}
        assert body["checkoutItems"] == [{"product_id": "p1", "product_name": "Áo thun", "product_price": 50000.0,
                                          "quantity": 2, "product_image": "a.jpg"}]
        assert body["paymentMethod"] == "cash"
        assert body["totalAmount"] == 100000.0
        assert body["userId"] == "staff-1"
        assert body["orderSource"] == "pos"

    @pytest.mark.asyncio
    async def test_success(self, payload):
        session = http_session({"orderId": "0f8fad5b-d9cb-469f-a165-70867728950e"})
        placer = EdgeFunctionOrderPlacer(url="https://backend.test/place-order", api_key="k", session=session)

        result = await placer.place_order(payload)

        assert result.short_id == "0f8fad5b"
        url = session.post.call_args.args[0]
        headers = session.post.call_args.kwargs["headers"]
        assert url == "https://backend.test/place-order"
        assert headers["Authorization"] == "Bearer k"

    @pytest.mark.asyncio
    async def test_error_body(self, payload):
        session = http_session({"error": "Hết hàng"}, status=400)
        placer = EdgeFunctionOrderPlacer(url="https://backend.test/place-order", api_key="k", session=session)

        with pytest.raises(BusinessException) as exc_info:
            await placer.place_order(payload)

        assert exc_info.value.message == "Hết hàng"

    @pytest.mark.asyncio
    async def test_http_error_without_body(self, payload):
        session = http_session(None, status=502)
        placer = EdgeFunctionOrderPlacer(url="https://backend.test/place-order", api_key="k", session=session)

        with pytest.raises(BusinessException):
            await placer.place_order(payload)

    @pytest.mark.asyncio
    async def test_connection_error(self, payload):
        session = MagicMock()
        session.post.side_effect = aiohttp.ClientConnectionError("connection refused")
        placer = EdgeFunctionOrderPlacer(url="https://backend.test/place-order", api_key="k", session=session)

        with pytest.raises(BusinessException) as exc_info:
            await placer.place_order(payload)

        assert "connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_url(self, payload):
        placer = EdgeFunctionOrderPlacer(url="", api_key="k", session=MagicMock())
        placer.url = ""

        with pytest.raises(BusinessException):
            await placer.place_order(payload)
