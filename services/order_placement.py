"""
Adapters to the backend that turns a checkout payload into a persisted order.

The backend owns stock checks and stock decrement; this side only forwards
the payload once and reports the outcome. A rejection always surfaces as
BusinessException carrying the backend's own message.
"""

import json
import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Callable

import aiohttp
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from db import get_catalog_session, session_commit, session_execute
from exceptions import BusinessException
from models.checkout import CheckoutPayloadDTO, OrderResultDTO

logger = logging.getLogger(__name__)


class OrderPlacer:
    """Interface: place_order(payload) -> OrderResultDTO, raising BusinessException on rejection."""

    async def place_order(self, payload: CheckoutPayloadDTO) -> OrderResultDTO:
        raise NotImplementedError


class StoredProcedureOrderPlacer(OrderPlacer):
    """
    Calls the `create_order_with_customer` database function.

    The function finds or creates the customer, inserts the order with its
    items and decrements stock in one transaction, and answers with
    {"success": bool, "orderId": str, "error": str}.
    """

    def __init__(self, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]] = get_catalog_session,
                 procedure_name: str | None = None):
        self.session_factory = session_factory
        self.procedure_name = procedure_name or config.ORDER_PROCEDURE_NAME

    @staticmethod
    def build_arguments(payload: CheckoutPayloadDTO) -> dict[str, Any]:
        order_items = [
            {
                "product_id": item.product_id,
                "quantity": item.quantity,
                "unit_price": float(item.unit_price),
                "product_name": item.product_name,
            }
            for item in payload.items
        ]
        return {
            "p_customer_full_name": payload.customer.full_name,
            "p_customer_phone": payload.customer.phone,
            "p_customer_email": payload.customer.email,
            "p_customer_address": payload.customer.address,
            "p_selected_customer_id": payload.selected_customer_id,
            # POS customers are linked to an account by the backend, if at all
            "p_auth_user_id": None,
            "p_order_items": json.dumps(order_items),
            "p_payment_method": payload.payment_method.value,
            "p_total_amount": float(payload.total_amount),
            "p_order_source": payload.order_source.value,
            "p_creator_profile_id": payload.creator_id,
        }

    async def place_order(self, payload: CheckoutPayloadDTO) -> OrderResultDTO:
        arguments = self.build_arguments(payload)
        procedure = getattr(func, self.procedure_name)
        stmt = select(procedure(*arguments.values()))
        try:
            async with self.session_factory() as session:
                result = await session_execute(stmt, session)
                data = result.scalar_one()
                await session_commit(session)
        except SQLAlchemyError as e:
            logger.error(f"Order procedure {self.procedure_name} failed: {e}")
            raise BusinessException(str(getattr(e, "orig", None) or e))

        try:
            if isinstance(data, (str, bytes)):
                data = json.loads(data)
        except json.JSONDecodeError as e:
            logger.error(f"Unreadable reply from {self.procedure_name}: {e}")
            raise BusinessException(f"Unreadable reply from {self.procedure_name}")
        if not isinstance(data, dict):
            data = {}

        if not data.get("success"):
            message = data.get("error") or "Order was not created"
            logger.warning(f"Order rejected by {self.procedure_name}: {message}")
            raise BusinessException(str(message))
        if not data.get("orderId"):
            raise BusinessException("Order was not created")

        logger.info(f"Order {data['orderId']} created with {len(payload.items)} items")
        return OrderResultDTO(order_id=str(data["orderId"]))


class EdgeFunctionOrderPlacer(OrderPlacer):
    """
    POSTs the payload to the hosted `place-order` function.

    Response body is {"orderId": ...} on success or {"error": ...}.
    """

    def __init__(self, url: str | None = None, api_key: str | None = None, timeout: float | None = None,
                 session: aiohttp.ClientSession | None = None):
        self.url = url or config.PLACE_ORDER_FUNCTION_URL
        self.api_key = api_key or config.BACKEND_ANON_KEY
        self.timeout = aiohttp.ClientTimeout(total=timeout or config.ORDER_PLACEMENT_TIMEOUT_SECONDS)
        self.session = session

    @staticmethod
    def build_body(payload: CheckoutPayloadDTO) -> dict[str, Any]:
        return {
            "profile": payload.customer.model_dump(),
            "checkoutItems": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "product_price": float(item.unit_price),
                    "quantity": item.quantity,
                    "product_image": item.image,
                }
                for item in payload.items
            ],
            "paymentMethod": payload.payment_method.value,
            "totalAmount": float(payload.total_amount),
            "userId": payload.creator_id,
            "orderSource": payload.order_source.value,
        }

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
            "Content-Type": "application/json",
        }

    async def place_order(self, payload: CheckoutPayloadDTO) -> OrderResultDTO:
        if not self.url:
            raise BusinessException("PLACE_ORDER_FUNCTION_URL is not configured")

        body = self.build_body(payload)
        try:
            if self.session is not None:
                data = await self._post(self.session, body)
            else:
                async with aiohttp.ClientSession(timeout=self.timeout) as session:
                    data = await self._post(session, body)
        except (aiohttp.ClientError, TimeoutError, json.JSONDecodeError) as e:
            logger.error(f"Order function call failed: {e!r}")
            raise BusinessException(str(e) or e.__class__.__name__)

        if data.get("error"):
            logger.warning(f"Order rejected by place-order function: {data['error']}")
            raise BusinessException(str(data["error"]))
        if not data.get("orderId"):
            raise BusinessException("Order was not created")

        logger.info(f"Order {data['orderId']} created with {len(payload.items)} items")
        return OrderResultDTO(order_id=str(data["orderId"]))

    async def _post(self, session: aiohttp.ClientSession, body: dict[str, Any]) -> dict[str, Any]:
        async with session.post(self.url, json=body, headers=self.headers, timeout=self.timeout) as response:
            data = await response.json(content_type=None)
            if response.status >= 400 and not (isinstance(data, dict) and data.get("error")):
                raise aiohttp.ClientResponseError(response.request_info, response.history,
                                                  status=response.status, message=response.reason or "")
            return data if isinstance(data, dict) else {}
