"""
HTTP client for the Kantin food-ordering REST API.

Every authenticated call takes the caller's bearer token explicitly; the
client itself is shared by all bot users and holds no auth state.

Response envelope is ``{"success": bool, "data": ..., "message": str}``.
Failures are raised as exceptions from ``app.core.exceptions``:

- 401 -> SessionExpired
- 404 -> NotFoundError
- other non-2xx or ``success: false`` -> ApiError
- connection error / timeout -> ApiUnavailable
"""
from __future__ import annotations

import asyncio
from typing import Any

import aiohttp

from app.core.constants import PAYMENTS_PER_PAGE
from app.core.exceptions import ApiError, ApiUnavailable, NotFoundError, SessionExpired
from app.core.utils import to_int
from app.domain.cart import Cart
from app.domain.entities import Restaurant
from app.domain.order import Order, Payment
from logging_config import logger


class KantinApiClient:
    """Thin async wrapper over the REST endpoints used by the bot."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the shared HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api/{path.lstrip('/')}"

    @staticmethod
    def _headers(token: str | None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json: dict[str, Any] | None = None,
        data: aiohttp.FormData | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        session = await self._get_session()
        url = self._url(path)
        try:
            async with session.request(
                method,
                url,
                headers=self._headers(token),
                json=json,
                data=data,
                params=params,
            ) as resp:
                try:
                    payload = await resp.json(content_type=None)
                except ValueError:
                    payload = None
                if not isinstance(payload, dict):
                    payload = {}
                message = str(payload.get("message") or f"HTTP {resp.status}")

                if resp.status == 401:
                    raise SessionExpired(message)
                if resp.status == 404:
                    raise NotFoundError(message)
                if resp.status >= 400:
                    logger.warning("API %s %s failed: %s %s", method, path, resp.status, message)
                    raise ApiError(message, status=resp.status)
                if payload.get("success") is False:
                    logger.warning("API %s %s unsuccessful: %s", method, path, message)
                    raise ApiError(message, status=resp.status)
                return payload
        except asyncio.TimeoutError as e:
            logger.warning("API %s %s timed out", method, path)
            raise ApiUnavailable(f"Timeout calling {path}") from e
        except aiohttp.ClientError as e:
            logger.warning("API %s %s transport error: %s", method, path, e)
            raise ApiUnavailable(str(e)) from e

    @staticmethod
    def _list_data(payload: dict[str, Any]) -> list[dict[str, Any]]:
        """Accept both a bare list and a paginated ``{"data": [...]}`` payload."""
        data = payload.get("data")
        if isinstance(data, dict):
            data = data.get("data")
        return [row for row in data or [] if isinstance(row, dict)]

    # =========================================================================
    # AUTH
    # =========================================================================

    async def login(self, email: str, password: str) -> dict[str, Any]:
        payload = await self._request(
            "POST", "auth/login", json={"email": email, "password": password}
        )
        data = payload.get("data")
        if not isinstance(data, dict) or not data.get("token"):
            raise ApiError("Login response has no token")
        return data

    async def logout(self, token: str) -> None:
        await self._request("POST", "auth/logout", token=token)

    # =========================================================================
    # CART
    # =========================================================================

    async def list_carts(self, token: str) -> list[Cart]:
        payload = await self._request("GET", "cart", token=token)
        return [Cart.from_dict(row) for row in self._list_data(payload)]

    async def add_cart_item(
        self,
        token: str,
        *,
        menu_id: int,
        restaurant_id: int,
        quantity: int,
        notes: str | None,
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            "cart/add-item",
            token=token,
            json={
                "menu_id": menu_id,
                "restaurant_id": restaurant_id,
                "quantity": quantity,
                "notes": notes,
            },
        )

    async def update_cart_item_quantity(self, token: str, item_id: int, quantity: int) -> None:
        await self._request("PUT", f"cart/items/{item_id}", token=token, json={"quantity": quantity})

    async def update_cart_item_notes(self, token: str, item_id: int, notes: str | None) -> None:
        await self._request("PUT", f"cart/items/{item_id}", token=token, json={"notes": notes})

    async def remove_cart_item(self, token: str, item_id: int) -> None:
        await self._request("DELETE", f"cart/items/{item_id}", token=token)

    async def clear_cart(self, token: str) -> None:
        await self._request("DELETE", "cart/clear", token=token)

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def create_order(self, token: str, notes: str | None) -> int:
        payload = await self._request("POST", "orders", token=token, json={"notes": notes})
        data = payload.get("data")
        order_id = to_int(data.get("id")) if isinstance(data, dict) else 0
        if not order_id:
            raise ApiError("Order response has no id")
        return order_id

    async def list_orders(self, token: str) -> list[Order]:
        payload = await self._request("GET", "orders", token=token)
        return [Order.from_dict(row) for row in self._list_data(payload)]

    async def get_order(self, token: str, order_id: int) -> Order:
        payload = await self._request("GET", f"orders/{order_id}", token=token)
        data = payload.get("data")
        if not isinstance(data, dict):
            raise NotFoundError(f"Order {order_id} not found")
        return Order.from_dict(data)

    async def cancel_order(self, token: str, order_id: int) -> None:
        await self._request("POST", f"orders/{order_id}/cancel", token=token)

    async def confirm_payment(
        self,
        token: str,
        order_id: int,
        *,
        order_code: str,
        payment_method: str,
        proof_image: bytes,
        filename: str,
        content_type: str = "image/jpeg",
        notes: str | None = None,
    ) -> dict[str, Any]:
        """Multipart upload of the proof-of-payment image."""
        form = aiohttp.FormData()
        form.add_field("order_code", order_code)
        form.add_field("payment_method", payment_method)
        form.add_field("proof_image", proof_image, filename=filename, content_type=content_type)
        if notes:
            form.add_field("notes", notes)
        return await self._request(
            "POST", f"orders/{order_id}/confirm-payment", token=token, data=form
        )

    # =========================================================================
    # RESTAURANTS
    # =========================================================================

    async def list_restaurants(self, token: str | None = None) -> list[Restaurant]:
        payload = await self._request("GET", "restaurants", token=token)
        return [Restaurant.model_validate(row) for row in self._list_data(payload)]

    async def get_restaurant(self, restaurant_id: int, token: str | None = None) -> Restaurant:
        payload = await self._request("GET", f"restaurants/{restaurant_id}", token=token)
        data = payload.get("data")
        if not isinstance(data, dict):
            raise NotFoundError(f"Restaurant {restaurant_id} not found")
        return Restaurant.model_validate(data)

    # =========================================================================
    # ADMIN PAYMENTS
    # =========================================================================

    async def admin_list_payments(
        self, token: str, per_page: int = PAYMENTS_PER_PAGE
    ) -> list[Payment]:
        payload = await self._request(
            "GET", "admin/payments", token=token, params={"per_page": per_page}
        )
        return [Payment.from_dict(row) for row in self._list_data(payload)]

    async def admin_get_payment(self, token: str, payment_id: int) -> Payment:
        payload = await self._request("GET", f"admin/payments/{payment_id}", token=token)
        data = payload.get("data")
        if not isinstance(data, dict):
            raise NotFoundError(f"Payment {payment_id} not found")
        return Payment.from_dict(data)

    async def admin_confirm_payment(self, token: str, payment_id: int) -> Payment | None:
        payload = await self._request(
            "PUT", f"admin/payments/{payment_id}/confirm", token=token, json={}
        )
        data = payload.get("data")
        return Payment.from_dict(data) if isinstance(data, dict) else None

    async def admin_reject_payment(self, token: str, payment_id: int) -> Payment | None:
        payload = await self._request(
            "PUT", f"admin/payments/{payment_id}/reject", token=token, json={}
        )
        data = payload.get("data")
        return Payment.from_dict(data) if isinstance(data, dict) else None
