"""Shopify Admin API wrapper (server-side only).

Order, customer and fulfillment helpers for back-office scripts. The Admin
access token must never reach page code. Lookups return ``None`` or an
empty list when the API is unreachable or not configured; only
:meth:`AdminClient.fulfill_order` propagates errors to its caller.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence

import httpx

from portsite.config import Settings, get_settings
from portsite.models import Customer, FulfillmentLineItem, Order, ShopInfo
from portsite.services.shopify import (
    DEFAULT_API_VERSION,
    ShopifyAPIError,
    ShopifyNotConfiguredError,
    normalize_store_domain,
)

logger = logging.getLogger(__name__)

ORDER_FIELDS = (
    "id,order_number,name,email,total_price,currency,financial_status,"
    "fulfillment_status,created_at,customer,line_items"
)

# Line-item title fragments that identify our product in mixed orders.
PRODUCT_ORDER_KEYWORDS: tuple[str, ...] = ("pour the port", "septic tank treatment")

_CLIENT_ERRORS = (httpx.HTTPError, ShopifyAPIError, ShopifyNotConfiguredError, ValueError)


class AdminClient:
    """Minimal async client for the Shopify Admin REST API."""

    def __init__(
        self,
        *,
        store_domain: str | None,
        access_token: str | None,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._store_domain = normalize_store_domain(store_domain)
        self._access_token = access_token or ""
        self._api_version = api_version
        self._base_url = f"https://{self._store_domain}/admin/api/{self._api_version}"
        self._headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self._access_token,
        }
        self._client = httpx.AsyncClient(timeout=timeout, headers=self._headers, transport=transport)

        if not self.is_configured:
            logger.warning("Shopify Admin API not configured. Check SHOPIFY_ADMIN_ACCESS_TOKEN in .env")

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "AdminClient":
        return cls(
            store_domain=settings.shopify_store_domain,
            access_token=settings.shopify_admin_access_token,
            api_version=settings.shopify_admin_api_version,
            timeout=settings.shopify_timeout_seconds,
            **kwargs,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._store_domain and self._access_token)

    def config_summary(self) -> dict[str, Any]:
        return {
            "store_domain": self._store_domain or None,
            "has_admin_token": bool(self._access_token),
            "api_version": self._api_version,
            "is_configured": self.is_configured,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_shop_info(self) -> ShopInfo | None:
        try:
            data = await self._request("GET", "/shop.json")
            return ShopInfo.model_validate(data["shop"])
        except (*_CLIENT_ERRORS, KeyError) as exc:
            logger.error("Error fetching shop info: %s", exc)
            return None

    async def get_recent_orders(self, limit: int = 10) -> List[Order]:
        params = {"limit": limit, "status": "any", "fields": ORDER_FIELDS}
        try:
            data = await self._request("GET", "/orders.json", params=params)
            return [Order.model_validate(o) for o in data.get("orders") or []]
        except _CLIENT_ERRORS as exc:
            logger.error("Error fetching orders: %s", exc)
            return []

    async def get_order_by_id(self, order_id: int) -> Order | None:
        try:
            data = await self._request("GET", f"/orders/{order_id}.json")
            return Order.model_validate(data["order"])
        except (*_CLIENT_ERRORS, KeyError) as exc:
            logger.error("Error fetching order %s: %s", order_id, exc)
            return None

    async def get_customer_by_id(self, customer_id: int) -> Customer | None:
        try:
            data = await self._request("GET", f"/customers/{customer_id}.json")
            return Customer.model_validate(data["customer"])
        except (*_CLIENT_ERRORS, KeyError) as exc:
            logger.error("Error fetching customer %s: %s", customer_id, exc)
            return None

    async def search_customers(self, email: str) -> List[Customer]:
        try:
            data = await self._request("GET", "/customers/search.json", params={"query": f"email:{email}"})
            return [Customer.model_validate(c) for c in data.get("customers") or []]
        except _CLIENT_ERRORS as exc:
            logger.error("Error searching customers with email %s: %s", email, exc)
            return []

    async def fulfill_order(
        self,
        order_id: int,
        line_items: Sequence[FulfillmentLineItem | dict[str, int]],
    ) -> dict[str, Any]:
        """Create a fulfillment for the given line items.

        Unlike the lookups, failures are logged and re-raised.
        """

        items = [FulfillmentLineItem.model_validate(item).model_dump() for item in line_items]
        payload = {
            "fulfillment": {
                "location_id": None,  # default location
                "tracking_number": None,
                "notify_customer": True,
                "line_items": items,
            }
        }
        try:
            return await self._request("POST", f"/orders/{order_id}/fulfillments.json", json=payload)
        except _CLIENT_ERRORS as exc:
            logger.error("Error fulfilling order %s: %s", order_id, exc)
            raise

    async def add_customer_tags(self, customer_id: int, tags: Iterable[str]) -> bool:
        """Merge *tags* into the customer's existing tags (order kept, no duplicates)."""

        customer = await self.get_customer_by_id(customer_id)
        if customer is None:
            return False

        existing = [t.strip() for t in (customer.tags or "").split(",") if t.strip()]
        merged = list(dict.fromkeys([*existing, *tags]))
        payload = {"customer": {"id": customer_id, "tags": ", ".join(merged)}}
        try:
            await self._request("PUT", f"/customers/{customer_id}.json", json=payload)
        except _CLIENT_ERRORS as exc:
            logger.error("Error adding tags to customer %s: %s", customer_id, exc)
            return False
        return True

    async def get_product_orders(
        self,
        keywords: Sequence[str] = PRODUCT_ORDER_KEYWORDS,
        limit: int = 50,
    ) -> List[Order]:
        """Recent orders with at least one line item mentioning the product."""

        orders = await self.get_recent_orders(limit)
        needles = [k.lower() for k in keywords]
        return [
            order
            for order in orders
            if any(needle in item.title.lower() for item in order.line_items for needle in needles)
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        if not self.is_configured:
            raise ShopifyNotConfiguredError("Admin API token not configured")

        url = f"{self._base_url}{endpoint}"
        logger.debug("%s %s", method, url)
        resp = await self._client.request(method, url, params=params, json=json)
        if resp.status_code >= 400:
            try:
                err_json = resp.json()
            except ValueError:
                err_json = None
            raise ShopifyAPIError(resp.status_code, resp.text, err_json)
        if not resp.content:
            return {}
        payload = resp.json()
        if not isinstance(payload, dict):
            raise ShopifyAPIError(resp.status_code, "unexpected payload", None)
        return payload

    async def close(self) -> None:
        await self._client.aclose()


def format_order_summary(order: Order) -> str:
    if order.customer is not None:
        customer_name = f"{order.customer.first_name or ''} {order.customer.last_name or ''}".strip()
    else:
        customer_name = "Guest"
    return f"Order #{order.order_number} - {customer_name} - ${order.total_price} - {order.financial_status}"


# ------------------------------------------------------------------
# Singleton instance
# ------------------------------------------------------------------

admin_client = AdminClient.from_settings(get_settings())
