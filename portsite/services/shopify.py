"""Shopify Storefront API wrapper.

Provides async helpers for product lookup, cart creation and the buy-now
flow used by the landing page. Every public call is attempted once; remote
failures are logged and surfaced as ``None`` so pages can fall back to
static content.
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import httpx

from portsite.config import Settings, get_settings
from portsite.models import Cart, CartUserError, Product, ProductVariant

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2024-10"


class ShopifyAPIError(Exception):
    """Raised when a Shopify API returns an error status."""

    def __init__(self, status: int, message: str, response_json: Optional[dict[str, Any]] = None):
        super().__init__(f"Shopify API error {status}: {message}")
        self.status = status
        self.response_json = response_json or {}


class ShopifyNotConfiguredError(RuntimeError):
    """Raised when a call is made without a store domain or access token."""


def normalize_store_domain(value: str | None) -> str:
    """``https://shop.myshopify.com/`` -> ``shop.myshopify.com``."""

    v = (value or "").strip()
    if v.lower().startswith("https://"):
        v = v[8:]
    elif v.lower().startswith("http://"):
        v = v[7:]
    return v.strip().strip("/")


# ---------------------------------------------------------------------------
# GraphQL documents
# ---------------------------------------------------------------------------

_PRODUCT_FIELDS = """
      id
      handle
      title
      description
      priceRange {
        minVariantPrice {
          amount
          currencyCode
        }
      }
      images(first: 5) {
        nodes {
          id
          url
          altText
          width
          height
        }
      }
      variants(first: 10) {
        nodes {
          id
          title
          price {
            amount
            currencyCode
          }
          availableForSale
          quantityAvailable
        }
      }
"""

_CART_FIELDS = """
        id
        checkoutUrl
        totalQuantity
        cost {
          totalAmount {
            amount
            currencyCode
          }
          subtotalAmount {
            amount
            currencyCode
          }
        }
        lines(first: 100) {
          nodes {
            id
            quantity
            merchandise {
              ... on ProductVariant {
                id
                title
                product {
                  title
                  handle
                }
                price {
                  amount
                  currencyCode
                }
              }
            }
          }
        }
"""

PRODUCT_BY_HANDLE_QUERY = f"""
  query getProductByHandle($handle: String!) {{
    product(handle: $handle) {{{_PRODUCT_FIELDS}    }}
  }}
"""

PRODUCT_BY_ID_QUERY = f"""
  query getProductById($id: ID!) {{
    product(id: $id) {{{_PRODUCT_FIELDS}    }}
  }}
"""

CREATE_CART_MUTATION = f"""
  mutation cartCreate($input: CartInput!) {{
    cartCreate(input: $input) {{
      cart {{{_CART_FIELDS}      }}
      userErrors {{
        field
        message
        code
      }}
    }}
  }}
"""

ADD_TO_CART_MUTATION = f"""
  mutation cartLinesAdd($cartId: ID!, $lines: [CartLineInput!]!) {{
    cartLinesAdd(cartId: $cartId, lines: $lines) {{
      cart {{{_CART_FIELDS}      }}
      userErrors {{
        field
        message
        code
      }}
    }}
  }}
"""


class StorefrontClient:
    """Minimal async client for the Shopify Storefront GraphQL API."""

    def __init__(
        self,
        *,
        store_domain: str | None,
        access_token: str | None,
        api_version: str = DEFAULT_API_VERSION,
        product_handle: str = "pour-the-port-3-pack",
        product_id: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._store_domain = normalize_store_domain(store_domain)
        self._access_token = access_token or ""
        self._api_version = api_version
        self.product_handle = product_handle
        self.product_id = product_id
        self._endpoint = f"https://{self._store_domain}/api/{self._api_version}/graphql.json"
        self._headers = {
            "Content-Type": "application/json",
            "X-Shopify-Storefront-Access-Token": self._access_token,
        }
        self._client = httpx.AsyncClient(timeout=timeout, headers=self._headers, transport=transport)

        if not self.is_configured:
            logger.warning("Shopify configuration missing. Please check your environment variables.")

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "StorefrontClient":
        return cls(
            store_domain=settings.shopify_store_domain,
            access_token=settings.shopify_storefront_access_token,
            api_version=settings.shopify_storefront_api_version,
            product_handle=settings.shopify_product_handle,
            product_id=settings.shopify_product_id,
            timeout=settings.shopify_timeout_seconds,
            **kwargs,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._store_domain and self._access_token)

    def config_summary(self) -> dict[str, Any]:
        """Non-secret view of the configuration, for debugging."""
        return {
            "store_domain": self._store_domain or None,
            "product_handle": self.product_handle,
            "has_access_token": bool(self._access_token),
            "is_configured": self.is_configured,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_product(self, handle: str | None = None) -> Product | None:
        """Fetch a product by handle, falling back to the configured product id."""

        if not self.is_configured:
            logger.error("Shopify client not initialized")
            return None

        handle = handle or self.product_handle
        try:
            data = await self._request(PRODUCT_BY_HANDLE_QUERY, {"handle": handle})
            product = data.get("product")
            if product:
                result = Product.model_validate(product)
                logger.info("Product loaded from Shopify: %s", result.title)
                return result
        except (httpx.HTTPError, ShopifyAPIError, ValueError) as exc:
            logger.error("Error fetching product %s: %s", handle, exc)
            return None

        logger.error("Product not found by handle: %s", handle)
        if self.product_id:
            logger.info("Trying to fetch product by ID: %s", self.product_id)
            return await self.get_product_by_id(self.product_id)
        return None

    async def get_product_by_id(self, product_id: str) -> Product | None:
        if not self.is_configured:
            logger.error("Shopify client not initialized")
            return None

        graphql_id = product_id if product_id.startswith("gid://") else f"gid://shopify/Product/{product_id}"
        logger.debug("Fetching product with GraphQL ID: %s", graphql_id)
        try:
            data = await self._request(PRODUCT_BY_ID_QUERY, {"id": graphql_id})
            product = data.get("product")
            if product:
                result = Product.model_validate(product)
                logger.info("Product loaded by ID from Shopify: %s (%s)", result.title, result.handle)
                return result
        except (httpx.HTTPError, ShopifyAPIError, ValueError) as exc:
            logger.error("Error fetching product by ID %s: %s", product_id, exc)
            return None

        logger.error("Product not found by ID: %s", product_id)
        return None

    async def create_cart(self, variant_id: str, quantity: int = 1) -> Cart | None:
        """Create a cart holding a single line."""

        if not self.is_configured:
            logger.error("Shopify client not initialized")
            return None

        cart_input = {"lines": [{"merchandiseId": variant_id, "quantity": quantity}]}
        logger.debug("Creating cart with %s", cart_input)
        try:
            data = await self._request(CREATE_CART_MUTATION, {"input": cart_input})
            return self._cart_from_payload(data.get("cartCreate"), "Cart creation")
        except (httpx.HTTPError, ShopifyAPIError, ValueError) as exc:
            logger.error("Error creating cart: %s", exc)
            return None

    async def add_to_cart(self, cart_id: str, variant_id: str, quantity: int = 1) -> Cart | None:
        if not self.is_configured:
            logger.error("Shopify client not initialized")
            return None

        variables = {
            "cartId": cart_id,
            "lines": [{"merchandiseId": variant_id, "quantity": quantity}],
        }
        try:
            data = await self._request(ADD_TO_CART_MUTATION, variables)
            return self._cart_from_payload(data.get("cartLinesAdd"), "Add to cart")
        except (httpx.HTTPError, ShopifyAPIError, ValueError) as exc:
            logger.error("Error adding to cart %s: %s", cart_id, exc)
            return None

    async def buy_now(self, variant_id: str, quantity: int = 1) -> str | None:
        """Create a cart and return its checkout URL."""

        cart = await self.create_cart(variant_id, quantity)
        if cart is not None and cart.checkout_url:
            return cart.checkout_url
        return None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        if not self.is_configured:
            raise ShopifyNotConfiguredError("Shopify Storefront API is not configured")

        logger.debug("POST %s", self._endpoint)
        resp = await self._client.post(self._endpoint, json={"query": query, "variables": variables})
        if resp.status_code >= 400:
            try:
                err_json = resp.json()
            except ValueError:
                err_json = None
            raise ShopifyAPIError(resp.status_code, resp.text, err_json)

        payload = resp.json()
        if not isinstance(payload, dict):
            raise ShopifyAPIError(resp.status_code, "unexpected payload", None)
        if payload.get("errors"):
            logger.error("Storefront GraphQL errors: %s", payload["errors"])
        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise ShopifyAPIError(resp.status_code, "unexpected payload", None)
        return data

    @staticmethod
    def _cart_from_payload(result: dict[str, Any] | None, action: str) -> Cart | None:
        result = result if isinstance(result, dict) else {}
        if result.get("cart"):
            cart = Cart.model_validate(result["cart"])
            logger.info("%s succeeded for cart %s", action, cart.id)
            return cart

        user_errors = [CartUserError.model_validate(e) for e in result.get("userErrors") or []]
        if user_errors:
            for error in user_errors:
                logger.error("%s user error [%s] %s: %s", action, error.code, error.field, error.message)
        else:
            # Usually an unavailable variant or a subscription-only product.
            logger.error("%s returned no cart and no user errors", action)
        return None

    async def close(self) -> None:
        await self._client.aclose()


# ------------------------------------------------------------------
# Helper functions
# ------------------------------------------------------------------

_CURRENCY_SYMBOLS: Dict[str, str] = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def format_price(amount: str, currency_code: str = "USD") -> str:
    """Format an amount like ``Intl.NumberFormat('en-US')`` with 0-2 decimals.

    ``"84.00"`` -> ``"$84"``, ``"84.50"`` -> ``"$84.5"``, ``"1299.99"`` -> ``"$1,299.99"``.
    """

    try:
        value = Decimal(amount).quantize(Decimal("0.01"))
    except (InvalidOperation, TypeError):
        logger.warning("Cannot format price amount %r", amount)
        return str(amount)

    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.2f}".rstrip("0").rstrip(".")
    code = currency_code.upper()
    symbol = _CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code}\u00a0{text}"
    return f"{sign}{symbol}{text}"


def get_default_variant(product: Product) -> ProductVariant | None:
    """First variant available for sale, otherwise the first variant."""

    variants = product.variants.nodes
    for variant in variants:
        if variant.available_for_sale:
            return variant
    return variants[0] if variants else None


# Development fixture used when Shopify is not configured.
MOCK_PRODUCT = Product.model_validate(
    {
        "id": "mock-product-id",
        "handle": "pour-the-port-3-pack",
        "title": "Pour the PORT - 3-Pack Annual Supply",
        "description": (
            "USDA Certified Biobased® septic tank treatment. Natural bacterial protection "
            "prevents costly system failures. Just 3 applications per year."
        ),
        "priceRange": {"minVariantPrice": {"amount": "84.00", "currencyCode": "USD"}},
        "images": {
            "nodes": [
                {
                    "id": "mock-image-1",
                    "url": "https://via.placeholder.com/400x400/22c55e/ffffff?text=Pour+the+PORT",
                    "altText": "Pour the PORT 3-Pack",
                    "width": 400,
                    "height": 400,
                }
            ]
        },
        "variants": {
            "nodes": [
                {
                    "id": "mock-variant-1",
                    "title": "Default Title",
                    "price": {"amount": "84.00", "currencyCode": "USD"},
                    "availableForSale": True,
                    "quantityAvailable": 100,
                }
            ]
        },
    }
)


# ------------------------------------------------------------------
# Singleton instance
# ------------------------------------------------------------------

storefront_client = StorefrontClient.from_settings(get_settings())
