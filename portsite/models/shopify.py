"""Shopify payload models.

Storefront API records use camelCase aliases so that
``model_dump(by_alias=True)`` gives back the same JSON shape the GraphQL
API returned. Admin REST records are snake_case already.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _StorefrontModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Storefront API (GraphQL)
# ---------------------------------------------------------------------------


class Money(_StorefrontModel):
    amount: str
    currency_code: str = "USD"


class PriceRange(_StorefrontModel):
    min_variant_price: Money


class ProductImage(_StorefrontModel):
    id: str
    url: str
    alt_text: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class ImageConnection(_StorefrontModel):
    nodes: list[ProductImage] = []


class ProductVariant(_StorefrontModel):
    id: str
    title: str
    price: Money
    available_for_sale: bool = False
    quantity_available: Optional[int] = None


class VariantConnection(_StorefrontModel):
    nodes: list[ProductVariant] = []


class Product(_StorefrontModel):
    id: str
    handle: str
    title: str
    description: str = ""
    price_range: PriceRange
    images: ImageConnection = ImageConnection()
    variants: VariantConnection = VariantConnection()


class CartProductRef(_StorefrontModel):
    title: str
    handle: str


class CartMerchandise(_StorefrontModel):
    id: str
    title: str
    product: CartProductRef
    price: Money


class CartLine(_StorefrontModel):
    id: str
    quantity: int = Field(..., ge=0)
    merchandise: CartMerchandise


class CartLineConnection(_StorefrontModel):
    nodes: list[CartLine] = []


class CartCost(_StorefrontModel):
    total_amount: Money
    subtotal_amount: Money


class Cart(_StorefrontModel):
    id: str
    checkout_url: str
    total_quantity: int = 0
    cost: CartCost
    lines: CartLineConnection = CartLineConnection()


class CartUserError(_StorefrontModel):
    field: Optional[list[str]] = None
    message: str
    code: Optional[str] = None


# ---------------------------------------------------------------------------
# Admin API (REST)
# ---------------------------------------------------------------------------


class ShopInfo(BaseModel):
    id: int
    name: str
    domain: Optional[str] = None
    email: Optional[str] = None
    currency: Optional[str] = None
    timezone: Optional[str] = None
    plan_name: Optional[str] = None
    created_at: Optional[str] = None


class OrderCustomer(BaseModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class OrderLineItem(BaseModel):
    id: int
    title: str
    quantity: int
    price: str
    product_id: Optional[int] = None
    variant_id: Optional[int] = None


class Order(BaseModel):
    id: int
    order_number: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    total_price: str = "0.00"
    currency: Optional[str] = None
    financial_status: Optional[str] = None
    fulfillment_status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    customer: Optional[OrderCustomer] = None
    line_items: list[OrderLineItem] = []


class Customer(BaseModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    orders_count: int = 0
    total_spent: str = "0.00"
    tags: Optional[str] = ""


class FulfillmentLineItem(BaseModel):
    id: int
    quantity: int = Field(..., ge=1)
