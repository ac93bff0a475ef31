"""Product and cart endpoints backed by the Storefront API."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from portsite.services.shopify import MOCK_PRODUCT, StorefrontClient, storefront_client

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)


class CartLineRequest(BaseModel):
    variant_id: str
    quantity: int = Field(1, ge=1, le=100)


class CartLinesAddRequest(CartLineRequest):
    cart_id: str


def get_storefront_client() -> StorefrontClient:
    return storefront_client


@router.get("/product")
async def product(handle: str | None = None, client: StorefrontClient = Depends(get_storefront_client)):
    if not client.is_configured:
        logger.info("Storefront not configured; serving mock product")
        return MOCK_PRODUCT.model_dump(by_alias=True)

    result = await client.get_product(handle)
    if result is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return result.model_dump(by_alias=True)


@router.post("/cart")
async def create_cart(body: CartLineRequest, client: StorefrontClient = Depends(get_storefront_client)):
    cart = await client.create_cart(body.variant_id, body.quantity)
    if cart is None:
        raise HTTPException(status_code=502, detail="Cart could not be created")
    return cart.model_dump(by_alias=True)


@router.post("/cart/lines")
async def add_cart_lines(body: CartLinesAddRequest, client: StorefrontClient = Depends(get_storefront_client)):
    cart = await client.add_to_cart(body.cart_id, body.variant_id, body.quantity)
    if cart is None:
        raise HTTPException(status_code=502, detail="Cart could not be updated")
    return cart.model_dump(by_alias=True)


@router.post("/checkout")
async def checkout(body: CartLineRequest, client: StorefrontClient = Depends(get_storefront_client)):
    checkout_url = await client.buy_now(body.variant_id, body.quantity)
    if checkout_url is None:
        raise HTTPException(status_code=502, detail="Checkout unavailable")
    return {"checkout_url": checkout_url}
