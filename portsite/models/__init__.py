from .shopify import (
    Cart,
    CartLine,
    CartUserError,
    Customer,
    FulfillmentLineItem,
    Money,
    Order,
    OrderCustomer,
    OrderLineItem,
    Product,
    ProductImage,
    ProductVariant,
    ShopInfo,
)
from .sitemap import SitemapEntry
from .transforms import ImagePreset, ResponsiveImageSet, SrcsetEntry, TransformOptions

__all__ = [
    "Cart",
    "CartLine",
    "CartUserError",
    "Customer",
    "FulfillmentLineItem",
    "Money",
    "Order",
    "OrderCustomer",
    "OrderLineItem",
    "Product",
    "ProductImage",
    "ProductVariant",
    "ShopInfo",
    "SitemapEntry",
    "ImagePreset",
    "ResponsiveImageSet",
    "SrcsetEntry",
    "TransformOptions",
]
