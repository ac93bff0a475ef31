from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Site configuration loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Cloudinary
    cloudinary_cloud_name: str = Field("demo", validation_alias="PUBLIC_CLOUDINARY_CLOUD_NAME")

    # Shopify Storefront API
    shopify_store_domain: Optional[str] = Field(default=None, validation_alias="PUBLIC_SHOPIFY_STORE_DOMAIN")
    shopify_storefront_access_token: Optional[str] = Field(
        default=None, validation_alias="PUBLIC_SHOPIFY_STOREFRONT_ACCESS_TOKEN"
    )
    shopify_product_handle: str = Field("pour-the-port-3-pack", validation_alias="PUBLIC_SHOPIFY_PRODUCT_HANDLE")
    shopify_product_id: Optional[str] = Field(default=None, validation_alias="PUBLIC_SHOPIFY_PRODUCT_ID")
    shopify_storefront_api_version: str = Field("2024-10", validation_alias="SHOPIFY_STOREFRONT_API_VERSION")

    # Shopify Admin API (server-side only, never expose the token to pages)
    shopify_admin_access_token: Optional[str] = Field(default=None, validation_alias="SHOPIFY_ADMIN_ACCESS_TOKEN")
    shopify_admin_api_version: str = Field("2024-10", validation_alias="SHOPIFY_ADMIN_API_VERSION")

    shopify_timeout_seconds: float = Field(
        10.0,
        validation_alias="SHOPIFY_TIMEOUT_SECONDS",
        description="Per-request timeout for both Shopify APIs (seconds).",
    )

    # Site metadata
    site_url: str = Field("https://www.pourtheport.com", validation_alias="SITE_URL")
    sitemap_include_blog: bool = Field(
        False,
        validation_alias="SITEMAP_INCLUDE_BLOG",
        description="If true, blog posts are listed in /sitemap.xml.",
    )

    # Analytics
    ga_measurement_id: Optional[str] = Field(default=None, validation_alias="PUBLIC_GA_MEASUREMENT_ID")
    vercel_web_analytics: bool = Field(True, validation_alias="VERCEL_WEB_ANALYTICS")

    # Logging
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
