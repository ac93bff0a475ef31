"""Shared test configuration."""

import os

# Deterministic configuration; never reach a real store.
os.environ["PUBLIC_CLOUDINARY_CLOUD_NAME"] = "test-cloud"
os.environ["PUBLIC_SHOPIFY_STORE_DOMAIN"] = ""
os.environ["PUBLIC_SHOPIFY_STOREFRONT_ACCESS_TOKEN"] = ""
os.environ["SHOPIFY_ADMIN_ACCESS_TOKEN"] = ""
os.environ["PUBLIC_GA_MEASUREMENT_ID"] = ""
os.environ["SITEMAP_INCLUDE_BLOG"] = "false"
os.environ["SITE_URL"] = "https://www.pourtheport.com"

from portsite.config import get_settings  # noqa: E402

get_settings.cache_clear()
