from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from portsite.config import get_settings
from portsite.handlers import analytics_handler, image_handler, shop_handler, sitemap_handler
from portsite.services.shopify import storefront_client
from portsite.services.shopify_admin import admin_client

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(get_settings().log_level)
    logger.info("Site API started (storefront configured: %s)", storefront_client.is_configured)
    yield
    await storefront_client.close()
    await admin_client.close()
    logger.info("Site API shut down")


app = FastAPI(title="Pour the PORT Site API", lifespan=lifespan)

app.include_router(sitemap_handler.router)
app.include_router(analytics_handler.router)
app.include_router(image_handler.router)
app.include_router(shop_handler.router)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
