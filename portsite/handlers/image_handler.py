"""Image URL sets for the page-rendering layer."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from portsite.services import cloudinary

router = APIRouter(prefix="/api/images")
logger = logging.getLogger(__name__)


@router.get("/{public_id:path}")
async def image_urls(
    public_id: str,
    preset: str = Query("hero"),
    width: Optional[int] = Query(None, ge=1),
    height: Optional[int] = Query(None, ge=1),
    dpr: bool = Query(False, description="Include 1.5x and 2x variants in the srcset."),
):
    if not cloudinary.validate_public_id(public_id):
        raise HTTPException(status_code=400, detail="Invalid image id")

    try:
        config = cloudinary.get_image_config(preset)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    overrides = {k: v for k, v in {"width": width, "height": height}.items() if v is not None}
    if dpr:
        responsive = cloudinary.get_dpr_srcset(public_id, config.transforms)
    else:
        responsive = cloudinary.get_responsive_set(public_id, config.transforms)

    logger.debug("Built %d srcset entries for %s (%s)", len(responsive.entries), public_id, preset)
    return {
        "public_id": public_id,
        "preset": config.name,
        "url": cloudinary.get_preset_image_url(public_id, preset, **overrides),
        "srcset": responsive.srcset,
        "sizes": config.sizes,
        "placeholder": cloudinary.get_placeholder_url(public_id),
        "fallback": cloudinary.get_fallback_image_url(width or 400, height or 300),
    }
