"""Analytics wiring for the static pages."""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from portsite.config import Settings, get_settings

router = APIRouter(prefix="/analytics")
logger = logging.getLogger(__name__)

_GTAG_TEMPLATE = """(function () {{
  var s = document.createElement("script");
  s.async = true;
  s.src = "https://www.googletagmanager.com/gtag/js?id=" + {mid};
  document.head.appendChild(s);
  window.dataLayer = window.dataLayer || [];
  window.gtag = function () {{ window.dataLayer.push(arguments); }};
  window.gtag("js", new Date());
  window.gtag("config", {mid});
}})();
"""


def render_gtag_snippet(measurement_id: str | None) -> str:
    """gtag.js bootstrap for *measurement_id*, empty when unset."""

    if not measurement_id:
        return ""
    return _GTAG_TEMPLATE.format(mid=json.dumps(measurement_id))


@router.get("/config")
async def analytics_config(settings: Settings = Depends(get_settings)):
    return {
        "provider": "google-analytics",
        "measurement_id": settings.ga_measurement_id,
        "enabled": bool(settings.ga_measurement_id),
        "vercel_web_analytics": settings.vercel_web_analytics,
    }


@router.get("/gtag.js")
async def gtag_script(settings: Settings = Depends(get_settings)):
    snippet = render_gtag_snippet(settings.ga_measurement_id)
    if not snippet:
        logger.warning("PUBLIC_GA_MEASUREMENT_ID not set; serving empty analytics script")
    return Response(
        content=snippet,
        media_type="application/javascript",
        headers={"Cache-Control": "public, max-age=3600"},
    )
