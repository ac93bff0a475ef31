"""XML sitemap for search engines."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import date, datetime, timezone
from typing import Iterable

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from portsite.config import Settings, get_settings
from portsite.models import SitemapEntry

router = APIRouter()
logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

STATIC_PAGES: tuple[SitemapEntry, ...] = (
    # Homepage
    SitemapEntry(path="", priority=1.0, changefreq="weekly"),
    # Product and subscription
    SitemapEntry(path="/product", priority=0.9, changefreq="monthly"),
    SitemapEntry(path="/subscription", priority=0.9, changefreq="monthly"),
    # Educational content
    SitemapEntry(path="/natural-septic-solutions", priority=0.8, changefreq="monthly"),
    SitemapEntry(path="/rv-septic-treatment", priority=0.8, changefreq="monthly"),
    SitemapEntry(path="/septic-tank-maintenance", priority=0.8, changefreq="monthly"),
    # Support and company
    SitemapEntry(path="/about", priority=0.7, changefreq="monthly"),
    SitemapEntry(path="/contact", priority=0.7, changefreq="monthly"),
    SitemapEntry(path="/faq", priority=0.7, changefreq="monthly"),
    # Legal
    SitemapEntry(path="/privacy-policy", priority=0.3, changefreq="yearly"),
    SitemapEntry(path="/terms-of-service", priority=0.3, changefreq="yearly"),
    SitemapEntry(path="/refund-policy", priority=0.3, changefreq="yearly"),
)

# Not published yet; listed only with SITEMAP_INCLUDE_BLOG=true.
BLOG_POSTS: tuple[SitemapEntry, ...] = tuple(
    SitemapEntry(path=f"/blog/{slug}", priority=0.7, changefreq="monthly")
    for slug in (
        "septic-tank-maintenance-guide",
        "natural-vs-chemical-septic-treatments",
        "rv-septic-tank-treatment-guide",
        "septic-tank-bacteria-science",
        "drain-field-protection-tips",
        "septic-system-troubleshooting",
    )
)


def build_sitemap_xml(site_url: str, entries: Iterable[SitemapEntry], lastmod: date) -> str:
    """Render a sitemaps.org ``urlset`` document."""

    base = site_url.rstrip("/")
    urlset = ET.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    for entry in entries:
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = f"{base}{entry.path}"
        ET.SubElement(url, "lastmod").text = lastmod.isoformat()
        ET.SubElement(url, "changefreq").text = entry.changefreq
        ET.SubElement(url, "priority").text = f"{entry.priority:.1f}"
    ET.indent(urlset, space="  ")
    body = ET.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'


def sitemap_entries(settings: Settings) -> list[SitemapEntry]:
    entries = list(STATIC_PAGES)
    if settings.sitemap_include_blog:
        entries.extend(BLOG_POSTS)
    return entries


@router.get("/sitemap.xml")
async def sitemap(settings: Settings = Depends(get_settings)):
    entries = sitemap_entries(settings)
    xml = build_sitemap_xml(settings.site_url, entries, datetime.now(timezone.utc).date())
    logger.debug("Rendered sitemap with %d entries", len(entries))
    return Response(
        content=xml,
        media_type="application/xml",
        headers={"Cache-Control": "public, max-age=3600"},
    )
