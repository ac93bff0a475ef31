"""Cloudinary delivery URL helpers.

Builds ``https://res.cloudinary.com/<cloud>/image/upload/<transforms>/<id>``
URLs from :class:`TransformOptions`, plus responsive srcsets, low-quality
placeholders, fallbacks and the named presets used across the landing page.

Nothing here talks to Cloudinary; the functions only assemble strings and
never raise for well-typed input. Out-of-range values are passed through
verbatim and invalid or unknown option keys are dropped.
"""
from __future__ import annotations

import base64
import logging
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Mapping, Optional, Union
from urllib.parse import quote

from pydantic import ValidationError

from portsite.config import get_settings
from portsite.models import ImagePreset, ResponsiveImageSet, SrcsetEntry, TransformOptions

logger = logging.getLogger(__name__)

CLOUDINARY_BASE_URL = "https://res.cloudinary.com"
DEFAULT_CLOUD_NAME = "demo"

TransformsLike = Union[TransformOptions, Mapping[str, Any], None]

RESPONSIVE_BREAKPOINTS: dict[str, int] = {
    "mobile": 400,
    "tablet": 800,
    "desktop": 1200,
    "large": 1600,
}

# Named variant used by page sections that pick one URL per device class.
NAMED_BREAKPOINTS: dict[str, int] = {
    "mobile": 480,
    "tablet": 768,
    "desktop": 1200,
    "xl": 1920,
}

DPR_VALUES: tuple[float, ...] = (1, 1.5, 2)

# Fixed hint; not derived from RESPONSIVE_BREAKPOINTS.
DEFAULT_SIZES = "(max-width: 640px) 400px, (max-width: 1024px) 800px, (max-width: 1440px) 1200px, 1600px"

FALLBACK_PUBLIC_ID = "sample"

_VALID_PUBLIC_ID = re.compile(r"^[a-zA-Z0-9_\-/.]+$")


# ---------------------------------------------------------------------------
# Token table
# ---------------------------------------------------------------------------


def _fmt(value: Any) -> str:
    # 2.0 -> "2", 1.5 -> "1.5"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _prefixed(prefix: str) -> Callable[[Any], str]:
    return lambda value: f"{prefix}{_fmt(value)}"


def _bare(token: str) -> Callable[[Any], str]:
    return lambda value: token


def _is_set(value: Any) -> bool:
    return value is not None


def _is_truthy(value: Any) -> bool:
    return bool(value)


# (attribute, renderer, presence check), in emission order.
_TOKEN_RULES: tuple[tuple[str, Callable[[Any], str], Callable[[Any], bool]], ...] = (
    # Dimensions
    ("width", _prefixed("w_"), _is_truthy),
    ("height", _prefixed("h_"), _is_truthy),
    ("aspect_ratio", _prefixed("ar_"), _is_truthy),
    # Device pixel ratio
    ("dpr", _prefixed("dpr_"), _is_truthy),
    # Cropping and positioning
    ("crop", _prefixed("c_"), _is_truthy),
    ("gravity", _prefixed("g_"), _is_truthy),
    # Quality and format
    ("quality", _prefixed("q_"), _is_truthy),
    ("delivery_format", _prefixed("f_"), _is_truthy),
    # Basic adjustments (0 is a meaningful value)
    ("brightness", _prefixed("e_brightness:"), _is_set),
    ("contrast", _prefixed("e_contrast:"), _is_set),
    ("saturation", _prefixed("e_saturation:"), _is_set),
    ("gamma", _prefixed("e_gamma:"), _is_set),
    ("vibrance", _prefixed("e_vibrance:"), _is_set),
    # Color
    ("hue", _prefixed("e_hue:"), _is_set),
    ("opacity", _prefixed("o_"), _is_set),
    # Effects
    ("blur", _prefixed("e_blur:"), _is_truthy),
    ("sharpen", _prefixed("e_sharpen:"), _is_truthy),
    ("unsharp_mask", _prefixed("e_unsharp_mask:"), _is_truthy),
    # Artistic effects
    ("sepia", _prefixed("e_sepia:"), _is_truthy),
    ("grayscale", _bare("e_grayscale"), _is_truthy),
    ("blackwhite", _prefixed("e_blackwhite:"), _is_truthy),
    ("negate", _bare("e_negate"), _is_truthy),
    ("oil_paint", _prefixed("e_oil_paint:"), _is_truthy),
    ("vignette", _prefixed("e_vignette:"), _is_truthy),
    ("pixelate", _prefixed("e_pixelate:"), _is_truthy),
    # Border and background
    ("border", _prefixed("bo_"), _is_truthy),
    ("background", _prefixed("b_"), _is_truthy),
    # Rotation
    ("angle", _prefixed("a_"), _is_truthy),
    # Flags
    ("progressive", _bare("fl_progressive"), _is_truthy),
    ("immutable_cache", _bare("fl_immutable_cache"), _is_truthy),
    ("strip_profile", _bare("fl_strip_profile"), _is_truthy),
    # Raw escape hatch, always last
    ("custom_transform", _prefixed(""), _is_truthy),
)


def _coerce(transforms: TransformsLike) -> TransformOptions:
    if transforms is None:
        return TransformOptions()
    if isinstance(transforms, TransformOptions):
        return transforms

    data = dict(transforms)
    try:
        return TransformOptions.model_validate(data)
    except ValidationError as exc:
        invalid = {err["loc"][0] for err in exc.errors() if err["loc"]}
        logger.debug("Dropping invalid transform fields: %s", sorted(map(str, invalid)))
        return TransformOptions.model_validate({k: v for k, v in data.items() if k not in invalid})


def _with(base: TransformsLike, **overrides: Any) -> TransformOptions:
    merged = _coerce(base).model_dump(exclude_none=True)
    merged.update(overrides)
    return _coerce(merged)


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def get_cloud_name() -> str:
    """Cloud name from ``PUBLIC_CLOUDINARY_CLOUD_NAME`` (cached settings)."""
    return get_settings().cloudinary_cloud_name or DEFAULT_CLOUD_NAME


def build_transformation(transforms: TransformsLike = None) -> str:
    """Return the comma-joined transformation segment, ``""`` when empty."""

    opts = _coerce(transforms)
    tokens = []
    for attr, render, present in _TOKEN_RULES:
        value = getattr(opts, attr)
        if present(value):
            tokens.append(render(value))
    return ",".join(tokens)


def build_cloudinary_url(
    public_id: str,
    transforms: TransformsLike = None,
    *,
    cloud_name: Optional[str] = None,
) -> str:
    """Build a Cloudinary delivery URL.

    Parameters
    ----------
    public_id : str
        Asset identifier, e.g. ``"shoes/red"``. Not validated here; use
        :func:`validate_public_id` first if the value is untrusted.
    transforms : TransformOptions | Mapping | None
        Requested transformation. Mappings are coerced, invalid fields
        dropped.
    cloud_name : str | None
        Overrides the configured cloud name.
    """

    base_url = f"{CLOUDINARY_BASE_URL}/{cloud_name or get_cloud_name()}/image/upload"
    segment = build_transformation(transforms)
    if segment:
        return f"{base_url}/{segment}/{public_id}"
    return f"{base_url}/{public_id}"


def validate_public_id(public_id: Any) -> bool:
    if not public_id or not isinstance(public_id, str):
        return False
    return bool(_VALID_PUBLIC_ID.match(public_id))


def get_optimized_image_url(
    public_id: str,
    *,
    width: Optional[int] = None,
    height: Optional[int] = None,
    quality: Optional[Union[str, int]] = None,
    crop: Optional[str] = None,
    auto_format: bool = True,
) -> str:
    """URL with smart defaults: ``q_auto``, ``c_fill`` and ``f_auto``."""

    options: dict[str, Any] = {
        "width": width,
        "height": height,
        "quality": quality or "auto",
        "crop": crop or "fill",
    }
    if auto_format:
        options["fetch_format"] = "auto"
    return build_cloudinary_url(public_id, options)


# ---------------------------------------------------------------------------
# Responsive sets
# ---------------------------------------------------------------------------


def _ascending(breakpoints: Optional[Mapping[str, int]]) -> list[int]:
    return sorted((breakpoints or RESPONSIVE_BREAKPOINTS).values())


def get_responsive_set(
    public_id: str,
    base: TransformsLike = None,
    breakpoints: Optional[Mapping[str, int]] = None,
) -> ResponsiveImageSet:
    """One WebP URL per breakpoint, smallest first."""

    opts = _coerce(base)
    entries = []
    for width in _ascending(breakpoints):
        url = build_cloudinary_url(
            public_id,
            _with(opts, width=width, crop=opts.crop or "fill", quality=opts.quality or "auto", format="webp"),
        )
        entries.append(SrcsetEntry(url=url, width=width))
    return ResponsiveImageSet(entries=entries, sizes=DEFAULT_SIZES)


def _scaled_width(width: int, dpr: float) -> int:
    # half-up, so 403 * 1.5 -> 605
    scaled = Decimal(width) * Decimal(str(dpr))
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def get_dpr_srcset(
    public_id: str,
    base: TransformsLike = None,
    support_dpr: bool = True,
    breakpoints: Optional[Mapping[str, int]] = None,
) -> ResponsiveImageSet:
    """Breakpoints crossed with :data:`DPR_VALUES`.

    The descriptor width of a variant is ``breakpoint * dpr``, rounded half
    up; with ``support_dpr=False`` only the 1x variants are produced.
    """

    opts = _coerce(base)
    dpr_values = DPR_VALUES if support_dpr else (1,)
    entries = []
    for width in _ascending(breakpoints):
        for dpr in dpr_values:
            url = build_cloudinary_url(
                public_id,
                _with(
                    opts,
                    width=width,
                    dpr=dpr,
                    crop=opts.crop or "fill",
                    quality=opts.quality or "auto",
                    fetch_format="auto",
                ),
            )
            entries.append(SrcsetEntry(url=url, width=_scaled_width(width, dpr)))
    return ResponsiveImageSet(entries=entries, sizes=DEFAULT_SIZES)


def get_responsive_image_urls(public_id: str, base: TransformsLike = None) -> dict[str, str]:
    """Map of device class (mobile, tablet, desktop, xl) to URL."""

    opts = _coerce(base)
    return {
        name: build_cloudinary_url(
            public_id,
            _with(
                opts,
                width=width,
                crop=opts.crop or "fill",
                quality=opts.quality or "auto",
                fetch_format=opts.fetch_format or "auto",
            ),
        )
        for name, width in NAMED_BREAKPOINTS.items()
    }


# ---------------------------------------------------------------------------
# Placeholders and fallbacks
# ---------------------------------------------------------------------------

PLACEHOLDER_TRANSFORMS = TransformOptions(width=50, quality="auto:low", blur=400, fetch_format="auto")


def get_placeholder_url(public_id: str) -> str:
    """Tiny blurred variant for progressive loading."""
    return build_cloudinary_url(public_id, PLACEHOLDER_TRANSFORMS)


def get_fallback_image_url(width: int = 400, height: int = 300) -> str:
    return build_cloudinary_url(
        FALLBACK_PUBLIC_ID,
        TransformOptions(width=width, height=height, crop="fill", quality="auto:low", background="gray"),
    )


_SKELETON_SVG = (
    '<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg">'
    '<rect width="100%" height="100%" fill="#e5e7eb"/>'
    '<rect width="100%" height="100%" fill="url(#shimmer)"/>'
    '<defs><linearGradient id="shimmer" x1="0%" y1="0%" x2="100%" y2="0%">'
    '<stop offset="0%" style="stop-color:#f3f4f6;stop-opacity:0.8"/>'
    '<stop offset="50%" style="stop-color:#ffffff;stop-opacity:1"/>'
    '<stop offset="100%" style="stop-color:#f3f4f6;stop-opacity:0.8"/>'
    '<animateTransform attributeName="gradientTransform" type="translate" '
    'values="-100% 0;100% 0;-100% 0" dur="1.5s" repeatCount="indefinite"/>'
    "</linearGradient></defs></svg>"
)


def get_skeleton_data_url(width: int, height: int) -> str:
    """Inline grey shimmer SVG sized like the image it stands in for."""

    svg = _SKELETON_SVG.format(width=width, height=height)
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


# ---------------------------------------------------------------------------
# Text overlays
# ---------------------------------------------------------------------------


def _overlay_text(text: str) -> str:
    # Commas and slashes separate transformation parts, so they are escaped twice.
    return quote(text, safe="").replace("%2C", "%252C").replace("%2F", "%252F")


def _overlay_color(color: str) -> str:
    if color.startswith("#"):
        return f"rgb:{color[1:]}"
    return color


def get_image_with_text(
    background_id: str,
    text: str,
    *,
    width: int = 1200,
    height: int = 630,
    text_color: str = "white",
    font_size: int = 60,
    font_family: str = "Arial",
    font_weight: str = "bold",
) -> str:
    """Background image resized to *width* x *height* with centred text on top.

    Defaults give a 1200x630 social-share card. The resize component comes
    first and the text layer is chained after it as its own component.
    """

    resize = build_transformation(
        TransformOptions(
            width=width,
            height=height,
            crop="fill",
            gravity="auto",
            quality="auto",
            fetch_format="auto",
        )
    )
    font = "_".join(str(part) for part in (font_family, font_size, font_weight) if part)
    layer = f"l_text:{font}:{_overlay_text(text)},co_{_overlay_color(text_color)},g_center"
    return build_cloudinary_url(background_id, TransformOptions(custom_transform=f"{resize}/{layer}"))


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


def _preset(name: str, sizes: str, **transforms: Any) -> ImagePreset:
    return ImagePreset(name=name, transforms=TransformOptions(**transforms), sizes=sizes)


# Fixed-size variants predating the responsive presets; still used for
# social cards and pages that need an exact pixel size.
LEGACY_IMAGE_CONFIGS: dict[str, TransformOptions] = {
    "hero": TransformOptions(width=1920, height=1080, crop="fill", quality="auto:good"),
    "trust_badge": TransformOptions(width=200, height=200, crop="fit", quality="auto:good", format="png"),
    "product_image": TransformOptions(width=600, height=600, crop="fit", quality="auto:best"),
    "testimonial": TransformOptions(width=400, height=400, crop="fill", quality="auto:good"),
    "og_image": TransformOptions(width=1200, height=630, crop="fill", quality="auto:good"),
}

IMAGE_CONFIGS: dict[str, ImagePreset] = {
    # Hero/banner images
    "hero": _preset("hero", "100vw", quality="auto:good", crop="fill", format="webp"),
    # Product showcase images
    "product": _preset("product", "(max-width: 768px) 100vw, 50vw", quality="auto:best", crop="fit", format="webp"),
    # Trust badges and logos
    "logo": _preset("logo", "200px", quality="auto:good", crop="fit", format="png"),
    "thumbnail": _preset("thumbnail", "(max-width: 640px) 150px, 200px", quality="auto", crop="fill", format="webp"),
    "background": _preset("background", "100vw", quality="auto:good", crop="fill", format="webp"),
}

ENHANCED_IMAGE_CONFIGS: dict[str, ImagePreset] = {
    **IMAGE_CONFIGS,
    "avatar": _preset(
        "avatar",
        "(max-width: 640px) 80px, 120px",
        quality="auto:good",
        crop="fill",
        gravity="face",
        format="webp",
        dpr="auto",
    ),
    "gallery": _preset(
        "gallery",
        "(max-width: 640px) 150px, (max-width: 1024px) 200px, 250px",
        quality="auto",
        crop="fill",
        format="webp",
        dpr="auto",
    ),
    "card": _preset(
        "card",
        "(max-width: 640px) 100vw, (max-width: 1024px) 50vw, 33vw",
        quality="auto:good",
        crop="fill",
        format="webp",
        dpr="auto",
    ),
    # Open Graph / social share card
    "og": ImagePreset(name="og", transforms=LEGACY_IMAGE_CONFIGS["og_image"], sizes="1200px"),
}


def get_image_config(name: str) -> ImagePreset:
    key = name.lower()
    if key not in ENHANCED_IMAGE_CONFIGS:
        raise ValueError(f"Unknown image preset: {name}")
    return ENHANCED_IMAGE_CONFIGS[key]


def get_preset_image_url(public_id: str, preset: str, **overrides: Any) -> str:
    """URL for a named preset, e.g. ``get_preset_image_url(id, "hero", width=1920)``."""
    return build_cloudinary_url(public_id, _with(get_image_config(preset).transforms, **overrides))
