"""Cloudinary URL builder tests.

Tests cover:
    - URL shape with and without transformation tokens
    - Fixed token order regardless of how options were supplied
    - Presence rules (zero values, out-of-range pass-through, invalid fields)
    - Responsive and DPR srcsets, placeholders, fallbacks, presets
"""

import base64
import re

import pytest
from pydantic import ValidationError

from portsite.models import TransformOptions
from portsite.services import cloudinary
from portsite.services.cloudinary import (
    DEFAULT_SIZES,
    LEGACY_IMAGE_CONFIGS,
    build_cloudinary_url,
    build_transformation,
    get_dpr_srcset,
    get_fallback_image_url,
    get_image_config,
    get_image_with_text,
    get_optimized_image_url,
    get_placeholder_url,
    get_preset_image_url,
    get_responsive_image_urls,
    get_responsive_set,
    get_skeleton_data_url,
    validate_public_id,
)

ROOT = "https://res.cloudinary.com/test-cloud/image/upload"


# --- URL shape ---------------------------------------------------------------

def test_build_reference_example():
    url = build_cloudinary_url("shoes/red", {"width": 300, "height": 200, "crop": "fill", "quality": "auto:good"})
    assert url == f"{ROOT}/w_300,h_200,c_fill,q_auto:good/shoes/red"


def test_build_without_options_has_no_empty_segment():
    assert build_cloudinary_url("shoes/red") == f"{ROOT}/shoes/red"
    assert build_cloudinary_url("shoes/red", {}) == f"{ROOT}/shoes/red"
    assert build_cloudinary_url("shoes/red", TransformOptions()) == f"{ROOT}/shoes/red"


def test_build_empty_identifier_is_not_rejected():
    assert build_cloudinary_url("", {}) == f"{ROOT}/"


def test_build_does_not_validate_identifier():
    assert build_cloudinary_url("bad id", {"width": 10}) == f"{ROOT}/w_10/bad id"


def test_explicit_cloud_name_overrides_configuration():
    url = build_cloudinary_url("logo", {"width": 10}, cloud_name="acme")
    assert url == "https://res.cloudinary.com/acme/image/upload/w_10/logo"


def test_configured_cloud_name_is_used():
    assert cloudinary.get_cloud_name() == "test-cloud"


def test_build_is_deterministic():
    options = {"width": 640, "blur": 30, "grayscale": True, "custom_transform": "l_badge"}
    assert build_cloudinary_url("a/b", options) == build_cloudinary_url("a/b", options)


# --- Token order -------------------------------------------------------------

def test_full_category_order():
    options = TransformOptions(
        custom_transform="e_cartoonify",
        strip_profile=True,
        immutable_cache=True,
        progressive=True,
        angle=90,
        background="white",
        border="5_black",
        pixelate=5,
        vignette=20,
        oil_paint=30,
        negate=True,
        blackwhite="40",
        grayscale=True,
        sepia=50,
        unsharp_mask="80:0.5:2:0",
        sharpen=100,
        blur=200,
        opacity=50,
        hue=40,
        vibrance=30,
        gamma=0,
        saturation=20,
        contrast=-5,
        brightness=10,
        format="png",
        fetch_format="avif",
        quality=80,
        gravity="face",
        crop="fill",
        dpr=2.0,
        aspect_ratio="16:9",
        height=50,
        width=100,
    )
    assert build_transformation(options) == (
        "w_100,h_50,ar_16:9,dpr_2,c_fill,g_face,q_80,f_avif,"
        "e_brightness:10,e_contrast:-5,e_saturation:20,e_gamma:0,e_vibrance:30,"
        "e_hue:40,o_50,"
        "e_blur:200,e_sharpen:100,e_unsharp_mask:80:0.5:2:0,"
        "e_sepia:50,e_grayscale,e_blackwhite:40,e_negate,e_oil_paint:30,e_vignette:20,e_pixelate:5,"
        "bo_5_black,b_white,a_90,"
        "fl_progressive,fl_immutable_cache,fl_strip_profile,"
        "e_cartoonify"
    )


def test_order_independent_of_construction_order():
    forward = {"width": 10, "brightness": 0, "grayscale": True, "angle": 90, "custom_transform": "l_logo"}
    backward = dict(reversed(list(forward.items())))
    assert build_cloudinary_url("x", forward) == build_cloudinary_url("x", backward)
    assert build_cloudinary_url("x", forward) == f"{ROOT}/w_10,e_brightness:0,e_grayscale,a_90,l_logo/x"


def test_custom_transform_is_appended_verbatim_last():
    url = build_cloudinary_url("x", {"custom_transform": "l_text:Arial_60:Hi,co_white", "width": 5})
    assert url == f"{ROOT}/w_5,l_text:Arial_60:Hi,co_white/x"


# --- Presence rules ----------------------------------------------------------

def test_numeric_values_appear_verbatim():
    assert "w_600" in build_cloudinary_url("x", {"width": 600})
    assert "e_blur:1200" in build_cloudinary_url("x", {"blur": 1200})
    assert "e_hue:-180" in build_cloudinary_url("x", {"hue": -180})


def test_out_of_range_values_pass_through():
    assert build_transformation({"brightness": 500, "quality": 150}) == "q_150,e_brightness:500"


def test_zero_values():
    # adjustments keep 0, geometry/effects/rotation drop it
    assert build_transformation({"width": 0, "angle": 0, "blur": 0, "brightness": 0, "opacity": 0}) == (
        "e_brightness:0,o_0"
    )


def test_false_flags_are_omitted():
    assert build_transformation({"progressive": False, "grayscale": False, "negate": False}) == ""


def test_format_used_when_no_fetch_format():
    assert build_transformation({"format": "png"}) == "f_png"
    assert build_transformation({"format": "png", "fetch_format": "auto"}) == "f_auto"


def test_dpr_rendering():
    assert build_transformation({"dpr": 2.0}) == "dpr_2"
    assert build_transformation({"dpr": 1.5}) == "dpr_1.5"
    assert build_transformation({"dpr": "auto"}) == "dpr_auto"


def test_vignette_accepts_number_or_string():
    assert build_transformation({"vignette": 30}) == "e_vignette:30"
    assert build_transformation({"vignette": "30:10:10"}) == "e_vignette:30:10:10"


def test_invalid_and_unknown_fields_are_dropped():
    url = build_cloudinary_url("x", {"width": 100, "crop": "bogus", "gravity": 7, "unknown": 1})
    assert url == f"{ROOT}/w_100/x"


# --- Identifier validation ---------------------------------------------------

@pytest.mark.parametrize("public_id", ["shoes/red", "hero_bottle-v2.png", "a/b/c"])
def test_validate_public_id_accepts(public_id):
    assert validate_public_id(public_id) is True


@pytest.mark.parametrize("public_id", ["", "bad id", "a?b", "café", None, 42])
def test_validate_public_id_rejects(public_id):
    assert validate_public_id(public_id) is False


# --- Optimized / placeholder / fallback --------------------------------------

def test_optimized_url_defaults():
    assert get_optimized_image_url("img", width=600) == f"{ROOT}/w_600,c_fill,q_auto,f_auto/img"
    assert get_optimized_image_url("img", width=600, auto_format=False) == f"{ROOT}/w_600,c_fill,q_auto/img"
    assert get_optimized_image_url("img", quality="auto:best", crop="fit") == f"{ROOT}/c_fit,q_auto:best,f_auto/img"


def test_placeholder_url():
    assert get_placeholder_url("hero/bottle") == f"{ROOT}/w_50,q_auto:low,f_auto,e_blur:400/hero/bottle"


@pytest.mark.parametrize("public_id", ["a", "hero/bottle", "", "bad id"])
def test_placeholder_is_small_and_blurred(public_id):
    url = get_placeholder_url(public_id)
    width = int(re.search(r"\bw_(\d+)", url).group(1))
    assert width <= 50
    assert "e_blur:" in url


def test_fallback_url():
    assert get_fallback_image_url() == f"{ROOT}/w_400,h_300,c_fill,q_auto:low,b_gray/sample"
    assert get_fallback_image_url(120, 80) == f"{ROOT}/w_120,h_80,c_fill,q_auto:low,b_gray/sample"


def test_skeleton_data_url():
    data_url = get_skeleton_data_url(320, 240)
    prefix = "data:image/svg+xml;base64,"
    assert data_url.startswith(prefix)
    svg = base64.b64decode(data_url[len(prefix):]).decode("utf-8")
    assert 'width="320"' in svg
    assert 'height="240"' in svg


# --- Responsive sets ---------------------------------------------------------

def test_responsive_set_has_four_ascending_entries():
    result = get_responsive_set("img")
    assert [e.width for e in result.entries] == [400, 800, 1200, 1600]
    assert result.entries[0].url == f"{ROOT}/w_400,c_fill,q_auto,f_webp/img"
    assert result.sizes == DEFAULT_SIZES


def test_responsive_set_keeps_base_crop_and_quality():
    result = get_responsive_set("img", {"crop": "fit", "quality": "auto:best", "width": 5})
    assert result.entries[-1].url == f"{ROOT}/w_1600,c_fit,q_auto:best,f_webp/img"


def test_responsive_srcset_string():
    srcset = get_responsive_set("img").srcset
    parts = srcset.split(", ")
    assert len(parts) == 4
    assert parts[0] == f"{ROOT}/w_400,c_fill,q_auto,f_webp/img 400w"
    assert parts[-1].endswith(" 1600w")


def test_custom_breakpoints_are_sorted_but_sizes_hint_is_fixed():
    result = get_responsive_set("img", breakpoints={"big": 900, "small": 300})
    assert [e.width for e in result.entries] == [300, 900]
    assert result.sizes == DEFAULT_SIZES


def test_dpr_srcset_crosses_breakpoints_and_ratios():
    result = get_dpr_srcset("img")
    assert len(result.entries) == 12
    assert [e.width for e in result.entries] == [
        400, 600, 800,
        800, 1200, 1600,
        1200, 1800, 2400,
        1600, 2400, 3200,
    ]
    assert result.entries[1].url == f"{ROOT}/w_400,dpr_1.5,c_fill,q_auto,f_auto/img"
    assert result.entries[2].url == f"{ROOT}/w_400,dpr_2,c_fill,q_auto,f_auto/img"


def test_dpr_descriptor_widths_round_half_up():
    result = get_dpr_srcset("img", breakpoints={"a": 401, "b": 403})
    assert [e.width for e in result.entries] == [401, 602, 802, 403, 605, 806]


def test_dpr_srcset_without_dpr_support():
    result = get_dpr_srcset("img", support_dpr=False)
    assert [e.width for e in result.entries] == [400, 800, 1200, 1600]
    assert all("dpr_1," in e.url for e in result.entries)


def test_named_responsive_urls():
    urls = get_responsive_image_urls("img")
    assert list(urls) == ["mobile", "tablet", "desktop", "xl"]
    assert urls["mobile"] == f"{ROOT}/w_480,c_fill,q_auto,f_auto/img"
    assert urls["xl"] == f"{ROOT}/w_1920,c_fill,q_auto,f_auto/img"


# --- Presets -----------------------------------------------------------------

def test_preset_lookup():
    avatar = get_image_config("avatar")
    assert avatar.transforms.gravity == "face"
    assert avatar.transforms.dpr == "auto"
    assert get_image_config("HERO").sizes == "100vw"


def test_unknown_preset_raises():
    with pytest.raises(ValueError):
        get_image_config("banner")


def test_preset_records_are_immutable():
    with pytest.raises(ValidationError):
        get_image_config("hero").transforms.width = 10


def test_preset_image_url_with_overrides():
    assert get_preset_image_url("img", "avatar", width=120) == (
        f"{ROOT}/w_120,dpr_auto,c_fill,g_face,q_auto:good,f_webp/img"
    )
    assert get_preset_image_url("badge", "logo") == f"{ROOT}/c_fit,q_auto:good,f_png/badge"


def test_all_presets_present():
    assert set(cloudinary.ENHANCED_IMAGE_CONFIGS) == {
        "hero", "product", "logo", "thumbnail", "background", "avatar", "gallery", "card", "og",
    }


def test_og_preset_is_fixed_social_card_size():
    og = get_image_config("og")
    assert og.sizes == "1200px"
    assert get_preset_image_url("share", "og") == f"{ROOT}/w_1200,h_630,c_fill,q_auto:good/share"


def test_legacy_fixed_size_configs():
    assert build_cloudinary_url("badge", LEGACY_IMAGE_CONFIGS["trust_badge"]) == (
        f"{ROOT}/w_200,h_200,c_fit,q_auto:good,f_png/badge"
    )
    assert build_transformation(LEGACY_IMAGE_CONFIGS["hero"]) == "w_1920,h_1080,c_fill,q_auto:good"


# --- Text overlays -----------------------------------------------------------

def test_image_with_text_defaults():
    assert get_image_with_text("hero/bottle", "Pour the PORT") == (
        f"{ROOT}/w_1200,h_630,c_fill,g_auto,q_auto,f_auto"
        "/l_text:Arial_60_bold:Pour%20the%20PORT,co_white,g_center/hero/bottle"
    )


def test_image_with_text_escapes_separators():
    url = get_image_with_text("bg", "Save 20%, today/now")
    assert "l_text:Arial_60_bold:Save%2020%25%252C%20today%252Fnow,co_white,g_center" in url


def test_image_with_text_custom_font_and_hex_color():
    url = get_image_with_text(
        "bg",
        "Hi",
        width=800,
        height=400,
        text_color="#22c55e",
        font_size=48,
        font_family="Helvetica",
        font_weight="normal",
    )
    assert url == f"{ROOT}/w_800,h_400,c_fill,g_auto,q_auto,f_auto/l_text:Helvetica_48_normal:Hi,co_rgb:22c55e,g_center/bg"
