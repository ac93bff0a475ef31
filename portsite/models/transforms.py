from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

CropMode = Literal["fill", "fit", "scale", "crop", "thumb", "pad", "limit", "mfit", "mpad", "lfill", "lpad"]

Gravity = Literal[
    "auto",
    "center",
    "face",
    "faces",
    "body",
    "north",
    "south",
    "east",
    "west",
    "north_east",
    "north_west",
    "south_east",
    "south_west",
    "xy_center",
    "adv_face",
    "adv_faces",
    "adv_eyes",
]

QualityTier = Literal["auto", "auto:best", "auto:good", "auto:low", "auto:eco"]

ImageFormat = Literal["auto", "webp", "avif", "jpg", "png", "gif", "svg", "bmp", "tiff"]

FetchFormat = Literal["auto", "webp", "avif"]


class TransformOptions(BaseModel):
    """Requested Cloudinary transformation.

    Every field is optional and unset by default. Ranges noted in the
    comments are what Cloudinary accepts; they are not enforced here, the
    CDN is the final arbiter.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Dimensions
    width: Optional[int] = None
    height: Optional[int] = None
    aspect_ratio: Optional[str] = None  # e.g. "16:9", "1:1"

    # Cropping and positioning
    crop: Optional[CropMode] = None
    gravity: Optional[Gravity] = None

    # Quality and format
    quality: Optional[Union[QualityTier, int]] = None  # int is 1-100
    format: Optional[ImageFormat] = None
    fetch_format: Optional[FetchFormat] = None  # takes precedence over format

    # Device pixel ratio: 1.0, 1.5, 2.0, 3.0 or "auto"
    dpr: Optional[Union[Literal["auto"], float]] = None

    # Basic adjustments, -100 to 100
    brightness: Optional[int] = None
    contrast: Optional[int] = None
    saturation: Optional[int] = None
    gamma: Optional[int] = None
    vibrance: Optional[int] = None

    # Color adjustments
    hue: Optional[int] = None  # -180 to 180
    opacity: Optional[int] = None  # 0 to 100

    # Effects
    blur: Optional[int] = None  # 1 to 2000
    sharpen: Optional[int] = None  # 1 to 400
    unsharp_mask: Optional[str] = None  # "strength:amount:radius:threshold"

    # Artistic effects
    sepia: Optional[int] = None  # 1 to 100
    grayscale: Optional[bool] = None
    blackwhite: Optional[str] = None  # threshold, e.g. "40"
    negate: Optional[bool] = None
    oil_paint: Optional[int] = None  # 1 to 100
    vignette: Optional[Union[int, str]] = None  # strength or "strength:x:y"
    pixelate: Optional[int] = None  # 1 to 200

    # Border, background, rotation
    border: Optional[str] = None  # "width_color", e.g. "5_black" or "3_rgb:ff0000"
    background: Optional[str] = None
    angle: Optional[int] = None  # -360 to 360

    # Flags
    progressive: Optional[bool] = None
    immutable_cache: Optional[bool] = None
    strip_profile: Optional[bool] = None

    # Raw transformation string, appended last and not validated
    custom_transform: Optional[str] = None

    @property
    def delivery_format(self) -> Optional[str]:
        return self.fetch_format or self.format


class ImagePreset(BaseModel):
    """Named, pre-filled transformation plus the matching ``sizes`` hint."""

    model_config = ConfigDict(frozen=True)

    name: str
    transforms: TransformOptions
    sizes: str


class SrcsetEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    width: int  # descriptor width in CSS pixels, rendered as "<width>w"

    @property
    def descriptor(self) -> str:
        return f"{self.url} {self.width}w"


class ResponsiveImageSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: list[SrcsetEntry]
    sizes: str

    @property
    def srcset(self) -> str:
        return ", ".join(entry.descriptor for entry in self.entries)
