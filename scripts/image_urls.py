#!/usr/bin/env python
"""Print the Cloudinary URLs a page section would use for an image."""
from __future__ import annotations

import argparse
import sys

from portsite.services import cloudinary


def main() -> None:
    parser = argparse.ArgumentParser(description="Build Cloudinary URLs for an image")
    parser.add_argument("public_id")
    parser.add_argument("--preset", default="hero", choices=sorted(cloudinary.ENHANCED_IMAGE_CONFIGS))
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    parser.add_argument("--dpr", action="store_true", help="include 1.5x and 2x srcset variants")
    parser.add_argument("--text", help="also print a social card with this text over the image")
    args = parser.parse_args()

    if not cloudinary.validate_public_id(args.public_id):
        sys.exit(f"Invalid public id: {args.public_id!r}")

    config = cloudinary.get_image_config(args.preset)
    overrides = {k: v for k, v in {"width": args.width, "height": args.height}.items() if v is not None}
    responsive = (
        cloudinary.get_dpr_srcset(args.public_id, config.transforms)
        if args.dpr
        else cloudinary.get_responsive_set(args.public_id, config.transforms)
    )

    print(f"url:         {cloudinary.get_preset_image_url(args.public_id, args.preset, **overrides)}")
    print(f"placeholder: {cloudinary.get_placeholder_url(args.public_id)}")
    print(f"sizes:       {config.sizes}")
    if args.text:
        print(f"text card:   {cloudinary.get_image_with_text(args.public_id, args.text)}")
    print("srcset:")
    for entry in responsive.entries:
        print(f"  {entry.descriptor}")


if __name__ == "__main__":
    main()
