"""
Watermarker - Command Line Entry Point
======================================
Applies a text and/or image watermark to a single image.

Usage:
    python main.py photo.jpg out.jpg --text "(c) Watermarker" --text-angle 45 \
        --text-size 60 --text-opacity 0.4 --text-anchor center \
        --image marker.png --image-opacity 0.5 --image-anchor bottom-left

    python main.py photo.jpg out.png --config settings.json

Options given on the command line override the same keys in --config.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from watermarker import (
    InvalidConfiguration,
    WatermarkCompositor,
    WatermarkSettings,
    load_image,
    save_image,
)

logger = logging.getLogger("watermarker")

# argparse dest -> configuration key
_OPTION_KEYS = {
    "text": "text",
    "color": "textColor",
    "text_angle": "textRotationDegrees",
    "font": "fontFamily",
    "text_size": "textSizePercent",
    "text_opacity": "textOpacity",
    "text_anchor": "textAnchors",
    "image_angle": "imageRotationDegrees",
    "image_size": "imageSizePercent",
    "image_opacity": "imageOpacity",
    "image_anchor": "imageAnchors",
    "min_width": "minWidthThreshold",
    "min_height": "minHeightThreshold",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="watermarker",
        description="Add text and image watermarks to an image."
    )
    parser.add_argument("input", type=Path, help="Source image")
    parser.add_argument("output", type=Path, help="Destination image; format from extension")
    parser.add_argument("--config", type=Path, help="JSON settings file")

    text = parser.add_argument_group("text watermark")
    text.add_argument("--text", help="Watermark text (enables the text layer)")
    text.add_argument("--color", help="Text color, e.g. red or #ff0000")
    text.add_argument("--text-angle", type=int, help="Clockwise rotation in degrees")
    text.add_argument("--font", help="Font family or font file")
    text.add_argument("--text-size", type=float, help="Size budget, percent of the image")
    text.add_argument("--text-opacity", type=float, help="Opacity 0.0-1.0")
    text.add_argument("--text-anchor", action="append", help="Placement; repeat for several")

    image = parser.add_argument_group("image watermark")
    image.add_argument("--image", type=Path, help="Watermark image (enables the image layer)")
    image.add_argument("--image-angle", type=int, help="Clockwise rotation in degrees")
    image.add_argument("--image-size", type=float, help="Size budget, percent of the image")
    image.add_argument("--image-opacity", type=float, help="Opacity 0.0-1.0")
    image.add_argument("--image-anchor", action="append", help="Placement; repeat for several")

    parser.add_argument("--min-width", type=int, help="Skip images not wider than this...")
    parser.add_argument("--min-height", type=int, help="...and not taller than this")
    parser.add_argument("--quality", type=int, default=95, help="JPEG quality (default: 95)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def build_settings(args: argparse.Namespace) -> WatermarkSettings:
    """Merge the --config file with command-line options."""
    config: Dict[str, Any] = {}
    if args.config:
        with open(args.config, encoding="utf-8") as f:
            config.update(json.load(f))

    for dest, key in _OPTION_KEYS.items():
        value = getattr(args, dest)
        if value is not None:
            config[key] = value

    if args.text is not None:
        config["watermarkTextEnabled"] = True
    if args.image is not None:
        config["watermarkImageEnabled"] = True

    return WatermarkSettings.from_mapping(config)


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        settings = build_settings(args)
        with WatermarkCompositor(args.image) as compositor:
            result = compositor.apply(load_image(args.input), settings)
            try:
                save_image(result, args.output, quality=args.quality)
            finally:
                result.close()
    except InvalidConfiguration as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger.info("Saved %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
