"""
Watermarker Package
===================
Text and image watermarks with rotation, proportional scaling,
transparency and multi-anchor placement.

Modules:
    - core: Geometry, settings and the compositor (Pillow based)

Usage:
    from watermarker import WatermarkCompositor, WatermarkSettings, load_image
"""

__version__ = "1.0.0"
__app_name__ = "Watermarker"

from .core import (
    Anchor,
    FontProvider,
    ImageWatermark,
    InvalidConfiguration,
    LayerSettings,
    TextWatermark,
    WatermarkCompositor,
    WatermarkSettings,
    load_image,
    save_image,
)

__all__ = [
    # Version info
    "__version__",
    "__app_name__",

    # Settings
    "Anchor",
    "LayerSettings",
    "TextWatermark",
    "ImageWatermark",
    "WatermarkSettings",
    "InvalidConfiguration",

    # Processing
    "FontProvider",
    "WatermarkCompositor",
    "load_image",
    "save_image",
]
