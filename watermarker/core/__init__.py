"""
Core Module - Geometry and Compositing
======================================
Decides where, how large and at what rotation watermarks are drawn.
Pixel work is delegated to Pillow.
"""

from .compositor import WatermarkCompositor, composite_at, rotate_image
from .errors import InvalidConfiguration
from .fonts import FontProvider, max_font_size
from .geometry import Point, Size, fit_to_bounds, rotated_bounds, rotated_size
from .image_io import load_image, save_image
from .position import Anchor, resolve_position
from .settings import ImageWatermark, LayerSettings, TextWatermark, WatermarkSettings

__all__ = [
    "WatermarkCompositor",
    "composite_at",
    "rotate_image",
    "InvalidConfiguration",
    "FontProvider",
    "max_font_size",
    "Point",
    "Size",
    "fit_to_bounds",
    "rotated_bounds",
    "rotated_size",
    "load_image",
    "save_image",
    "Anchor",
    "resolve_position",
    "ImageWatermark",
    "LayerSettings",
    "TextWatermark",
    "WatermarkSettings",
]
