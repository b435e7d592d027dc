"""
Watermark Geometry
==================
Pure size calculations used to place watermarks.

Technical Notes:
- Angles are in degrees, clockwise, and normalized modulo 360
- Results are truncated toward zero, like pixel sizes on a canvas
- sin/cos noise is rounded away before truncation so that a 90 degree
  turn of (w, h) is exactly (h, w)
"""

import math
from typing import NamedTuple, Tuple


# Decimal places kept before truncating float sizes to pixels
_FLOAT_NOISE_DIGITS = 9


class Size(NamedTuple):
    """Width and height of a box in pixels."""
    width: int
    height: int


class Point(NamedTuple):
    """Top-left offset on a canvas in pixels."""
    x: int
    y: int


def _truncate(value: float) -> int:
    return int(round(value, _FLOAT_NOISE_DIGITS))


def rotated_size(width: float, height: float, angle: float) -> Tuple[float, float]:
    """
    Exact footprint of a width x height rectangle rotated about its center.
    
    Args:
        width: Rectangle width.
        height: Rectangle height.
        angle: Rotation angle in degrees.
        
    Returns:
        (width, height) of the smallest axis-aligned box around the result.
    """
    radian = math.radians(angle % 360)
    cos = math.cos(radian)
    sin = math.sin(radian)
    new_width = max(abs(width * cos - height * sin), abs(width * cos + height * sin))
    new_height = max(abs(width * sin - height * cos), abs(width * sin + height * cos))
    return new_width, new_height


def rotated_bounds(width: int, height: int, angle: float) -> Size:
    """
    Pixel footprint of a rotated rectangle.
    
    A rectangle with a zero side has no area to rotate and yields Size(0, 0).
    """
    if width == 0 or height == 0:
        return Size(0, 0)

    new_width, new_height = rotated_size(width, height, angle)
    return Size(_truncate(new_width), _truncate(new_height))


def fit_to_bounds(bounds: Size, natural: Size) -> Size:
    """
    Largest size with the aspect ratio of `natural` that fits in `bounds`.
    
    Never upscales: a natural size already strictly inside the bounds is
    returned as is. Zero-sized bounds give Size(0, 0), which callers read
    as "do not draw".
    
    Args:
        bounds: The bounding box to fit into.
        natural: The unscaled size of the content.
        
    Returns:
        The fitted size, truncated toward zero.
    """
    if natural.width < bounds.width and natural.height < bounds.height:
        return Size(natural.width, natural.height)

    if bounds.width == 0 or bounds.height == 0:
        return Size(0, 0)

    scale = max(natural.width / bounds.width, natural.height / bounds.height)
    return Size(int(natural.width / scale), int(natural.height / scale))
