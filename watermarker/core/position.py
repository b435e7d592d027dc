"""
Watermark Positioning
=====================
Maps the nine named anchors to top-left offsets on a canvas.

Offsets are not clamped: content larger than the canvas gets negative
coordinates and is clipped when it is drawn.
"""

from enum import Enum
from typing import Union

from .errors import InvalidConfiguration
from .geometry import Point, Size


class Anchor(Enum):
    """Relative placement of a watermark layer on the canvas."""
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    CENTER_LEFT = "center-left"
    CENTER = "center"
    CENTER_RIGHT = "center-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"

    @classmethod
    def parse(cls, value: Union["Anchor", str]) -> "Anchor":
        """
        Parse an anchor from configuration.
        
        Accepts "bottom-left", "Bottom_Left", "bottom left" and the
        CamelCase names of older settings files such as "BottomLeftCorner".
        
        Raises:
            InvalidConfiguration: If the value names no anchor.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidConfiguration(f"Anchor must be a string, got {value!r}")

        key = value.strip().lower().replace("_", "-").replace(" ", "-")
        key = _LEGACY_NAMES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise InvalidConfiguration(f"Unknown anchor: {value!r}") from None


# CamelCase names, lowercased
_LEGACY_NAMES = {
    "topleftcorner": "top-left",
    "topcenter": "top-center",
    "toprightcorner": "top-right",
    "centerleft": "center-left",
    "centerright": "center-right",
    "bottomleftcorner": "bottom-left",
    "bottomcenter": "bottom-center",
    "bottomrightcorner": "bottom-right",
}

# Anchor -> (horizontal, vertical) alignment factor: 0 start, 1 middle, 2 end
_ALIGNMENT = {
    Anchor.TOP_LEFT: (0, 0),
    Anchor.TOP_CENTER: (1, 0),
    Anchor.TOP_RIGHT: (2, 0),
    Anchor.CENTER_LEFT: (0, 1),
    Anchor.CENTER: (1, 1),
    Anchor.CENTER_RIGHT: (2, 1),
    Anchor.BOTTOM_LEFT: (0, 2),
    Anchor.BOTTOM_CENTER: (1, 2),
    Anchor.BOTTOM_RIGHT: (2, 2),
}


def _align(free_space: int, alignment: int) -> int:
    if alignment == 0:
        return 0
    if alignment == 1:
        return free_space // 2
    return free_space


def resolve_position(anchor: Anchor, canvas_size: Size, content_size: Size) -> Point:
    """
    Top-left offset of `content_size` placed at `anchor` on the canvas.
    
    Args:
        anchor: Where to place the content.
        canvas_size: (width, height) of the destination canvas.
        content_size: (width, height) of the content being drawn.
        
    Returns:
        Point offset, possibly negative when the content is larger.
    """
    horizontal, vertical = _ALIGNMENT[anchor]
    return Point(
        _align(canvas_size[0] - content_size[0], horizontal),
        _align(canvas_size[1] - content_size[1], vertical),
    )
