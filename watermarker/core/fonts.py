"""
Font Metrics and Font Size Fitting
==================================
Measures text with Pillow fonts and searches for the largest font size
whose rotated footprint fits a size budget.

Technical Notes:
- Fonts are cached per (family, size); a search touches hundreds of sizes
- A family is resolved to a font file once, so Pillow's directory search
  does not run again for every size
- Family names are resolved the way Pillow resolves font files, with a
  platform fallback chain and finally Pillow's bundled default font
- The search is linear from size 2, so a measurement that is not strictly
  monotonic at tiny sizes cannot make it skip the answer
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from PIL import ImageFont

from .geometry import Point, Size, rotated_bounds

logger = logging.getLogger(__name__)

# (text, font_family, size) -> unrotated text extent
MeasureFunc = Callable[[str, str, int], Size]

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# Smallest size the search tries
MIN_FONT_SIZE = 2

# Upper bound for fonts whose extent stops growing (bitmap fallbacks)
MAX_FONT_SIZE = 4096

# Tried in order when the requested family cannot be loaded
FALLBACK_FONTS = (
    # Windows
    "msyh.ttc",
    # macOS
    "/System/Library/Fonts/PingFang.ttc",
    # Linux
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
)


def max_font_size(
        text: str,
        angle: float,
        font_family: str,
        budget: Size,
        measure: MeasureFunc
) -> int:
    """
    Largest font size whose rotated text footprint fits in `budget`.

    Args:
        text: Text to measure.
        angle: Rotation angle in degrees.
        font_family: Font family passed through to `measure`.
        budget: Maximum (width, height) of the rotated footprint.
        measure: Callback returning the unrotated text extent.

    Returns:
        The font size. A value <= 1 means the text cannot fit, or has
        no ink at all (e.g. zero-width characters).
    """
    for size in range(MIN_FONT_SIZE, MAX_FONT_SIZE + 1):
        width, height = measure(text, font_family, size)
        if width == 0 or height == 0:
            logger.debug("Text %r has no ink at size %d", text, size)
            return 1

        footprint = rotated_bounds(width, height, angle)
        if footprint.width > budget.width or footprint.height > budget.height:
            return size - 1

    logger.warning(
        "Font %r never outgrew %sx%s; capping text at size %d",
        font_family, budget.width, budget.height, MAX_FONT_SIZE
    )
    return MAX_FONT_SIZE


class FontProvider:
    """
    Loads and caches Pillow fonts, and measures text with them.

    `measure` matches the callback signature expected by `max_font_size`.
    """

    def __init__(self, font_path: Optional[Union[str, Path]] = None, bold: bool = True):
        """
        Initialize the FontProvider.

        Args:
            font_path: Optional font file used for every family.
            bold: Prefer the bold face of a family unless a call says otherwise.
        """
        self._font_path = font_path
        self._bold = bold
        self._cached_fonts: Dict[Tuple[str, int, bool], FontType] = {}
        self._font_files: Dict[Tuple[str, bool], Optional[str]] = {}

    def _candidates(self, family: str, bold: bool) -> List[str]:
        names: List[str] = []
        if self._font_path and Path(self._font_path).exists():
            names.append(str(self._font_path))

        if family:
            if bold:
                names.extend([f"{family}bd.ttf", f"{family}-Bold.ttf", f"{family} Bold.ttf"])
            names.append(family)
            if not Path(family).suffix:
                names.append(f"{family}.ttf")

        names.extend(FALLBACK_FONTS)
        return names

    def get_font(self, family: str, size: int, bold: Optional[bool] = None) -> FontType:
        """
        Get or create a cached font for the given family and size.

        Args:
            family: Font family name or font file path.
            size: Font size in pixels.
            bold: Prefer the bold face; None uses the provider default.

        Returns:
            ImageFont object for drawing text.
        """
        if bold is None:
            bold = self._bold

        key = (family, size, bold)
        if key not in self._cached_fonts:
            font_file = self._resolve(family, bold)
            if font_file is not None:
                self._cached_fonts[key] = ImageFont.truetype(font_file, size)
            else:
                self._cached_fonts[key] = ImageFont.load_default(size)

        return self._cached_fonts[key]

    def _resolve(self, family: str, bold: bool) -> Optional[str]:
        """Font file for a family, looked up once; None means Pillow's default."""
        key = (family, bold)
        if key not in self._font_files:
            self._font_files[key] = None
            for name in self._candidates(family, bold):
                try:
                    font = ImageFont.truetype(name, MIN_FONT_SIZE)
                except OSError:
                    continue
                self._font_files[key] = font.path
                break
            else:
                logger.debug("No font file found for %r; using Pillow default", family)

        return self._font_files[key]

    def measure(self, text: str, family: str, size: int, bold: Optional[bool] = None) -> Size:
        """Ink extent of `text` at `size`, unrotated."""
        left, top, right, bottom = self.get_font(family, size, bold).getbbox(text)
        return Size(int(right - left), int(bottom - top))

    def text_offset(self, text: str, family: str, size: int, bold: Optional[bool] = None) -> Point:
        """Drawing origin that puts the ink box of `text` at (0, 0)."""
        left, top, _, _ = self.get_font(family, size, bold).getbbox(text)
        return Point(-int(left), -int(top))

    def clear(self):
        """Drop every cached font."""
        self._cached_fonts.clear()
        self._font_files.clear()
