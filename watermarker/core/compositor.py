"""
Watermark Compositor
====================
Places a text watermark and/or an image watermark on a base image.

Technical Notes:
- The canvas is RGBA; layers are alpha-composited, so the same layer
  drawn twice at one anchor is visibly stronger
- Text is rendered once per call on its own layer, sized to the rotated
  footprint, then composited at every anchor
- The watermark image is loaded lazily, once per compositor, and kept
  until close()
- Every intermediate image is closed before the next layer is processed
- Angles are clockwise in degrees
"""

import logging
import math
from functools import partial
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw

from .errors import InvalidConfiguration
from .fonts import FontProvider, max_font_size
from .geometry import Point, Size, fit_to_bounds, rotated_bounds
from .position import resolve_position
from .settings import ImageWatermark, TextWatermark, WatermarkSettings

logger = logging.getLogger(__name__)

WatermarkSource = Union[str, Path, Image.Image, None]

TRANSPARENT = (0, 0, 0, 0)


def layer_budget(canvas_size: Tuple[int, int], size_percent: float) -> Size:
    """Size budget of a layer: a percentage of each canvas dimension."""
    factor = size_percent / 100
    return Size(int(canvas_size[0] * factor), int(canvas_size[1] * factor))


def composite_at(canvas: Image.Image, overlay: Image.Image, position: Point) -> bool:
    """
    Alpha-composite `overlay` onto `canvas` with its top-left at `position`.

    Parts of the overlay outside the canvas, including negative offsets,
    are clipped. Both images must be RGBA.

    Returns:
        False if nothing of the overlay lands on the canvas.
    """
    x, y = position
    left, top = max(0, -x), max(0, -y)
    right = min(overlay.width, canvas.width - x)
    bottom = min(overlay.height, canvas.height - y)
    if right <= left or bottom <= top:
        return False

    canvas.alpha_composite(overlay, dest=(x + left, y + top), source=(left, top, right, bottom))
    return True


def rotate_image(image: Image.Image, angle: float) -> Optional[Image.Image]:
    """
    Rotate an RGBA image about its center onto a canvas that fits it.

    The forward transform is: translate to the center of the rotated
    canvas, rotate, then translate back by half the SOURCE size. Pillow's
    affine transform maps destination to source, so the inverse is used.

    Args:
        image: RGBA image to rotate.
        angle: Clockwise rotation in degrees.

    Returns:
        The rotated image, or None when no rotation could be produced and
        the caller should use the original.
    """
    angle = angle % 360
    src_width, src_height = image.size
    bounds = rotated_bounds(src_width, src_height, angle)
    if bounds.width == 0 or bounds.height == 0:
        logger.warning("Cannot rotate %sx%s image: empty footprint", src_width, src_height)
        return None

    radian = math.radians(angle)
    cos, sin = math.cos(radian), math.sin(radian)
    center_x, center_y = bounds.width / 2, bounds.height / 2
    inverse = (
        cos, sin, src_width / 2 - cos * center_x - sin * center_y,
        -sin, cos, src_height / 2 + sin * center_x - cos * center_y,
    )

    try:
        return image.transform(
            bounds,
            Image.Transform.AFFINE,
            inverse,
            resample=Image.Resampling.BICUBIC,
            fillcolor=TRANSPARENT
        )
    except (ValueError, OSError, MemoryError) as e:
        logger.warning("Rotating watermark by %s degrees failed: %s", angle, e)
        return None


def _scale_alpha(image: Image.Image, opacity: float):
    """Multiply the alpha channel of an RGBA image by `opacity`, in place."""
    if opacity >= 1:
        return
    alpha = np.asarray(image.getchannel("A"), dtype=np.float32) * opacity
    image.putalpha(Image.fromarray(alpha.astype(np.uint8)))


class WatermarkCompositor:
    """
    Applies text and image watermarks to images.

    One compositor can process many images; the watermark image is read
    on first use and shared by every call.

    Usage:
        with WatermarkCompositor("marker.png") as compositor:
            result = compositor.apply(load_image("photo.jpg"), settings)
    """

    def __init__(
            self,
            watermark_image: WatermarkSource = None,
            font_provider: Optional[FontProvider] = None
    ):
        """
        Initialize the WatermarkCompositor.

        Args:
            watermark_image: Path to the watermark bitmap, or an Image.
                            Not read until the image layer first needs it.
            font_provider: Font loader used to measure and draw text.
        """
        self._watermark_source = watermark_image
        self._watermark_image: Optional[Image.Image] = None
        self._watermark_loaded = False
        self._fonts = font_provider if font_provider is not None else FontProvider()

    # ===== Lifecycle =====

    def __enter__(self) -> "WatermarkCompositor":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        """Release the cached watermark image and fonts."""
        if self._watermark_image is not None:
            self._watermark_image.close()
            self._watermark_image = None
        self._fonts.clear()

    # ===== Watermark image =====

    def _load_watermark(self) -> Optional[Image.Image]:
        """Load the watermark image on first call; later calls reuse it."""
        if not self._watermark_loaded:
            self._watermark_loaded = True
            self._watermark_image = self._read_watermark(self._watermark_source)
        return self._watermark_image

    @staticmethod
    def _read_watermark(source: WatermarkSource) -> Optional[Image.Image]:
        if source is None:
            logger.warning("Image watermark is enabled but no watermark image was given")
            return None

        if isinstance(source, Image.Image):
            return source.convert("RGBA")

        path = Path(source)
        if not path.is_file():
            logger.warning("Watermark image not found: %s", path)
            return None

        try:
            with Image.open(path) as img:
                return img.convert("RGBA")
        except OSError as e:
            logger.warning("Cannot read watermark image %s: %s", path, e)
            return None

    # ===== Processing =====

    def apply(self, source: Image.Image, settings: WatermarkSettings) -> Image.Image:
        """
        Watermark an image.

        Images that are neither taller than `settings.min_height` nor wider
        than `settings.min_width` are returned unchanged. Otherwise a new
        RGBA image is returned and `source` is closed.

        Args:
            source: Image to watermark.
            settings: Watermark configuration.

        Returns:
            The watermarked image, or `source` itself below the threshold.

        Raises:
            InvalidConfiguration: If no source image is given.
        """
        if source is None:
            raise InvalidConfiguration("A source image is required")

        width, height = source.size
        if not (height > settings.min_height or width > settings.min_width):
            logger.debug(
                "Skipping %sx%s image: not above minimum %sx%s",
                width, height, settings.min_width, settings.min_height
            )
            return source

        canvas = source.convert("RGBA")
        try:
            if settings.text.usable:
                self._place_text(canvas, settings.text)

            if settings.image.enabled:
                watermark = self._load_watermark()
                if watermark is not None:
                    self._place_image(canvas, watermark, settings.image)
        except Exception:
            canvas.close()
            raise

        source.close()
        return canvas

    def _place_text(self, canvas: Image.Image, settings: TextWatermark):
        text = settings.text.strip()
        angle = settings.rotation_degrees
        family = settings.font_family
        measure = partial(self._fonts.measure, bold=settings.bold)

        budget = layer_budget(canvas.size, settings.layer.size_percent)
        font_size = max_font_size(text, angle, family, budget, measure)
        if font_size <= 1:
            logger.info("Text watermark does not fit in %sx%s; skipped", *budget)
            return

        text_size = measure(text, family, font_size)
        footprint = rotated_bounds(text_size.width, text_size.height, angle)
        if footprint.width == 0 or footprint.height == 0:
            logger.info("Text watermark %r has no visible extent; skipped", text)
            return

        logger.debug("Text watermark at font size %d, footprint %sx%s", font_size, *footprint)

        text_layer = self._render_text(text, settings, font_size, text_size, footprint)
        try:
            # Keep the footprint at the anchor when the layer is a pixel larger
            shift_x = (footprint.width - text_layer.width) // 2
            shift_y = (footprint.height - text_layer.height) // 2
            for anchor in settings.layer.anchors:
                x, y = resolve_position(anchor, Size(*canvas.size), footprint)
                composite_at(canvas, text_layer, Point(x + shift_x, y + shift_y))
        finally:
            text_layer.close()

    def _render_text(
            self,
            text: str,
            settings: TextWatermark,
            font_size: int,
            text_size: Size,
            footprint: Size
    ) -> Image.Image:
        """
        Draw the text centered and rotated on a transparent footprint-sized layer.

        rotate() can round its canvas a pixel past the truncated footprint;
        the layer then grows to match so no anti-aliased ink is cropped.
        """
        font = self._fonts.get_font(settings.font_family, font_size, settings.bold)
        offset = self._fonts.text_offset(text, settings.font_family, font_size, settings.bold)
        fill = (*settings.color, int(settings.layer.opacity * 255))

        block = Image.new("RGBA", text_size, TRANSPARENT)
        rotated = None
        try:
            ImageDraw.Draw(block).text(offset, text, font=font, fill=fill)
            rotated = block.rotate(
                -settings.rotation_degrees, expand=True, resample=Image.Resampling.BICUBIC
            )

            layer_size = Size(
                max(footprint.width, rotated.width), max(footprint.height, rotated.height)
            )
            layer = Image.new("RGBA", layer_size, TRANSPARENT)
            layer.paste(
                rotated,
                ((layer_size.width - rotated.width) // 2, (layer_size.height - rotated.height) // 2)
            )
            return layer
        finally:
            block.close()
            if rotated is not None:
                rotated.close()

    def _place_image(self, canvas: Image.Image, watermark: Image.Image, settings: ImageWatermark):
        rotated = None
        if settings.rotation_degrees % 360:
            rotated = rotate_image(watermark, settings.rotation_degrees)
            if rotated is None:
                logger.info("Using unrotated watermark image")

        source = rotated if rotated is not None else watermark
        try:
            budget = layer_budget(canvas.size, settings.layer.size_percent)
            fitted = fit_to_bounds(budget, Size(*source.size))
            if fitted.width == 0 or fitted.height == 0:
                logger.info("Image watermark does not fit in %sx%s; skipped", *budget)
                return

            scaled = source.resize(fitted, Image.Resampling.LANCZOS)
            try:
                _scale_alpha(scaled, settings.layer.opacity)
                for anchor in settings.layer.anchors:
                    position = resolve_position(anchor, Size(*canvas.size), fitted)
                    composite_at(canvas, scaled, position)
            finally:
                scaled.close()
        finally:
            if rotated is not None:
                rotated.close()
