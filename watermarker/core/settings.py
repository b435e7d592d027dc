"""
Watermark Settings
==================
Immutable configuration for the text and image watermark layers.

Settings are plain frozen dataclasses. `WatermarkSettings.from_mapping`
builds them from the flat key/value configuration surface, e.g. a JSON
file:

    {
        "watermarkTextEnabled": true,
        "text": "(c) Watermarker",
        "textColor": "#ff0000",
        "textRotationDegrees": 45,
        "textSizePercent": 60,
        "textOpacity": 0.4,
        "textAnchors": ["center"],
        "watermarkImageEnabled": true,
        "imageOpacity": 0.5,
        "imageAnchors": ["bottom-left"]
    }
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Tuple, Union

from PIL import ImageColor

from .errors import InvalidConfiguration
from .position import Anchor

RGB = Tuple[int, int, int]

DEFAULT_FONT_FAMILY = "arial"


def _parse_color(value: Union[str, Iterable[int]]) -> RGB:
    if isinstance(value, str):
        try:
            rgb = ImageColor.getrgb(value)
        except ValueError as e:
            raise InvalidConfiguration(f"Unknown color: {value!r}") from e
        return rgb[0], rgb[1], rgb[2]

    channels = tuple(value)
    if len(channels) != 3 or not all(isinstance(c, int) and 0 <= c <= 255 for c in channels):
        raise InvalidConfiguration(f"Color must be three values in 0-255, got {value!r}")
    return channels  # type: ignore[return-value]


def _parse_flag(config: Mapping[str, Any], key: str, default: bool) -> bool:
    value = config.get(key, default)
    if not isinstance(value, bool):
        raise InvalidConfiguration(f"{key} must be true or false, got {value!r}")
    return value


def _parse_anchors(values: Union[str, Anchor, Iterable[Union[str, Anchor]]]) -> Tuple[Anchor, ...]:
    if isinstance(values, (str, Anchor)):
        values = [values]
    return tuple(Anchor.parse(value) for value in values)


@dataclass(frozen=True)
class LayerSettings:
    """Size, opacity and placement shared by both layer kinds."""
    size_percent: float = 20.0  # of the canvas, per axis
    opacity: float = 0.5  # 0.0-1.0
    anchors: Tuple[Anchor, ...] = (Anchor.BOTTOM_RIGHT,)

    def __post_init__(self):
        if not 0 < self.size_percent <= 100:
            raise InvalidConfiguration(
                f"Size percent must be in (0, 100], got {self.size_percent}"
            )
        if not 0 <= self.opacity <= 1:
            raise InvalidConfiguration(f"Opacity must be in [0, 1], got {self.opacity}")
        object.__setattr__(self, "anchors", _parse_anchors(self.anchors))


@dataclass(frozen=True)
class TextWatermark:
    """Configuration for the text layer."""
    enabled: bool = False
    text: str = ""
    color: RGB = (255, 255, 255)
    rotation_degrees: int = 0  # clockwise
    font_family: str = DEFAULT_FONT_FAMILY
    bold: bool = True
    layer: LayerSettings = field(default_factory=LayerSettings)

    def __post_init__(self):
        object.__setattr__(self, "color", _parse_color(self.color))
        if self.enabled and not self.layer.anchors:
            raise InvalidConfiguration("Text watermark is enabled but has no anchors")

    @property
    def usable(self) -> bool:
        return self.enabled and bool(self.text and self.text.strip())


@dataclass(frozen=True)
class ImageWatermark:
    """Configuration for the image layer. The bitmap itself belongs to the compositor."""
    enabled: bool = False
    rotation_degrees: int = 0  # clockwise
    layer: LayerSettings = field(default_factory=LayerSettings)

    def __post_init__(self):
        if self.enabled and not self.layer.anchors:
            raise InvalidConfiguration("Image watermark is enabled but has no anchors")


@dataclass(frozen=True)
class WatermarkSettings:
    """
    Complete watermark configuration.

    Images are watermarked when they are taller than `min_height` OR wider
    than `min_width`.
    """
    text: TextWatermark = field(default_factory=TextWatermark)
    image: ImageWatermark = field(default_factory=ImageWatermark)
    min_width: int = 0
    min_height: int = 0

    def __post_init__(self):
        if self.min_width < 0 or self.min_height < 0:
            raise InvalidConfiguration(
                f"Minimum size must not be negative, got {self.min_width}x{self.min_height}"
            )

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "WatermarkSettings":
        """
        Build settings from the flat configuration keys.

        Args:
            config: Mapping of recognized keys (see module docstring).
            Missing keys keep their defaults.

        Returns:
            WatermarkSettings instance.

        Raises:
            InvalidConfiguration: On unknown keys or invalid values.
        """
        unknown = set(config) - _CONFIG_KEYS
        if unknown:
            raise InvalidConfiguration(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        text_defaults = TextWatermark()
        image_defaults = ImageWatermark()
        layer_defaults = LayerSettings()

        def layer(prefix: str) -> LayerSettings:
            return LayerSettings(
                size_percent=float(config.get(f"{prefix}SizePercent", layer_defaults.size_percent)),
                opacity=float(config.get(f"{prefix}Opacity", layer_defaults.opacity)),
                anchors=config.get(f"{prefix}Anchors", layer_defaults.anchors),
            )

        try:
            return cls(
                text=TextWatermark(
                    enabled=_parse_flag(config, "watermarkTextEnabled", text_defaults.enabled),
                    text=str(config.get("text") or text_defaults.text),
                    color=config.get("textColor", text_defaults.color),
                    rotation_degrees=int(config.get("textRotationDegrees", text_defaults.rotation_degrees)),
                    font_family=str(config.get("fontFamily", text_defaults.font_family)),
                    bold=_parse_flag(config, "textBold", text_defaults.bold),
                    layer=layer("text"),
                ),
                image=ImageWatermark(
                    enabled=_parse_flag(config, "watermarkImageEnabled", image_defaults.enabled),
                    rotation_degrees=int(config.get("imageRotationDegrees", image_defaults.rotation_degrees)),
                    layer=layer("image"),
                ),
                min_width=int(config.get("minWidthThreshold", 0)),
                min_height=int(config.get("minHeightThreshold", 0)),
            )
        except InvalidConfiguration:
            raise
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration(f"Invalid configuration value: {e}") from e


_CONFIG_KEYS = {
    "watermarkTextEnabled", "text", "textColor", "textRotationDegrees",
    "fontFamily", "textBold", "textSizePercent", "textOpacity", "textAnchors",
    "watermarkImageEnabled", "imageRotationDegrees", "imageSizePercent",
    "imageOpacity", "imageAnchors", "minHeightThreshold", "minWidthThreshold",
}
