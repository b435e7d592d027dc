"""
Tests for watermark settings and anchor parsing.

Run with: python -m pytest tests/test_settings.py -v
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from watermarker.core.errors import InvalidConfiguration
from watermarker.core.position import Anchor
from watermarker.core.settings import (
    ImageWatermark, LayerSettings, TextWatermark, WatermarkSettings
)


def test_anchor_parse_spellings():
    assert Anchor.parse("bottom-left") is Anchor.BOTTOM_LEFT
    assert Anchor.parse("Bottom_Left") is Anchor.BOTTOM_LEFT
    assert Anchor.parse(" top center ") is Anchor.TOP_CENTER
    assert Anchor.parse("BottomLeftCorner") is Anchor.BOTTOM_LEFT
    assert Anchor.parse("CenterRight") is Anchor.CENTER_RIGHT
    assert Anchor.parse(Anchor.CENTER) is Anchor.CENTER


@pytest.mark.parametrize("value", ["middle", "", 3, None])
def test_anchor_parse_rejects_unknown(value):
    with pytest.raises(InvalidConfiguration):
        Anchor.parse(value)


def test_layer_ranges():
    LayerSettings(size_percent=100, opacity=0)
    LayerSettings(size_percent=0.5, opacity=1)
    for bad in (0, -10, 100.5):
        with pytest.raises(InvalidConfiguration):
            LayerSettings(size_percent=bad)
    for bad in (-0.1, 1.5):
        with pytest.raises(InvalidConfiguration):
            LayerSettings(opacity=bad)


def test_layer_anchor_strings_and_duplicates():
    layer = LayerSettings(anchors=["center", "center", "TopLeftCorner"])
    assert layer.anchors == (Anchor.CENTER, Anchor.CENTER, Anchor.TOP_LEFT)


def test_invalid_configuration_is_a_value_error():
    with pytest.raises(ValueError):
        LayerSettings(opacity=2)


def test_enabled_layer_needs_anchors():
    with pytest.raises(InvalidConfiguration):
        TextWatermark(enabled=True, text="WM", layer=LayerSettings(anchors=()))
    with pytest.raises(InvalidConfiguration):
        ImageWatermark(enabled=True, layer=LayerSettings(anchors=()))

    # Disabled layers may leave anchors empty
    TextWatermark(enabled=False, layer=LayerSettings(anchors=()))
    ImageWatermark(enabled=False, layer=LayerSettings(anchors=()))


def test_text_usable():
    assert TextWatermark(enabled=True, text="WM").usable
    assert not TextWatermark(enabled=True, text="   ").usable
    assert not TextWatermark(enabled=False, text="WM").usable


def test_text_color():
    assert TextWatermark(color="red").color == (255, 0, 0)
    assert TextWatermark(color="#00ff0080").color == (0, 255, 0)
    assert TextWatermark(color=[1, 2, 3]).color == (1, 2, 3)
    for bad in ("not-a-color", (1, 2), (0, 0, 300)):
        with pytest.raises(InvalidConfiguration):
            TextWatermark(color=bad)


def test_negative_threshold():
    with pytest.raises(InvalidConfiguration):
        WatermarkSettings(min_width=-1)


def test_settings_are_immutable():
    settings = WatermarkSettings()
    with pytest.raises(AttributeError):
        settings.min_width = 10


def test_from_mapping():
    settings = WatermarkSettings.from_mapping({
        "watermarkTextEnabled": True,
        "text": "Blue Fox",
        "textColor": "red",
        "textRotationDegrees": 45,
        "fontFamily": "DejaVuSans",
        "textSizePercent": 60,
        "textOpacity": 0.4,
        "textAnchors": ["center"],
        "watermarkImageEnabled": True,
        "imageRotationDegrees": 30,
        "imageOpacity": 0.5,
        "imageAnchors": "BottomLeftCorner",
        "minWidthThreshold": 200,
        "minHeightThreshold": 150,
    })

    assert settings.text.enabled and settings.text.text == "Blue Fox"
    assert settings.text.color == (255, 0, 0)
    assert settings.text.rotation_degrees == 45
    assert settings.text.font_family == "DejaVuSans"
    assert settings.text.layer == LayerSettings(60.0, 0.4, (Anchor.CENTER,))
    assert settings.image.enabled and settings.image.rotation_degrees == 30
    assert settings.image.layer.opacity == 0.5
    assert settings.image.layer.anchors == (Anchor.BOTTOM_LEFT,)
    assert (settings.min_width, settings.min_height) == (200, 150)


def test_from_mapping_defaults():
    assert WatermarkSettings.from_mapping({}) == WatermarkSettings()


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(InvalidConfiguration, match="textSize"):
        WatermarkSettings.from_mapping({"textSize": 60})


def test_from_mapping_rejects_bad_values():
    with pytest.raises(InvalidConfiguration):
        WatermarkSettings.from_mapping({"textOpacity": "opaque"})
    with pytest.raises(InvalidConfiguration):
        WatermarkSettings.from_mapping({"imageSizePercent": -5})
    with pytest.raises(InvalidConfiguration):
        WatermarkSettings.from_mapping({"watermarkTextEnabled": True, "textAnchors": []})


@pytest.mark.parametrize("key", ["watermarkTextEnabled", "watermarkImageEnabled", "textBold"])
@pytest.mark.parametrize("value", ["false", "true", 0, 1, None])
def test_from_mapping_flags_must_be_booleans(key, value):
    with pytest.raises(InvalidConfiguration, match=key):
        WatermarkSettings.from_mapping({key: value})


def test_from_mapping_boolean_flags():
    settings = WatermarkSettings.from_mapping({
        "watermarkTextEnabled": False, "watermarkImageEnabled": True, "textBold": False,
    })
    assert not settings.text.enabled
    assert settings.image.enabled
    assert not settings.text.bold
