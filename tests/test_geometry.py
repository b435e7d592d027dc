"""
Tests for rotation geometry, scaling and anchor positions.

Run with: python -m pytest tests/test_geometry.py -v
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from watermarker.core.geometry import Point, Size, fit_to_bounds, rotated_bounds, rotated_size
from watermarker.core.position import Anchor, resolve_position

SIZES = [(1, 1), (40, 20), (123, 57), (640, 480), (17, 300)]
ANGLES = list(range(0, 360, 15)) + [7, 33, 271]


# ===== RotationGeometry =====

@pytest.mark.parametrize("width,height", SIZES)
def test_no_rotation_is_identity(width, height):
    assert rotated_bounds(width, height, 0) == (width, height)
    assert rotated_bounds(width, height, 360) == (width, height)
    assert rotated_bounds(width, height, -360) == (width, height)


@pytest.mark.parametrize("width,height", SIZES)
def test_quarter_turn_swaps_sides(width, height):
    assert rotated_bounds(width, height, 90) == (height, width)
    assert rotated_bounds(width, height, 270) == (height, width)
    assert rotated_bounds(width, height, 180) == (width, height)


@pytest.mark.parametrize("width,height", SIZES)
def test_swapped_rectangle_a_quarter_turn_later_has_same_footprint(width, height):
    for angle in ANGLES:
        a = rotated_bounds(width, height, angle)
        b = rotated_bounds(height, width, (angle + 90) % 360)
        assert abs(a.width - b.width) <= 1
        assert abs(a.height - b.height) <= 1


def test_forty_five_degrees():
    # 150 / sqrt(2) = 106.07
    assert rotated_bounds(100, 50, 45) == Size(106, 106)
    width, height = rotated_size(100, 50, 45)
    assert width == pytest.approx(106.066, abs=1e-3)
    assert height == pytest.approx(106.066, abs=1e-3)


def test_angle_is_normalized():
    assert rotated_bounds(100, 50, 405) == rotated_bounds(100, 50, 45)
    assert rotated_bounds(100, 50, -30) == rotated_bounds(100, 50, 330)


def test_footprint_never_smaller_than_rectangle_side():
    for angle in ANGLES:
        footprint = rotated_bounds(200, 100, angle)
        assert max(footprint) >= 100


@pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (0, 0)])
def test_degenerate_rectangle_has_empty_footprint(width, height):
    assert rotated_bounds(width, height, 30) == Size(0, 0)


# ===== ScalingFitter =====

def test_fit_keeps_content_strictly_inside():
    assert fit_to_bounds(Size(100, 100), Size(40, 60)) == (40, 60)


def test_fit_scales_down_by_limiting_axis():
    assert fit_to_bounds(Size(100, 100), Size(400, 200)) == (100, 50)
    assert fit_to_bounds(Size(100, 100), Size(200, 400)) == (50, 100)


def test_fit_content_equal_to_bounds():
    assert fit_to_bounds(Size(80, 60), Size(80, 60)) == (80, 60)


def test_fit_zero_bounds_means_do_not_draw():
    assert fit_to_bounds(Size(0, 100), Size(40, 60)) == (0, 0)
    assert fit_to_bounds(Size(100, 0), Size(400, 60)) == (0, 0)


def test_fit_never_exceeds_bounds_or_upscales():
    for bw, bh in [(10, 10), (100, 30), (33, 77), (600, 480)]:
        for nw, nh in [(5, 5), (50, 20), (1000, 10), (12, 999), (640, 480)]:
            fitted = fit_to_bounds(Size(bw, bh), Size(nw, nh))
            assert fitted.width <= bw and fitted.height <= bh
            assert fitted.width <= nw and fitted.height <= nh


def test_fit_preserves_aspect_ratio():
    for natural in [Size(1000, 10), Size(640, 480), Size(300, 700)]:
        fitted = fit_to_bounds(Size(100, 100), natural)
        # Truncation loses less than one pixel on each axis
        skew = fitted.width * natural.height - fitted.height * natural.width
        assert abs(skew) <= max(natural)


# ===== PositionResolver =====

def test_position_examples():
    assert resolve_position(Anchor.CENTER, Size(100, 100), Size(20, 20)) == Point(40, 40)
    assert resolve_position(Anchor.BOTTOM_RIGHT, Size(100, 100), Size(20, 30)) == Point(80, 70)
    assert resolve_position(Anchor.TOP_LEFT, Size(100, 100), Size(20, 30)) == Point(0, 0)
    assert resolve_position(Anchor.TOP_LEFT, Size(5, 5), Size(50, 50)) == Point(0, 0)


def test_every_anchor():
    canvas, content = Size(200, 100), Size(50, 20)
    expected = {
        Anchor.TOP_LEFT: (0, 0),
        Anchor.TOP_CENTER: (75, 0),
        Anchor.TOP_RIGHT: (150, 0),
        Anchor.CENTER_LEFT: (0, 40),
        Anchor.CENTER: (75, 40),
        Anchor.CENTER_RIGHT: (150, 40),
        Anchor.BOTTOM_LEFT: (0, 80),
        Anchor.BOTTOM_CENTER: (75, 80),
        Anchor.BOTTOM_RIGHT: (150, 80),
    }
    for anchor, point in expected.items():
        assert resolve_position(anchor, canvas, content) == point


def test_oversized_content_gets_negative_offset():
    assert resolve_position(Anchor.BOTTOM_RIGHT, Size(100, 100), Size(120, 150)) == (-20, -50)
    assert resolve_position(Anchor.CENTER, Size(100, 100), Size(120, 140)) == (-10, -20)
