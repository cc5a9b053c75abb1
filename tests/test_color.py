import numpy as np
import pytest

from mandeltile import Pixel, color_for, colors_for, hsl_to_rgb
from mandeltile.color import hue_for, quantize

IN_SET = Pixel(191, 64, 64, 255)


def test_in_set_color():
    assert color_for(0.0) == IN_SET
    # Whole turns of the hue wheel land on the same color.
    assert color_for(360 / 25) == IN_SET
    assert color_for(-360 / 25) == IN_SET


@pytest.mark.parametrize(
    "hue, expected",
    [
        (0.0, (0.75, 0.25, 0.25)),
        (60.0, (0.75, 0.75, 0.25)),
        (120.0, (0.25, 0.75, 0.25)),
        (180.0, (0.25, 0.75, 0.75)),
        (240.0, (0.25, 0.25, 0.75)),
        (300.0, (0.75, 0.25, 0.75)),
    ],
)
def test_primary_hues(hue, expected):
    np.testing.assert_allclose(hsl_to_rgb(np.array(hue), 0.5, 0.5), expected)


def test_grey_when_unsaturated():
    np.testing.assert_allclose(hsl_to_rgb(np.array([0.0, 200.0]), 0.0, 0.3), [[0.3, 0.3, 0.3]] * 2)


def test_hue_is_wrapped_into_the_circle():
    hues = hue_for(np.array([0.0, 1.0, 14.4, -1.0, -14.4]))
    np.testing.assert_allclose(hues, [0.0, 25.0, 0.0, 335.0, 0.0], atol=1e-9)


@pytest.mark.parametrize("boundary", [60.0, 120.0, 180.0, 240.0, 300.0, 360.0])
def test_sectors_meet_without_jumps(boundary):
    counts = np.array([boundary - 1e-7, boundary, boundary + 1e-7]) / 25.0
    pixels = colors_for(counts).astype(int)
    assert np.abs(np.diff(pixels, axis=0)).max() <= 1


def test_colors_are_continuous_around_the_wheel():
    counts = np.linspace(0.0, 360.0 / 25.0, 20001)
    pixels = colors_for(counts).astype(int)
    assert np.abs(np.diff(pixels, axis=0)).max() <= 1


def test_channel_bounds_for_any_count():
    rng = np.random.default_rng(0)
    counts = np.concatenate(
        (
            rng.uniform(-1e6, 1e6, size=5000),
            rng.normal(0.0, 50.0, size=5000),
            np.array([0.0, -0.0, 1e-300, -1e-300, 1e300, -1e300, 1e308, -1e308, np.inf, -np.inf, np.nan]),
        )
    )
    pixels = colors_for(counts)
    assert pixels.dtype == np.uint8
    assert pixels.shape == counts.shape + (4,)
    assert np.all(pixels[..., 3] == 255)
    rgb = hsl_to_rgb(hue_for(counts), 0.5, 0.5)
    assert rgb.min() >= 0.0
    assert rgb.max() <= 1.0


def test_non_finite_counts_use_the_in_set_color():
    for count in (np.nan, np.inf, -np.inf):
        assert color_for(count) == IN_SET


def test_quantize_rounds_half_up_and_clamps():
    np.testing.assert_array_equal(quantize(np.array([0.0, 0.25, 0.75, 1.0, -0.5, 1.5])), [0, 64, 191, 255, 0, 255])


def test_colors_for_keeps_grid_shape():
    assert colors_for(np.zeros((3, 5))).shape == (3, 5, 4)
