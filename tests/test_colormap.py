import numpy as np
import pytest

from ripplelab.colormap import BLOCKED_COLOR, ColorScheme, colorize, hsl_to_rgb


def rgb(values, scheme, obstacles=None):
    values = np.asarray(values, dtype=np.float32)
    if obstacles is None:
        obstacles = np.ones_like(values)
    return colorize(values, obstacles, scheme)[..., :3]


def test_output_is_rgba8_with_opaque_alpha(field):
    image = colorize(field.heights, field.obstacles)
    assert image.shape == (48, 64, 4)
    assert image.dtype == np.uint8
    assert (image[..., 3] == 255).all()


def test_preallocated_output_is_reused(field):
    out = np.zeros((48, 64, 4), dtype=np.uint8)
    image = colorize(field.heights, field.obstacles, ColorScheme.GRAYSCALE, out=out)
    assert image is out
    assert (out[..., 0] == 127).all()


@pytest.mark.parametrize('scheme', list(ColorScheme))
def test_blocked_cells_use_fixed_color(scheme):
    values = np.array([0.7, -0.4, 0.0])
    obstacles = np.array([0.0, 0.0, 1.0])
    colors = rgb(values, scheme, obstacles)
    assert tuple(colors[0]) == BLOCKED_COLOR
    assert tuple(colors[1]) == BLOCKED_COLOR
    assert tuple(colors[2]) != BLOCKED_COLOR


def test_slowed_cells_are_not_blocked():
    colors = rgb([1.0], ColorScheme.DEEP_OCEAN, np.array([0.5]))
    assert tuple(colors[0]) == (60, 120, 255)


def test_deep_ocean_endpoints():
    colors = rgb([-1.0, 1.0, 3.0], ColorScheme.DEEP_OCEAN)
    assert tuple(colors[0]) == (20, 40, 80)
    assert tuple(colors[1]) == (60, 120, 255)
    # amplitudes beyond +-1 saturate
    assert tuple(colors[2]) == (60, 120, 255)


def test_scientific_runs_red_green_blue():
    colors = rgb([-1.0, 0.0, 1.0], ColorScheme.SCIENTIFIC)
    assert tuple(colors[0]) == (255, 0, 0)
    assert tuple(colors[1]) == (0, 255, 0)
    assert tuple(colors[2]) == (0, 0, 255)


def test_grayscale_midpoint_and_limits():
    colors = rgb([0.0, -2.0, 2.0], ColorScheme.GRAYSCALE)
    assert tuple(colors[0]) == (127, 127, 127)
    assert tuple(colors[1]) == (0, 0, 0)
    assert tuple(colors[2]) == (255, 255, 255)


def test_phase_color_follows_hue_of_amplitude():
    values = np.linspace(-2.0, 2.0, 41).astype(np.float32)
    colors = rgb(values, ColorScheme.PHASE_COLOR).astype(int)
    for v, c in zip(values.astype(np.float64), colors):
        hue = int(np.floor((np.arctan2(v, 0.5) + np.pi) / (2.0 * np.pi) * 360.0))
        np.testing.assert_allclose(c, hsl_to_rgb(hue, 80, 50), atol=1)


def test_hsl_primaries():
    assert hsl_to_rgb(0, 100, 50) == (255, 0, 0)
    assert hsl_to_rgb(120, 100, 50) == (0, 255, 0)
    assert hsl_to_rgb(240, 100, 50) == (0, 0, 255)
    assert hsl_to_rgb(0, 0, 100) == (255, 255, 255)
