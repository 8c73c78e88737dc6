import pytest

from medmap.coloring import NO_DATA_COLOR, gradient_rgb, plotly_colorscale, region_color


@pytest.mark.parametrize("total", [None, 0])
def test_no_data_color(total):
    assert region_color(total, 0, 100) == NO_DATA_COLOR


def test_gradient_endpoints():
    assert region_color(1, 1, 101) == "rgb(51, 255, 51)"
    assert region_color(51, 1, 101) == "rgb(255, 255, 0)"
    assert region_color(101, 1, 101) == "rgb(255, 0, 0)"


def test_gradient_quarter_points():
    assert region_color(25, 0, 100) == "rgb(153, 255, 26)"
    assert region_color(75, 0, 100) == "rgb(255, 128, 0)"


def test_values_outside_bounds_are_clamped():
    assert region_color(5000, 0, 100) == "rgb(255, 0, 0)"
    assert region_color(1, 50, 100) == "rgb(51, 255, 51)"


def test_degenerate_range_is_red():
    assert region_color(7, 7, 7) == "rgb(255, 0, 0)"


def test_default_bounds():
    assert region_color(40000) == "rgb(255, 0, 0)"


def test_plotly_colorscale_matches_gradient():
    scale = plotly_colorscale()
    assert scale[0] == [0.0, "rgb(51, 255, 51)"]
    assert scale[2] == [0.5, "rgb(255, 255, 0)"]
    assert scale[-1] == [1.0, "rgb(255, 0, 0)"]
    assert gradient_rgb(-1) == (51, 255, 51)
