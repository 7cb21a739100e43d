import dataclasses

import pytest

from multibrot.evaluator import FractalMode, FractalParameters
from multibrot.view import (
    DEFAULT_SIDE,
    MAX_SIDE,
    MIN_SIDE,
    ViewState,
    Viewport,
    pan_offset,
    pixel_to_complex,
    plane_axes,
    plane_coordinate,
    sampling_metadata,
    zoom_anchor,
)


def test_viewport_unit_and_validation():
    assert Viewport(800, 600).unit == 600
    with pytest.raises(ValueError):
        Viewport(0, 10)


@pytest.mark.parametrize(
    "state",
    [
        ViewState(),
        ViewState(center_x=-0.7, center_y=0.3, side=0.001),
        ViewState(center_x=5.0, center_y=-9.0, side=9.5, mode=FractalMode.JULIA),
    ],
)
def test_toggle_mode_resets_view(state):
    before = state.mode
    state.toggle_mode()
    assert state.mode is before.toggled()
    assert (state.center_x, state.center_y, state.side) == (0.0, 0.0, DEFAULT_SIDE)


def test_set_mode_only_resets_on_change():
    state = ViewState(center_x=1.0, side=0.5)
    state.set_mode(FractalMode.MANDELBROT)
    assert (state.center_x, state.side) == (1.0, 0.5)
    state.set_mode(FractalMode.JULIA)
    assert state.mode is FractalMode.JULIA
    assert (state.center_x, state.side) == (0.0, DEFAULT_SIDE)


def test_pan_round_trip():
    state = ViewState(center_x=0.25, center_y=-0.5)
    state.pan(0.1234, -0.987)
    state.pan(-0.1234, 0.987)
    assert state.center_x == pytest.approx(0.25)
    assert state.center_y == pytest.approx(-0.5)


def test_pan_flips_vertical_axis():
    state = ViewState()
    state.pan(0.5, 0.5)
    assert state.center_x == pytest.approx(0.5)
    assert state.center_y == pytest.approx(-0.5)


def test_zoom_in_refused_at_minimum_side():
    state = ViewState(side=MIN_SIDE)
    assert not state.zoom(-1.0, (0.3, 0.3))
    assert state.side == MIN_SIDE
    assert state.center_x == 0.0


def test_zoom_out_allowed_at_minimum_side():
    state = ViewState(side=MIN_SIDE)
    assert state.zoom(1.0, (0.0, 0.0))
    assert state.side > MIN_SIDE


def test_zoom_out_refused_at_maximum_side():
    state = ViewState(side=MAX_SIDE)
    assert not state.zoom(1.0, (0.0, 0.0))
    assert state.side == MAX_SIDE


def test_zoom_in_allowed_at_maximum_side():
    state = ViewState(side=MAX_SIDE)
    assert state.zoom(-1.0, (0.0, 0.0))
    assert state.side == pytest.approx(9.0)


def test_zoom_never_collapses_side():
    state = ViewState(side=1.0)
    assert not state.zoom(-10.0, (0.0, 0.0))
    assert not state.zoom(-25.0, (0.0, 0.0))
    assert state.side == 1.0


def test_zoom_keeps_point_under_cursor_fixed():
    viewport = Viewport(800, 600)
    params = FractalParameters()
    state = ViewState(center_x=-0.5, center_y=0.25, side=1.5)
    cursor = (650.0, 120.0)
    before = plane_coordinate(state.snapshot(params, viewport), *cursor)
    assert state.zoom(-2.4, zoom_anchor(viewport, *cursor))
    after = plane_coordinate(state.snapshot(params, viewport), *cursor)
    assert state.side == pytest.approx(1.5 * 0.76)
    assert after.real == pytest.approx(before.real)
    assert after.imag == pytest.approx(before.imag)


def test_pan_offset_spans_side_at_short_edge():
    viewport = Viewport(800, 600)
    assert pan_offset(viewport, 2.0, 400, 300) == (0.0, 0.0)
    x, y = pan_offset(viewport, 2.0, 700, 0)
    assert x == pytest.approx(2.0)
    assert y == pytest.approx(-2.0)


def test_zoom_anchor_mirrors_horizontal_axis():
    x, y = zoom_anchor(Viewport(800, 600), 700, 600)
    assert x == pytest.approx(-1.0)
    assert y == pytest.approx(1.0)


def test_snapshot_is_detached_from_later_mutation():
    state = ViewState(center_x=1.0)
    snapshot = state.snapshot(FractalParameters(power=3.0), Viewport(10, 10))
    state.pan(1.0, 1.0)
    state.toggle_mode()
    assert snapshot.center_x == 1.0
    assert snapshot.mode is FractalMode.MANDELBROT
    assert snapshot.params.power == 3.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        snapshot.side = 1.0


def test_sampling_metadata_uses_pixel_centres():
    snapshot = ViewState(side=1.0).snapshot(FractalParameters(), Viewport(4, 2))
    metadata = sampling_metadata(snapshot)
    assert (metadata.x_start, metadata.y_start) == pytest.approx((-1.5, 0.5))
    assert (metadata.x_step, metadata.y_step) == pytest.approx((1.0, -1.0))

    x, y = pixel_to_complex(metadata, 1, 3)
    expected = plane_coordinate(snapshot, 3.5, 1.5)
    assert (x, y) == pytest.approx((expected.real, expected.imag))
    assert (x, y) == pytest.approx((1.5, -0.5))


def test_plane_axes_match_pixel_lookup():
    snapshot = ViewState(center_x=-0.75, center_y=0.1, side=0.05).snapshot(FractalParameters(), Viewport(7, 5))
    metadata = sampling_metadata(snapshot)
    xs, ys = plane_axes(metadata)
    assert xs.shape == (7,) and ys.shape == (5,)
    assert xs[3] == pytest.approx(-0.75)
    assert ys[2] == pytest.approx(0.1)
    for row in range(5):
        for col in range(7):
            assert (xs[col], ys[row]) == pytest.approx(pixel_to_complex(metadata, row, col))
