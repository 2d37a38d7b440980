import pytest

from JuliaVisualizer.config import START_BOUNDARY, ZOOM_FACTOR, SCROLL_FACTOR, C_RANGE_RE, C_RANGE_IM
from JuliaVisualizer.view import (
    FrameParams,
    InputSnapshot,
    ViewState,
    pointer_to_c,
    update_view,
)


def frame(**kwargs):
    kwargs.setdefault("width", 800)
    kwargs.setdefault("height", 800)
    return InputSnapshot(**kwargs)


def test_initial_state():
    state = ViewState()
    assert state.boundary == START_BOUNDARY
    assert (state.x_offset, state.y_offset) == (0.0, 0.0)
    assert not state.frozen
    assert state.c == 0j


def test_boundary_must_be_positive():
    with pytest.raises(ValueError):
        ViewState(boundary=0.0)


def test_bounds_with_offsets():
    state = ViewState(boundary=2.0, x_offset=0.5, y_offset=0.25)
    assert state.bounds() == (-1.5, 2.5, 1.75, -2.25)


def test_center_pixel_maps_to_origin():
    params = ViewState(boundary=1.5).frame_params(400, 400)
    assert params.pixel_to_complex(200, 200) == 0j


def test_top_left_pixel_maps_to_upper_left_corner():
    params = ViewState(boundary=1.5).frame_params(400, 400)
    assert params.pixel_to_complex(0, 0) == complex(-1.5, 1.5)


def test_frame_params_is_immutable():
    params = ViewState().frame_params(10, 10)
    assert isinstance(params, FrameParams)
    with pytest.raises(Exception):
        params.width = 20


def test_zoom_keys():
    state = ViewState()
    update_view(state, frame(zoom_in=True))
    assert state.boundary == pytest.approx(START_BOUNDARY / ZOOM_FACTOR)
    update_view(state, frame(zoom_out=True))
    update_view(state, frame(zoom_out=True))
    assert state.boundary == pytest.approx(START_BOUNDARY * ZOOM_FACTOR)


def test_pan_scales_with_boundary():
    state = ViewState(boundary=1.0)
    update_view(state, frame(pan_right=True, pan_down=True))
    assert state.x_offset == pytest.approx(1.0 / SCROLL_FACTOR)
    assert state.y_offset == pytest.approx(1.0 / SCROLL_FACTOR)

    state = ViewState(boundary=0.01)
    update_view(state, frame(pan_left=True, pan_up=True))
    assert state.x_offset == pytest.approx(-0.01 / SCROLL_FACTOR)
    assert state.y_offset == pytest.approx(-0.01 / SCROLL_FACTOR)


def test_zoom_and_pan_in_the_same_frame():
    state = ViewState(boundary=1.1)
    update_view(state, frame(zoom_in=True, pan_right=True))
    assert state.boundary == pytest.approx(1.0)
    assert state.x_offset == pytest.approx(1.0 / SCROLL_FACTOR)


def test_pointer_maps_into_parameter_range():
    assert pointer_to_c((400, 400), 800, 800) == 0j
    assert pointer_to_c((0, 0), 800, 800) == complex(-C_RANGE_RE, -C_RANGE_IM)
    assert pointer_to_c((800, 800), 800, 800) == complex(C_RANGE_RE, C_RANGE_IM)


def test_pointer_that_never_moved_keeps_c_at_zero():
    state = ViewState()
    update_view(state, frame(pointer=(0, 0)))
    assert state.c == 0j


def test_pointer_movement_updates_c():
    state = ViewState()
    update_view(state, frame(pointer=(600, 200)))
    assert state.c == pointer_to_c((600, 200), 800, 800)


def test_freeze_keeps_c_until_unfrozen():
    state = ViewState()
    update_view(state, frame(pointer=(600, 200)))
    c = state.c

    update_view(state, frame(pointer=(600, 200), freeze_pressed=True))
    assert state.frozen
    for pointer in [(10, 10), (700, 700), (123, 456)]:
        update_view(state, frame(pointer=pointer))
        assert state.c == c

    update_view(state, frame(pointer=(123, 456), freeze_pressed=True))
    assert not state.frozen
    assert state.c == pointer_to_c((123, 456), 800, 800)


def test_freeze_frame_ignores_pointer():
    state = ViewState()
    update_view(state, frame(pointer=(100, 100), freeze_pressed=True))
    assert state.frozen
    assert state.c == 0j


def test_freeze_is_edge_triggered():
    state = ViewState()
    update_view(state, frame(freeze_pressed=True))
    update_view(state, frame())
    update_view(state, frame())
    assert state.frozen


def test_zero_size_viewport_does_not_update_c():
    state = ViewState()
    update_view(state, InputSnapshot(width=0, height=0, pointer=(5, 5)))
    assert state.c == 0j


def test_status_text():
    assert ViewState().status_text() == "c = 0.000 + 0.000i"
    assert ViewState(c=complex(1.23456, -0.5)).status_text() == "c = 1.235 + -0.500i"
