"""
View and interaction state.

ViewState holds everything that persists between frames: the zoom
boundary, the pan offsets, the freeze flag and the current parameter c.
update_view() applies one frame's worth of input to it, and
ViewState.frame_params() takes the immutable snapshot handed to the
field evaluator's workers.
"""

from dataclasses import dataclass

from .compute import map_value
from .config import (
    START_BOUNDARY,
    ZOOM_FACTOR,
    SCROLL_FACTOR,
    C_RANGE_RE,
    C_RANGE_IM,
    MAX_ITERS,
    ESCAPE_RADIUS,
    POST_ESCAPE_ITERATIONS,
)


@dataclass(frozen=True)
class FrameParams:
    """
    Everything a worker needs to score pixels for one frame.

    The plane region is [x_min, x_max] horizontally; y_top is the
    imaginary value of pixel row 0 and y_bottom that of row `height`.
    """
    width: int
    height: int
    x_min: float
    x_max: float
    y_top: float
    y_bottom: float
    c: complex
    max_iter: int = MAX_ITERS
    escape_radius: float = ESCAPE_RADIUS
    post_escape: int = POST_ESCAPE_ITERATIONS

    def pixel_to_complex(self, x, y):
        """Complex sample for pixel (x, y)."""
        return complex(
            map_value(float(x), 0.0, float(self.width), self.x_min, self.x_max),
            map_value(float(y), 0.0, float(self.height), self.y_top, self.y_bottom),
        )


@dataclass(frozen=True)
class InputSnapshot:
    """
    One frame of input, as polled from the platform layer.

    Held keys repeat their effect every frame; freeze_pressed is
    edge-triggered and is only True on the frame the key went down.
    """
    width: int
    height: int
    pointer: tuple = (0, 0)
    zoom_in: bool = False
    zoom_out: bool = False
    pan_left: bool = False
    pan_right: bool = False
    pan_up: bool = False
    pan_down: bool = False
    freeze_pressed: bool = False


def pointer_to_c(pointer, width, height):
    """Map a pointer position in pixels into the parameter range for c."""
    px, py = pointer
    return complex(
        map_value(float(px), 0.0, float(width), -C_RANGE_RE, C_RANGE_RE),
        map_value(float(py), 0.0, float(height), -C_RANGE_IM, C_RANGE_IM),
    )


@dataclass
class ViewState:
    """Mutable view/interaction state, owned by the frame loop."""
    boundary: float = START_BOUNDARY
    x_offset: float = 0.0
    y_offset: float = 0.0
    frozen: bool = False
    c: complex = 0j
    last_pointer: tuple = (0, 0)

    def __post_init__(self):
        if not self.boundary > 0:
            raise ValueError(f"boundary must be positive, got {self.boundary}")

    def bounds(self):
        """(x_min, x_max, y_top, y_bottom) of the visible plane region."""
        return (
            -self.boundary + self.x_offset,
            self.boundary + self.x_offset,
            self.boundary - self.y_offset,
            -self.boundary - self.y_offset,
        )

    def frame_params(self, width, height, max_iter=MAX_ITERS,
                     escape_radius=ESCAPE_RADIUS,
                     post_escape=POST_ESCAPE_ITERATIONS):
        """Snapshot the state into a FrameParams for a width x height viewport."""
        x_min, x_max, y_top, y_bottom = self.bounds()
        return FrameParams(
            width=width, height=height,
            x_min=x_min, x_max=x_max,
            y_top=y_top, y_bottom=y_bottom,
            c=self.c,
            max_iter=max_iter,
            escape_radius=escape_radius,
            post_escape=post_escape,
        )

    def status_text(self):
        """Overlay text showing the current c."""
        return f"c = {self.c.real:.3f} + {self.c.imag:.3f}i"


def update_view(state, inputs):
    """
    Apply one frame of input to the view state (in place).

    Transitions are not exclusive: zooming, panning in several directions
    and toggling freeze can all happen in the same frame. The freeze
    toggle is applied before the pointer is looked at, so the frame that
    freezes already ignores pointer movement.

    Args:
        state: ViewState to update
        inputs: InputSnapshot for this frame

    Returns:
        The same ViewState, for chaining.
    """
    if inputs.zoom_in:
        state.boundary /= ZOOM_FACTOR
    if inputs.zoom_out:
        state.boundary *= ZOOM_FACTOR

    # Pan speed scales with zoom so it feels constant on screen
    step = state.boundary / SCROLL_FACTOR
    if inputs.pan_right:
        state.x_offset += step
    if inputs.pan_left:
        state.x_offset -= step
    if inputs.pan_down:
        state.y_offset += step
    if inputs.pan_up:
        state.y_offset -= step

    if inputs.freeze_pressed:
        state.frozen = not state.frozen

    pointer = tuple(inputs.pointer)
    if pointer != state.last_pointer and not state.frozen:
        if inputs.width > 0 and inputs.height > 0:
            state.last_pointer = pointer
            state.c = pointer_to_c(pointer, inputs.width, inputs.height)

    return state
