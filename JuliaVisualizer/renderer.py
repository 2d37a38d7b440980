"""
Per-frame Julia set renderer.

The JuliaRenderer class handles:
- Owning the RGBA pixel buffer and reallocating it on resize
- Running the field evaluator for the current view snapshot
- Colorizing the finished score grid into the buffer
- The status text and backing rectangle for the overlay
"""

import numpy as np

from .config import Settings, TEXT_X, TEXT_Y
from .colorizer import make_colorizer
from .evaluator import FieldEvaluator
from .view import ViewState


class JuliaRenderer:
    """
    Renders one full frame at a time.

    Usage:
        renderer = JuliaRenderer(800, 600, Settings())

        # In your game loop:
        renderer.resize(*screen.get_size())
        pixels = renderer.render(view_state)

    The evaluator always finishes every pixel before the colorizer runs,
    and the buffer is overwritten completely, so there are no partial
    frames.

    Attributes:
        width, height: Current viewport dimensions
        settings: Settings in use
        pixels: (height, width, 4) uint8 RGBA buffer
    """

    def __init__(self, width, height, settings=None, evaluator=None, colorizer=None):
        """
        Initialize the renderer.

        Args:
            width, height: Viewport dimensions in pixels
            settings: Settings (defaults if None)
            evaluator: FieldEvaluator to use (built from settings if None)
            colorizer: Colorizer to use (built from settings if None)
        """
        self.settings = settings or Settings()
        self.evaluator = evaluator or FieldEvaluator(
            workers=self.settings.workers,
            chunk_rows=self.settings.chunk_rows,
            backend=self.settings.backend,
        )
        self.colorizer = colorizer or make_colorizer(self.settings)
        self.width = 0
        self.height = 0
        self.pixels = None
        self.resize(width, height)

    def resize(self, width, height):
        """
        Reallocate the pixel buffer if the viewport size changed.

        The view window is left alone, so the plane region stays the same
        and only its pixel density changes.

        Returns:
            True if the buffer was reallocated
        """
        width = max(1, int(width))
        height = max(1, int(height))
        if self.pixels is not None and (width, height) == (self.width, self.height):
            return False
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)
        self.pixels[..., 3] = 255
        return True

    def frame_params(self, state):
        """Immutable snapshot of the view for the current buffer size."""
        return state.frame_params(
            self.width, self.height,
            max_iter=self.settings.max_iter,
            escape_radius=self.settings.escape_radius,
            post_escape=self.settings.post_escape,
        )

    def render(self, state):
        """
        Render a full frame for the given view state.

        Args:
            state: ViewState (read only)

        Returns:
            The RGBA pixel buffer (height, width, 4)
        """
        params = self.frame_params(state)
        scores = self.evaluator.evaluate(params)
        self.colorizer.colorize(scores, self.pixels)
        return self.pixels

    def rgb(self):
        """RGB view of the pixel buffer, transposed to (width, height, 3) for pygame."""
        return self.pixels[..., :3].swapaxes(0, 1)

    def warmup(self):
        """Compile the JIT kernels used by the current evaluator and colorizer."""
        params = ViewState().frame_params(
            4, 4, max_iter=10,
            escape_radius=self.settings.escape_radius,
            post_escape=self.settings.post_escape,
        )
        self.evaluator.evaluate(params)
        self.evaluator.evaluate_points(params, [(0, 0)])
        self.colorizer.warmup()

    @staticmethod
    def status_overlay(state, measure):
        """
        Status text and its backing rectangle.

        Args:
            state: ViewState
            measure: Callable returning (width, height) of a rendered string

        Returns:
            (text, (x, y, w, h)) with the rectangle anchored at the top-left
            corner and padded by TEXT_X / TEXT_Y
        """
        text = state.status_text()
        text_w, text_h = measure(text)
        return text, (0, 0, text_w + TEXT_X, text_h + TEXT_Y)

    def close(self):
        self.evaluator.close()
