"""
Score -> color policies.

A Colorizer turns a grid of escape scores into an opaque RGBA image.
Two policies are available and selected through settings:

- GrayscaleColorizer: inverted linear gray ramp (inside the set is black)
- GradientColorizer: lookup into a gradient table (see colormaps.py)

Both work per pixel with no ordering dependency, so the array kernels
run in parallel.
"""

import numpy as np

from .compute import (
    apply_grayscale,
    apply_gradient,
    gradient_index,
    grayscale_value,
)
from .colormaps import build_gradient_table, table_to_uint8


class Colorizer:
    """Base class for score -> RGBA policies."""

    name = None

    def __init__(self, max_iter):
        self.max_iter = max_iter

    def colorize(self, scores, out):
        """
        Color a score grid into an RGBA buffer.

        Args:
            scores: 2D float64 array (height, width)
            out: uint8 array (height, width, 4), fully overwritten
        """
        raise NotImplementedError

    def color_for(self, score):
        """Return the (r, g, b, a) uint8 color for a single score."""
        raise NotImplementedError

    def warmup(self):
        """Compile the colorizer kernel on a tiny grid."""
        self.colorize(np.zeros((2, 2)), np.empty((2, 2, 4), dtype=np.uint8))


class GrayscaleColorizer(Colorizer):
    """Inverted gray ramp: score 0 is white, max_iter is black."""

    name = 'grayscale'

    def colorize(self, scores, out):
        apply_grayscale(scores, float(self.max_iter), out)

    def color_for(self, score):
        v = grayscale_value(float(score), float(self.max_iter))
        return (v, v, v, 255)


class GradientColorizer(Colorizer):
    """
    Gradient-table lookup.

    The score is normalized from [0, max_iter] to [1, 0], clamped into
    [0, 1] and used to pick entry floor((N - 1) * t) of the table, so
    non-escaping points take the first entry and the fastest escaping
    ones the last.
    """

    name = 'gradient'

    def __init__(self, max_iter, table):
        super().__init__(max_iter)
        if len(table) < 2:
            raise ValueError(f"Gradient table needs at least 2 entries, got {len(table)}")
        self.table = table
        self.lut = table_to_uint8(table)

    @classmethod
    def from_colormap(cls, max_iter, colormap, size, white_range):
        return cls(max_iter, build_gradient_table(colormap, size, white_range))

    def colorize(self, scores, out):
        apply_gradient(scores, float(self.max_iter), self.lut, out)

    def index_for(self, score):
        return gradient_index(float(score), float(self.max_iter), len(self.lut))

    def lookup(self, t):
        """
        Table entry for an already normalized value t.

        t is clamped into [0, 1]; NaN selects the first entry.
        """
        t = float(t)
        if np.isnan(t):
            t = 0.0
        t = min(max(t, 0.0), 1.0)
        return self.table[int(np.floor((len(self.table) - 1) * t))]

    def color_for(self, score):
        r, g, b = self.lut[self.index_for(score)]
        return (int(r), int(g), int(b), 255)


def make_colorizer(settings):
    """Create the colorizer selected by a Settings object."""
    if settings.colorizer == 'grayscale':
        return GrayscaleColorizer(settings.max_iter)
    if settings.colorizer == 'gradient':
        return GradientColorizer.from_colormap(
            settings.max_iter, settings.colormap,
            settings.gradient_size, settings.white_range,
        )
    raise ValueError(f"Unknown colorizer {settings.colorizer!r}")
