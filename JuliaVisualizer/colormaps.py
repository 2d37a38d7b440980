"""
Colormap definitions for Julia set visualization.

Each colormap function takes a size and returns a numpy array of shape
(size, 3) with float64 RGB channels in [0, 1], ordered from the color used
for non-escaping points (index 0) to the color used for the fastest
escaping ones.

build_gradient_table() extends a base colormap with a near-white band,
which gives the fast-escaping edge of the set a saturating highlight.

To add a new colormap:
1. Define a create_colormap_xxx(size) function that returns the color array
2. Add it to the COLORMAPS dictionary at the bottom of this file
"""

import numpy as np
from matplotlib import colormaps as mpl_colormaps

from .config import MAX_ITERS, WHITE_GRADIENT_RANGE, DEFAULT_COLORMAP


WHITE_BAND_START = 0.9
WHITE_BAND_END = 1.0


def _sample_matplotlib(name, size):
    """Sample a matplotlib colormap at `size` evenly spaced points."""
    cmap = mpl_colormaps[name]
    return cmap(np.linspace(0.0, 1.0, size))[:, :3].astype(np.float64)


def create_colormap_magma(size=MAX_ITERS):
    """
    Magma colormap: black -> purple -> orange -> pale yellow.

    Perceptually uniform, and its dark end keeps the filled Julia set black.
    """
    return _sample_matplotlib('magma', size)


def create_colormap_inferno(size=MAX_ITERS):
    """Inferno colormap: black -> red -> yellow. Perceptually uniform."""
    return _sample_matplotlib('inferno', size)


def create_colormap_plasma(size=MAX_ITERS):
    """Plasma colormap: blue -> magenta -> yellow."""
    return _sample_matplotlib('plasma', size)


def create_colormap_viridis(size=MAX_ITERS):
    """Viridis colormap: purple -> teal -> yellow."""
    return _sample_matplotlib('viridis', size)


def create_colormap_hot(size=MAX_ITERS):
    """
    Hot colormap: black -> red -> orange -> yellow -> white.

    Classic "fire" look with good contrast. Uses a power curve
    to spend more time in the bright colors (glow effect).
    """
    t = np.linspace(0.0, 1.0, size) ** 0.8
    colors = np.empty((size, 3), dtype=np.float64)
    colors[:, 0] = np.clip(t * 2.5, 0.0, 1.0)            # Red
    colors[:, 1] = np.clip((t - 0.4) * 2.5, 0.0, 1.0)    # Green
    colors[:, 2] = np.clip((t - 0.7) * 3.3, 0.0, 1.0)    # Blue
    return colors


def create_colormap_grayscale(size=MAX_ITERS):
    """Grayscale colormap: black -> white."""
    return np.repeat(np.linspace(0.0, 1.0, size)[:, None], 3, axis=1)


# Registry of all available colormaps.
# Keys are names usable in settings.json, values are factory functions.
COLORMAPS = {
    'magma': create_colormap_magma,
    'inferno': create_colormap_inferno,
    'plasma': create_colormap_plasma,
    'viridis': create_colormap_viridis,
    'hot': create_colormap_hot,
    'grayscale': create_colormap_grayscale,
}


def get_colormap(name, size=MAX_ITERS):
    """
    Get a colormap by name.

    Args:
        name: Key from COLORMAPS dictionary
        size: Number of entries to sample

    Returns:
        Colormap array (size, 3) of float64 RGB values in [0, 1]

    Raises:
        KeyError if name not found
    """
    if name not in COLORMAPS:
        raise KeyError(f"Unknown colormap {name!r}, expected one of {list_colormap_names()}")
    return COLORMAPS[name](size)


def list_colormap_names():
    """Get list of available colormap names."""
    return list(COLORMAPS.keys())


def white_band(size=WHITE_GRADIENT_RANGE):
    """Gray ramp from 0.9 to 1.0 with `size` entries, shape (size, 3)."""
    levels = np.linspace(WHITE_BAND_START, WHITE_BAND_END, size)
    return np.repeat(levels[:, None], 3, axis=1)


def build_gradient_table(name=DEFAULT_COLORMAP, size=MAX_ITERS,
                         white_range=WHITE_GRADIENT_RANGE):
    """
    Build the lookup table used by the gradient colorizer.

    Args:
        name: Base colormap name
        size: Entries sampled from the base colormap
        white_range: Near-white entries appended after the base

    Returns:
        Read-only float64 array (size + white_range, 3), channels in [0, 1]

    Raises:
        ValueError if the table would have fewer than 2 entries
    """
    if size < 0 or white_range < 0 or size + white_range < 2:
        raise ValueError(
            f"Gradient table needs at least 2 entries, got {size} + {white_range}"
        )
    base = get_colormap(name, size) if size else np.empty((0, 3))
    table = np.concatenate([base, white_band(white_range)])
    table.setflags(write=False)
    return table


def table_to_uint8(table):
    """Convert a [0, 1] float color table to a contiguous uint8 table."""
    lut = np.rint(np.clip(table, 0.0, 1.0) * 255.0).astype(np.uint8)
    return np.ascontiguousarray(lut)
