"""
Julia set computation functions using Numba JIT compilation.

This module contains all the performance-critical computation functions
that are JIT-compiled for speed. These functions handle:
- Affine coordinate mapping (pixel -> complex plane)
- The escape-time recurrence z <- z² + c with smooth escape scores
- Grayscale and gradient colorization of score grids

All kernels use error_model='numpy' so that degenerate inputs (zero-width
mapping ranges, log2 of values <= 1) produce inf/NaN instead of raising.
fastmath is deliberately not enabled: it assumes finite values, and NaN
scores must reach the colorizer unchanged.
"""

import math

import numpy as np
from numba import jit, prange


@jit(nopython=True, cache=True, error_model='numpy')
def map_value(value, from_min, from_max, to_min, to_max):
    """
    Map value from one range to another.

    Normalizes value to [0, 1] relative to [from_min, from_max], then scales
    into [to_min, to_max]. No clamping is applied.
    """
    normalized = (value - from_min) / (from_max - from_min)
    return normalized * (to_max - to_min) + to_min


@jit(nopython=True, cache=True, error_model='numpy')
def escape_score(zr, zi, cr, ci, max_iter, escape_radius, post_escape):
    """
    Run z <- z² + c from z0 = zr + i·zi and return a smooth escape score.

    Once |z| first exceeds escape_radius the orbit keeps going for
    post_escape + 1 more over-threshold checks before the score is taken,
    which makes the log2(log2|z|) correction accurate.

    Returns:
        i - log2(log2|z|) for the iteration index i at which escape was
        declared, or exactly max_iter if the orbit never escaped.
    """
    post_iters = 0
    for i in range(max_iter):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        norm = math.hypot(zr, zi)

        if norm > escape_radius:
            if post_iters <= post_escape:
                post_iters += 1
            else:
                return i - math.log2(math.log2(norm))
    return float(max_iter)


@jit(nopython=True, parallel=True, cache=True, error_model='numpy')
def compute_julia(x_min, x_max, y_top, y_bottom, width, height,
                  cr, ci, max_iter, escape_radius, post_escape):
    """
    Compute escape scores for a full viewport in one parallel kernel.

    Args:
        x_min, x_max: Real axis bounds (left and right edges)
        y_top, y_bottom: Imaginary values of the top and bottom edges
        width, height: Viewport dimensions in pixels
        cr, ci: The Julia parameter c
        max_iter: Maximum iteration count
        escape_radius: Escape threshold on |z|
        post_escape: Grace iterations after first escape

    Returns:
        2D numpy array (height, width) of float64 escape scores.
    """
    result = np.empty((height, width), dtype=np.float64)
    for py in prange(height):
        zi0 = map_value(py, 0.0, height, y_top, y_bottom)
        for px in range(width):
            zr0 = map_value(px, 0.0, width, x_min, x_max)
            result[py, px] = escape_score(zr0, zi0, cr, ci, max_iter,
                                          escape_radius, post_escape)
    return result


@jit(nopython=True, nogil=True, cache=True, error_model='numpy')
def compute_julia_rows(x_min, x_max, y_top, y_bottom, width, height,
                       row_start, row_end, cr, ci, max_iter, escape_radius,
                       post_escape):
    """
    Compute escape scores for the rows [row_start, row_end) of a viewport.

    Releases the GIL, so several calls can run concurrently on a thread
    pool. Coordinates are mapped against the full viewport size.

    Returns:
        2D numpy array (row_end - row_start, width) of float64 scores.
    """
    result = np.empty((row_end - row_start, width), dtype=np.float64)
    for row in range(row_end - row_start):
        zi0 = map_value(row_start + row, 0.0, height, y_top, y_bottom)
        for px in range(width):
            zr0 = map_value(px, 0.0, width, x_min, x_max)
            result[row, px] = escape_score(zr0, zi0, cr, ci, max_iter,
                                           escape_radius, post_escape)
    return result


@jit(nopython=True, nogil=True, cache=True, error_model='numpy')
def compute_julia_points(xs, ys, x_min, x_max, y_top, y_bottom, width, height,
                         cr, ci, max_iter, escape_radius, post_escape):
    """
    Compute escape scores for an arbitrary list of pixel coordinates.

    Args:
        xs, ys: 1D arrays of pixel coordinates (same length)
        (other arguments as in compute_julia)

    Returns:
        1D numpy array of float64 scores, one per point.
    """
    n = xs.shape[0]
    result = np.empty(n, dtype=np.float64)
    for k in range(n):
        zr0 = map_value(xs[k], 0.0, width, x_min, x_max)
        zi0 = map_value(ys[k], 0.0, height, y_top, y_bottom)
        result[k] = escape_score(zr0, zi0, cr, ci, max_iter,
                                 escape_radius, post_escape)
    return result


@jit(nopython=True, cache=True, error_model='numpy')
def gradient_index(score, max_iter, num_colors):
    """
    Table index for a score: inverted normalization, clamped into [0, 1].

    NaN maps to index 0.
    """
    t = map_value(score, 0.0, max_iter, 1.0, 0.0)
    if t != t:
        t = 0.0
    elif t < 0.0:
        t = 0.0
    elif t > 1.0:
        t = 1.0
    return int(math.floor((num_colors - 1) * t))


@jit(nopython=True, cache=True, error_model='numpy')
def grayscale_value(score, max_iter):
    """Inverted gray level in [0, 255] for a score. NaN maps to 0 (black)."""
    v = 255.0 - map_value(score, 0.0, max_iter, 0.0, 255.0)
    if v != v:
        return 0
    if v < 0.0:
        return 0
    if v > 255.0:
        return 255
    return int(v)


@jit(nopython=True, parallel=True, cache=True, error_model='numpy')
def apply_grayscale(scores, max_iter, out):
    """
    Write an inverted grayscale image of the scores into an RGBA buffer.

    Args:
        scores: 2D array of escape scores
        max_iter: Maximum iteration value (maps to black)
        out: Output RGBA image array (height, width, 4) uint8, modified in place
    """
    height, width = scores.shape
    for py in prange(height):
        for px in range(width):
            v = np.uint8(grayscale_value(scores[py, px], max_iter))
            out[py, px, 0] = v
            out[py, px, 1] = v
            out[py, px, 2] = v
            out[py, px, 3] = 255


@jit(nopython=True, parallel=True, cache=True, error_model='numpy')
def apply_gradient(scores, max_iter, lut, out):
    """
    Write gradient-table colors for the scores into an RGBA buffer.

    Args:
        scores: 2D array of escape scores
        max_iter: Maximum iteration value (maps to the first table entry)
        lut: Nx3 array of RGB colors (uint8)
        out: Output RGBA image array (height, width, 4) uint8, modified in place
    """
    height, width = scores.shape
    num_colors = lut.shape[0]
    for py in prange(height):
        for px in range(width):
            idx = gradient_index(scores[py, px], max_iter, num_colors)
            out[py, px, 0] = lut[idx, 0]
            out[py, px, 1] = lut[idx, 1]
            out[py, px, 2] = lut[idx, 2]
            out[py, px, 3] = 255

