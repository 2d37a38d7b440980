"""
Julia Set Visualizer Package

An interactive Julia set explorer using Pygame for display and Numba
for JIT-compiled, multi-threaded computation.

Quick Start:
    from JuliaVisualizer import run
    run()

Or from command line:
    python -m JuliaVisualizer

Package Structure:
    - config.py: Constants and settings.json loading
    - compute.py: JIT-compiled escape-time and coloring kernels
    - compute_gpu.py: Optional PyTorch backend
    - evaluator.py: Fork-join field evaluation over a worker pool
    - colormaps.py: Base gradients and the gradient lookup table
    - colorizer.py: Grayscale and gradient coloring policies
    - view.py: View/interaction state and per-frame snapshots
    - renderer.py: Per-frame rendering into the pixel buffer
    - app.py: Main application and frame loop

Controls:
    - Mouse: Select the parameter c
    - = / -: Zoom in/out
    - Arrow keys: Pan
    - Space: Freeze/unfreeze c
    - ESC: Quit
"""

from .app import run, JuliaApp
from .config import Settings
from .renderer import JuliaRenderer
from .evaluator import FieldEvaluator
from .colorizer import Colorizer, GrayscaleColorizer, GradientColorizer
from .colormaps import COLORMAPS, get_colormap, list_colormap_names
from .view import ViewState, FrameParams, InputSnapshot, update_view

__version__ = "1.0.0"
__all__ = [
    "run",
    "JuliaApp",
    "Settings",
    "JuliaRenderer",
    "FieldEvaluator",
    "Colorizer",
    "GrayscaleColorizer",
    "GradientColorizer",
    "COLORMAPS",
    "get_colormap",
    "list_colormap_names",
    "ViewState",
    "FrameParams",
    "InputSnapshot",
    "update_view",
]
