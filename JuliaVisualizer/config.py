"""
Configuration for the Julia set visualizer.

Fixed constants live at module level. Tunable rendering settings are read
from settings.json (next to this file) into a Settings object; a missing
or malformed file falls back to the defaults below.
"""

import json
import numbers
import os
from dataclasses import dataclass, fields


# Iteration limits
MAX_ITERS = 500
POST_ESCAPE_ITERATIONS = 2   # Extra iterations after escape, for smoothing
ESCAPE_RADIUS = 2.0

# View
START_BOUNDARY = 1.5
ZOOM_FACTOR = 1.1
SCROLL_FACTOR = 50.0

# Pointer -> c parameter range
C_RANGE_RE = 2.0
C_RANGE_IM = 0.5

# Gradient
WHITE_GRADIENT_RANGE = 20    # Near-white entries appended to the base gradient
DEFAULT_COLORMAP = 'magma'

# Overlay
FONT_SIZE = 30
TEXT_X = 10
TEXT_Y = 30
TRANSPARENT_GREY = (220, 220, 220, 51)
TEXT_COLOR = (0, 0, 0)

# Window
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 800
FPS = 60

COLORIZERS = ('gradient', 'grayscale')
BACKENDS = ('auto', 'threads', 'numba', 'gpu')

SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')


def load_settings(path=None):
    """Load the raw settings dict from a JSON file (None if unavailable)."""
    settings_path = path or SETTINGS_PATH
    try:
        with open(settings_path, 'r') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        print(f"Warning: Could not load {os.path.basename(settings_path)}: {e}")
        return None


def _as_int(name, value):
    """Return value as an int, rejecting non-numbers and fractional values."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not float(value).is_integer():
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return int(value)


@dataclass
class Settings:
    """
    Rendering settings.

    Attributes:
        max_iter: Iteration cap; non-escaping points score exactly this
        escape_radius: |z| threshold for escape
        post_escape: Grace iterations run past the first escape
        colorizer: 'gradient' or 'grayscale'
        colormap: Base gradient name (see colormaps.COLORMAPS)
        gradient_size: Number of entries sampled from the base gradient
        white_range: Number of near-white entries appended to the gradient
        backend: Field evaluator backend ('auto', 'threads', 'numba', 'gpu')
        workers: Worker threads for the 'threads' backend (None = CPU count)
        chunk_rows: Rows per worker task for the 'threads' backend
        width, height: Initial window size
    """
    max_iter: int = MAX_ITERS
    escape_radius: float = ESCAPE_RADIUS
    post_escape: int = POST_ESCAPE_ITERATIONS
    colorizer: str = 'gradient'
    colormap: str = DEFAULT_COLORMAP
    gradient_size: int = MAX_ITERS
    white_range: int = WHITE_GRADIENT_RANGE
    backend: str = 'auto'
    workers: int = None
    chunk_rows: int = 16
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT

    def __post_init__(self):
        for name in ('max_iter', 'post_escape', 'gradient_size', 'white_range',
                     'chunk_rows', 'width', 'height'):
            setattr(self, name, _as_int(name, getattr(self, name)))
        if self.workers is not None:
            self.workers = _as_int('workers', self.workers)
        if isinstance(self.escape_radius, bool) or not isinstance(self.escape_radius, numbers.Real):
            raise ValueError(f"escape_radius must be a number, got {self.escape_radius!r}")
        self.escape_radius = float(self.escape_radius)

        if self.max_iter < 1:
            raise ValueError(f"max_iter must be positive, got {self.max_iter}")
        if self.escape_radius <= 0:
            raise ValueError(f"escape_radius must be positive, got {self.escape_radius}")
        if self.post_escape < 0:
            raise ValueError(f"post_escape must be non-negative, got {self.post_escape}")
        if self.colorizer not in COLORIZERS:
            raise ValueError(f"Unknown colorizer {self.colorizer!r}, expected one of {COLORIZERS}")
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend {self.backend!r}, expected one of {BACKENDS}")
        if self.gradient_size < 1 or self.white_range < 0:
            raise ValueError("gradient_size must be positive and white_range non-negative")
        if self.gradient_size + self.white_range < 2:
            raise ValueError("Gradient table needs at least 2 entries")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be positive, got {self.workers}")
        if self.chunk_rows < 1:
            raise ValueError(f"chunk_rows must be positive, got {self.chunk_rows}")
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Window size must be positive, got {self.width}x{self.height}")

    @classmethod
    def from_dict(cls, data):
        """Build settings from a dict, ignoring unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def load(cls, path=None):
        """Read settings.json, falling back to defaults if it can't be read."""
        return cls.from_dict(load_settings(path))
