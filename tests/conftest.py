import os

# Headless pygame for the app tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from JuliaVisualizer.config import Settings


@pytest.fixture
def small_settings():
    """Settings small enough to keep JIT-compiled tests quick."""
    return Settings(max_iter=50, workers=2, chunk_rows=4, width=64, height=48,
                    gradient_size=50, white_range=5)
