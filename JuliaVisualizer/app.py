"""
Main application module for the Julia set visualizer.

Contains the JuliaApp class which handles:
- Window setup and main loop
- User input (pointer selects c, keys zoom/pan/freeze)
- Rendering and display
- The status overlay showing the current c
"""

import pygame

from .config import (
    Settings,
    FONT_SIZE,
    TEXT_X,
    TEXT_Y,
    TRANSPARENT_GREY,
    TEXT_COLOR,
    FPS,
)
from .renderer import JuliaRenderer
from .view import ViewState, InputSnapshot, update_view


class JuliaApp:
    """
    Main application class for the Julia set visualizer.

    Handles the pygame window, frame loop and input, and coordinates
    between the view state, renderer and display.
    """

    CAPTION = "Julia Set - Move the mouse to change c, +/- to zoom, arrows to pan, space to freeze"

    # Control keys
    KEY_ZOOM_IN = pygame.K_EQUALS
    KEY_ZOOM_OUT = pygame.K_MINUS
    KEY_LEFT = pygame.K_LEFT
    KEY_RIGHT = pygame.K_RIGHT
    KEY_UP = pygame.K_UP
    KEY_DOWN = pygame.K_DOWN
    KEY_FREEZE = pygame.K_SPACE

    def __init__(self, settings=None, width=None, height=None):
        """
        Initialize the application.

        Args:
            settings: Settings (loaded from settings.json if None)
            width: Window width in pixels (default from settings)
            height: Window height in pixels (default from settings)
        """
        self.settings = settings or Settings.load()
        self.width = width or self.settings.width
        self.height = height or self.settings.height

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None
        self.font = None

        # Components
        self.renderer = None
        self.state = ViewState()

        # Edge-triggered keys seen since the last frame
        self.freeze_pressed = False

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._init_components()

        self.running = True
        try:
            while self.running:
                self.step()
                # Present and wait for the next frame
                pygame.display.flip()
                self.clock.tick(FPS)
        finally:
            self.renderer.close()
            pygame.quit()

    def step(self):
        """Poll input, update the view, render and draw one frame."""
        self._handle_events()
        if not self.running:
            return
        inputs = self._poll_input()
        self._update(inputs)
        self._draw()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.width, self.height),
            pygame.RESIZABLE | pygame.DOUBLEBUF
        )
        pygame.display.set_caption(self.CAPTION)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, FONT_SIZE)

    def _init_components(self):
        """Create the renderer and compile its kernels."""
        self.renderer = JuliaRenderer(self.width, self.height, self.settings)

        pygame.display.set_caption("Compiling (first run only)...")
        print(f"Compute backend: {self.renderer.evaluator.describe()}")
        self.renderer.warmup()
        pygame.display.set_caption(self.CAPTION)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == self.KEY_FREEZE:
                    self.freeze_pressed = True

    def _poll_input(self):
        """Build this frame's InputSnapshot from pygame state."""
        width, height = self.screen.get_size()
        keys = pygame.key.get_pressed()
        inputs = InputSnapshot(
            width=width,
            height=height,
            pointer=pygame.mouse.get_pos(),
            zoom_in=bool(keys[self.KEY_ZOOM_IN]),
            zoom_out=bool(keys[self.KEY_ZOOM_OUT]),
            pan_left=bool(keys[self.KEY_LEFT]),
            pan_right=bool(keys[self.KEY_RIGHT]),
            pan_up=bool(keys[self.KEY_UP]),
            pan_down=bool(keys[self.KEY_DOWN]),
            freeze_pressed=self.freeze_pressed,
        )
        self.freeze_pressed = False
        return inputs

    def _update(self, inputs):
        """Apply input to the view state and follow window resizes."""
        # Resize is only picked up here, between frames
        if self.renderer.resize(inputs.width, inputs.height):
            self.width, self.height = self.renderer.width, self.renderer.height
        update_view(self.state, inputs)

    def _draw(self):
        """Render the fractal and the status overlay to the screen."""
        self.renderer.render(self.state)
        surface = pygame.surfarray.make_surface(self.renderer.rgb())
        self.screen.blit(surface, (0, 0))
        self._draw_overlay()

    def _draw_overlay(self):
        """Draw the current c over a semi-transparent rectangle."""
        text, (x, y, w, h) = self.renderer.status_overlay(self.state, self.font.size)
        # Backing rectangle in case the text is over a black region
        backing = pygame.Surface((w, h), pygame.SRCALPHA)
        backing.fill(TRANSPARENT_GREY)
        self.screen.blit(backing, (x, y))

        label = self.font.render(text, True, TEXT_COLOR)
        self.screen.blit(label, (TEXT_X, TEXT_Y - label.get_height()))


def run(settings=None, width=None, height=None):
    """
    Run the Julia set visualizer.

    Args:
        settings: Settings (default: loaded from settings.json)
        width: Window width (default from settings)
        height: Window height (default from settings)
    """
    app = JuliaApp(settings, width, height)
    try:
        app.run()
    except KeyboardInterrupt:
        pass
