"""Interactive pygame window driving the engine."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from .evaluator import FractalMode, FractalParameters
from .interaction import WHEEL_NOTCH, InteractionController
from .palette import Palette, default_palette
from .renderer import render_frame
from .view import ViewState, Viewport

logger = logging.getLogger(__name__)

POWER_STEP = 0.05
SEED_STEP = 0.01


def _require_pygame():
    try:
        import pygame
    except ImportError as exc:
        raise RuntimeError("The interactive viewer needs pygame; install it with `pip install pygame`.") from exc
    return pygame


def translate_event(event, controller: InteractionController, pointer: Optional[tuple[int, int]] = None) -> bool:
    """Forward a pointer event to ``controller``. Returns whether the view may have changed."""

    pygame = _require_pygame()

    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        controller.drag_start(*event.pos)
        return False
    if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
        controller.drag_end()
        return False
    if event.type == pygame.MOUSEMOTION:
        if not controller.dragging:
            return False
        controller.drag_move(*event.pos)
        return True
    if event.type == pygame.WINDOWLEAVE:
        controller.drag_end()
        return False
    if event.type == pygame.MOUSEWHEEL:
        x, y = pointer if pointer is not None else pygame.mouse.get_pos()
        # pygame reports scrolling up as positive, which zooms in.
        return controller.wheel(x, y, -event.y * WHEEL_NOTCH)
    return False


class FractalViewer:
    """Own the window, the view state and the per-frame render loop."""

    def __init__(
        self,
        viewport: Viewport,
        params: FractalParameters,
        *,
        view: Optional[ViewState] = None,
        palette: Optional[Palette] = None,
        backend: str = "numpy",
        workers: Optional[int] = None,
        device: Optional[str] = None,
    ):
        self.view = view if view is not None else ViewState()
        self.params = params
        self.palette = palette if palette is not None else default_palette()
        self.controller = InteractionController(self.view, viewport)
        self.backend = backend
        self.workers = workers
        self.device = device
        self._dirty = True
        self._running = False

    def _caption(self) -> str:
        if self.view.mode is FractalMode.JULIA:
            seed = self.params.julia_seed
            return f"Julia Set  power={self.params.power:.2f}  c={seed.real:.2f}{seed.imag:+.2f}i"
        return f"Mandelbrot Set  power={self.params.power:.2f}"

    def _adjust(self, power: float = 0.0, seed: complex = 0j) -> None:
        updated = replace(self.params, power=self.params.power + power, julia_seed=self.params.julia_seed + seed)
        self.params = updated.clamped()
        self._dirty = True

    def _on_key(self, key: int, pygame) -> None:
        if key == pygame.K_ESCAPE:
            self._running = False
        elif key in (pygame.K_SPACE, pygame.K_TAB):
            mode = self.controller.toggle_mode()
            logger.info("switched to %s", mode.value)
            self._dirty = True
        elif key == pygame.K_r:
            self.view.reset()
            self._dirty = True
        elif key == pygame.K_UP:
            self._adjust(power=POWER_STEP)
        elif key == pygame.K_DOWN:
            self._adjust(power=-POWER_STEP)
        elif self.view.mode is FractalMode.JULIA:
            if key == pygame.K_RIGHT:
                self._adjust(seed=complex(SEED_STEP, 0.0))
            elif key == pygame.K_LEFT:
                self._adjust(seed=complex(-SEED_STEP, 0.0))
            elif key == pygame.K_PAGEUP:
                self._adjust(seed=complex(0.0, SEED_STEP))
            elif key == pygame.K_PAGEDOWN:
                self._adjust(seed=complex(0.0, -SEED_STEP))

    def _draw(self, screen, pygame) -> None:
        snapshot = self.view.snapshot(self.params, self.controller.viewport)
        result = render_frame(
            snapshot,
            self.palette,
            backend=self.backend,
            workers=self.workers,
            device=self.device,
        )
        surface = pygame.surfarray.make_surface(result.rgba[..., :3].swapaxes(0, 1))
        screen.blit(surface, (0, 0))
        pygame.display.set_caption(self._caption())
        pygame.display.flip()

    def run(self) -> None:
        pygame = _require_pygame()
        pygame.init()
        try:
            viewport = self.controller.viewport
            screen = pygame.display.set_mode((viewport.width, viewport.height), pygame.RESIZABLE)
            clock = pygame.time.Clock()
            self._running = True
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN:
                        self._on_key(event.key, pygame)
                    elif event.type == pygame.VIDEORESIZE:
                        self.controller.resize(Viewport(max(event.w, 1), max(event.h, 1)))
                        screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                        self._dirty = True
                    elif translate_event(event, self.controller):
                        self._dirty = True
                if self._dirty:
                    self._draw(screen, pygame)
                    self._dirty = False
                clock.tick(60)
        finally:
            pygame.quit()
