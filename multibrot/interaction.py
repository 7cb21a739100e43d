"""Translate pointer drag and wheel events into view mutations."""

from __future__ import annotations

from typing import Optional

from .evaluator import FractalMode
from .view import ViewState, Viewport, pan_offset, zoom_anchor

# Raw wheel delta of one scroll notch.
WHEEL_NOTCH = 125.0


class InteractionController:
    """The single writer of a :class:`ViewState`.

    Events carry screen coordinates relative to the viewport's top-left corner.
    """

    def __init__(self, view: ViewState, viewport: Viewport):
        self.view = view
        self.viewport = viewport
        self._last: Optional[tuple[float, float]] = None

    @property
    def dragging(self) -> bool:
        return self._last is not None

    def resize(self, viewport: Viewport) -> None:
        self.viewport = viewport

    def drag_start(self, x: float, y: float) -> None:
        self._last = pan_offset(self.viewport, self.view.side, x, y)

    def drag_move(self, x: float, y: float) -> None:
        if self._last is None:
            return
        current = pan_offset(self.viewport, self.view.side, x, y)
        dx = self._last[0] - current[0]
        dy = self._last[1] - current[1]
        self._last = current
        self.view.pan(dx, dy)

    def drag_end(self) -> None:
        self._last = None

    def wheel(self, x: float, y: float, raw_delta: float) -> bool:
        """Zoom around the cursor; positive deltas zoom out. Returns whether the view changed."""

        delta = raw_delta / WHEEL_NOTCH
        return self.view.zoom(delta, zoom_anchor(self.viewport, x, y))

    def toggle_mode(self) -> FractalMode:
        return self.view.toggle_mode()
