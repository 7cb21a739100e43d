"""Pan/zoom view state and the screen to complex-plane transform."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .evaluator import FractalMode, FractalParameters

DEFAULT_SIDE = 2.0
MIN_SIDE = 6e-5
MAX_SIDE = 10.0
# Each wheel notch changes ``side`` by ``side / ZOOM_DIVISOR``.
ZOOM_DIVISOR = 10.0


@dataclass(frozen=True)
class Viewport:
    """Size of the output surface in pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"viewport must have a positive size, got {self.width}x{self.height}")

    @property
    def unit(self) -> int:
        return min(self.width, self.height)


@dataclass(frozen=True)
class FrameSnapshot:
    """Immutable copy of everything a frame needs to evaluate its pixels."""

    center_x: float
    center_y: float
    side: float
    mode: FractalMode
    params: FractalParameters
    viewport: Viewport


@dataclass(frozen=True)
class SamplingMetadata:
    """Plane coordinates of pixel centres for a rendered frame.

    ``(x_start, y_start)`` is the centre of the top-left pixel; ``y_step`` is
    negative because image rows grow downward while the imaginary axis grows
    upward.
    """

    x_start: float
    y_start: float
    x_step: float
    y_step: float
    x_res: int
    y_res: int


@dataclass
class ViewState:
    """Center, half-extent and fractal type of the session's view."""

    center_x: float = 0.0
    center_y: float = 0.0
    side: float = DEFAULT_SIDE
    mode: FractalMode = FractalMode.MANDELBROT

    def reset(self) -> None:
        self.center_x = 0.0
        self.center_y = 0.0
        self.side = DEFAULT_SIDE

    def toggle_mode(self) -> FractalMode:
        """Switch between Mandelbrot and Julia, starting over from the default view."""

        self.mode = self.mode.toggled()
        self.reset()
        return self.mode

    def set_mode(self, mode: FractalMode) -> None:
        if mode is not self.mode:
            self.toggle_mode()

    def pan(self, dx: float, dy: float) -> None:
        """Move the center by a pan delta (previous minus current pointer offset)."""

        self.center_x += dx
        self.center_y -= dy

    def can_zoom(self, delta: float) -> bool:
        if not (self.side > MIN_SIDE or delta > 0):
            return False
        if not (self.side < MAX_SIDE or delta < 0):
            return False
        return 1.0 + delta / ZOOM_DIVISOR > 0.0

    def zoom(self, delta: float, anchor: tuple[float, float]) -> bool:
        """Zoom by ``delta`` notches around ``anchor`` (see :func:`zoom_anchor`).

        Positive deltas zoom out. Returns ``False`` when the step is refused
        because ``side`` already sits at the limit in the direction of travel.
        """

        if not self.can_zoom(delta):
            return False
        step = self.side / ZOOM_DIVISOR * delta
        self.center_x += anchor[0] * step
        self.center_y += anchor[1] * step
        self.side += step
        return True

    def snapshot(self, params: FractalParameters, viewport: Viewport) -> FrameSnapshot:
        return FrameSnapshot(
            center_x=float(self.center_x),
            center_y=float(self.center_y),
            side=float(self.side),
            mode=self.mode,
            params=params,
            viewport=viewport,
        )


def pan_offset(viewport: Viewport, side: float, sx: float, sy: float) -> tuple[float, float]:
    """Plane-relative offset of a pointer position, in the form used for panning."""

    unit = np.float64(viewport.unit)
    x = (np.float64(sx) - viewport.width / 2.0) / unit * np.float64(side) * 2.0
    y = (np.float64(sy) - viewport.height / 2.0) / unit * np.float64(side) * 2.0
    return float(x), float(y)


def zoom_anchor(viewport: Viewport, sx: float, sy: float) -> tuple[float, float]:
    """Cursor offset in the form consumed by :meth:`ViewState.zoom`."""

    unit = np.float64(viewport.unit)
    x = -(np.float64(sx) - viewport.width / 2.0) / unit * 2.0
    y = (np.float64(sy) - viewport.height / 2.0) / unit * 2.0
    return float(x), float(y)


def plane_coordinate(snapshot: FrameSnapshot, px: float, py: float) -> complex:
    """Plane point under the screen position ``(px, py)``; ``py`` grows downward."""

    viewport = snapshot.viewport
    half_unit = np.float64(viewport.unit) / 2.0
    re = np.float64(snapshot.center_x) + (np.float64(px) - viewport.width / 2.0) / half_unit * snapshot.side
    im = np.float64(snapshot.center_y) - (np.float64(py) - viewport.height / 2.0) / half_unit * snapshot.side
    return complex(float(re), float(im))


def sampling_metadata(snapshot: FrameSnapshot) -> SamplingMetadata:
    viewport = snapshot.viewport
    step = np.float64(snapshot.side) * 2.0 / np.float64(viewport.unit)
    top_left = plane_coordinate(snapshot, 0.5, 0.5)
    return SamplingMetadata(
        x_start=top_left.real,
        y_start=top_left.imag,
        x_step=float(step),
        y_step=float(-step),
        x_res=viewport.width,
        y_res=viewport.height,
    )


def pixel_to_complex(metadata: SamplingMetadata, row: int, col: int) -> tuple[np.float64, np.float64]:
    x = np.float64(metadata.x_start) + np.float64(col) * np.float64(metadata.x_step)
    y = np.float64(metadata.y_start) + np.float64(row) * np.float64(metadata.y_step)
    return np.float64(x), np.float64(y)


def plane_axes(metadata: SamplingMetadata) -> tuple[np.ndarray, np.ndarray]:
    """Real coordinates of each column and imaginary coordinates of each row."""

    cols = np.arange(metadata.x_res, dtype=np.float64)
    rows = np.arange(metadata.y_res, dtype=np.float64)
    x = np.float64(metadata.x_start) + cols * np.float64(metadata.x_step)
    y = np.float64(metadata.y_start) + rows * np.float64(metadata.y_step)
    return x, y
