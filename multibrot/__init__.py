"""Public API for the generalized Mandelbrot/Julia engine."""

from .complex_ops import argument, magnitude, power
from .evaluator import (
    ESCAPE_RADIUS,
    MAX_ITERATIONS,
    FractalMode,
    FractalParameters,
    escape_count,
    evaluate,
    evaluate_grid,
)
from .interaction import InteractionController
from .palette import Palette, color_at, colorize, default_palette, load_palette
from .renderer import RenderResult, render_frame
from .view import (
    FrameSnapshot,
    SamplingMetadata,
    ViewState,
    Viewport,
    pan_offset,
    pixel_to_complex,
    plane_coordinate,
    zoom_anchor,
)

__all__ = [
    "ESCAPE_RADIUS",
    "MAX_ITERATIONS",
    "FractalMode",
    "FractalParameters",
    "FrameSnapshot",
    "InteractionController",
    "Palette",
    "RenderResult",
    "SamplingMetadata",
    "ViewState",
    "Viewport",
    "argument",
    "color_at",
    "colorize",
    "default_palette",
    "escape_count",
    "evaluate",
    "evaluate_grid",
    "load_palette",
    "magnitude",
    "pan_offset",
    "pixel_to_complex",
    "plane_coordinate",
    "power",
    "render_frame",
    "zoom_anchor",
]
