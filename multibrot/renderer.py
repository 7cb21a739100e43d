"""Per-frame evaluation of every output pixel."""

from __future__ import annotations

import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .evaluator import MAX_ITERATIONS, escape_counts_grid
from .palette import Palette, colorize, default_palette
from .view import FrameSnapshot, SamplingMetadata, plane_axes, sampling_metadata

logger = logging.getLogger(__name__)

BACKENDS = ("numpy", "tensorflow")


@dataclass(frozen=True)
class RenderResult:
    """Container for the numerical and color output of one frame."""

    iterations: np.ndarray
    values: np.ndarray
    rgba: np.ndarray
    metadata: SamplingMetadata


def _row_tiles(height: int, workers: int) -> list[tuple[int, int]]:
    rows_per_tile = max(1, math.ceil(height / max(workers, 1)))
    return [(start, min(start + rows_per_tile, height)) for start in range(0, height, rows_per_tile)]


def _numpy_counts(snapshot: FrameSnapshot, metadata: SamplingMetadata, workers: Optional[int]) -> np.ndarray:
    x, y = plane_axes(metadata)
    counts = np.zeros((metadata.y_res, metadata.x_res), dtype=np.int32)
    workers = workers or os.cpu_count() or 1

    def task(tile: tuple[int, int]) -> None:
        start, stop = tile
        counts[start:stop] = escape_counts_grid(
            x[np.newaxis, :],
            y[start:stop, np.newaxis],
            snapshot.params,
            snapshot.mode,
        )

    tiles = _row_tiles(metadata.y_res, workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        # Consume the iterator so worker exceptions propagate.
        list(executor.map(task, tiles))
    return counts


def _tensorflow_counts(snapshot: FrameSnapshot, metadata: SamplingMetadata, device: Optional[str]) -> np.ndarray:
    from . import kernel_tf

    x, y = plane_axes(metadata)
    return kernel_tf.escape_counts(x, y, snapshot.params, snapshot.mode, device=device)


def render_frame(
    snapshot: FrameSnapshot,
    palette: Optional[Palette] = None,
    *,
    backend: str = "numpy",
    workers: Optional[int] = None,
    device: Optional[str] = None,
) -> RenderResult:
    """Evaluate and colorize every pixel of ``snapshot``'s viewport."""

    if backend not in BACKENDS:
        raise ValueError(f"unknown backend {backend!r} (expected one of: {', '.join(BACKENDS)})")

    metadata = sampling_metadata(snapshot)
    if backend == "tensorflow":
        counts = _tensorflow_counts(snapshot, metadata, device)
    else:
        counts = _numpy_counts(snapshot, metadata, workers)

    values = counts.astype(np.float64) / np.float64(MAX_ITERATIONS)
    rgba = colorize(values, palette if palette is not None else default_palette())
    logger.debug(
        "rendered %dx%d %s frame (side=%g) with %s backend",
        metadata.x_res,
        metadata.y_res,
        snapshot.mode.value,
        snapshot.side,
        backend,
    )
    return RenderResult(iterations=counts, values=values, rgba=rgba, metadata=metadata)
