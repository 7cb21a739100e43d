"""Map normalized escape values to colors through a 1D palette."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import numpy as np
import PIL.Image
from matplotlib import colormaps

logger = logging.getLogger(__name__)

DEFAULT_COLORMAP = "twilight_shifted"
DEFAULT_WIDTH = 256
BLACK = (0.0, 0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Palette:
    """A horizontal gradient of RGBA samples with components in ``[0, 1]``."""

    samples: np.ndarray

    def __post_init__(self) -> None:
        samples = self.samples
        if samples.ndim != 2 or samples.shape[1] != 4 or samples.shape[0] == 0:
            raise ValueError(f"palette samples must have shape (width, 4), got {samples.shape}")

    @property
    def width(self) -> int:
        return int(self.samples.shape[0])

    @classmethod
    def from_array(cls, array) -> "Palette":
        """Build a palette from grayscale, RGB or RGBA samples.

        Accepts ``(W,)``, ``(W, 3|4)`` or ``(H, W, 3|4)`` arrays; only the first
        row of a 2D image is used. Integer input is read as 0..255.
        """

        data = np.asarray(array)
        if data.ndim == 3:
            data = data[0]
        if data.ndim == 1:
            data = np.stack((data, data, data), axis=-1)
        if data.ndim != 2 or data.shape[-1] not in (3, 4) or data.shape[0] == 0:
            raise ValueError(f"unsupported palette array shape {np.asarray(array).shape}")

        if np.issubdtype(data.dtype, np.integer):
            samples = data.astype(np.float64) / 255.0
        else:
            samples = data.astype(np.float64)
        samples = np.clip(samples, 0.0, 1.0)
        if samples.shape[-1] == 3:
            alpha = np.ones((samples.shape[0], 1), dtype=np.float64)
            samples = np.concatenate((samples, alpha), axis=-1)
        return cls(samples=samples)

    @classmethod
    def from_image(cls, path: Union[str, Path]) -> "Palette":
        with PIL.Image.open(path) as image:
            pixels = np.array(image.convert("RGBA"), copy=True)
        return cls.from_array(pixels)

    @classmethod
    def from_colormap(cls, name: str, width: int = DEFAULT_WIDTH) -> "Palette":
        cmap = colormaps[name]
        positions = (np.arange(width, dtype=np.float64) + 0.5) / width
        return cls(samples=np.asarray(cmap(positions), dtype=np.float64))

    def sample(self, values: np.ndarray) -> np.ndarray:
        """Linearly filtered lookup at horizontal coordinates ``values``, wrapping at the edges."""

        values = np.asarray(values, dtype=np.float64)
        x = values * self.width - 0.5
        left = np.floor(x)
        t = np.expand_dims(x - left, -1)
        i0 = np.mod(left.astype(np.int64), self.width)
        i1 = np.mod(i0 + 1, self.width)
        return self.samples[i0] * (1.0 - t) + self.samples[i1] * t


def default_palette() -> Palette:
    return Palette.from_colormap(DEFAULT_COLORMAP)


def load_palette(path: Optional[Union[str, Path]] = None) -> Palette:
    """Load a palette image, falling back to the built-in gradient."""

    if path is None:
        return default_palette()
    try:
        return Palette.from_image(path)
    except (OSError, ValueError) as exc:
        logger.warning("Could not load palette %s (%s); using the default gradient.", path, exc)
        return default_palette()


def color_at(value: float, palette: Palette) -> tuple[float, float, float, float]:
    """Color for a normalized escape value; exactly 0 or 1 renders opaque black."""

    if value == 0.0 or value == 1.0:
        return BLACK
    r, g, b, a = palette.sample(np.float64(value))
    return float(r), float(g), float(b), float(a)


def colorize(values: np.ndarray, palette: Palette) -> np.ndarray:
    """Vectorized :func:`color_at`, returning an 8-bit RGBA image."""

    values = np.asarray(values, dtype=np.float64)
    rgba = palette.sample(values)
    boundary = (values == 0.0) | (values == 1.0)
    rgba[boundary] = BLACK
    return np.uint8(np.clip(np.rint(rgba * 255.0), 0, 255))
