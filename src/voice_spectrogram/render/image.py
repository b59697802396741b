"""Color-mapped bitmap rendering of a normalized mel spectrogram.

Rows are flipped so the lowest mel bin sits at the bottom of the image.
Columns are linearly interpolated across time frames when the image is wider
than the spectrogram. Images are written as PNG with matplotlib.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Union

import numpy as np
from matplotlib import image as mpimg

from voice_spectrogram.errors import DimensionError

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 320

# black -> dark purple -> magenta-red -> orange-red -> yellow -> white
GRADIENT_STOPS = np.array(
    [
        [0, 0, 0],
        [50, 0, 80],
        [180, 30, 100],
        [240, 70, 40],
        [255, 180, 60],
        [255, 255, 255],
    ],
    dtype=np.float64,
)


def value_to_color(values: np.ndarray) -> np.ndarray:
    """Map values in [0, 1] to RGB uint8 via the piecewise-linear gradient.

    Out-of-range values are clipped and non-finite values map to the first stop.
    """
    values = np.asarray(values, dtype=np.float64)
    values = np.clip(np.where(np.isfinite(values), values, 0.0), 0.0, 1.0)
    segments = len(GRADIENT_STOPS) - 1
    scaled = values * segments
    idx = np.minimum(np.floor(scaled).astype(int), segments - 1)
    frac = (scaled - idx)[..., np.newaxis]
    c1 = GRADIENT_STOPS[idx]
    c2 = GRADIENT_STOPS[idx + 1]
    return np.round(c1 + frac * (c2 - c1)).astype(np.uint8)


def render_spectrogram(
    normalized: np.ndarray,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    interpolate: bool = True,
) -> np.ndarray:
    """Render a (time_frames, mel_bins) matrix of [0, 1] values to RGB.

    Args:
        normalized: Normalized spectrogram, time on axis 0.
        width: Output width in pixels (time axis).
        height: Output height in pixels (mel axis).
        interpolate: Blend neighbouring time frames; nearest frame otherwise.

    Returns:
        uint8 array (height, width, 3).
    """
    normalized = np.asarray(normalized, dtype=np.float64)
    if normalized.ndim != 2 or 0 in normalized.shape:
        raise DimensionError(
            f"Cannot render spectrogram of shape {normalized.shape}", stage="render"
        )
    if width < 1 or height < 1:
        raise ValueError("width and height must be >= 1")
    time_steps, mel_bins = normalized.shape
    values = np.where(np.isfinite(normalized), normalized, 0.0)

    # Row 0 of the image is the highest mel bin.
    src_y = np.floor(np.arange(height) / height * mel_bins).astype(int)
    mel_index = mel_bins - src_y - 1

    if interpolate:
        t = np.arange(width) / max(width - 1, 1) * (time_steps - 1)
        x1 = np.floor(t).astype(int)
        x2 = np.minimum(x1 + 1, time_steps - 1)
        frac = t - x1
        v1 = values[x1][:, mel_index]
        v2 = values[x2][:, mel_index]
        columns = v1 + frac[:, np.newaxis] * (v2 - v1)
    else:
        x = np.floor(np.arange(width) / width * time_steps).astype(int)
        columns = values[x][:, mel_index]

    logger.debug("Rendering %s spectrogram to %dx%d", normalized.shape, width, height)
    return value_to_color(columns.T)


def save_png(image: np.ndarray, target: Union[str, Path, BinaryIO]) -> None:
    """Write an RGB uint8 image as PNG to a path or binary file object."""
    if isinstance(target, (str, Path)):
        mpimg.imsave(str(target), image, format="png")
    else:
        mpimg.imsave(target, image, format="png")


def png_bytes(image: np.ndarray) -> bytes:
    buf = io.BytesIO()
    save_png(image, buf)
    return buf.getvalue()
