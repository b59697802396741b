"""Global [0, 1] normalization and the time-major tensor layout."""

import logging

import numpy as np

from voice_spectrogram.errors import DimensionError

logger = logging.getLogger(__name__)


def normalize(matrix: np.ndarray) -> np.ndarray:
    """Rescale to [0, 1] with the global min/max of the whole matrix.

    A constant matrix (e.g. pure silence) has no range and maps to all zeros.
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.size == 0:
        return matrix.astype(np.float32)
    lo = float(matrix.min())
    hi = float(matrix.max())
    if hi == lo:
        logger.warning("Mel spectrogram has no dynamic range (%.3f), returning zeros", lo)
        return np.zeros(matrix.shape, dtype=np.float32)
    out = (matrix - lo) / (hi - lo)
    return np.clip(out, 0.0, 1.0).astype(np.float32)


def pack(matrix: np.ndarray, time_frames: int, mel_bins: int) -> np.ndarray:
    """Flatten (time_frames, mel_bins) to float32 with flat[t * mel_bins + m] = matrix[t, m]."""
    matrix = np.asarray(matrix)
    if matrix.shape != (time_frames, mel_bins):
        raise DimensionError(
            f"Expected matrix of shape ({time_frames}, {mel_bins}), got {matrix.shape}",
            stage="pack",
        )
    return np.ascontiguousarray(matrix, dtype=np.float32).reshape(-1)


def unpack(flat: np.ndarray, time_frames: int, mel_bins: int) -> np.ndarray:
    """Inverse of pack: view a flat tensor as (time_frames, mel_bins)."""
    flat = np.asarray(flat)
    if flat.ndim != 1 or flat.shape[0] != time_frames * mel_bins:
        raise DimensionError(
            f"Expected {time_frames * mel_bins} elements, got shape {flat.shape}",
            stage="pack",
        )
    return flat.reshape(time_frames, mel_bins)
