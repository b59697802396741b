"""Slice PCM into fixed-size Hann-windowed frames."""

import logging

import numpy as np

from voice_spectrogram.audio.config import SpectrogramConfig
from voice_spectrogram.errors import DimensionError

logger = logging.getLogger(__name__)


def hann_window(size: int) -> np.ndarray:
    """Symmetric Hann window: 0.5 * (1 - cos(2*pi*i / (size - 1)))."""
    if size < 2:
        return np.ones(size)
    i = np.arange(size)
    return 0.5 * (1 - np.cos(2 * np.pi * i / (size - 1)))


def resolve_hop(config: SpectrogramConfig, n_samples: int) -> int:
    """Hop length in samples for a clip of n_samples.

    "fixed" uses hop_time_sec * sample_rate. "fit" spreads time_frames frames
    evenly over the clip, (n_samples - fft_size) / (time_frames - 1), with a
    floor of one sample.
    """
    if config.hop_mode == "fixed":
        return config.hop_length
    if config.time_frames == 1:
        return config.fft_size
    return max(1, (n_samples - config.fft_size) // (config.time_frames - 1))


def ensure_length(samples: np.ndarray, required_length: int) -> np.ndarray:
    """Zero-pad at the end or truncate to exactly required_length samples."""
    n = len(samples)
    if n == required_length:
        return samples
    if n > required_length:
        return samples[:required_length]
    out = np.zeros(required_length, dtype=samples.dtype)
    out[:n] = samples
    return out


def frame_signal(
    samples: np.ndarray,
    fft_size: int,
    hop_length: int,
    n_frames: int,
) -> np.ndarray:
    """Cut samples into n_frames windowed frames.

    Args:
        samples: Mono signal.
        fft_size: Frame length (window size).
        hop_length: Offset between frame starts.
        n_frames: Number of frames to produce.

    Returns:
        float64 array (n_frames, fft_size); the signal is padded or truncated
        to (n_frames - 1) * hop_length + fft_size first.
    """
    if hop_length < 1 or fft_size < 1 or n_frames < 1:
        raise DimensionError(
            f"Invalid framing: fft_size={fft_size} hop={hop_length} frames={n_frames}",
            stage="frame",
        )
    required = (n_frames - 1) * hop_length + fft_size
    if len(samples) < required:
        logger.debug("Zero-padding %d samples to %d", len(samples), required)
    signal = ensure_length(np.asarray(samples, dtype=np.float64), required)
    idx = np.arange(n_frames)[:, np.newaxis] * hop_length + np.arange(fft_size)[np.newaxis, :]
    return signal[idx] * hann_window(fft_size)
