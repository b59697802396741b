"""Mel filterbank construction, projection and dB conversion."""

import logging
import threading
from typing import Dict, Tuple

import numpy as np

from voice_spectrogram.errors import DimensionError

logger = logging.getLogger(__name__)

DEFAULT_LOG_FLOOR = 1e-10

_FilterKey = Tuple[float, int, int, bool]
_filter_cache: Dict[_FilterKey, np.ndarray] = {}
_filter_cache_lock = threading.Lock()


def hz_to_mel(hz):
    return 2595 * np.log10(1 + np.asarray(hz, dtype=np.float64) / 700)


def mel_to_hz(mel):
    return 700 * (10 ** (np.asarray(mel, dtype=np.float64) / 2595) - 1)


def build_mel_filter_bank(
    sample_rate: float,
    fft_size: int,
    mel_bins: int,
    normalize: bool = False,
) -> np.ndarray:
    """Build the triangular mel filterbank matrix.

    mel_bins + 2 points are spaced evenly in mel between 0 Hz and Nyquist and
    mapped to FFT bins with floor((fft_size/2 + 1) * hz / nyquist). Filter m
    ramps up from its left point to its center and down to its right point.
    A ramp whose endpoints land on the same bin contributes nothing.

    Args:
        sample_rate: Sample rate in Hz.
        fft_size: FFT length.
        mel_bins: Number of filters.
        normalize: Divide each non-empty row by its sum.

    Returns:
        float64 array (mel_bins, fft_size // 2 + 1), non-negative.
    """
    n_bins = fft_size // 2 + 1
    nyquist = sample_rate / 2
    mel_points = np.linspace(hz_to_mel(0.0), hz_to_mel(nyquist), mel_bins + 2)
    hz_points = mel_to_hz(mel_points)
    bin_points = np.floor(n_bins * hz_points / nyquist).astype(int)

    filters = np.zeros((mel_bins, n_bins))
    for i in range(mel_bins):
        left, center, right = bin_points[i], bin_points[i + 1], bin_points[i + 2]
        if center > left:
            k = np.arange(left, min(center, n_bins))
            filters[i, k] = (k - left) / (center - left)
        if right > center:
            k = np.arange(center, min(right, n_bins))
            filters[i, k] = (right - k) / (right - center)

    if normalize:
        sums = filters.sum(axis=1, keepdims=True)
        filters = np.divide(filters, sums, out=np.zeros_like(filters), where=sums > 0)
    return filters


def get_mel_filter_bank(
    sample_rate: float,
    fft_size: int,
    mel_bins: int,
    normalize: bool = False,
) -> np.ndarray:
    """Cached build_mel_filter_bank. The returned array is shared and read-only."""
    key = (float(sample_rate), int(fft_size), int(mel_bins), bool(normalize))
    with _filter_cache_lock:
        filters = _filter_cache.get(key)
        if filters is None:
            filters = build_mel_filter_bank(*key)
            filters.setflags(write=False)
            _filter_cache[key] = filters
            logger.debug("Built mel filterbank %s for key %s", filters.shape, key)
    return filters


def clear_filter_bank_cache() -> None:
    with _filter_cache_lock:
        _filter_cache.clear()


def project(spectra: np.ndarray, filter_bank: np.ndarray) -> np.ndarray:
    """Mel energies: energies[..., m] = sum_k spectra[..., k] * filter_bank[m, k]."""
    spectra = np.asarray(spectra, dtype=np.float64)
    if spectra.shape[-1] != filter_bank.shape[1]:
        raise DimensionError(
            f"Spectrum has {spectra.shape[-1]} bins, filterbank expects {filter_bank.shape[1]}",
            stage="mel",
        )
    return spectra @ filter_bank.T


def to_db(
    energies: np.ndarray,
    multiplier: float = 10.0,
    floor: float = DEFAULT_LOG_FLOOR,
) -> np.ndarray:
    """multiplier * log10(max(floor, energy)). NaN and non-positive energies hit the floor."""
    energies = np.asarray(energies, dtype=np.float64)
    energies = np.where(np.isnan(energies), floor, energies)
    return multiplier * np.log10(np.maximum(energies, floor))


def log_mel_spectrogram(
    spectra: np.ndarray,
    filter_bank: np.ndarray,
    multiplier: float = 10.0,
    floor: float = DEFAULT_LOG_FLOOR,
) -> np.ndarray:
    """Project magnitude spectra (frames, bins) to dB mel energies (frames, mel_bins)."""
    return to_db(project(spectra, filter_bank), multiplier, floor)
