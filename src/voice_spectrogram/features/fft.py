"""Magnitude spectra of real frames.

Two interchangeable backends: scipy.fft.rfft, and an in-package iterative
radix-2 FFT (bit-reversal permutation followed by butterfly stages). Both
return |X[k]| for k = 0..N/2.
"""

import numpy as np
import scipy.fft

from voice_spectrogram.errors import DimensionError


def _check_power_of_two(n: int) -> None:
    if n < 1 or (n & (n - 1)) != 0:
        raise DimensionError(f"FFT length must be a power of two, got {n}", stage="fft")


def _bit_reverse_indices(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=np.int64)
    for _ in range(bits):
        rev = (rev << 1) | (idx & 1)
        idx = idx >> 1
    return rev


def fft_radix2(x: np.ndarray) -> np.ndarray:
    """Complex FFT along the last axis; length must be a power of two."""
    x = np.asarray(x)
    n = x.shape[-1]
    _check_power_of_two(n)
    lead = x.shape[:-1]
    a = x[..., _bit_reverse_indices(n)].astype(np.complex128).reshape(-1, n)

    size = 2
    while size <= n:
        half = size // 2
        twiddle = np.exp(-2j * np.pi * np.arange(half) / size)
        blocks = a.reshape(a.shape[0], n // size, size)
        even = blocks[..., :half].copy()
        odd = blocks[..., half:] * twiddle
        blocks[..., :half] = even + odd
        blocks[..., half:] = even - odd
        a = blocks.reshape(-1, n)
        size *= 2
    return a.reshape(*lead, n)


def magnitude_spectrum(frames: np.ndarray, backend: str = "scipy") -> np.ndarray:
    """Magnitude spectrum, shape (..., N/2 + 1). NaN bins are set to 0.

    Args:
        frames: Real frames, last axis is the frame length N.
        backend: "scipy" or "radix2".
    """
    frames = np.asarray(frames, dtype=np.float64)
    n = frames.shape[-1]
    _check_power_of_two(n)
    if backend == "scipy":
        spectrum = scipy.fft.rfft(frames, axis=-1)
    elif backend == "radix2":
        spectrum = fft_radix2(frames)[..., : n // 2 + 1]
    else:
        raise ValueError(f"Unknown FFT backend: {backend!r}")
    mag = np.sqrt(spectrum.real ** 2 + spectrum.imag ** 2)
    return np.where(np.isnan(mag), 0.0, mag)
