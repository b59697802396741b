"""Sample-rate conversion.

The default "nearest" mode is plain decimation: out[i] = in[floor(i * ratio)].
It aliases, which is acceptable for coarse feature extraction and is the
numeric contract the tensor output depends on. "polyphase" is an opt-in
band-limited resampler (scipy.signal.resample_poly).
"""

from __future__ import annotations

import logging
from fractions import Fraction

import numpy as np
from scipy.signal import resample_poly

from voice_spectrogram.audio.decoder import PcmBuffer, decode, encode_wav, to_mono

logger = logging.getLogger(__name__)

# Rates closer than this are treated as equal.
RATE_TOLERANCE_HZ = 0.1


def _resample_nearest(samples: np.ndarray, ratio: float) -> np.ndarray:
    target_length = int(np.floor(len(samples) / ratio))
    idx = np.floor(np.arange(target_length) * ratio).astype(np.int64)
    return samples[idx]


def _resample_polyphase(samples: np.ndarray, source_rate: float, target_rate: float) -> np.ndarray:
    frac = Fraction(int(round(target_rate)), int(round(source_rate)))
    return resample_poly(samples.astype(np.float64), frac.numerator, frac.denominator)


def resample(pcm: PcmBuffer, target_rate: float, mode: str = "nearest") -> PcmBuffer:
    """Convert pcm to target_rate.

    Args:
        pcm: Mono input buffer.
        target_rate: Output sample rate in Hz.
        mode: "nearest" (decimation) or "polyphase" (band-limited).

    Returns:
        A new PcmBuffer at target_rate, or pcm itself when the rates match.
    """
    if target_rate <= 0:
        raise ValueError("target_rate must be > 0")
    source_rate = float(pcm.sample_rate)
    if abs(source_rate - target_rate) < RATE_TOLERANCE_HZ:
        return pcm

    if mode == "nearest":
        out = _resample_nearest(pcm.samples, source_rate / target_rate)
    elif mode == "polyphase":
        out = _resample_polyphase(pcm.samples, source_rate, target_rate)
    else:
        raise ValueError(f"Unknown resample mode: {mode!r}")

    logger.debug(
        "Resampled %d samples @ %.1f Hz -> %d samples @ %.1f Hz (%s)",
        len(pcm),
        source_rate,
        len(out),
        target_rate,
        mode,
    )
    return PcmBuffer(samples=out, sample_rate=float(target_rate))


def downsample_wav(
    data: bytes,
    target_rate: int = 16_000,
    mode: str = "nearest",
    downmix: str = "first",
) -> bytes:
    """Decode a WAV clip, collapse to mono, resample, and re-encode as 16-bit WAV."""
    pcm = to_mono(decode(data), downmix)
    return encode_wav(resample(pcm, target_rate, mode))
