"""STFT framing, FFT, mel filterbank and normalization."""

from voice_spectrogram.features.fft import fft_radix2, magnitude_spectrum
from voice_spectrogram.features.framing import ensure_length, frame_signal, hann_window, resolve_hop
from voice_spectrogram.features.mel import (
    build_mel_filter_bank,
    get_mel_filter_bank,
    hz_to_mel,
    log_mel_spectrogram,
    mel_to_hz,
    project,
    to_db,
)
from voice_spectrogram.features.normalize import normalize, pack, unpack

__all__ = [
    "build_mel_filter_bank",
    "ensure_length",
    "fft_radix2",
    "frame_signal",
    "get_mel_filter_bank",
    "hann_window",
    "hz_to_mel",
    "log_mel_spectrogram",
    "magnitude_spectrum",
    "mel_to_hz",
    "normalize",
    "pack",
    "project",
    "resolve_hop",
    "to_db",
    "unpack",
]
