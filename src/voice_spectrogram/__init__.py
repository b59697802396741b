"""Mel spectrogram tensors from recorded audio - decode, resample, STFT, mel, normalize, render."""

from voice_spectrogram.audio.config import SpectrogramConfig
from voice_spectrogram.errors import DecodeError, DimensionError, EmptyInputError, SpectrogramError
from voice_spectrogram.pipeline import MelSpectrogramPipeline, MelSpectrogramResult, generate_mel_tensor

__version__ = "0.1.0"

__all__ = [
    "DecodeError",
    "DimensionError",
    "EmptyInputError",
    "MelSpectrogramPipeline",
    "MelSpectrogramResult",
    "SpectrogramConfig",
    "SpectrogramError",
    "generate_mel_tensor",
]
