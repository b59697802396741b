"""End-to-end mel spectrogram pipeline."""

from voice_spectrogram.pipeline.mel_pipeline import (
    MelSpectrogramPipeline,
    MelSpectrogramResult,
    generate_mel_tensor,
)

__all__ = ["MelSpectrogramPipeline", "MelSpectrogramResult", "generate_mel_tensor"]
