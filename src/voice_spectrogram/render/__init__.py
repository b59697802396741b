"""Bitmap and text exports of mel spectrograms."""

from voice_spectrogram.render.image import (
    GRADIENT_STOPS,
    png_bytes,
    render_spectrogram,
    save_png,
    value_to_color,
)
from voice_spectrogram.render.text import format_mel_text, save_mel_text

__all__ = [
    "GRADIENT_STOPS",
    "format_mel_text",
    "png_bytes",
    "render_spectrogram",
    "save_mel_text",
    "save_png",
    "value_to_color",
]
