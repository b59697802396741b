"""Audio decoding, resampling and configuration."""

from voice_spectrogram.audio.config import SpectrogramConfig
from voice_spectrogram.audio.decoder import (
    DecodedAudio,
    PcmBuffer,
    decode,
    decode_base64_audio,
    encode_base64,
    encode_wav,
    to_mono,
)
from voice_spectrogram.audio.resample import downsample_wav, resample

__all__ = [
    "DecodedAudio",
    "PcmBuffer",
    "SpectrogramConfig",
    "decode",
    "decode_base64_audio",
    "downsample_wav",
    "encode_base64",
    "encode_wav",
    "resample",
    "to_mono",
]
