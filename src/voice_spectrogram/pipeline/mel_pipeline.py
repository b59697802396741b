"""End-to-end pipeline: bytes -> PCM -> resample -> frames -> FFT -> mel dB -> [0, 1] -> tensor.

Each invocation is independent; the only shared state is the read-only mel
filterbank cache, so one pipeline object can serve several threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from voice_spectrogram.audio.config import SpectrogramConfig
from voice_spectrogram.audio.decoder import PcmBuffer, decode, decode_base64_audio, to_mono
from voice_spectrogram.audio.resample import resample
from voice_spectrogram.errors import EmptyInputError
from voice_spectrogram.features.fft import magnitude_spectrum
from voice_spectrogram.features.framing import frame_signal, resolve_hop
from voice_spectrogram.features.mel import get_mel_filter_bank, log_mel_spectrogram
from voice_spectrogram.features.normalize import normalize, pack

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MelSpectrogramResult:
    """Output of one pipeline run.

    mel_db and normalized are (time_frames, mel_bins); tensor is the flat
    time-major float32 buffer handed to ML consumers.
    """

    mel_db: np.ndarray
    normalized: np.ndarray
    tensor: np.ndarray
    hop_length: int
    source_sample_rate: float
    config: SpectrogramConfig

    @property
    def shape(self) -> tuple[int, int]:
        return self.normalized.shape

    def mel_major(self, normalized: bool = True) -> np.ndarray:
        """Transposed (mel_bins, time_frames) view of the spectrogram."""
        return (self.normalized if normalized else self.mel_db).T


class MelSpectrogramPipeline:
    """Turns encoded audio into a fixed-size normalized mel tensor.

    Interface:
      pipeline = MelSpectrogramPipeline(SpectrogramConfig())
      result = pipeline.run(wav_bytes)
      result.tensor      # float32, mel_bins * time_frames, time-major
      result.normalized  # (time_frames, mel_bins) in [0, 1]
    """

    def __init__(self, config: Optional[SpectrogramConfig] = None):
        self.config = config or SpectrogramConfig()

    @property
    def filter_bank(self) -> np.ndarray:
        c = self.config
        return get_mel_filter_bank(c.sample_rate, c.fft_size, c.mel_bins, c.normalize_filters)

    def run(self, data: bytes) -> MelSpectrogramResult:
        """Decode a WAV byte buffer and compute its mel tensor."""
        decoded = decode(data)
        pcm = to_mono(decoded, self.config.downmix)
        return self.run_pcm(pcm)

    def run_base64(self, text: str) -> MelSpectrogramResult:
        """Same as run() for base64 (or data: URL) transport text."""
        return self.run(decode_base64_audio(text))

    def run_pcm(self, pcm: PcmBuffer) -> MelSpectrogramResult:
        """Compute the mel tensor from already-decoded mono PCM."""
        c = self.config
        if len(pcm) == 0:
            raise EmptyInputError("PCM buffer is empty", stage="input")

        audio = resample(pcm, c.sample_rate, c.resample_mode)
        hop = resolve_hop(c, len(audio))
        required = c.required_length(hop)
        if len(audio) < required:
            logger.debug("Clip has %d samples, padding to %d", len(audio), required)

        frames = frame_signal(audio.samples, c.fft_size, hop, c.time_frames)
        spectra = magnitude_spectrum(frames, c.fft_backend)
        mel_db = log_mel_spectrogram(spectra, self.filter_bank, c.db_multiplier, c.log_floor)
        normalized = normalize(mel_db)
        tensor = pack(normalized, c.time_frames, c.mel_bins)

        logger.debug(
            "Mel spectrogram: %d frames x %d bins, hop=%d, dB range [%.2f, %.2f]",
            c.time_frames,
            c.mel_bins,
            hop,
            float(mel_db.min()),
            float(mel_db.max()),
        )
        return MelSpectrogramResult(
            mel_db=mel_db.astype(np.float32),
            normalized=normalized,
            tensor=tensor,
            hop_length=hop,
            source_sample_rate=pcm.sample_rate,
            config=c,
        )


def generate_mel_tensor(data: bytes, config: Optional[SpectrogramConfig] = None) -> np.ndarray:
    """Decode WAV bytes and return the flat float32 mel tensor."""
    return MelSpectrogramPipeline(config).run(data).tensor
