"""Centralized spectrogram pipeline configuration.

Canonical settings:
- Audio: mono 16 kHz (channel 0 of the decoded clip)
- STFT: Hann window, FFT 512, 10 ms hop, 173 frames
- Features: 64-bin mel filterbank, 10*log10 dB, global [0, 1] normalization
- Tensor: 64 x 173 float32, time-major
"""

from dataclasses import dataclass

HOP_MODES = ("fixed", "fit")
DOWNMIX_MODES = ("first", "mean")
RESAMPLE_MODES = ("nearest", "polyphase")
FFT_BACKENDS = ("scipy", "radix2")


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


@dataclass(frozen=True)
class SpectrogramConfig:
    """Mel-spectrogram pipeline configuration."""

    # Audio
    sample_rate: int = 16_000
    downmix: str = "first"  # "first" = channel 0, "mean" = average channels
    resample_mode: str = "nearest"

    # STFT
    fft_size: int = 512
    time_frames: int = 173
    hop_time_sec: float = 0.01
    hop_mode: str = "fixed"  # "fit" spreads the frames over the whole clip
    fft_backend: str = "scipy"

    # Mel filterbank
    mel_bins: int = 64
    normalize_filters: bool = False

    # dB conversion: 10 for power-like energies, 20 for amplitude-like
    db_multiplier: float = 10.0
    log_floor: float = 1e-10

    def __post_init__(self) -> None:
        if not _is_power_of_two(self.fft_size):
            raise ValueError(f"fft_size must be a power of two, got {self.fft_size}")
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be > 0")
        if self.mel_bins < 1:
            raise ValueError("mel_bins must be >= 1")
        if self.time_frames < 1:
            raise ValueError("time_frames must be >= 1")
        if self.hop_time_sec <= 0:
            raise ValueError("hop_time_sec must be > 0")
        if self.log_floor <= 0:
            raise ValueError("log_floor must be > 0")
        if self.db_multiplier not in (10.0, 20.0):
            raise ValueError("db_multiplier must be 10 or 20")
        if self.hop_mode not in HOP_MODES:
            raise ValueError(f"hop_mode must be one of {HOP_MODES}")
        if self.downmix not in DOWNMIX_MODES:
            raise ValueError(f"downmix must be one of {DOWNMIX_MODES}")
        if self.resample_mode not in RESAMPLE_MODES:
            raise ValueError(f"resample_mode must be one of {RESAMPLE_MODES}")
        if self.fft_backend not in FFT_BACKENDS:
            raise ValueError(f"fft_backend must be one of {FFT_BACKENDS}")
        if self.hop_mode == "fixed" and self.hop_length < 1:
            raise ValueError("hop_time_sec * sample_rate must be at least one sample")

    @property
    def n_freq_bins(self) -> int:
        """Magnitude spectrum length (fft_size / 2 + 1)."""
        return self.fft_size // 2 + 1

    @property
    def hop_length(self) -> int:
        """Fixed-mode hop length in samples."""
        return int(self.hop_time_sec * self.sample_rate)

    @property
    def nyquist(self) -> float:
        return self.sample_rate / 2

    @property
    def tensor_length(self) -> int:
        """Number of elements in the flat ML tensor."""
        return self.mel_bins * self.time_frames

    def required_length(self, hop_length: int) -> int:
        """Samples needed to cover every frame at the given hop."""
        return (self.time_frames - 1) * hop_length + self.fft_size
