"""Decode encoded audio bytes into float32 PCM.

WAV containers are read with scipy.io.wavfile; integer PCM is scaled to
[-1, 1]. Base64 helpers cover the transport encoding used by callers that
ship recordings as text.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass
from typing import Union

import numpy as np
import scipy.io.wavfile as wavfile

from voice_spectrogram.errors import DecodeError, EmptyInputError

logger = logging.getLogger(__name__)

_DATA_URL_PREFIX = re.compile(r"^data:[^,]*?;base64,", re.IGNORECASE)
_BASE64_CHARS = re.compile(r"^[A-Za-z0-9+/=]*$")


@dataclass(frozen=True)
class PcmBuffer:
    """Mono float32 samples at a known sample rate. Samples are read-only."""

    samples: np.ndarray
    sample_rate: float

    def __post_init__(self) -> None:
        samples = np.array(self.samples, dtype=np.float32).reshape(-1)
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return len(self) / float(self.sample_rate)


@dataclass(frozen=True)
class DecodedAudio:
    """All channels of a decoded clip, shape (channels, samples)."""

    channels: np.ndarray
    sample_rate: float

    @property
    def channel_count(self) -> int:
        return int(self.channels.shape[0])

    @property
    def n_samples(self) -> int:
        return int(self.channels.shape[1])


def _to_float32(audio: np.ndarray) -> np.ndarray:
    if audio.dtype == np.uint8:
        return (audio.astype(np.float32) - 128.0) / 128.0
    if audio.dtype == np.int16:
        return audio.astype(np.float32) / 32768.0
    if audio.dtype == np.int32:
        # 24-bit files come back left-justified in int32
        return (audio.astype(np.float64) / 2147483648.0).astype(np.float32)
    if np.issubdtype(audio.dtype, np.floating):
        return audio.astype(np.float32)
    raise DecodeError(f"Unsupported sample format: {audio.dtype}")


def decode(data: bytes) -> DecodedAudio:
    """Decode a WAV byte buffer into per-channel float32 PCM.

    Args:
        data: Encoded audio (RIFF/WAVE container).

    Returns:
        DecodedAudio with channels shaped (n_channels, n_samples) at the
        file's native sample rate.

    Raises:
        EmptyInputError: data is empty or holds no samples.
        DecodeError: data is not a readable WAV container.
    """
    if not data:
        raise EmptyInputError("Audio byte buffer is empty")
    try:
        sr, audio = wavfile.read(io.BytesIO(bytes(data)))
    except Exception as exc:
        raise DecodeError(f"Failed to decode audio: {exc}") from exc

    audio = np.asarray(audio)
    if audio.ndim == 1:
        audio = audio[:, np.newaxis]
    if audio.size == 0:
        raise EmptyInputError("Decoded audio contains no samples")
    channels = np.ascontiguousarray(_to_float32(audio).T)
    logger.debug(
        "Decoded %d channel(s), %d samples at %d Hz",
        channels.shape[0],
        channels.shape[1],
        sr,
    )
    return DecodedAudio(channels=channels, sample_rate=float(sr))


def to_mono(decoded: DecodedAudio, mode: str = "first") -> PcmBuffer:
    """Collapse a decoded clip to one channel.

    "first" keeps channel 0 only; "mean" averages all channels.
    """
    if mode == "first":
        samples = decoded.channels[0]
    elif mode == "mean":
        samples = decoded.channels.mean(axis=0)
    else:
        raise ValueError(f"Unknown downmix mode: {mode!r}")
    return PcmBuffer(samples=samples, sample_rate=decoded.sample_rate)


def decode_base64_audio(text: Union[str, bytes]) -> bytes:
    """Turn base64 transport text (optionally a data: URL) into raw bytes."""
    if isinstance(text, (bytes, bytearray)):
        try:
            text = bytes(text).decode("ascii")
        except UnicodeDecodeError as exc:
            raise DecodeError("Invalid base64 input: not ASCII text") from exc
    if not text or not text.strip():
        raise EmptyInputError("Base64 string is empty")
    clean = _DATA_URL_PREFIX.sub("", text.strip())
    clean = re.sub(r"\s", "", clean)
    if not _BASE64_CHARS.match(clean):
        raise DecodeError("Invalid base64 string: contains non-base64 characters")
    clean += "=" * (-len(clean) % 4)
    try:
        data = base64.b64decode(clean, validate=True)
    except binascii.Error as exc:
        raise DecodeError(f"Invalid base64 string: {exc}") from exc
    if not data:
        raise EmptyInputError("Base64 string decoded to zero bytes")
    return data


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def encode_wav(pcm: PcmBuffer) -> bytes:
    """Encode mono PCM as a 16-bit WAV byte buffer (samples clipped to [-1, 1])."""
    if len(pcm) == 0:
        raise EmptyInputError("Cannot encode an empty PCM buffer", stage="encode")
    clipped = np.clip(pcm.samples, -1.0, 1.0)
    buf = io.BytesIO()
    wavfile.write(buf, int(round(pcm.sample_rate)), (clipped * 32767).astype(np.int16))
    return buf.getvalue()
