"""Unit tests for WAV decoding, mono down-mix and base64 transport helpers."""

from __future__ import annotations

import io
import struct
import unittest

import numpy as np
import scipy.io.wavfile as wavfile

from voice_spectrogram.audio.decoder import (
    PcmBuffer,
    decode,
    decode_base64_audio,
    encode_base64,
    encode_wav,
    to_mono,
)
from voice_spectrogram.errors import DecodeError, EmptyInputError


def _wav(data: np.ndarray, sample_rate: int = 16_000) -> bytes:
    buf = io.BytesIO()
    wavfile.write(buf, sample_rate, data)
    return buf.getvalue()


class TestDecode(unittest.TestCase):
    """Tests for decode() and to_mono()."""

    def test_int16_scaled_to_unit_range(self) -> None:
        """int16 samples are divided by 32768."""
        decoded = decode(_wav(np.array([0, 16384, -32768], dtype=np.int16)))
        self.assertEqual(decoded.sample_rate, 16_000)
        self.assertEqual(decoded.channel_count, 1)
        np.testing.assert_allclose(decoded.channels[0], [0.0, 0.5, -1.0])
        self.assertEqual(decoded.channels.dtype, np.float32)

    def test_float32_passthrough(self) -> None:
        samples = np.array([0.25, -0.75, 0.0], dtype=np.float32)
        decoded = decode(_wav(samples, 8_000))
        self.assertEqual(decoded.sample_rate, 8_000)
        np.testing.assert_array_equal(decoded.channels[0], samples)

    def test_uint8_centered(self) -> None:
        decoded = decode(_wav(np.array([128, 0, 192], dtype=np.uint8)))
        np.testing.assert_allclose(decoded.channels[0], [0.0, -1.0, 0.5])

    def test_stereo_first_channel(self) -> None:
        """Default down-mix keeps channel 0 untouched."""
        stereo = np.stack(
            [np.full(4, 8192, dtype=np.int16), np.full(4, -8192, dtype=np.int16)],
            axis=1,
        )
        decoded = decode(_wav(stereo))
        self.assertEqual(decoded.channel_count, 2)
        self.assertEqual(decoded.n_samples, 4)
        mono = to_mono(decoded)
        np.testing.assert_allclose(mono.samples, 0.25)
        averaged = to_mono(decoded, "mean")
        np.testing.assert_allclose(averaged.samples, 0.0)

    def test_unknown_downmix(self) -> None:
        decoded = decode(_wav(np.zeros(4, dtype=np.int16)))
        with self.assertRaises(ValueError):
            to_mono(decoded, "left")

    def test_empty_bytes(self) -> None:
        with self.assertRaises(EmptyInputError) as ctx:
            decode(b"")
        self.assertEqual(ctx.exception.stage, "decode")

    def test_no_samples(self) -> None:
        """A valid header with an empty data chunk is still empty input."""
        with self.assertRaises(EmptyInputError):
            decode(_wav(np.zeros(0, dtype=np.int16)))

    def test_garbage_bytes(self) -> None:
        with self.assertRaises(DecodeError) as ctx:
            decode(b"this is definitely not a wav file")
        self.assertEqual(ctx.exception.stage, "decode")
        self.assertIn("[decode]", str(ctx.exception))

    def test_zero_channel_header(self) -> None:
        """A header that declares zero channels is reported as a decode failure."""
        buf = bytearray(_wav(np.zeros(64, dtype=np.int16)))
        struct.pack_into("<H", buf, 22, 0)
        with self.assertRaises(DecodeError) as ctx:
            decode(bytes(buf))
        self.assertEqual(ctx.exception.stage, "decode")


class TestPcmBuffer(unittest.TestCase):
    """Tests for PcmBuffer."""

    def test_read_only_float32(self) -> None:
        pcm = PcmBuffer(samples=[0.0, 1.0, 2.0], sample_rate=2.0)
        self.assertEqual(pcm.samples.dtype, np.float32)
        self.assertFalse(pcm.samples.flags.writeable)
        self.assertEqual(len(pcm), 3)
        self.assertAlmostEqual(pcm.duration, 1.5)

    def test_does_not_alias_input(self) -> None:
        source = np.zeros(3, dtype=np.float32)
        pcm = PcmBuffer(samples=source, sample_rate=16_000)
        source[0] = 1.0
        self.assertEqual(pcm.samples[0], 0.0)


class TestBase64(unittest.TestCase):
    """Tests for base64 transport helpers."""

    def test_plain(self) -> None:
        self.assertEqual(decode_base64_audio("aGVsbG8="), b"hello")

    def test_data_url_whitespace_and_missing_padding(self) -> None:
        self.assertEqual(decode_base64_audio("data:audio/wav;base64,aGVs\nbG8"), b"hello")

    def test_invalid_characters(self) -> None:
        with self.assertRaises(DecodeError):
            decode_base64_audio("aGVs$bG8=")

    def test_bytes_input(self) -> None:
        self.assertEqual(decode_base64_audio(b"aGVsbG8="), b"hello")

    def test_non_ascii_bytes(self) -> None:
        """Binary content is rejected as undecodable rather than crashing."""
        with self.assertRaises(DecodeError):
            decode_base64_audio(b"\xff\xfe\x00RIFF")

    def test_empty(self) -> None:
        with self.assertRaises(EmptyInputError):
            decode_base64_audio("   ")

    def test_encode_roundtrip(self) -> None:
        data = bytes(range(256))
        self.assertEqual(decode_base64_audio(encode_base64(data)), data)


class TestEncodeWav(unittest.TestCase):
    """Tests for encode_wav()."""

    def test_mono_int16_clipped(self) -> None:
        pcm = PcmBuffer(samples=[0.0, 0.5, 2.0, -3.0], sample_rate=16_000)
        sr, audio = wavfile.read(io.BytesIO(encode_wav(pcm)))
        self.assertEqual(sr, 16_000)
        self.assertEqual(audio.dtype, np.int16)
        self.assertEqual(audio.tolist(), [0, 16383, 32767, -32767])

    def test_empty(self) -> None:
        with self.assertRaises(EmptyInputError):
            encode_wav(PcmBuffer(samples=[], sample_rate=16_000))


if __name__ == "__main__":
    unittest.main(verbosity=2)
