"""Smoke tests for the command-line interface."""

from __future__ import annotations

import contextlib
import io
import os
import tempfile
import unittest

import numpy as np
import scipy.io.wavfile as wavfile

from voice_spectrogram.audio.decoder import encode_base64
from voice_spectrogram.cli import main


def _write_tone(path: str, sample_rate: int = 16_000) -> bytes:
    t = np.arange(sample_rate) / sample_rate
    audio = (0.5 * np.sin(2 * np.pi * 440 * t) * 32767).astype(np.int16)
    wavfile.write(path, sample_rate, audio)
    with open(path, "rb") as f:
        return f.read()


class TestCli(unittest.TestCase):
    """Tests for voice_spectrogram.cli.main()."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = self._tmp.name
        self.wav = os.path.join(self.tmp, "tone.wav")
        self.wav_bytes = _write_tone(self.wav)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, *argv: str) -> int:
        with contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(io.StringIO()):
            return main(list(argv))

    def test_all_outputs(self) -> None:
        tensor = os.path.join(self.tmp, "mel.npy")
        png = os.path.join(self.tmp, "mel.png")
        text = os.path.join(self.tmp, "mel.txt")
        wav_out = os.path.join(self.tmp, "out.wav")
        code = self._run(
            self.wav,
            "--tensor", tensor,
            "--png", png,
            "--text", text,
            "--export-wav", wav_out,
            "--width", "200",
            "--height", "80",
        )
        self.assertEqual(code, 0)
        self.assertEqual(np.load(tensor).shape, (11_072,))
        self.assertGreater(os.path.getsize(png), 0)
        self.assertEqual(np.loadtxt(text).shape, (64, 173))
        sr, _ = wavfile.read(wav_out)
        self.assertEqual(sr, 16_000)

    def test_base64_input(self) -> None:
        b64 = os.path.join(self.tmp, "tone.b64")
        with open(b64, "w") as f:
            f.write(encode_base64(self.wav_bytes))
        tensor = os.path.join(self.tmp, "mel.npy")
        self.assertEqual(self._run(b64, "--base64", "--tensor", tensor, "--mel-bins", "40"), 0)
        self.assertEqual(np.load(tensor).shape, (40 * 173,))

    def test_bad_input_returns_error(self) -> None:
        bad = os.path.join(self.tmp, "bad.wav")
        with open(bad, "wb") as f:
            f.write(b"not audio at all")
        self.assertEqual(self._run(bad), 1)

    def test_binary_file_with_base64_flag(self) -> None:
        """Passing a WAV file with --base64 exits with status 1."""
        self.assertEqual(self._run(self.wav, "--base64"), 1)

    def test_missing_file_returns_error(self) -> None:
        self.assertEqual(self._run(os.path.join(self.tmp, "missing.wav")), 1)

    def test_invalid_config_exits(self) -> None:
        with self.assertRaises(SystemExit):
            self._run(self.wav, "--fft-size", "500")


if __name__ == "__main__":
    unittest.main(verbosity=2)
