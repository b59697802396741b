"""Unit tests for the FFT backends and magnitude spectra."""

from __future__ import annotations

import unittest

import numpy as np

from voice_spectrogram.errors import DimensionError
from voice_spectrogram.features.fft import fft_radix2, magnitude_spectrum


class TestRadix2(unittest.TestCase):
    """Tests for fft_radix2()."""

    def test_matches_numpy(self) -> None:
        rng = np.random.default_rng(7)
        x = rng.standard_normal(512) + 1j * rng.standard_normal(512)
        np.testing.assert_allclose(fft_radix2(x), np.fft.fft(x), atol=1e-9)

    def test_batched(self) -> None:
        rng = np.random.default_rng(8)
        x = rng.standard_normal((3, 64))
        np.testing.assert_allclose(fft_radix2(x), np.fft.fft(x, axis=-1), atol=1e-9)

    def test_length_one(self) -> None:
        np.testing.assert_allclose(fft_radix2(np.array([2.0])), [2.0])

    def test_not_power_of_two(self) -> None:
        with self.assertRaises(DimensionError) as ctx:
            fft_radix2(np.zeros(100))
        self.assertEqual(ctx.exception.stage, "fft")


class TestMagnitudeSpectrum(unittest.TestCase):
    """Tests for magnitude_spectrum()."""

    def test_shape(self) -> None:
        mag = magnitude_spectrum(np.zeros((5, 512)))
        self.assertEqual(mag.shape, (5, 257))

    def test_impulse_is_flat(self) -> None:
        frame = np.zeros(512)
        frame[0] = 1.0
        for backend in ("scipy", "radix2"):
            np.testing.assert_allclose(magnitude_spectrum(frame, backend), np.ones(257), atol=1e-12)

    def test_backends_agree(self) -> None:
        rng = np.random.default_rng(3)
        frames = rng.standard_normal((4, 512))
        np.testing.assert_allclose(
            magnitude_spectrum(frames, "scipy"),
            magnitude_spectrum(frames, "radix2"),
            atol=1e-9,
        )

    def test_sine_peak(self) -> None:
        n = 512
        frame = np.cos(2 * np.pi * 8 * np.arange(n) / n)
        mag = magnitude_spectrum(frame)
        self.assertEqual(int(np.argmax(mag)), 8)
        self.assertAlmostEqual(mag[8], n / 2, places=6)

    def test_nan_clamped_to_zero(self) -> None:
        frame = np.zeros(16)
        frame[3] = np.nan
        mag = magnitude_spectrum(frame)
        self.assertFalse(np.any(np.isnan(mag)))
        np.testing.assert_array_equal(mag, 0.0)

    def test_unknown_backend(self) -> None:
        with self.assertRaises(ValueError):
            magnitude_spectrum(np.zeros(8), "fftw")


if __name__ == "__main__":
    unittest.main(verbosity=2)
