"""CLI for mel spectrogram generation."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np

from voice_spectrogram.audio.config import (
    DOWNMIX_MODES,
    FFT_BACKENDS,
    HOP_MODES,
    RESAMPLE_MODES,
    SpectrogramConfig,
)
from voice_spectrogram.audio.decoder import decode_base64_audio
from voice_spectrogram.audio.resample import downsample_wav
from voice_spectrogram.errors import SpectrogramError
from voice_spectrogram.pipeline import MelSpectrogramPipeline
from voice_spectrogram.render import render_spectrogram, save_mel_text, save_png


def build_parser() -> argparse.ArgumentParser:
    defaults = SpectrogramConfig()
    parser = argparse.ArgumentParser(
        description="Compute a fixed-size normalized mel spectrogram from a WAV file"
    )
    parser.add_argument("input", type=Path, help="Input WAV file (or base64 text with --base64)")
    parser.add_argument(
        "--base64",
        action="store_true",
        help="Input file holds base64 text (a data: URL prefix is accepted)",
    )
    parser.add_argument("--tensor", type=Path, default=None, help="Write the flat tensor as .npy")
    parser.add_argument("--png", type=Path, default=None, help="Write a color-mapped PNG")
    parser.add_argument("--text", type=Path, default=None, help="Write the dB mel matrix as text")
    parser.add_argument(
        "--text-layout",
        choices=("mel", "frame"),
        default="mel",
        help="One text row per mel bin (default) or per frame",
    )
    parser.add_argument(
        "--export-wav",
        type=Path,
        default=None,
        help="Write the mono clip resampled to --sample-rate as 16-bit WAV",
    )
    parser.add_argument("--width", type=int, default=800, help="PNG width (default: 800)")
    parser.add_argument("--height", type=int, default=320, help="PNG height (default: 320)")
    parser.add_argument(
        "--no-interpolate",
        action="store_true",
        help="Nearest-frame columns instead of interpolating across time",
    )

    cfg = parser.add_argument_group("pipeline configuration")
    cfg.add_argument("--fft-size", type=int, default=defaults.fft_size)
    cfg.add_argument("--mel-bins", type=int, default=defaults.mel_bins)
    cfg.add_argument("--time-frames", type=int, default=defaults.time_frames)
    cfg.add_argument("--sample-rate", type=int, default=defaults.sample_rate)
    cfg.add_argument("--hop-time", type=float, default=defaults.hop_time_sec)
    cfg.add_argument("--hop-mode", choices=HOP_MODES, default=defaults.hop_mode)
    cfg.add_argument("--db-multiplier", type=float, choices=(10.0, 20.0), default=defaults.db_multiplier)
    cfg.add_argument("--normalize-filters", action="store_true")
    cfg.add_argument("--downmix", choices=DOWNMIX_MODES, default=defaults.downmix)
    cfg.add_argument("--resample-mode", choices=RESAMPLE_MODES, default=defaults.resample_mode)
    cfg.add_argument("--fft-backend", choices=FFT_BACKENDS, default=defaults.fft_backend)

    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> SpectrogramConfig:
    return SpectrogramConfig(
        sample_rate=args.sample_rate,
        downmix=args.downmix,
        resample_mode=args.resample_mode,
        fft_size=args.fft_size,
        time_frames=args.time_frames,
        hop_time_sec=args.hop_time,
        hop_mode=args.hop_mode,
        fft_backend=args.fft_backend,
        mel_bins=args.mel_bins,
        normalize_filters=args.normalize_filters,
        db_multiplier=args.db_multiplier,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        if args.base64:
            data = decode_base64_audio(args.input.read_bytes())
        else:
            data = args.input.read_bytes()

        result = MelSpectrogramPipeline(config).run(data)
        print(
            f"Mel spectrogram: {config.time_frames} frames x {config.mel_bins} bins "
            f"(hop {result.hop_length} samples, source {result.source_sample_rate:.0f} Hz)"
        )
        print(
            f"dB range [{result.mel_db.min():.2f}, {result.mel_db.max():.2f}], "
            f"tensor length {result.tensor.shape[0]}"
        )

        if args.tensor is not None:
            np.save(args.tensor, result.tensor)
            print(f"Saved tensor: {args.tensor}")
        if args.png is not None:
            image = render_spectrogram(
                result.normalized,
                width=args.width,
                height=args.height,
                interpolate=not args.no_interpolate,
            )
            save_png(image, args.png)
            print(f"Saved image: {args.png}")
        if args.text is not None:
            save_mel_text(result.mel_db, args.text, layout=args.text_layout)
            print(f"Saved mel text: {args.text}")
        if args.export_wav is not None:
            args.export_wav.write_bytes(
                downsample_wav(data, config.sample_rate, config.resample_mode, config.downmix)
            )
            print(f"Saved WAV: {args.export_wav}")
    except (SpectrogramError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
