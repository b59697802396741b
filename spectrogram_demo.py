"""Run the mel spectrogram pipeline on a WAV file or a synthetic tone.

Usage:
  python spectrogram_demo.py                       # 440 Hz tone, canonical config
  python spectrogram_demo.py --file test.wav       # audio from file
  python spectrogram_demo.py --file test.wav --output mel   # mel.png, mel.txt, mel.npy
"""

import io
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

import numpy as np
import scipy.io.wavfile as wavfile

from voice_spectrogram import MelSpectrogramPipeline, SpectrogramConfig
from voice_spectrogram.render import render_spectrogram, save_mel_text, save_png


def make_tone(freq=440.0, duration_sec=1.0, sample_rate=16000):
    """Mono 16-bit WAV bytes of a sine tone."""
    t = np.arange(int(duration_sec * sample_rate)) / sample_rate
    audio = (0.5 * np.sin(2 * np.pi * freq * t) * 32767).astype(np.int16)
    buf = io.BytesIO()
    wavfile.write(buf, sample_rate, audio)
    return buf.getvalue()


def main(wav_path=None, output_prefix=None):
    config = SpectrogramConfig()
    pipeline = MelSpectrogramPipeline(config)

    if wav_path:
        wav_path = Path(wav_path)
        if not wav_path.exists():
            print(f"File not found: {wav_path}")
            sys.exit(1)
        data = wav_path.read_bytes()
        source = str(wav_path)
    else:
        data = make_tone()
        source = "440 Hz tone"

    print(f"Running pipeline on {source}...\n")
    result = pipeline.run(data)
    print(f"tensor: {result.tensor.shape[0]} floats ({config.time_frames} x {config.mel_bins})")
    print(f"dB range: [{result.mel_db.min():.2f}, {result.mel_db.max():.2f}]")
    peaks = np.argmax(result.normalized, axis=1)
    print(f"peak mel bin, first 10 frames: {peaks[:10].tolist()}")

    if output_prefix:
        prefix = Path(output_prefix)
        save_png(render_spectrogram(result.normalized), prefix.with_suffix(".png"))
        save_mel_text(result.mel_db, prefix.with_suffix(".txt"))
        np.save(prefix.with_suffix(".npy"), result.tensor)
        print(f"\nSaved {prefix}.png, {prefix}.txt, {prefix}.npy")
    print("\nDone.")


if __name__ == "__main__":
    args = sys.argv[1:]
    wav_path = None
    output_prefix = None
    if "--file" in args:
        idx = args.index("--file")
        if idx + 1 < len(args):
            wav_path = args[idx + 1]
    if "--output" in args:
        idx = args.index("--output")
        if idx + 1 < len(args):
            output_prefix = args[idx + 1]
    main(wav_path=wav_path, output_prefix=output_prefix)
