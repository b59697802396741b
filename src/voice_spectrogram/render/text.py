"""Human-readable text dump of a mel matrix for offline inspection."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Union

import numpy as np

LAYOUTS = ("mel", "frame")


def _oriented(matrix: np.ndarray, layout: str) -> np.ndarray:
    matrix = np.atleast_2d(np.asarray(matrix, dtype=np.float64))
    if layout == "mel":
        return matrix.T
    if layout == "frame":
        return matrix
    raise ValueError(f"layout must be one of {LAYOUTS}")


def format_mel_text(matrix: np.ndarray, layout: str = "mel", fmt: str = "%.6f") -> str:
    """Format a (time_frames, mel_bins) matrix as space-separated rows.

    layout="mel" writes one line per mel bin, layout="frame" one per time frame.
    """
    buf = io.StringIO()
    np.savetxt(buf, _oriented(matrix, layout), fmt=fmt, delimiter=" ")
    return buf.getvalue()


def save_mel_text(
    matrix: np.ndarray,
    path: Union[str, Path],
    layout: str = "mel",
    fmt: str = "%.6f",
) -> None:
    np.savetxt(str(path), _oriented(matrix, layout), fmt=fmt, delimiter=" ")
