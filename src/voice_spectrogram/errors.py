"""Pipeline error types.

Every failure carries the name of the stage that raised it so callers can tell
a decode failure from a transform failure.
"""

from typing import Optional


class SpectrogramError(Exception):
    """Base class for all pipeline failures."""

    default_stage = "transform"

    def __init__(self, message: str, stage: Optional[str] = None):
        self.stage = stage or self.default_stage
        self.message = message
        super().__init__(f"[{self.stage}] {message}")


class DecodeError(SpectrogramError):
    """Malformed or unsupported audio bytes."""

    default_stage = "decode"


class EmptyInputError(SpectrogramError):
    """Zero-length byte buffer or PCM buffer."""

    default_stage = "decode"


class DimensionError(SpectrogramError):
    """Internal shape invariant violated (filter bank vs spectrum, tensor layout, ...)."""
