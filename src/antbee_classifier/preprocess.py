"""
preprocess.py
-------------
Turn a decoded RGBA pixel buffer into the tensor layout the classifier expects.

Pipeline
- ``strip_alpha``: (rows, cols, >=3) -> (rows, cols, 3), alpha dropped.
- ``to_float``: same values as ``float32``, no scaling.
- ``to_channel_first``: (rows, cols, 3) -> (3, rows, cols).
- ``normalize_and_flatten``: divide by 255 and lay out in (channel, row, column)
  order as a 1-D buffer plus its shape.

Every call allocates its own arrays; nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np


class ClassifierError(ValueError):
    """Base class for errors raised by the preprocessing pipeline."""


class InvalidShape(ClassifierError):
    """The pixel buffer or tensor does not have the expected dimensions."""


class EmptyScores(ClassifierError):
    """The inference engine returned no scores."""


@dataclass
class FlatTensor:
    """Channel-first tensor serialized as one contiguous float32 buffer."""

    data: np.ndarray
    shape: Tuple[int, int, int]

    def __len__(self) -> int:
        return int(self.data.size)

    def to_chw(self) -> np.ndarray:
        """Re-read ``data`` with ``shape`` in (channel, row, column) order."""
        return self.data.reshape(self.shape)


def _check_spatial(arr: np.ndarray, what: str) -> None:
    if arr.ndim != 3:
        raise InvalidShape(f"{what} must be 3-dimensional, got shape {arr.shape}.")


def strip_alpha(pixels: np.ndarray) -> np.ndarray:
    """Keep the R, G and B channels of ``pixels`` and drop everything after them."""
    pixels = np.asarray(pixels)
    _check_spatial(pixels, "Pixel buffer")
    rows, cols, channels = pixels.shape
    if channels < 3:
        raise InvalidShape(f"Pixel buffer needs at least 3 channels, got {channels}.")
    if rows == 0 or cols == 0:
        raise InvalidShape(f"Pixel buffer is empty: {rows}x{cols}.")
    return pixels[:, :, :3].copy()


def to_float(rgb: np.ndarray) -> np.ndarray:
    return np.asarray(rgb).astype(np.float32)


def to_channel_first(rgb: np.ndarray) -> np.ndarray:
    """Move the channel axis to the front: ``out[c, i, j] == rgb[i, j, c]``."""
    rgb = np.asarray(rgb)
    _check_spatial(rgb, "RGB tensor")
    if rgb.shape[2] != 3:
        raise InvalidShape(f"RGB tensor must have exactly 3 channels, got {rgb.shape[2]}.")
    return np.ascontiguousarray(np.transpose(rgb, (2, 0, 1)))


def normalize_and_flatten(chw: np.ndarray) -> FlatTensor:
    """Scale ``chw`` to [0, 1] and flatten it channel-major.

    Values outside the 8-bit range are divided like any other; nothing is clamped.
    """
    chw = np.asarray(chw)
    _check_spatial(chw, "CHW tensor")
    channels, rows, cols = chw.shape
    if channels != 3:
        raise InvalidShape(f"CHW tensor must have exactly 3 channels, got {channels}.")
    # C order ravel walks channel, then row, then column
    data = (chw.astype(np.float32) / np.float32(255.0)).ravel(order="C").copy()
    return FlatTensor(data=data, shape=(int(channels), int(rows), int(cols)))


def preprocess(pixels: np.ndarray) -> FlatTensor:
    """Run the full pixel buffer -> flat tensor pipeline."""
    rgb = to_float(strip_alpha(pixels))
    return normalize_and_flatten(to_channel_first(rgb))


def argmax(scores: Sequence[float]) -> int:
    """Index of the largest score; the earliest one wins on ties."""
    values = [float(s) for s in np.asarray(scores, dtype=float).ravel()]
    if not values:
        raise EmptyScores("Cannot take the arg-max of an empty score sequence.")
    best_idx, best = 0, values[0]
    for idx in range(1, len(values)):
        if values[idx] > best:
            best_idx, best = idx, values[idx]
    return best_idx
