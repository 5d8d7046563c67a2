"""Helpers for bundled assets and image decoding."""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

_COPY_CHUNK = 4 * 1024


def asset_file_path(asset_dir: Union[str, Path], files_dir: Union[str, Path], name: str) -> Path:
    """Return a local copy of ``asset_dir/name`` inside ``files_dir``.

    An existing non-empty copy is reused as is.
    """
    target = Path(files_dir) / name
    if target.is_file() and target.stat().st_size > 0:
        return target

    source = Path(asset_dir) / name
    if not source.is_file():
        raise FileNotFoundError(f"Asset not found: {source}")

    target.parent.mkdir(parents=True, exist_ok=True)
    with source.open("rb") as src, target.open("wb") as dst:
        shutil.copyfileobj(src, dst, _COPY_CHUNK)
    logger.info("Copied asset %s -> %s", source, target)
    return target


def load_rgba(path: Union[str, Path]) -> np.ndarray:
    """Decode ``path`` into a (rows, cols, 4) uint8 RGBA pixel buffer."""
    with Image.open(path) as img:
        return np.array(img.convert("RGBA"), dtype=np.uint8)


def to_pixel_buffer(image: Union[Image.Image, np.ndarray]) -> np.ndarray:
    """Coerce an in-memory image (e.g. from a Gradio component) to RGBA uint8."""
    if isinstance(image, Image.Image):
        return np.array(image.convert("RGBA"), dtype=np.uint8)
    arr = np.asarray(image)
    if arr.ndim == 3 and arr.shape[2] == 4 and arr.dtype == np.uint8:
        return arr
    if arr.dtype != np.uint8:
        arr = np.clip(arr, 0, 255).astype(np.uint8)
    return np.array(Image.fromarray(arr).convert("RGBA"), dtype=np.uint8)
