"""Shared fixtures for antbee_classifier tests.

This module provides pytest fixtures for:
- Synthetic RGBA pixel buffers and image files
- A fake inference engine that records what it was called with
- A ClassifierApp wired to the fake engine
"""

from pathlib import Path
from typing import List, Sequence

import numpy as np
import pytest
from PIL import Image


class FakeEngine:
    """Engine returning fixed scores and remembering its inputs."""

    def __init__(self, scores: Sequence[float] = (0.1, 0.9)) -> None:
        self.scores = list(scores)
        self.calls: List[tuple] = []

    def __call__(self, data, shape):
        self.calls.append((np.array(data, copy=True), tuple(shape)))
        return list(self.scores)


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def red_rgba() -> np.ndarray:
    """Solid red 2x2 RGBA pixel buffer."""
    pixels = np.zeros((2, 2, 4), dtype=np.uint8)
    pixels[..., 0] = 255
    pixels[..., 3] = 255
    return pixels


@pytest.fixture
def gradient_rgba() -> np.ndarray:
    """3x4 RGBA buffer where every (row, col, channel) value is distinct."""
    return np.arange(3 * 4 * 4, dtype=np.uint8).reshape(3, 4, 4)


@pytest.fixture
def rgba_png(tmp_path, gradient_rgba) -> Path:
    path = tmp_path / "ants.png"
    Image.fromarray(gradient_rgba).save(path)
    return path


@pytest.fixture
def app(fake_engine):
    from antbee_classifier.core import ClassifierApp

    classifier = ClassifierApp(["Ants", "Bees"], fake_engine)
    yield classifier
    classifier.close()
