"""TorchScript inference engine used by :class:`~antbee_classifier.core.ClassifierApp`.

An engine is any callable ``engine(data, shape) -> Sequence[float]`` where
``data`` is the flat float32 buffer produced by
:func:`~antbee_classifier.preprocess.preprocess` and ``shape`` is
``(channels, rows, cols)``.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Engine = Callable[[np.ndarray, Tuple[int, int, int]], Sequence[float]]


class TorchScriptEngine:
    """Run a TorchScript (``.pt``) or lite interpreter (``.ptl``) module."""

    def __init__(self, model_path: str, device: Optional[str] = None, batch_dim: bool = False) -> None:
        path = Path(model_path)
        if not path.is_file():
            raise FileNotFoundError(f"Model file not found: {path}")

        # Torch is optional at import time; only needed when a model is loaded
        import torch  # local import

        self.torch = torch
        self.batch_dim = batch_dim
        if path.suffix == ".ptl":
            from torch.jit.mobile import _load_for_lite_interpreter

            self.device = "cpu"
            self.module = _load_for_lite_interpreter(str(path), map_location="cpu")
        else:
            self.device = device or ("cuda" if torch.cuda.is_available() else "cpu")
            self.module = torch.jit.load(str(path), map_location=self.device)
            self.module.eval()
        logger.info("Loaded model %s on %s", path, self.device)

    def __call__(self, data: np.ndarray, shape: Tuple[int, int, int]) -> List[float]:
        x = self.torch.from_numpy(np.ascontiguousarray(data, dtype=np.float32)).reshape(shape)
        if self.batch_dim:
            x = x.unsqueeze(0)
        with self.torch.no_grad():
            out = self.module(x.to(self.device))
        return [float(v) for v in out.flatten().cpu().numpy()]
