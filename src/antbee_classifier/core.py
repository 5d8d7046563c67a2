
"""
core.py
-------
A small Gradio app that classifies one image with a TorchScript model and shows
the detected class, usable from a phone.

Key features
- Plug in *any* inference engine: a callable ``engine(data, shape) -> scores``
  receiving the flat channel-first float32 tensor from
  :func:`~antbee_classifier.preprocess.preprocess`, or a
  :class:`~antbee_classifier.engine.TorchScriptEngine`.
- Labels are an explicit list passed in by the caller; index ``i`` of the score
  vector maps to ``classes[i]``.
- Inference runs on a single background worker. The "Recognize" button is
  disabled while it runs and restored once the result (or failure) is in.
"""

from __future__ import annotations
import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import numpy as np
from PIL import Image
import gradio as gr

from .assets import to_pixel_buffer
from .engine import Engine
from .preprocess import ClassifierError, argmax, preprocess
from .worker import InferenceWorker, WorkerBusy

logger = logging.getLogger(__name__)

BUTTON_READY = "Recognize"
BUTTON_RUNNING = "Running..."


@dataclass
class Prediction:
    index: int
    label: str
    scores: List[float] = field(default_factory=list)


class ClassifierApp:
    """
    Pixels -> preprocess -> engine -> arg-max -> label, plus the Gradio page.
    """

    def __init__(
        self,
        classes: List[str],
        engine: Engine,
        image: Optional[Union[str, np.ndarray]] = None,
    ) -> None:
        if not classes:
            raise ValueError("At least one class label is required.")
        self.classes = list(classes)
        self.engine = engine
        self.image = image
        self.worker = InferenceWorker(self.predict)

    # ---------- Core Prediction ----------
    def predict(self, pixels: np.ndarray) -> Prediction:
        """Classify one RGBA pixel buffer."""
        flat = preprocess(pixels)
        scores = [float(s) for s in self.engine(flat.data, flat.shape)]
        idx = argmax(scores)
        if idx >= len(self.classes):
            raise IndexError(
                f"Engine returned {len(scores)} scores but only {len(self.classes)} labels are known."
            )
        pred = Prediction(index=idx, label=self.classes[idx], scores=scores)
        logger.info("Class detected: %s (index %d, scores %s)", pred.label, idx, scores)
        return pred

    def recognize(
        self,
        pixels: np.ndarray,
        on_done: Optional[Callable[[Future], None]] = None,
    ) -> Future:
        """Run :meth:`predict` on the background worker; raises ``WorkerBusy`` if one is running."""
        return self.worker.submit(pixels, on_done=on_done)

    # ---------- Gradio Handlers ----------
    def start_gr(self) -> Tuple[Dict[str, Any], str]:
        return gr.update(value=BUTTON_RUNNING, interactive=False), " "

    def recognize_gr(self, img: Optional[Union[np.ndarray, Image.Image]]) -> Tuple[str, Dict[str, Any]]:
        ready = gr.update(value=BUTTON_READY, interactive=True)
        if img is None:
            return "No image provided.", ready
        try:
            pred = self.recognize(to_pixel_buffer(img)).result()
        except WorkerBusy:
            return "Recognition already running.", gr.update(value=BUTTON_RUNNING, interactive=False)
        except (ClassifierError, IndexError) as e:
            logger.error("Recognition failed: %s", e)
            return f"Recognition failed: {e}", ready
        except Exception as e:
            logger.exception("Unexpected error during recognition")
            return f"Recognition failed: {e}", ready
        return f"Class Detected: {pred.label}", ready

    # ---------- Build UI ----------
    def build_demo(self) -> gr.Blocks:
        with gr.Blocks(title="Ants vs. Bees", css="footer {visibility: hidden}") as demo:
            gr.Markdown("## 🐜 Ants vs. Bees\nPress the button to classify the image.")
            img_in = gr.Image(
                value=self.image,
                sources=["upload", "webcam"],
                image_mode="RGBA",
                type="numpy",
                label="Image",
            )
            out_text = gr.Textbox(label="Result", interactive=False)
            btn = gr.Button(BUTTON_READY)
            btn.click(self.start_gr, outputs=[btn, out_text]).then(
                self.recognize_gr, inputs=[img_in], outputs=[out_text, btn]
            )
        return demo

    def launch(self, **kwargs):
        demo = self.build_demo()
        return demo.launch(**kwargs)

    def close(self) -> None:
        self.worker.shutdown()
