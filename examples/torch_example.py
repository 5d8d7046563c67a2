# examples/torch_example.py
import logging
import os
from pathlib import Path

import torch
from torchvision import models

from antbee_classifier import ClassifierApp, TorchScriptEngine

MODEL_PATH = os.environ.get("MODEL_PATH", "my_model.pt")
IMAGE_PATH = os.environ.get("IMAGE_PATH", "ants.jpg")
DEFAULT_CLASSES = ["Ants", "Bees"]
classes_path = Path(__file__).with_name("classes.txt")
if classes_path.exists():
    classes = [line.strip() for line in classes_path.read_text().splitlines() if line.strip()] or DEFAULT_CLASSES
else:
    classes = DEFAULT_CLASSES

logging.basicConfig(level=logging.INFO)

model_path = Path(MODEL_PATH)
if not model_path.is_file():
    logging.getLogger(__name__).warning(
        "MODEL_PATH '%s' not found. Scripting an untrained resnet18 instead.", model_path
    )
    model = models.resnet18(weights=None)
    model.fc = torch.nn.Linear(model.fc.in_features, len(classes))
    torch.jit.script(model.eval()).save(str(model_path))

# resnet18 wants NCHW, so add the batch axis
engine = TorchScriptEngine(str(model_path), batch_dim=True)
app = ClassifierApp(classes, engine, image=IMAGE_PATH if Path(IMAGE_PATH).is_file() else None)
app.launch(share=True)
