from .core import ClassifierApp, Prediction
from .engine import TorchScriptEngine
from .preprocess import (
    ClassifierError,
    EmptyScores,
    FlatTensor,
    InvalidShape,
    argmax,
    normalize_and_flatten,
    preprocess,
    strip_alpha,
    to_channel_first,
    to_float,
)
from .worker import InferenceWorker, WorkerBusy

__all__ = [
    "ClassifierApp",
    "ClassifierError",
    "EmptyScores",
    "FlatTensor",
    "InferenceWorker",
    "InvalidShape",
    "Prediction",
    "TorchScriptEngine",
    "WorkerBusy",
    "argmax",
    "normalize_and_flatten",
    "preprocess",
    "strip_alpha",
    "to_channel_first",
    "to_float",
]
