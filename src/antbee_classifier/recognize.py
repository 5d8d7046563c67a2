"""Run the classifier once (or launch the UI) from a YAML config file."""
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import yaml

from .assets import asset_file_path, load_rgba
from .core import ClassifierApp, Prediction
from .engine import TorchScriptEngine
from .preprocess import ClassifierError

logger = logging.getLogger(__name__)

DEFAULT_CLASSES = ["Ants", "Bees"]
DEFAULT_FILES_DIR = Path.home() / ".antbee_classifier"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class RecognizeConfig:
    """Configuration for a recognition run."""

    model: str
    image: str
    classes: List[str] = field(default_factory=lambda: list(DEFAULT_CLASSES))
    asset_dir: Optional[Path] = None
    files_dir: Path = DEFAULT_FILES_DIR
    device: Optional[str] = None
    batch_dim: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.classes = list(self.classes)
        if self.asset_dir is not None:
            self.asset_dir = Path(self.asset_dir)
        self.files_dir = Path(self.files_dir).expanduser()
        self.log_level = str(self.log_level).upper()

    def resolve(self, name: str) -> Path:
        """Path of ``name``, copied out of ``asset_dir`` first when one is set."""
        if self.asset_dir is None:
            return Path(name)
        return asset_file_path(self.asset_dir, self.files_dir, name)


def _ensure_classes(value: object) -> List[str]:
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        raise TypeError("`classes` must be a list of strings.")
    classes: List[str] = []
    for item in value:
        if not isinstance(item, str):
            raise TypeError("Each class label must be a string.")
        classes.append(item)
    if not classes:
        raise ValueError("At least one class label must be provided.")
    return classes


def _ensure_str(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value:
        raise TypeError(f"`{key}` must be a non-empty string.")
    return value


def _ensure_bool(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise TypeError(f"`{key}` must be true or false.")
    return value


def load_config(path: str) -> RecognizeConfig:
    """Load and validate a :class:`RecognizeConfig` from ``path``."""

    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping of options.")

    required_keys = {"model", "image"}
    missing = required_keys.difference(data)
    if missing:
        missing_list = ", ".join(sorted(missing))
        raise KeyError(f"Missing required configuration keys: {missing_list}")

    model = _ensure_str(data, "model")
    image = _ensure_str(data, "image")
    classes = _ensure_classes(data.get("classes", DEFAULT_CLASSES))

    asset_dir = data.get("asset_dir")
    if asset_dir is not None:
        if not isinstance(asset_dir, str):
            raise TypeError("`asset_dir` must be a string path.")
        # Relative asset dirs are taken relative to the config file
        asset_dir = config_path.parent / asset_dir

    files_dir = data.get("files_dir", str(DEFAULT_FILES_DIR))
    if not isinstance(files_dir, str):
        raise TypeError("`files_dir` must be a string path.")

    device = data.get("device")
    if device is not None and not isinstance(device, str):
        raise TypeError("`device` must be a string such as 'cpu' or 'cuda'.")

    log_level = str(data.get("log_level", "INFO")).upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"`log_level` must be one of {', '.join(sorted(_LOG_LEVELS))}.")

    return RecognizeConfig(
        model=model,
        image=image,
        classes=classes,
        asset_dir=asset_dir,
        files_dir=Path(files_dir),
        device=device,
        batch_dim=_ensure_bool(data, "batch_dim", False),
        log_level=log_level,
    )


def build_app(config: RecognizeConfig) -> ClassifierApp:
    model_path = config.resolve(config.model)
    image_path = config.resolve(config.image)
    engine = TorchScriptEngine(str(model_path), device=config.device, batch_dim=config.batch_dim)
    return ClassifierApp(config.classes, engine, image=str(image_path))


def main(config: RecognizeConfig, ui: bool = False, share: bool = False) -> Optional[Prediction]:
    """Classify the configured image once, or launch the UI when ``ui`` is set."""

    app = build_app(config)
    if ui:
        app.launch(share=share)
        return None
    try:
        pixels = load_rgba(app.image)
        return app.recognize(pixels).result()
    finally:
        app.close()


def cli() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Classify an image (ants vs. bees) using a YAML config file.")
    parser.add_argument(
        "--config",
        required=True,
        help="Path to a YAML configuration file.",
    )
    parser.add_argument("--image", help="Override the configured image.")
    parser.add_argument("--ui", action="store_true", help="Launch the Gradio page instead of a single run.")
    parser.add_argument("--share", action="store_true", help="Create a public Gradio link (with --ui).")

    args = parser.parse_args()
    config = load_config(args.config)
    if args.image:
        config.image = args.image
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        pred = main(config, ui=args.ui, share=args.share)
    except (ClassifierError, IndexError) as e:
        logger.error("Recognition failed: %s", e)
        sys.exit(1)
    if pred is not None:
        print(f"Class Detected: {pred.label}")


if __name__ == "__main__":
    cli()
