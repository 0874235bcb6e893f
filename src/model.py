"""
Pretrained image classifier used for pet detection.
Wraps a Hugging Face `image-classification` pipeline (ResNet-50 on ImageNet).
"""

import logging
import os

import torch
from transformers import pipeline

logger = logging.getLogger(__name__)

MODEL_NAME = os.getenv("MODEL_NAME", "microsoft/resnet-50")
TOP_K = int(os.getenv("TOP_K", "5"))
TASK = "image-classification"


class ModelLoadError(RuntimeError):
    """The classifier pipeline could not be created."""


def get_device() -> str:
    """Preferred inference device; MODEL_DEVICE overrides autodetection."""
    override = os.getenv("MODEL_DEVICE")
    if override:
        return override
    return "cuda" if torch.cuda.is_available() else "cpu"


def load_classifier(model_name: str = MODEL_NAME, device: str | None = None):
    """
    Build the classification pipeline, falling back to CPU when the
    preferred accelerator cannot be used.
    """
    device = device or get_device()

    if device != "cpu":
        try:
            classifier = pipeline(TASK, model=model_name, device=device)
            logger.info(f"Classifier {model_name} ready on {device}")
            return classifier
        except Exception as e:
            logger.warning(f"Device {device} not available ({e}), falling back to CPU")

    try:
        classifier = pipeline(TASK, model=model_name, device="cpu")
    except Exception as e:
        raise ModelLoadError(f"Could not load {model_name}: {e}") from e

    logger.info(f"Classifier {model_name} ready on cpu")
    return classifier


if __name__ == "__main__":
    from PIL import Image

    logging.basicConfig(level=logging.INFO)
    classifier = load_classifier()
    dummy = Image.new("RGB", (224, 224), color=(128, 128, 128))
    for result in classifier(dummy, top_k=TOP_K):
        print(f"{result['label']:<40} {result['score']:.4f}")
