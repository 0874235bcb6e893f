"""
Model loading and inference logic.
The pipeline is loaded once (at app startup or on first request) and shared.
"""

import threading

from PIL import Image

from src.data_preprocessing import prepare_image
from src.model import MODEL_NAME, TOP_K, load_classifier
from src.pet_labels import process_pet_classification


class ClassificationError(RuntimeError):
    """Inference failed for an otherwise valid image."""


class Predictor:
    """Wraps the pretrained pipeline for single-image pet classification."""

    def __init__(self, model_name: str = MODEL_NAME, device: str | None = None,
                 top_k: int = TOP_K, loader=load_classifier):
        self.model_name = model_name
        self.device = device
        self.top_k = top_k
        self._loader = loader
        self._classifier = None
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._classifier is not None

    def load(self):
        """Load the pipeline exactly once; concurrent callers wait for it."""
        if self._classifier is not None:
            return self._classifier
        with self._lock:
            if self._classifier is None:
                self._classifier = self._loader(self.model_name, self.device)
        return self._classifier

    def predict(self, image: Image.Image) -> dict:
        """
        Given a PIL Image, return the pet classification.

        Returns:
            {
                "is_dog": bool,
                "is_cat": bool,
                "confidence": int,
                "raw_results": [{"label": str, "score": float, "confidence": int}, ...],
                "prediction": "dog" | "cat" | "uncertain",
            }
        """
        classifier = self.load()  # ModelLoadError propagates
        try:
            results = classifier(prepare_image(image), top_k=self.top_k)
        except Exception as e:
            raise ClassificationError(f"Inference failed: {e}") from e
        return process_pet_classification(results)
