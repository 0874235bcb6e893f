"""
Unit tests for device selection and pipeline loading in model.py.
The transformers pipeline factory is replaced, so nothing is downloaded.
"""

import logging
import sys
from pathlib import Path
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

import src.model as model_module
from src.model import ModelLoadError, get_device, load_classifier


class PipelineFactory:
    """Stands in for transformers.pipeline; fails on the listed devices."""

    def __init__(self, failing_devices=()):
        self.failing_devices = set(failing_devices)
        self.calls = []

    def __call__(self, task, model=None, device=None):
        self.calls.append((task, model, device))
        if device in self.failing_devices:
            raise RuntimeError(f"{device} unavailable")
        return f"classifier@{device}"


class TestGetDevice:
    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MODEL_DEVICE", "mps")
        assert get_device() == "mps"

    def test_cpu_without_cuda(self, monkeypatch):
        monkeypatch.delenv("MODEL_DEVICE", raising=False)
        monkeypatch.setattr(model_module.torch.cuda, "is_available", lambda: False)
        assert get_device() == "cpu"

    def test_cuda_when_available(self, monkeypatch):
        monkeypatch.delenv("MODEL_DEVICE", raising=False)
        monkeypatch.setattr(model_module.torch.cuda, "is_available", lambda: True)
        assert get_device() == "cuda"


class TestLoadClassifier:
    def test_uses_preferred_device(self, monkeypatch):
        factory = PipelineFactory()
        monkeypatch.setattr(model_module, "pipeline", factory)
        assert load_classifier("some/model", "cuda") == "classifier@cuda"
        assert factory.calls == [("image-classification", "some/model", "cuda")]

    def test_falls_back_to_cpu(self, monkeypatch, caplog):
        factory = PipelineFactory(failing_devices={"cuda"})
        monkeypatch.setattr(model_module, "pipeline", factory)

        with caplog.at_level(logging.WARNING, logger="src.model"):
            classifier = load_classifier("some/model", "cuda")

        assert classifier == "classifier@cpu"
        assert [device for _, _, device in factory.calls] == ["cuda", "cpu"]
        assert any("falling back to CPU" in r.getMessage() for r in caplog.records)

    def test_cpu_device_loaded_once(self, monkeypatch):
        factory = PipelineFactory()
        monkeypatch.setattr(model_module, "pipeline", factory)
        assert load_classifier("some/model", "cpu") == "classifier@cpu"
        assert len(factory.calls) == 1

    def test_total_failure_raises(self, monkeypatch):
        factory = PipelineFactory(failing_devices={"cuda", "cpu"})
        monkeypatch.setattr(model_module, "pipeline", factory)
        with pytest.raises(ModelLoadError, match="some/model"):
            load_classifier("some/model", "cuda")
        assert [device for _, _, device in factory.calls] == ["cuda", "cpu"]

    def test_default_device_from_env(self, monkeypatch):
        factory = PipelineFactory()
        monkeypatch.setattr(model_module, "pipeline", factory)
        monkeypatch.setenv("MODEL_DEVICE", "cpu")
        load_classifier("some/model")
        assert factory.calls[0][2] == "cpu"
