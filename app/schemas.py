"""
Pydantic schemas for request/response validation.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    status: str
    model_loaded: bool
    model_name: str
    version: str = "1.0.0"


class RawLabel(BaseModel):
    label: str          # ImageNet label as returned by the model
    score: float        # Raw score (0.0 - 1.0)
    confidence: int     # Score as a rounded percentage


class PredictionResponse(BaseModel):
    is_dog: bool
    is_cat: bool
    confidence: int     # Max matching keyword score, percent
    raw_results: list[RawLabel]
    prediction: Literal["dog", "cat", "uncertain"]


class ErrorResponse(BaseModel):
    detail: str
