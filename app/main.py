"""
FastAPI Inference Service for dog / cat pet classification.

Endpoints:
  GET  /         → Redirect to the browser UI
  GET  /ui       → Gradio upload page
  GET  /health   → Health check
  POST /predict  → Classify an uploaded image as dog, cat or uncertain
  GET  /metrics  → Prometheus metrics
"""

import logging
import os
import time
from contextlib import asynccontextmanager

import gradio as gr
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import RedirectResponse, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.concurrency import run_in_threadpool

from app.predictor import ClassificationError, Predictor
from app.schemas import ErrorResponse, HealthResponse, PredictionResponse
from app.ui import FAILURE_MESSAGE, build_interface
from src.data_preprocessing import is_supported_content_type, load_image
from src.model import MODEL_NAME, ModelLoadError

# ── Structured JSON-like logging ─────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format='{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}',
)
logger = logging.getLogger("petclassifier-api")

PRELOAD_MODEL = os.getenv("PRELOAD_MODEL", "true").lower() in ("1", "true", "yes")

# ── Prometheus Metrics ────────────────────────────────────────────────────────
REQUEST_COUNT = Counter(
    "petclassifier_request_total",
    "Total number of requests",
    ["endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "petclassifier_request_latency_seconds",
    "Request latency in seconds",
    ["endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)
PREDICTION_LABELS = Counter(
    "petclassifier_prediction_total",
    "Count of pet predictions",
    ["prediction"],
)

# ── Shared predictor (model loads once) ──────────────────────────────────────
predictor = Predictor(model_name=MODEL_NAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if PRELOAD_MODEL:
        logger.info(f"Loading model {predictor.model_name}...")
        try:
            predictor.load()
            logger.info("Model loaded successfully")
        except ModelLoadError as e:
            # Retried on the first request
            logger.error(f"Failed to load model: {e}")
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Pet Classifier API",
    description="Classifies uploaded photos as dog, cat or uncertain using a pretrained ImageNet model.",
    version="1.0.0",
    lifespan=lifespan,
)


# ── Endpoints ─────────────────────────────────────────────────────────────────

@app.get("/", include_in_schema=False)
async def index():
    return RedirectResponse(url="/ui")


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Health check endpoint — returns service and model status."""
    start = time.time()
    REQUEST_COUNT.labels(endpoint="/health", status="200").inc()
    REQUEST_LATENCY.labels(endpoint="/health").observe(time.time() - start)
    return HealthResponse(
        status="ok",
        model_loaded=predictor.loaded,
        model_name=predictor.model_name,
    )


@app.post(
    "/predict",
    response_model=PredictionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    tags=["Inference"],
)
async def predict(file: UploadFile = File(..., description="Image file (png/jpg/gif/webp)")):
    """
    Accept an image upload and classify it as dog, cat or uncertain.

    - **file**: Image file
    """
    start = time.time()

    if not is_supported_content_type(file.content_type):
        REQUEST_COUNT.labels(endpoint="/predict", status="400").inc()
        raise HTTPException(status_code=400, detail="File must be an image")

    try:
        image = load_image(await file.read())
    except ValueError as e:
        REQUEST_COUNT.labels(endpoint="/predict", status="400").inc()
        raise HTTPException(status_code=400, detail=f"Cannot read image: {e}")

    try:
        # Inference (and a lazy model load) runs off the event loop
        result = await run_in_threadpool(predictor.predict, image)
    except ModelLoadError as e:
        logger.error(f"Model unavailable: {e}")
        REQUEST_COUNT.labels(endpoint="/predict", status="503").inc()
        raise HTTPException(status_code=503, detail="Model not loaded")
    except ClassificationError as e:
        logger.error(f"Error during classification: {e}")
        REQUEST_COUNT.labels(endpoint="/predict", status="500").inc()
        raise HTTPException(status_code=500, detail=FAILURE_MESSAGE)

    latency = time.time() - start
    REQUEST_COUNT.labels(endpoint="/predict", status="200").inc()
    REQUEST_LATENCY.labels(endpoint="/predict").observe(latency)
    PREDICTION_LABELS.labels(prediction=result["prediction"]).inc()

    logger.info(
        f"predict | prediction={result['prediction']} "
        f"confidence={result['confidence']}% "
        f"latency={latency:.3f}s "
        f"file={file.filename}"
    )

    return PredictionResponse(**result)


@app.get("/metrics", tags=["System"], include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


# ── Browser UI ────────────────────────────────────────────────────────────────
app = gr.mount_gradio_app(app, build_interface(lambda: predictor), path="/ui")
