"""
Image preparation for inference.
- Decodes uploaded bytes with Pillow
- Converts to RGB
- Shrinks large images so the longer side fits MAX_IMAGE_DIMENSION
"""

import io
import os
from pathlib import Path
from PIL import Image

# ── Constants ─────────────────────────────────────────────────────────────────
MAX_IMAGE_DIMENSION = int(os.getenv("MAX_IMAGE_DIMENSION", "512"))
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp")


def resize_if_needed(image: Image.Image, max_dim: int = MAX_IMAGE_DIMENSION) -> Image.Image:
    """Scale down so neither side exceeds max_dim, keeping aspect ratio."""
    width, height = image.size

    if width <= max_dim and height <= max_dim:
        return image

    if width > height:
        height = round(height * max_dim / width)
        width = max_dim
    else:
        width = round(width * max_dim / height)
        height = max_dim

    return image.resize((max(width, 1), max(height, 1)), Image.LANCZOS)


def prepare_image(image: Image.Image, max_dim: int = MAX_IMAGE_DIMENSION) -> Image.Image:
    """RGB conversion + resize, the only preprocessing the pipeline needs."""
    return resize_if_needed(image.convert("RGB"), max_dim)


def load_image(data: bytes) -> Image.Image:
    """Decode raw upload bytes into a PIL image."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except Exception as e:
        raise ValueError(f"Failed to load image: {e}") from e
    return image


def is_supported_content_type(content_type) -> bool:
    return bool(content_type) and content_type.startswith("image/")


def get_image_files(directory: Path, extensions: tuple = IMAGE_EXTENSIONS) -> list:
    """Recursively collect image file paths from a directory."""
    files = []
    for ext in extensions:
        files.extend(directory.rglob(f"*{ext}"))
    return sorted(files)
