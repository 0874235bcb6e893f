"""
Classify image files from the command line.

Usage:
    python -m src.classify photos/ rex.jpg --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from PIL import Image

from src.data_preprocessing import IMAGE_EXTENSIONS, get_image_files, prepare_image
from src.model import MODEL_NAME, TOP_K, ModelLoadError, load_classifier
from src.pet_labels import process_pet_classification


def collect_paths(paths: list) -> list:
    """Expand directories into the image files they contain."""
    files = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            files.extend(get_image_files(path))
        elif path.suffix.lower() in IMAGE_EXTENSIONS:
            files.append(path)
        else:
            print(f"[WARNING] Skipping {path}: not an image file", file=sys.stderr)
    return files


def classify_files(classifier, files: list, top_k: int = TOP_K):
    """Yield (path, result, error) for each file; one bad file does not stop the batch."""
    for path in files:
        try:
            with Image.open(path) as img:
                results = classifier(prepare_image(img), top_k=top_k)
        except Exception as e:
            yield path, None, str(e)
            continue
        yield path, process_pet_classification(results), None


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Classify pet photos as dog, cat or uncertain")
    parser.add_argument("paths", nargs="+", help="Image files or directories")
    parser.add_argument("--model", type=str, default=MODEL_NAME)
    parser.add_argument("--device", type=str, default=None)
    parser.add_argument("--top-k", type=int, default=TOP_K)
    parser.add_argument("--json", action="store_true", help="Print one JSON object per image")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING)

    files = collect_paths(args.paths)
    if not files:
        print("No image files found.", file=sys.stderr)
        return 1

    try:
        classifier = load_classifier(args.model, args.device)
    except ModelLoadError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    failures = 0
    for path, result, error in classify_files(classifier, files, args.top_k):
        if error is not None:
            failures += 1
        if args.json:
            print(json.dumps({"file": str(path), "result": result, "error": error}))
        elif error is not None:
            print(f"{path}: ERROR {error}")
        else:
            print(f"{path}: {result['prediction']:<9} confidence={result['confidence']}%")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
