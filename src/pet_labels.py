"""
Maps raw ImageNet labels onto a dog / cat / uncertain decision.

The pretrained classifier knows ~120 dog breeds and a handful of cat
classes, so species detection is a case-insensitive substring lookup
against fixed keyword lists.
"""

import math

# ── Keywords found in ImageNet label names ──────────────────────────────────
DOG_KEYWORDS = [
    "dog", "puppy", "retriever", "beagle", "bulldog", "terrier",
    "spaniel", "poodle", "chihuahua", "collie", "shepherd", "husky",
    "labrador", "mastiff", "boxer", "dachshund", "corgi", "pointer",
    "setter", "hound", "schnauzer", "rottweiler", "doberman",
]

CAT_KEYWORDS = [
    "cat", "kitten", "tabby", "persian", "siamese", "egyptian",
    "tiger cat", "lynx", "manx", "maine coon",
]

CONFIDENCE_THRESHOLD = 0.1
RAW_RESULTS_LIMIT = 5


def to_percent(score: float) -> int:
    """Score in [0, 1] → integer percentage, halves rounded up."""
    return int(math.floor(score * 100 + 0.5))


def matches_any(label: str, keywords: list) -> bool:
    label = label.lower()
    return any(keyword in label for keyword in keywords)


def process_pet_classification(results: list) -> dict:
    """
    Turn pipeline output into a pet classification.

    Args:
        results: [{"label": str, "score": float}, ...] in model order.

    Returns:
        {
            "is_dog": bool,
            "is_cat": bool,
            "confidence": int,          # percent
            "raw_results": [{"label", "score", "confidence"}, ...],
            "prediction": "dog" | "cat" | "uncertain",
        }
    """
    max_dog_score = 0.0
    max_cat_score = 0.0
    raw_results = []

    for result in results:
        label = result["label"]
        score = float(result["score"])

        raw_results.append({
            "label": label,
            "score": score,
            "confidence": to_percent(score),
        })

        # Checked independently: one label can raise both maxima
        if matches_any(label, DOG_KEYWORDS):
            max_dog_score = max(max_dog_score, score)
        if matches_any(label, CAT_KEYWORDS):
            max_cat_score = max(max_cat_score, score)

    is_dog = max_dog_score > max_cat_score and max_dog_score > CONFIDENCE_THRESHOLD
    is_cat = max_cat_score > max_dog_score and max_cat_score > CONFIDENCE_THRESHOLD
    confidence = max(max_dog_score, max_cat_score)

    if confidence < CONFIDENCE_THRESHOLD:
        prediction = "uncertain"
    elif is_dog:
        prediction = "dog"
    elif is_cat:
        prediction = "cat"
    else:
        prediction = "uncertain"  # tie, or exactly on the threshold

    return {
        "is_dog": is_dog,
        "is_cat": is_cat,
        "confidence": to_percent(confidence),
        "raw_results": raw_results[:RAW_RESULTS_LIMIT],
        "prediction": prediction,
    }
