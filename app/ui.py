"""
Browser UI (Gradio) for the pet classifier.
Mounted into the FastAPI app at /ui.
"""

import html
import logging

import gradio as gr

logger = logging.getLogger("petclassifier-ui")

NO_IMAGE_MESSAGE = "Please select an image first!"
FAILURE_MESSAGE = "Classification failed. Please try again with a different image."
ANALYZING_MESSAGE = "🧠 AI is analyzing your pet... This may take a moment while the neural network loads."

DETAILS_LIMIT = 3

PREDICTION_DISPLAY = {
    "dog": ("🐕", "This is a Dog! 🐕", "#f97316"),
    "cat": ("🐱", "This is a Cat! 🐱", "#8b5cf6"),
    "uncertain": ("🤔", "Uncertain Classification 🤔", "#94a3b8"),
}


def confidence_color(confidence: int) -> str:
    if confidence >= 70:
        return "#16a34a"  # green
    if confidence >= 40:
        return "#ca8a04"  # yellow
    return "#dc2626"  # red


def _badge(name: str, emoji: str, detected: bool, color: str) -> str:
    border = color if detected else "#e2e8f0"
    text = "Detected" if detected else "Not Detected"
    return (
        f'<div class="pet-badge" style="border:2px solid {border};border-radius:8px;'
        f'padding:12px;text-align:center;flex:1">'
        f'<div style="font-size:1.5em">{emoji}</div>'
        f"<div><strong>{name}</strong></div>"
        f"<div>{text}</div></div>"
    )


def _bar(percent: int, color: str, width: str = "100%") -> str:
    percent = max(0, min(percent, 100))
    return (
        f'<div style="background:#e2e8f0;border-radius:9999px;height:8px;width:{width}">'
        f'<div style="background:{color};border-radius:9999px;height:8px;width:{percent}%"></div>'
        f"</div>"
    )


def render_result(result: dict) -> str:
    """Render a classification result dict as an HTML card."""
    icon, headline, accent = PREDICTION_DISPLAY[result["prediction"]]
    confidence = result["confidence"]

    rows = []
    for item in result["raw_results"][:DETAILS_LIMIT]:
        rows.append(
            '<div style="display:flex;justify-content:space-between;align-items:center;gap:8px">'
            f'<span style="text-transform:capitalize">{html.escape(item["label"])}</span>'
            f'<span style="display:flex;align-items:center;gap:8px">'
            f'{_bar(item["confidence"], "#6366f1", "64px")}'
            f'<span>{item["confidence"]}%</span></span></div>'
        )

    return (
        f'<div class="pet-result pet-{result["prediction"]}" '
        f'style="border:2px solid {accent};border-radius:12px;padding:16px">'
        f'<div style="text-align:center;font-size:2em">{icon}</div>'
        f'<h2 style="text-align:center">{headline}</h2>'
        f'<p style="text-align:center">Confidence: '
        f'<strong style="color:{confidence_color(confidence)}">{confidence}%</strong></p>'
        f'{_bar(confidence, accent)}'
        f'<div style="display:flex;gap:16px;margin:16px 0">'
        f'{_badge("Dog", "🐕", result["is_dog"], PREDICTION_DISPLAY["dog"][2])}'
        f'{_badge("Cat", "🐱", result["is_cat"], PREDICTION_DISPLAY["cat"][2])}'
        f"</div>"
        f"<h4>AI Analysis Details</h4>"
        f'{"".join(rows)}'
        f"</div>"
    )


def complete_message(result: dict) -> str:
    icon = PREDICTION_DISPLAY[result["prediction"]][0]
    return (
        f"{icon} Classification complete! "
        f"Detected: {result['prediction']} with {result['confidence']}% confidence"
    )


def make_classify_handler(get_predictor):
    """Build the click handler; get_predictor returns the shared Predictor."""

    def classify(image):
        if image is None:
            raise gr.Error(NO_IMAGE_MESSAGE)

        gr.Info(ANALYZING_MESSAGE)
        try:
            result = get_predictor().predict(image)
        except Exception as e:
            logger.error(f"Classification error: {e}")
            raise gr.Error(FAILURE_MESSAGE) from e

        logger.info(f"ui predict | prediction={result['prediction']} confidence={result['confidence']}")
        gr.Info(complete_message(result))
        return render_result(result)

    return classify


def build_interface(get_predictor) -> gr.Blocks:
    with gr.Blocks(title="AI Pet Classifier") as demo:
        gr.Markdown(
            "# AI Pet Classifier\n"
            "Upload an image of your pet and the neural network will tell "
            "whether it's a dog or a cat.\n\n"
            "Supports: PNG, JPG, JPEG, GIF, WebP"
        )
        image_input = gr.Image(type="pil", label="Upload Pet Image")
        with gr.Row():
            classify_btn = gr.Button("Classify Pet with AI", variant="primary")
            clear_btn = gr.Button("Try Another Image")
        result_html = gr.HTML()

        classify_btn.click(
            fn=make_classify_handler(get_predictor),
            inputs=image_input,
            outputs=result_html,
        )
        # A new selection invalidates the previous result
        image_input.change(fn=lambda _: "", inputs=image_input, outputs=result_html)
        clear_btn.click(fn=lambda: (None, ""), inputs=None, outputs=[image_input, result_html])

    return demo
