"""
Post-deployment batch simulation.
Sends N requests to the running API (synthetic images, or real photos from a
directory), collects predictions and latency, and logs a performance report.

Usage:
    python monitoring/simulate_requests.py --n 50 --url http://localhost:8000
    python monitoring/simulate_requests.py --image-dir samples/ --url http://localhost:8000
"""

import argparse
import time
import random
import io
import json
import sys
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
import requests
import numpy as np
from PIL import Image

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.data_preprocessing import get_image_files


# Synthetic inputs: random noise at a few sizes, including ones that get resized
SYNTHETIC_SIZES = [(224, 224), (640, 480), (480, 640), (1024, 768)]

# Every upload type the service accepts
CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def make_dummy_image(size: tuple) -> bytes:
    """Generate a random-noise JPEG image in memory."""
    width, height = size
    arr = np.random.randint(0, 255, (height, width, 3), dtype=np.uint8)
    img = Image.fromarray(arr)
    buf = io.BytesIO()
    img.save(buf, format="JPEG")
    return buf.getvalue()


def iter_payloads(n: int, image_dir: Path | None):
    """Yield (filename, bytes, content_type) for n requests."""
    if image_dir is not None:
        files = get_image_files(image_dir, tuple(CONTENT_TYPES))
        if not files:
            raise SystemExit(f"No images found in {image_dir}")
        for i in range(n):
            path = files[i % len(files)]
            ctype = CONTENT_TYPES[path.suffix.lower()]
            yield path.name, path.read_bytes(), ctype
    else:
        for i in range(n):
            yield f"synthetic_{i:04d}.jpg", make_dummy_image(random.choice(SYNTHETIC_SIZES)), "image/jpeg"


def run_simulation(base_url: str, n: int, image_dir: Path | None = None,
                   report_path: str = "monitoring/performance_report.json"):
    predict_url = f"{base_url}/predict"
    health_url  = f"{base_url}/health"

    # Check health first
    resp = requests.get(health_url, timeout=5)
    resp.raise_for_status()
    print(f"[Health] {resp.json()}\n")

    results = []   # (filename, prediction, confidence, latency)
    errors  = 0

    for i, (name, img_bytes, ctype) in enumerate(iter_payloads(n, image_dir)):
        start = time.perf_counter()
        try:
            r = requests.post(
                predict_url,
                files={"file": (name, img_bytes, ctype)},
                timeout=60,
            )
            latency = time.perf_counter() - start

            if r.status_code == 200:
                data = r.json()
                results.append((name, data["prediction"], data["confidence"], latency))
                top = data["raw_results"][0]["label"] if data["raw_results"] else "-"
                print(
                    f"  [{i+1:02d}/{n}] {name:<24} pred={data['prediction']:<9} "
                    f"conf={data['confidence']:>3}%  top={top[:30]:<30} latency={latency*1000:.1f}ms"
                )
            else:
                errors += 1
                print(f"  [{i+1:02d}/{n}] ERROR: HTTP {r.status_code} {r.text[:80]}")
        except requests.RequestException as e:
            errors += 1
            print(f"  [{i+1:02d}/{n}] EXCEPTION: {e}")

    # ── Performance Summary ────────────────────────────────────────────────────
    now = datetime.now(timezone.utc)
    print("\n" + "=" * 55)
    print("  Post-Deployment Performance Report")
    print(f"  Generated: {now.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    print("=" * 55)

    if not results:
        print("  No successful predictions recorded.")
        return

    total       = len(results)
    predictions = Counter(p for _, p, __, ___ in results)
    latencies   = sorted(l for _, __, ___, l in results)
    avg_conf    = sum(c for _, __, c, ___ in results) / total
    avg_lat     = sum(latencies) / total
    p95_lat     = latencies[min(int(0.95 * total), total - 1)]

    print(f"  Total requests     : {n}")
    print(f"  Successful         : {total}")
    print(f"  Errors             : {errors}")
    for label in ("dog", "cat", "uncertain"):
        print(f"  {label.capitalize():<19}: {predictions.get(label, 0)}")
    print(f"  Avg confidence     : {avg_conf:.1f}%")
    print(f"  Avg latency        : {avg_lat*1000:.1f} ms")
    print(f"  P95 latency        : {p95_lat*1000:.1f} ms")
    print(f"  Min latency        : {latencies[0]*1000:.1f} ms")
    print(f"  Max latency        : {latencies[-1]*1000:.1f} ms")
    print("=" * 55)

    # ── Save JSON report ───────────────────────────────────────────────────────
    report = {
        "timestamp": now.isoformat(),
        "total_requests": n,
        "successful": total,
        "errors": errors,
        "predictions": dict(predictions),
        "avg_confidence": round(avg_conf, 2),
        "avg_latency_ms": round(avg_lat * 1000, 2),
        "p95_latency_ms": round(p95_lat * 1000, 2),
    }
    with open(report_path, "w") as f:
        json.dump(report, f, indent=2)
    print(f"\n  Report saved → {report_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate batch inference requests")
    parser.add_argument("--n",   type=int, default=50, help="Number of requests")
    parser.add_argument("--url", type=str, default="http://localhost:8000")
    parser.add_argument("--image-dir", type=Path, default=None, help="Send real photos from this directory")
    args = parser.parse_args()
    run_simulation(args.url, args.n, args.image_dir)
