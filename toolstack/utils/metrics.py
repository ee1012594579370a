# =============================================
# File: toolstack/utils/metrics.py
# Purpose: Process-local counters, top-pick tally and latency stats served by GET /metrics
# =============================================
from __future__ import annotations
import bisect
import threading
import time
from collections import Counter, defaultdict, deque
from typing import Any, Deque, Dict, List

LATENCY_BUCKETS_MS: List[int] = [10, 25, 50, 100, 250, 500, 1000]
ENDPOINT_SAMPLES = 1000

COUNTERS = (
    "requests_total",
    "rate_limit_hits_total",
    "quiz_submissions_total",
    "quiz_record_failures_total",
)


class _Registry:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.clear()

    def clear(self) -> None:
        self.counters: Dict[str, int] = dict.fromkeys(COUNTERS, 0)
        self.top_picks: Counter = Counter()
        # one slot per bucket plus +Inf
        self.histogram: List[int] = [0] * (len(LATENCY_BUCKETS_MS) + 1)
        self.endpoints: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=ENDPOINT_SAMPLES))
        self.endpoint_hits: Counter = Counter()


_registry = _Registry()


def _p95(samples: List[float]) -> float:
    if not samples:
        return 0.0
    xs = sorted(samples)
    return xs[int(0.95 * (len(xs) - 1))]


def record_request(latency_ms: int) -> None:
    with _registry.lock:
        _registry.counters["requests_total"] += 1
        _registry.histogram[bisect.bisect_left(LATENCY_BUCKETS_MS, int(latency_ms))] += 1


def record_endpoint(method: str, path: str, latency_ms: float) -> None:
    key = f"{method.upper()} {path}"
    with _registry.lock:
        _registry.endpoint_hits[key] += 1
        _registry.endpoints[key].append(float(latency_ms))


def record_rate_limit_hit() -> None:
    with _registry.lock:
        _registry.counters["rate_limit_hits_total"] += 1


def record_quiz_submission(top_pick_slug: str) -> None:
    with _registry.lock:
        _registry.counters["quiz_submissions_total"] += 1
        _registry.top_picks[top_pick_slug] += 1


def record_quiz_record_failure() -> None:
    with _registry.lock:
        _registry.counters["quiz_record_failures_total"] += 1


def snapshot() -> Dict[str, Any]:
    with _registry.lock:
        endpoints = {}
        for key, samples in _registry.endpoints.items():
            xs = list(samples)
            endpoints[key] = {
                "count": _registry.endpoint_hits[key],
                "avg_latency_ms": sum(xs) / len(xs) if xs else 0.0,
                "p95_latency_ms": _p95(xs),
            }
        return {
            "counters": dict(_registry.counters),
            "top_picks": dict(_registry.top_picks),
            "latency_ms": {
                "buckets": LATENCY_BUCKETS_MS + ["+Inf"],
                "counts": list(_registry.histogram),
            },
            "performance": {"endpoints": endpoints, "generated_at": time.time()},
        }


def reset() -> None:
    with _registry.lock:
        _registry.clear()
