# =============================================
# File: toolstack/utils/ratelimit.py
# Purpose: Per-client fixed-window limiter for quiz submissions
# =============================================
from __future__ import annotations
import os
import threading
import time
from typing import Dict, Tuple

# key -> (window start, hits in that window)
_windows: Dict[str, Tuple[float, int]] = {}
_lock = threading.Lock()


class RateLimitExceeded(RuntimeError):
    pass


def _now() -> float:
    return time.time()


def limits() -> Tuple[int, int]:
    """(max submissions, window seconds), read per call so env changes apply immediately."""
    return int(os.getenv("RL_MAX_REQS", "30")), int(os.getenv("RL_WINDOW_SECONDS", "60"))


def check_rate_limit(key: str) -> None:
    max_reqs, window_s = limits()
    now = _now()
    with _lock:
        # drop every ended window so idle clients do not accumulate
        for k in [k for k, (s, _) in _windows.items() if now - s >= window_s]:
            del _windows[k]
        started, hits = _windows.get(key, (now, 0))
        if hits >= max_reqs:
            raise RateLimitExceeded(f"{key}: {max_reqs} requests per {window_s}s")
        _windows[key] = (started, hits + 1)


def reset_rate_limit() -> None:
    with _lock:
        _windows.clear()
