# =============================================
# File: toolstack/utils/timing.py
# Purpose: Elapsed-time helper for sub-millisecond work (quiz scoring)
# =============================================
import time
from contextlib import contextmanager

@contextmanager
def timer():
    """Yield a callable returning elapsed milliseconds (float, microsecond resolution)."""
    t0 = time.perf_counter()
    yield lambda: round((time.perf_counter() - t0) * 1000, 3)
