# =============================================
# File: toolstack/routers/metrics.py
# Purpose: Expose internal metrics as JSON
# =============================================
from __future__ import annotations
from typing import Any, Dict
from fastapi import APIRouter
from toolstack.utils.metrics import snapshot

router = APIRouter(tags=["metrics"])

@router.get("/metrics")
def get_metrics() -> Dict[str, Any]:
    """Return in-process counters, top-pick tallies and latency stats (JSON)."""
    return snapshot()
