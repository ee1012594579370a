# =============================================
# File: toolstack/utils/slog.py
# Purpose: One-line JSON events on the "toolstack" logger (request summaries, quiz outcomes)
# =============================================
from __future__ import annotations
import hashlib
import json
import logging
import os
import uuid
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger("toolstack")

if not logger.handlers:
    _console = logging.StreamHandler()
    _console.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(_console)
    logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    # pytest's caplog listens on the root logger
    logger.propagate = True


def new_request_id() -> str:
    return uuid.uuid4().hex


def answers_hash(record: Mapping[str, Any]) -> str:
    """
    Stable 10-char fingerprint of a quiz answer record (QuizAnswers.as_record()).
    Lets identical submissions be grouped in logs without logging the answers.
    """
    goals = ",".join(record.get("goals") or [])
    parts = [record.get("role") or "", goals, record.get("technical") or "",
             record.get("budget") or "", record.get("workflow") or ""]
    return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()[:10]


def log_event(event: str, **fields: Any) -> None:
    logger.info(json.dumps({"event": event, **fields}, ensure_ascii=False, default=str))


def finalize_request_log(
    request_id: str,
    method: str,
    path: str,
    status: int,
    latency_ms: int,
    client_ip: Optional[str],
    ctx: Optional[Dict[str, Any]] = None,
) -> None:
    """request.completed summary; ctx carries what the route put on request.state.log_context."""
    log_event(
        "request.completed",
        request_id=request_id,
        method=method,
        path=path,
        status=status,
        latency_ms=latency_ms,
        client_ip=client_ip or "",
        **(ctx or {}),
    )
