# =============================================
# File: tests/test_rate_limit.py
# Purpose: Validate per-client rate limiting on POST /quiz
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest
from fastapi.testclient import TestClient

from conftest import build_app
from toolstack.utils.ratelimit import RateLimitExceeded, check_rate_limit, reset_rate_limit

PAYLOAD = {"role": "student", "goals": ["learn"], "technical": "beginner", "budget": "free", "workflow": "simple"}

def test_rate_limit_per_client(monkeypatch):
    app = build_app(monkeypatch)
    # Keep window tiny for test
    monkeypatch.setenv("RL_MAX_REQS", "1")
    client = TestClient(app)

    r1 = client.post("/quiz", json=PAYLOAD)
    assert r1.status_code == 200

    # Second call in same window should be blocked
    r2 = client.post("/quiz", json=PAYLOAD)
    assert r2.status_code == 429

    # reads are not limited
    assert client.get("/quiz/steps").status_code == 200

def test_limiter_keys_are_independent(monkeypatch):
    monkeypatch.setenv("RL_MAX_REQS", "2")
    monkeypatch.setenv("RL_WINDOW_SECONDS", "60")
    reset_rate_limit()

    check_rate_limit("a")
    check_rate_limit("a")
    check_rate_limit("b")
    with pytest.raises(RateLimitExceeded):
        check_rate_limit("a")

def test_window_expiry(monkeypatch):
    monkeypatch.setenv("RL_MAX_REQS", "1")
    monkeypatch.setenv("RL_WINDOW_SECONDS", "60")
    reset_rate_limit()

    import toolstack.utils.ratelimit as rl
    now = [1000.0]
    monkeypatch.setattr(rl, "_now", lambda: now[0])

    check_rate_limit("k")
    with pytest.raises(RateLimitExceeded):
        check_rate_limit("k")
    now[0] += 61
    check_rate_limit("k")

def test_ended_windows_are_dropped(monkeypatch):
    monkeypatch.setenv("RL_MAX_REQS", "5")
    monkeypatch.setenv("RL_WINDOW_SECONDS", "60")
    reset_rate_limit()

    import toolstack.utils.ratelimit as rl
    now = [1000.0]
    monkeypatch.setattr(rl, "_now", lambda: now[0])

    for i in range(50):
        check_rate_limit(f"quiz:10.0.0.{i}")
    assert len(rl._windows) == 50

    now[0] += 60
    check_rate_limit("quiz:10.0.0.99")
    assert list(rl._windows) == ["quiz:10.0.0.99"]
