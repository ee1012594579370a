import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from toolstack.db.seed import load_seed_data, seed
from toolstack.utils import metrics
from toolstack.utils.ratelimit import reset_rate_limit


def build_app(monkeypatch, seeded: bool = True, **env: str):
    """Fresh app on an in-memory store, with a permissive limiter and clean metrics."""
    monkeypatch.setenv("RL_MAX_REQS", "100")
    monkeypatch.setenv("RL_WINDOW_SECONDS", "60")
    monkeypatch.delenv("CATALOG_SOURCE", raising=False)
    monkeypatch.delenv("SCORING_CONFIG_PATH", raising=False)
    for k, v in env.items():
        monkeypatch.setenv(k, v)
    reset_rate_limit()
    metrics.reset()

    from toolstack.main import create_app
    from toolstack.db.repo import create_db_engine, init_db

    if seeded:
        # seed a shared in-memory engine before the app reads it
        engine = create_db_engine("sqlite://")
        init_db(engine)
        with Session(engine) as session:
            seed(session, load_seed_data())
        monkeypatch.setattr("toolstack.main.create_db_engine", lambda url=None: engine)
    return create_app(db_url="sqlite://")


@pytest.fixture
def app(monkeypatch):
    return build_app(monkeypatch)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def session(app):
    with Session(app.state.db_engine) as s:
        yield s
