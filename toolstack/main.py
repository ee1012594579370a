# =============================================
# File: toolstack/main.py
# Purpose: FastAPI application factory: owns the DB engine, the recommender and the response recorder
# Usage:
#   uvicorn toolstack.main:create_app --factory --reload
# =============================================
from __future__ import annotations

import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import Session

from toolstack.db.repo import create_db_engine, init_db, load_catalog_snapshot
from toolstack.routers import catalog, metrics, quiz
from toolstack.services.recorder import QuizResponseRecorder
from toolstack.services.recommender import QuizRecommender
from toolstack.services.scoring_config import ScoringConfig, load_scoring_config
from toolstack.utils import slog
from toolstack.utils.logging import setup_logging
from toolstack.utils.metrics import record_endpoint, record_request


def _resolve_scoring_config(engine: Engine, config: ScoringConfig | None) -> ScoringConfig:
    """
    Mirror file by default. With CATALOG_SOURCE=store the catalog comes from the
    published tools instead, keeping the mirror when the store has none.
    """
    config = config or load_scoring_config()
    if os.getenv("CATALOG_SOURCE", "mirror").lower() != "store":
        return config
    with Session(engine) as session:
        items = load_catalog_snapshot(session)
    if not items:
        logger.warning("[startup] CATALOG_SOURCE=store but no published tools; using the catalog mirror")
        return config
    logger.info(f"[startup] recommender catalog loaded from store ({len(items)} tools)")
    return config.with_catalog(items)


def create_app(db_url: str | None = None, scoring_config: ScoringConfig | None = None) -> FastAPI:
    setup_logging()

    engine = create_db_engine(db_url)
    init_db(engine)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        engine.dispose()

    app = FastAPI(
        title="ToolStack",
        description="SaaS tool directory and recommendation quiz API",
        lifespan=lifespan,
    )
    app.state.db_engine = engine
    app.state.recommender = QuizRecommender(_resolve_scoring_config(engine, scoring_config))
    app.state.recorder = QuizResponseRecorder(engine)

    @app.middleware("http")
    async def _logging_middleware(request, call_next):
        start = time.perf_counter()
        req_id = slog.new_request_id()
        client_ip = request.client.host if request.client else None
        try:
            response = await call_next(request)
        except Exception as e:
            latency_ms = int((time.perf_counter() - start) * 1000)
            ctx = getattr(request.state, "log_context", {})
            slog.log_event(
                "request.error",
                request_id=req_id,
                path=str(request.url.path),
                method=request.method,
                latency_ms=latency_ms,
                client_ip=client_ip,
                error=str(e),
                **(ctx or {}),
            )
            raise
        latency_ms = int((time.perf_counter() - start) * 1000)
        ctx = getattr(request.state, "log_context", {}) or {}
        ctx.setdefault("rate_limited", response.status_code == 429)
        slog.finalize_request_log(
            request_id=req_id,
            method=request.method,
            path=str(request.url.path),
            status=response.status_code,
            latency_ms=latency_ms,
            client_ip=client_ip,
            ctx=ctx,
        )
        record_request(latency_ms=latency_ms)
        record_endpoint(method=request.method, path=str(request.url.path), latency_ms=latency_ms)
        response.headers["X-Request-ID"] = req_id
        return response

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(quiz.router)
    app.include_router(catalog.router)
    app.include_router(metrics.router)

    logger.info(f"[startup] catalog={len(app.state.recommender.config.catalog)} tools")
    return app
