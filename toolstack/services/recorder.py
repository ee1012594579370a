# =============================================
# File: toolstack/services/recorder.py
# Purpose: Best-effort persistence of quiz responses, run off the request path with its own error channel
# =============================================
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import Session

from toolstack.db import repo
from toolstack.services.quiz_models import QuizAnswers, Recommendation
from toolstack.utils import slog
from toolstack.utils.metrics import record_quiz_record_failure


@dataclass(frozen=True)
class RecordOutcome:
    ok: bool
    response_id: Optional[int] = None
    top_pick_slug: str = ""
    error: Optional[str] = None


class QuizResponseRecorder:
    """
    Stores anonymous quiz answers plus the chosen top pick for analytics.

    record() opens its own session and converts any storage failure into a
    RecordOutcome, so callers scheduling it as a background task never see an
    exception. observe_outcome() is the single place failures are reported.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def record(self, answers: QuizAnswers, top_pick: Recommendation) -> RecordOutcome:
        data = answers.as_record()
        try:
            with Session(self._engine) as session:
                response_id = repo.save_quiz_response(
                    session,
                    role=str(data["role"]),
                    goals=list(data["goals"]),
                    technical=str(data["technical"]),
                    budget=str(data["budget"]),
                    workflow=str(data["workflow"]),
                    top_pick_slug=top_pick.slug,
                    top_pick_score=top_pick.score,
                )
        except Exception as e:
            return RecordOutcome(ok=False, top_pick_slug=top_pick.slug, error=f"{type(e).__name__}: {e}")
        return RecordOutcome(ok=True, response_id=response_id, top_pick_slug=top_pick.slug)

    def record_and_observe(self, answers: QuizAnswers, top_pick: Recommendation) -> RecordOutcome:
        outcome = self.record(answers, top_pick)
        observe_outcome(outcome)
        return outcome


def observe_outcome(outcome: RecordOutcome) -> None:
    if outcome.ok:
        logger.debug(f"[quiz] stored response id={outcome.response_id} top_pick={outcome.top_pick_slug}")
        return
    record_quiz_record_failure()
    logger.warning(f"[quiz] could not store response top_pick={outcome.top_pick_slug}: {outcome.error}")
    slog.log_event("quiz.record_failed", top_pick=outcome.top_pick_slug, error=outcome.error)
