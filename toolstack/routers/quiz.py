# toolstack/routers/quiz.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlmodel import Session

from toolstack.db.repo import get_session
from toolstack.services.hydration import hydrate_result
from toolstack.services.quiz_models import QuizAnswers
from toolstack.services.quiz_steps import (
    BudgetBracket,
    Goal,
    Role,
    TechnicalLevel,
    WorkflowPreference,
    steps_payload,
)
from toolstack.utils import slog
from toolstack.utils.metrics import record_quiz_submission, record_rate_limit_hit
from toolstack.utils.ratelimit import RateLimitExceeded, check_rate_limit
from toolstack.utils.timing import timer

router = APIRouter(tags=["quiz"])


# --------- Schemas ---------

class QuizRequest(BaseModel):
    """
    Completed quiz.
    - every single-choice step is required and must be one of that step's option values
    - goals must be present but may be empty (duplicates are ignored)
    """
    role: Role
    goals: List[Goal] = Field(..., max_length=len(Goal) * 2)
    technical: TechnicalLevel
    budget: BudgetBracket
    workflow: WorkflowPreference

    def to_answers(self) -> QuizAnswers:
        return QuizAnswers.from_values(
            role=self.role,
            goals=self.goals,
            technical=self.technical,
            budget=self.budget,
            workflow=self.workflow,
        )


class QuizCard(BaseModel):
    slug: str
    score: float
    reason: str
    tool: Optional[Dict[str, Any]] = None


class QuizResponse(BaseModel):
    top_pick: QuizCard
    alternatives: List[QuizCard]
    related_posts: List[Dict[str, Any]]


# --------- Routes ---------

@router.get("/quiz/steps")
def get_quiz_steps() -> List[Dict[str, Any]]:
    """Ordered quiz steps with their options."""
    return steps_payload()


@router.post("/quiz", response_model=QuizResponse)
def post_quiz(
    req: QuizRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
) -> QuizResponse:
    """
    Score the quiz, schedule anonymous storage of the outcome, and return the
    top pick, alternatives and related posts joined with live records.
    """
    key = request.client.host if request.client else "anon"
    try:
        check_rate_limit(f"quiz:{key}")
    except RateLimitExceeded:
        record_rate_limit_hit()
        request.state.log_context = {"rate_limited": True}
        raise HTTPException(status_code=429, detail="Too Many Requests")

    answers = req.to_answers()
    record = answers.as_record()

    with timer() as elapsed:
        result = request.app.state.recommender.recommend(answers)
    scoring_ms = elapsed()

    # storage runs after the response is sent; it reports its own failures
    background_tasks.add_task(request.app.state.recorder.record_and_observe, answers, result.top_pick)
    record_quiz_submission(result.top_pick.slug)

    request.state.log_context = {
        "answers_hash": slog.answers_hash(record),
        "top_pick": result.top_pick.slug,
    }
    slog.log_event(
        "quiz.recommended",
        top_pick=result.top_pick.slug,
        top_score=result.top_pick.score,
        alternatives=[a.slug for a in result.alternatives],
        related=list(result.related_article_slugs),
        scoring_ms=scoring_ms,
    )

    return QuizResponse(**hydrate_result(session, result))
