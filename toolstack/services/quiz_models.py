# =============================================
# File: toolstack/services/quiz_models.py
# Purpose: Value types flowing in and out of the quiz recommender
# =============================================
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from toolstack.services.quiz_steps import (
    BudgetBracket,
    Goal,
    Role,
    TechnicalLevel,
    WorkflowPreference,
    parse_goals,
    parse_option,
)


@dataclass(frozen=True)
class QuizAnswers:
    """
    One completed (or partial) quiz attempt.
    Unanswered single-choice steps are None; goals keep first-seen order, which
    only matters for related-article ordering.
    """
    role: Optional[Role] = None
    goals: Tuple[Goal, ...] = ()
    technical: Optional[TechnicalLevel] = None
    budget: Optional[BudgetBracket] = None
    workflow: Optional[WorkflowPreference] = None

    def __post_init__(self) -> None:
        # goals are a set; a repeated goal must not add its weight twice
        object.__setattr__(self, "goals", tuple(dict.fromkeys(self.goals or ())))

    @classmethod
    def from_values(
        cls,
        role: object = None,
        goals: Iterable[object] | None = None,
        technical: object = None,
        budget: object = None,
        workflow: object = None,
    ) -> "QuizAnswers":
        return cls(
            role=parse_option(Role, role),
            goals=parse_goals(goals),
            technical=parse_option(TechnicalLevel, technical),
            budget=parse_option(BudgetBracket, budget),
            workflow=parse_option(WorkflowPreference, workflow),
        )

    def as_record(self) -> Dict[str, object]:
        """Plain-string view used for persistence and logs."""
        return {
            "role": self.role.value if self.role else "",
            "goals": [g.value for g in self.goals],
            "technical": self.technical.value if self.technical else "",
            "budget": self.budget.value if self.budget else "",
            "workflow": self.workflow.value if self.workflow else "",
        }


@dataclass(frozen=True)
class CatalogItem:
    slug: str
    category: str
    traits: FrozenSet[str] = field(default_factory=frozenset)
    monthly_cost: float = 0.0

    @property
    def is_free(self) -> bool:
        return self.monthly_cost == 0


@dataclass(frozen=True)
class Recommendation:
    slug: str
    score: float
    reason: str


@dataclass(frozen=True)
class QuizResult:
    top_pick: Recommendation
    alternatives: Tuple[Recommendation, ...]
    related_article_slugs: Tuple[str, ...]

    @property
    def slugs(self) -> Tuple[str, ...]:
        return (self.top_pick.slug,) + tuple(a.slug for a in self.alternatives)
