# =============================================
# File: toolstack/services/quiz_steps.py
# Purpose: Static quiz step definitions and the closed option sets for each step
# =============================================
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Type


class Role(str, Enum):
    SOLO_CREATOR = "solo-creator"
    STARTUP_FOUNDER = "startup-founder"
    DESIGNER = "designer"
    MARKETER = "marketer"
    DEVELOPER = "developer"
    SMALL_BUSINESS = "small-business"
    STUDENT = "student"
    EXPLORING = "exploring"


class Goal(str, Enum):
    AUTOMATION = "automation"
    DESIGN = "design"
    NO_CODE = "no-code"
    MARKETING = "marketing"
    PROJECT_MGMT = "project-mgmt"
    MAKE_MONEY = "make-money"
    LEARN = "learn"


class TechnicalLevel(str, Enum):
    BEGINNER = "beginner"
    SOMEWHAT = "somewhat"
    VERY = "very"


class BudgetBracket(str, Enum):
    FREE = "free"
    UNDER_20 = "under-20"
    MID_RANGE = "20-100"
    NO_LIMIT = "no-limit"


class WorkflowPreference(str, Enum):
    SIMPLE = "simple"
    FEATURE_RICH = "feature-rich"
    AI_FIRST = "ai-first"
    VISUAL = "visual"


class SelectionMode(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


@dataclass(frozen=True)
class QuizOption:
    value: Enum
    label: str


@dataclass(frozen=True)
class QuizStep:
    id: str
    question: str
    subtitle: str
    selection_mode: SelectionMode
    options: Tuple[QuizOption, ...]

    @property
    def values(self) -> Tuple[str, ...]:
        return tuple(o.value.value for o in self.options)


def _options(enum_cls: Type[Enum], labels: Dict[Enum, str]) -> Tuple[QuizOption, ...]:
    # one label per member, in declaration order
    return tuple(QuizOption(value=member, label=labels[member]) for member in enum_cls)


QUIZ_STEPS: Tuple[QuizStep, ...] = (
    QuizStep(
        id="role",
        question="Who are you?",
        subtitle="No wrong answers, we're just getting to know you.",
        selection_mode=SelectionMode.SINGLE,
        options=_options(Role, {
            Role.SOLO_CREATOR: "Solo creator / freelancer",
            Role.STARTUP_FOUNDER: "Startup founder",
            Role.DESIGNER: "Designer",
            Role.MARKETER: "Marketer",
            Role.DEVELOPER: "Developer",
            Role.SMALL_BUSINESS: "Small business owner",
            Role.STUDENT: "Student",
            Role.EXPLORING: "Just exploring",
        }),
    ),
    QuizStep(
        id="goals",
        question="What's your main goal?",
        subtitle="Pick as many as you like.",
        selection_mode=SelectionMode.MULTI,
        options=_options(Goal, {
            Goal.AUTOMATION: "Save time with automation",
            Goal.DESIGN: "Design better products",
            Goal.NO_CODE: "Build websites/apps without code",
            Goal.MARKETING: "Grow audience / marketing",
            Goal.PROJECT_MGMT: "Manage projects better",
            Goal.MAKE_MONEY: "Make money online",
            Goal.LEARN: "Learn new tools",
        }),
    ),
    QuizStep(
        id="technical",
        question="How technical are you?",
        subtitle="This helps us match the right complexity level.",
        selection_mode=SelectionMode.SINGLE,
        options=_options(TechnicalLevel, {
            TechnicalLevel.BEGINNER: "Beginner, I avoid code",
            TechnicalLevel.SOMEWHAT: "Somewhat technical",
            TechnicalLevel.VERY: "Very technical",
        }),
    ),
    QuizStep(
        id="budget",
        question="What's your budget range?",
        subtitle="We'll filter tools that actually fit.",
        selection_mode=SelectionMode.SINGLE,
        options=_options(BudgetBracket, {
            BudgetBracket.FREE: "Free tools only",
            BudgetBracket.UNDER_20: "Under $20/month",
            BudgetBracket.MID_RANGE: "$20-$100/month",
            BudgetBracket.NO_LIMIT: "No limit if it's worth it",
        }),
    ),
    QuizStep(
        id="workflow",
        question="What kind of workflow do you prefer?",
        subtitle="Almost there, last question!",
        selection_mode=SelectionMode.SINGLE,
        options=_options(WorkflowPreference, {
            WorkflowPreference.SIMPLE: "Simple & minimal",
            WorkflowPreference.FEATURE_RICH: "Feature-rich",
            WorkflowPreference.AI_FIRST: "AI-first",
            WorkflowPreference.VISUAL: "Visual / no-code",
        }),
    ),
)

# step id -> enum of its option values
STEP_ENUMS: Dict[str, Type[Enum]] = {
    "role": Role,
    "goals": Goal,
    "technical": TechnicalLevel,
    "budget": BudgetBracket,
    "workflow": WorkflowPreference,
}


def step_ids() -> List[str]:
    return [s.id for s in QUIZ_STEPS]


def get_step(step_id: str) -> QuizStep:
    for step in QUIZ_STEPS:
        if step.id == step_id:
            return step
    raise KeyError(step_id)


def parse_option(enum_cls: Type[Enum], value: object) -> Optional[Enum]:
    """Map a loose value onto a step enum; empty or unknown values become None."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return enum_cls(value.strip())
    except ValueError:
        return None


def parse_goals(values: Iterable[object] | None) -> Tuple[Goal, ...]:
    """Parse goal values, dropping unknowns and duplicates (first occurrence wins)."""
    out: List[Goal] = []
    for v in values or ():
        g = parse_option(Goal, v)
        if g is not None and g not in out:
            out.append(g)
    return tuple(out)


def steps_payload() -> List[Dict[str, object]]:
    """JSON-ready view of the steps for the quiz UI."""
    return [
        {
            "id": s.id,
            "question": s.question,
            "subtitle": s.subtitle,
            "type": s.selection_mode.value,
            "options": [{"value": o.value.value, "label": o.label} for o in s.options],
        }
        for s in QUIZ_STEPS
    ]
