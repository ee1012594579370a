# =============================================
# File: tests/test_quiz_steps.py
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import dataclasses
import pytest

from toolstack.services.quiz_models import QuizAnswers
from toolstack.services.quiz_steps import (
    QUIZ_STEPS,
    STEP_ENUMS,
    Goal,
    Role,
    SelectionMode,
    get_step,
    parse_goals,
    parse_option,
    step_ids,
    steps_payload,
)

def test_step_ids_match_answer_fields():
    fields = [f.name for f in dataclasses.fields(QuizAnswers)]
    assert step_ids() == ["role", "goals", "technical", "budget", "workflow"]
    assert sorted(step_ids()) == sorted(fields)
    assert set(STEP_ENUMS) == set(fields)

def test_only_goals_is_multi_choice():
    modes = {s.id: s.selection_mode for s in QUIZ_STEPS}
    assert modes.pop("goals") == SelectionMode.MULTI
    assert set(modes.values()) == {SelectionMode.SINGLE}

def test_options_cover_each_enum_in_order():
    for step in QUIZ_STEPS:
        assert step.values == tuple(m.value for m in STEP_ENUMS[step.id])
        assert all(o.label for o in step.options)

def test_steps_are_immutable():
    step = get_step("role")
    with pytest.raises(dataclasses.FrozenInstanceError):
        step.question = "Changed?"

def test_get_step_unknown():
    with pytest.raises(KeyError):
        get_step("favourite-colour")

def test_parse_option_is_lenient():
    assert parse_option(Role, " designer ") is Role.DESIGNER
    assert parse_option(Role, Role.STUDENT) is Role.STUDENT
    assert parse_option(Role, "") is None
    assert parse_option(Role, "astronaut") is None
    assert parse_option(Role, 3) is None

def test_parse_goals_drops_unknown_and_duplicates():
    assert parse_goals(["learn", "nope", "design", "learn"]) == (Goal.LEARN, Goal.DESIGN)
    assert parse_goals(None) == ()

def test_steps_payload_shape():
    payload = steps_payload()
    assert [p["id"] for p in payload] == step_ids()
    budget = payload[3]
    assert budget["type"] == "single"
    assert budget["options"][0] == {"value": "free", "label": "Free tools only"}
