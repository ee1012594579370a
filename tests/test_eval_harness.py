# =============================================
# File: tests/test_eval_harness.py
# =============================================
import sys, os, json
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest

from toolstack.eval.harness import eval_case, main, summarize
from toolstack.services.recommender import QuizRecommender
from toolstack.services.scoring_config import load_scoring_config

CASES = os.path.join(os.path.dirname(__file__), "data", "quiz_cases.yaml")

def test_bundled_cases_pass(capsys):
    main(["--cases", CASES])
    out = capsys.readouterr().out
    assert "category_ok_%: 100.0" in out
    assert "top_ok_%: 100.0" in out

def test_json_rows(capsys):
    main(["--cases", CASES, "--json", "--max", "2"])
    rows = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.strip()]
    assert [r["top_pick"] for r in rows] == ["supabase", "framer"]

def test_failed_expectation_exits_nonzero(tmp_path):
    cases = tmp_path / "cases.yaml"
    cases.write_text("- id: wrong\n  answers: {role: designer}\n  expect_top_category: developer\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["--cases", str(cases)])
    assert exc.value.code == 1

def test_missing_cases_file():
    with pytest.raises(SystemExit) as exc:
        main(["--cases", "no/such/file.yaml"])
    assert exc.value.code == 2

def test_summarize_rates():
    engine = QuizRecommender(load_scoring_config())
    rows = [
        eval_case(engine, {"answers": {"role": "developer"}, "expect_top_category": "developer"}),
        eval_case(engine, {"answers": {"role": "developer"}, "expect_top_category": "marketing"}),
    ]
    summary = summarize(rows)
    assert summary["n"] == 2
    assert summary["category_ok_%"] == 50.0
    assert summary["diverse_%"] == 100.0
