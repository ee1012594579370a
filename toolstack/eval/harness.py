# =============================================
# File: toolstack/eval/harness.py
# Purpose: Offline evaluation harness for the quiz recommender over YAML scenario cases.
# =============================================
from __future__ import annotations
import sys
import time
import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from toolstack.services.quiz_models import QuizAnswers
from toolstack.services.recommender import QuizRecommender
from toolstack.services.scoring_config import load_scoring_config


def _load_cases(path: str) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or []


def eval_case(engine: QuizRecommender, case: Dict[str, Any]) -> Dict[str, Any]:
    raw = case.get("answers") or {}
    answers = QuizAnswers.from_values(
        role=raw.get("role"),
        goals=raw.get("goals"),
        technical=raw.get("technical"),
        budget=raw.get("budget"),
        workflow=raw.get("workflow"),
    )

    t0 = time.perf_counter()
    result = engine.recommend(answers)
    dt_ms = round((time.perf_counter() - t0) * 1000, 3)

    categories = {i.slug: i.category for i in engine.config.catalog}
    top_category = categories.get(result.top_pick.slug)
    alt_slugs = [a.slug for a in result.alternatives]

    expect_category: Optional[str] = case.get("expect_top_category")
    expect_top_in = case.get("expect_top_in") or []
    expect_related = case.get("expect_related_contains") or []

    return {
        "id": case.get("id", result.top_pick.slug),
        "top_pick": result.top_pick.slug,
        "top_score": result.top_pick.score,
        "alternatives": alt_slugs,
        "related": list(result.related_article_slugs),
        "category_ok": expect_category is None or top_category == expect_category,
        "top_ok": not expect_top_in or result.top_pick.slug in expect_top_in,
        "related_ok": all(s in result.related_article_slugs for s in expect_related),
        "diverse": sum(1 for s in alt_slugs if categories.get(s) != top_category) >= min(2, len(alt_slugs)),
        "latency_ms": dt_ms,
    }


def summarize(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    def rate(key: str) -> float:
        ok = sum(1 for r in rows if r.get(key))
        return round(100.0 * ok / max(1, len(rows)), 1)

    return {
        "n": len(rows),
        "category_ok_%": rate("category_ok"),
        "top_ok_%": rate("top_ok"),
        "related_ok_%": rate("related_ok"),
        "diverse_%": rate("diverse"),
        "avg_latency_ms": round(sum(r.get("latency_ms", 0) for r in rows) / max(1, len(rows)), 3),
        "distinct_top_picks": sorted({r["top_pick"] for r in rows}),
    }


def main(argv=None):
    ap = argparse.ArgumentParser(description="Evaluate the quiz recommender against scenario cases.")
    ap.add_argument("--cases", default="tests/data/quiz_cases.yaml", help="YAML with evaluation cases")
    ap.add_argument("--config", default=None, help="Scoring YAML (default: SCORING_CONFIG_PATH or packaged file)")
    ap.add_argument("--max", type=int, default=0, help="Evaluate at most N cases (0 = all)")
    ap.add_argument("--json", action="store_true", help="Print JSON rows (one per line)")
    args = ap.parse_args(argv)

    # Load .env so SCORING_CONFIG_PATH is picked up
    load_dotenv()

    if not Path(args.cases).exists():
        print(f"[ERROR] Cases file not found: {args.cases}", file=sys.stderr)
        sys.exit(2)

    engine = QuizRecommender(load_scoring_config(args.config))
    cases = _load_cases(args.cases)
    if args.max > 0:
        cases = cases[: args.max]

    rows = [eval_case(engine, c) for c in cases]

    if args.json:
        for r in rows:
            print(json.dumps(r, ensure_ascii=False))
    else:
        summary = summarize(rows)
        print("\n=== Evaluation Summary ===")
        for k, v in summary.items():
            print(f"{k}: {v}")
        print("\n=== Per-case ===")
        for r in rows:
            print(f"- {r['id']}: top={r['top_pick']} ({r['top_score']}) category_ok={r['category_ok']} "
                  f"top_ok={r['top_ok']} related_ok={r['related_ok']} diverse={r['diverse']}")
            print(f"  alternatives: {r['alternatives']}  related: {r['related']}")

    if not all(r["category_ok"] and r["top_ok"] and r["related_ok"] for r in rows):
        sys.exit(1)


if __name__ == "__main__":
    main()
