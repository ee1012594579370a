# =============================================
# File: toolstack/services/hydration.py
# Purpose: Attach live catalog/article records to a slug-based quiz result
# =============================================
from __future__ import annotations

from typing import Any, Dict, List

from sqlmodel import Session

from toolstack.db import repo
from toolstack.services.quiz_models import QuizResult, Recommendation


def _card(rec: Recommendation, tools: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "slug": rec.slug,
        "score": rec.score,
        "reason": rec.reason,
        # None when the live store no longer has (or hides) this tool
        "tool": tools.get(rec.slug),
    }


def hydrate_result(session: Session, result: QuizResult) -> Dict[str, Any]:
    """
    Join the recommender output with the store. Missing tools become tool=None and
    missing posts are dropped; the snapshot and the store are not kept in lockstep.
    """
    tools = {t.slug: t.model_dump() for t in repo.get_tools_by_slugs(session, list(result.slugs))}
    posts: List[Dict[str, Any]] = [
        p.model_dump() for p in repo.get_posts_by_slugs(session, list(result.related_article_slugs))
    ]
    return {
        "top_pick": _card(result.top_pick, tools),
        "alternatives": [_card(a, tools) for a in result.alternatives],
        "related_posts": posts,
    }
