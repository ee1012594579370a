# =============================================
# File: toolstack/db/seed.py
# Purpose: Insert starter categories, tools and posts from a seed YAML (idempotent by slug).
# =============================================
from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from sqlmodel import Session, select

from toolstack.db.models import Category, Post, PostTool, Tool
from toolstack.services.scoring_config import ScoringConfig, load_scoring_config

DEFAULT_SEED_PATH = Path(__file__).resolve().parents[1] / "data" / "seed.yaml"


def load_seed_data(path: str | os.PathLike | None = None) -> Dict[str, Any]:
    with open(path or DEFAULT_SEED_PATH, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def seed(session: Session, data: Dict[str, Any], config: ScoringConfig | None = None) -> Dict[str, int]:
    """
    Insert seed rows that are not present yet (matched by slug). Tool category,
    traits and cost default to the scoring mirror entry with the same slug.
    Returns inserted counts.
    """
    mirror = {i.slug: i for i in (config or load_scoring_config()).catalog}
    counts = {"categories": 0, "tools": 0, "posts": 0}

    for row in data.get("categories", []):
        if session.exec(select(Category).where(Category.slug == row["slug"])).first():
            continue
        session.add(Category(**row))
        counts["categories"] += 1

    for row in data.get("tools", []):
        if session.exec(select(Tool).where(Tool.slug == row["slug"])).first():
            continue
        fields = dict(row)
        item = mirror.get(row["slug"])
        if item is not None:
            fields.setdefault("category_slug", item.category)
            fields.setdefault("traits", sorted(item.traits))
            fields.setdefault("monthly_cost", item.monthly_cost)
        session.add(Tool(**fields))
        counts["tools"] += 1
    session.commit()

    tools_by_slug = {t.slug: t for t in session.exec(select(Tool))}
    for row in data.get("posts", []):
        if session.exec(select(Post).where(Post.slug == row["slug"])).first():
            continue
        post = Post(**{k: v for k, v in row.items() if k != "tools"})
        session.add(post)
        session.commit()
        session.refresh(post)
        for order, slug in enumerate(row.get("tools", [])):
            tool = tools_by_slug.get(slug)
            if tool is not None:
                session.add(PostTool(post_id=post.id, tool_id=tool.id, sort_order=order))
        counts["posts"] += 1
    session.commit()
    return counts
