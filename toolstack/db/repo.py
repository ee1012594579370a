# =============================================
# File: toolstack/db/repo.py
# Purpose: DB repository: build engines from DB_URL (default SQLite), create tables, and the catalog/article/quiz query functions.
# =============================================
from __future__ import annotations

import os
from typing import Dict, Iterator, List, Optional, Sequence

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

from toolstack.db.models import Category, Post, PostTool, QuizResponse, Tool
from toolstack.services.quiz_models import CatalogItem

DEFAULT_DB_URL = "sqlite:///./toolstack.db"


def db_url_from_env() -> str:
    return os.getenv("DB_URL", DEFAULT_DB_URL)


def create_db_engine(url: str | None = None, echo: bool = False) -> Engine:
    """
    Build an engine for `url` (DB_URL env when omitted).
    In-memory SQLite gets a single shared connection so every session sees the same data.
    """
    url = url or db_url_from_env()
    if url.startswith("sqlite"):
        kwargs: Dict[str, object] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Iterator[Session]:
    """FastAPI dependency: one session per request on the app-owned engine."""
    with Session(request.app.state.db_engine) as session:
        yield session


# ---------- Categories ----------

def get_categories(session: Session) -> List[Category]:
    return list(session.exec(select(Category).order_by(Category.sort_order)))


def get_category_by_slug(session: Session, slug: str) -> Optional[Category]:
    return session.exec(select(Category).where(Category.slug == slug)).first()


# ---------- Tools ----------

def get_tools(session: Session) -> List[Tool]:
    stmt = (
        select(Tool)
        .where(Tool.published == True)  # noqa: E712
        .order_by(Tool.featured.desc(), Tool.created_at.desc())
    )
    return list(session.exec(stmt))


def get_tools_by_category(session: Session, category_slug: str) -> List[Tool]:
    stmt = (
        select(Tool)
        .where(Tool.published == True, Tool.category_slug == category_slug)  # noqa: E712
        .order_by(Tool.featured.desc(), Tool.rating.desc())
    )
    return list(session.exec(stmt))


def get_tool_by_slug(session: Session, slug: str) -> Optional[Tool]:
    # unpublished tools are still reachable by slug (preview links)
    return session.exec(select(Tool).where(Tool.slug == slug)).first()


def get_featured_tools(session: Session, limit: int = 6) -> List[Tool]:
    stmt = (
        select(Tool)
        .where(Tool.published == True, Tool.featured == True)  # noqa: E712
        .order_by(Tool.rating.desc())
        .limit(limit)
    )
    return list(session.exec(stmt))


def get_tools_by_slugs(session: Session, slugs: Sequence[str]) -> List[Tool]:
    """Published tools for `slugs`, in input order; unknown slugs are skipped."""
    if not slugs:
        return []
    rows = session.exec(
        select(Tool).where(Tool.slug.in_(list(slugs)), Tool.published == True)  # noqa: E712
    ).all()
    by_slug = {t.slug: t for t in rows}
    return [by_slug[s] for s in slugs if s in by_slug]


# ---------- Posts ----------

def get_posts(session: Session) -> List[Post]:
    stmt = select(Post).where(Post.published == True).order_by(Post.created_at.desc())  # noqa: E712
    return list(session.exec(stmt))


def get_posts_by_type(session: Session, post_type: str) -> List[Post]:
    stmt = (
        select(Post)
        .where(Post.published == True, Post.post_type == post_type)  # noqa: E712
        .order_by(Post.created_at.desc())
    )
    return list(session.exec(stmt))


def get_post_by_slug(session: Session, slug: str) -> Optional[Post]:
    return session.exec(select(Post).where(Post.slug == slug)).first()


def get_post_tools(session: Session, post_id: int) -> List[Tool]:
    """Tools linked to a post, in link sort order."""
    links = session.exec(
        select(PostTool).where(PostTool.post_id == post_id).order_by(PostTool.sort_order)
    ).all()
    if not links:
        return []
    tool_ids = [link.tool_id for link in links]
    tools = session.exec(select(Tool).where(Tool.id.in_(tool_ids))).all()
    by_id = {t.id: t for t in tools}
    return [by_id[i] for i in tool_ids if i in by_id]


def get_featured_posts(session: Session, limit: int = 3) -> List[Post]:
    stmt = (
        select(Post)
        .where(Post.published == True)  # noqa: E712
        .order_by(Post.created_at.desc())
        .limit(limit)
    )
    return list(session.exec(stmt))


def get_posts_by_slugs(session: Session, slugs: Sequence[str]) -> List[Post]:
    if not slugs:
        return []
    rows = session.exec(
        select(Post).where(Post.slug.in_(list(slugs)), Post.published == True)  # noqa: E712
    ).all()
    by_slug = {p.slug: p for p in rows}
    return [by_slug[s] for s in slugs if s in by_slug]


# ---------- Quiz ----------

def save_quiz_response(
    session: Session,
    role: str,
    goals: List[str],
    technical: str,
    budget: str,
    workflow: str,
    top_pick_slug: str,
    top_pick_score: float = 0.0,
) -> int:
    """Insert one anonymous quiz response and return its id. Errors propagate to the caller."""
    row = QuizResponse(
        role=role,
        goals=list(goals),
        technical=technical,
        budget=budget,
        workflow=workflow,
        top_pick_slug=top_pick_slug,
        top_pick_score=top_pick_score,
    )
    session.add(row)
    session.commit()
    session.refresh(row)
    return row.id or 0


def load_catalog_snapshot(session: Session) -> List[CatalogItem]:
    """Published tools as recommender catalog items (ordered by id so ties stay stable)."""
    stmt = select(Tool).where(Tool.published == True).order_by(Tool.id)  # noqa: E712
    return [
        CatalogItem(
            slug=t.slug,
            category=t.category_slug,
            traits=frozenset(t.traits or []),
            monthly_cost=float(t.monthly_cost or 0),
        )
        for t in session.exec(stmt)
    ]
