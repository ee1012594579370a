# =============================================
# File: toolstack/routers/catalog.py
# Purpose: Public read-only directory endpoints (categories, tools, posts)
# =============================================
from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from toolstack.db import repo
from toolstack.db.models import POST_TYPES, Category, Post, Tool
from toolstack.db.repo import get_session

router = APIRouter(tags=["catalog"])


@router.get("/categories", response_model=List[Category])
def list_categories(session: Session = Depends(get_session)):
    return repo.get_categories(session)


@router.get("/categories/{slug}")
def get_category(slug: str, session: Session = Depends(get_session)) -> Dict[str, Any]:
    category = repo.get_category_by_slug(session, slug)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return {
        "category": category.model_dump(),
        "tools": [t.model_dump() for t in repo.get_tools_by_category(session, slug)],
    }


@router.get("/tools", response_model=List[Tool])
def list_tools(
    category: Optional[str] = Query(None, min_length=1, max_length=64),
    session: Session = Depends(get_session),
):
    if category:
        return repo.get_tools_by_category(session, category)
    return repo.get_tools(session)


# declared before /tools/{slug} so "featured" is not read as a slug
@router.get("/tools/featured", response_model=List[Tool])
def list_featured_tools(
    limit: int = Query(6, ge=1, le=24),
    session: Session = Depends(get_session),
):
    return repo.get_featured_tools(session, limit=limit)


@router.get("/tools/{slug}", response_model=Tool)
def get_tool(slug: str, session: Session = Depends(get_session)):
    tool = repo.get_tool_by_slug(session, slug)
    if tool is None:
        raise HTTPException(status_code=404, detail="Tool not found")
    return tool


@router.get("/posts", response_model=List[Post])
def list_posts(
    type: Optional[str] = Query(None, description="article | review | comparison"),
    session: Session = Depends(get_session),
):
    if type is None:
        return repo.get_posts(session)
    if type not in POST_TYPES:
        raise HTTPException(status_code=422, detail=f"type must be one of {', '.join(POST_TYPES)}")
    return repo.get_posts_by_type(session, type)


@router.get("/posts/featured", response_model=List[Post])
def list_featured_posts(
    limit: int = Query(3, ge=1, le=12),
    session: Session = Depends(get_session),
):
    return repo.get_featured_posts(session, limit=limit)


@router.get("/posts/{slug}")
def get_post(slug: str, session: Session = Depends(get_session)) -> Dict[str, Any]:
    post = repo.get_post_by_slug(session, slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return {
        "post": post.model_dump(),
        "tools": [t.model_dump() for t in repo.get_post_tools(session, post.id)],
    }
