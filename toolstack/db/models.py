# =============================================
# File: toolstack/db/models.py
# Purpose: SQLModel ORM definitions for the directory (categories, tools, posts) and anonymous quiz responses.
# =============================================

from sqlalchemy import Column, JSON
from sqlmodel import SQLModel, Field
from typing import List, Optional
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Category(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)
    description: str = ""
    icon: str = ""
    sort_order: int = 0


class Tool(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)
    tagline: str = ""
    description: str = ""
    what_it_is: str = ""
    who_its_for: str = ""
    pros: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    cons: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    use_cases: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    pricing_summary: str = ""
    affiliate_url: str = ""
    website_url: str = ""
    image_url: str = ""
    logo_url: str = ""
    category_slug: str = Field(default="", index=True)
    rating: Optional[float] = None
    featured: bool = False
    published: bool = True
    # scoring inputs mirrored into the recommender catalog
    traits: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    monthly_cost: float = 0.0
    created_at: datetime = Field(default_factory=_utcnow)


class Post(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(index=True, unique=True)
    title: str
    summary: Optional[str] = None
    body: str = ""
    featured_image: Optional[str] = None
    post_type: str = "article"  # article | review | comparison
    category_slug: Optional[str] = None
    published: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None


class PostTool(SQLModel, table=True):
    post_id: int = Field(foreign_key="post.id", primary_key=True)
    tool_id: int = Field(foreign_key="tool.id", primary_key=True)
    sort_order: Optional[int] = None


class QuizResponse(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    role: str
    goals: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    technical: str
    budget: str
    workflow: str
    top_pick_slug: str
    top_pick_score: float = 0.0
    created_at: datetime = Field(default_factory=_utcnow)


POST_TYPES = ("article", "review", "comparison")
