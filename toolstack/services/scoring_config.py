# =============================================
# File: toolstack/services/scoring_config.py
# Purpose: Injectable scoring configuration for the quiz recommender (weights, trait boosts, catalog mirror)
# =============================================
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type

import yaml

from toolstack.services.quiz_models import CatalogItem
from toolstack.services.quiz_steps import (
    BudgetBracket,
    Goal,
    Role,
    TechnicalLevel,
    WorkflowPreference,
)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "data" / "scoring.yaml"


class ScoringConfigError(ValueError):
    """Raised when a scoring configuration is malformed or out of sync with the quiz steps."""


@dataclass(frozen=True)
class ReasonFragments:
    role: Mapping[Role, str] = field(default_factory=dict)
    workflow: Mapping[WorkflowPreference, str] = field(default_factory=dict)
    free_budget: str = ""
    category: Mapping[str, str] = field(default_factory=dict)
    default: str = "A solid tool for your stack."


@dataclass(frozen=True)
class ScoringConfig:
    role_weights: Mapping[Role, Mapping[str, float]]
    goal_weights: Mapping[Goal, Mapping[str, float]]
    technical_traits: Mapping[TechnicalLevel, Tuple[str, ...]]
    workflow_traits: Mapping[WorkflowPreference, Tuple[str, ...]]
    catalog: Tuple[CatalogItem, ...]
    # None means no ceiling
    budget_ceilings: Mapping[BudgetBracket, Optional[float]]
    reasons: ReasonFragments = field(default_factory=ReasonFragments)
    goal_articles: Mapping[Goal, Tuple[str, ...]] = field(default_factory=dict)
    role_articles: Mapping[Role, Tuple[str, ...]] = field(default_factory=dict)
    technical_trait_bonus: float = 1.5
    workflow_trait_bonus: float = 2.0
    over_budget_penalty: float = 5.0
    free_tier_bonus: float = 1.0

    def __post_init__(self) -> None:
        if not self.catalog:
            raise ScoringConfigError("catalog must contain at least one item")
        slugs = [i.slug for i in self.catalog]
        if len(set(slugs)) != len(slugs):
            raise ScoringConfigError("catalog slugs must be unique")
        if self.technical_trait_bonus >= self.workflow_trait_bonus:
            raise ScoringConfigError("technical trait bonus must be smaller than the workflow trait bonus")
        if self.over_budget_penalty <= 0:
            raise ScoringConfigError("over-budget penalty must be positive")

    def with_catalog(self, items: Iterable[CatalogItem]) -> "ScoringConfig":
        """Same weights, different catalog snapshot."""
        return replace(self, catalog=tuple(items))

    @property
    def categories(self) -> List[str]:
        seen: List[str] = []
        for item in self.catalog:
            if item.category not in seen:
                seen.append(item.category)
        return seen


# ---------- YAML loading ----------

def _number(value: Any, table: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ScoringConfigError(f"{table}: expected a number, got {value!r}") from None


def _enum_key(enum_cls: Type[Enum], key: Any, table: str) -> Enum:
    try:
        return enum_cls(str(key))
    except ValueError:
        raise ScoringConfigError(f"{table}: unknown option value {key!r}") from None


def _weights(raw: Mapping[Any, Any] | None, enum_cls: Type[Enum], table: str) -> Dict[Enum, Dict[str, float]]:
    out: Dict[Enum, Dict[str, float]] = {}
    for key, cats in (raw or {}).items():
        out[_enum_key(enum_cls, key, table)] = {str(c): _number(w, f"{table}.{key}") for c, w in (cats or {}).items()}
    return out


def _lists(raw: Mapping[Any, Any] | None, enum_cls: Type[Enum], table: str) -> Dict[Enum, Tuple[str, ...]]:
    return {
        _enum_key(enum_cls, key, table): tuple(str(v) for v in (values or []))
        for key, values in (raw or {}).items()
    }


def _texts(raw: Mapping[Any, Any] | None, enum_cls: Type[Enum], table: str) -> Dict[Enum, str]:
    return {_enum_key(enum_cls, key, table): str(text) for key, text in (raw or {}).items()}


def catalog_from_data(rows: Iterable[Mapping[str, Any]]) -> Tuple[CatalogItem, ...]:
    items: List[CatalogItem] = []
    for row in rows or []:
        try:
            slug = str(row["slug"])
            category = str(row["category"])
        except KeyError as e:
            raise ScoringConfigError(f"catalog entry missing field {e}") from None
        items.append(
            CatalogItem(
                slug=slug,
                category=category,
                traits=frozenset(str(t) for t in (row.get("traits") or [])),
                monthly_cost=_number(row.get("monthly_cost") or 0, f"catalog.{slug}.monthly_cost"),
            )
        )
    return tuple(items)


def catalog_to_data(items: Iterable[CatalogItem]) -> List[Dict[str, Any]]:
    """Serialisable rows for the mirror file (traits sorted for stable diffs)."""
    rows: List[Dict[str, Any]] = []
    for item in items:
        cost = item.monthly_cost
        rows.append({
            "slug": item.slug,
            "category": item.category,
            "monthly_cost": int(cost) if float(cost).is_integer() else cost,
            "traits": sorted(item.traits),
        })
    return rows


def config_from_data(data: Mapping[str, Any]) -> ScoringConfig:
    if not isinstance(data, Mapping):
        raise ScoringConfigError("scoring config must be a mapping")

    bonuses = data.get("bonuses") or {}
    reasons = data.get("reasons") or {}

    ceilings: Dict[BudgetBracket, Optional[float]] = {}
    for key, value in (data.get("budget_ceilings") or {}).items():
        bracket = _enum_key(BudgetBracket, key, "budget_ceilings")
        ceilings[bracket] = None if value is None else _number(value, f"budget_ceilings.{key}")

    fragments = ReasonFragments(
        role=_texts(reasons.get("role"), Role, "reasons.role"),
        workflow=_texts(reasons.get("workflow"), WorkflowPreference, "reasons.workflow"),
        free_budget=str(reasons.get("free_budget") or ""),
        category={str(k): str(v) for k, v in (reasons.get("category") or {}).items()},
        default=str(reasons.get("default") or ReasonFragments.default),
    )

    return ScoringConfig(
        role_weights=_weights(data.get("role_weights"), Role, "role_weights"),
        goal_weights=_weights(data.get("goal_weights"), Goal, "goal_weights"),
        technical_traits=_lists(data.get("technical_traits"), TechnicalLevel, "technical_traits"),
        workflow_traits=_lists(data.get("workflow_traits"), WorkflowPreference, "workflow_traits"),
        catalog=catalog_from_data(data.get("catalog") or []),
        budget_ceilings=ceilings,
        reasons=fragments,
        goal_articles=_lists(data.get("goal_articles"), Goal, "goal_articles"),
        role_articles=_lists(data.get("role_articles"), Role, "role_articles"),
        technical_trait_bonus=_number(bonuses.get("technical_trait", 1.5), "bonuses.technical_trait"),
        workflow_trait_bonus=_number(bonuses.get("workflow_trait", 2.0), "bonuses.workflow_trait"),
        over_budget_penalty=_number(bonuses.get("over_budget_penalty", 5.0), "bonuses.over_budget_penalty"),
        free_tier_bonus=_number(bonuses.get("free_tier", 1.0), "bonuses.free_tier"),
    )


def resolve_config_path(path: str | os.PathLike | None = None) -> Path:
    if path:
        return Path(path)
    env = os.getenv("SCORING_CONFIG_PATH")
    return Path(env) if env else DEFAULT_CONFIG_PATH


def read_config_data(path: str | os.PathLike | None = None) -> Dict[str, Any]:
    p = resolve_config_path(path)
    with open(p, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ScoringConfigError(f"{p}: expected a mapping at top level")
    return data


def load_scoring_config(path: str | os.PathLike | None = None) -> ScoringConfig:
    """Load the scoring configuration from YAML (SCORING_CONFIG_PATH or the packaged default)."""
    return config_from_data(read_config_data(path))
