# =============================================
# File: toolstack/services/recommender.py
# Purpose: Quiz recommendation engine: multi-signal scoring, diversified alternatives, reasons and related articles
# =============================================
from __future__ import annotations

from typing import List, Optional, Tuple

from toolstack.services.quiz_models import CatalogItem, QuizAnswers, QuizResult, Recommendation
from toolstack.services.quiz_steps import BudgetBracket
from toolstack.services.scoring_config import ScoringConfig

MAX_ALTERNATIVES = 3
MIN_DIVERSE_ALTERNATIVES = 2
MAX_REASON_FRAGMENTS = 2
MAX_RELATED_ARTICLES = 3

Ranked = List[Tuple[CatalogItem, float]]


class QuizRecommender:
    """
    Deterministic recommender over an injected ScoringConfig.

    recommend() is pure: no I/O and no shared mutable state, so one instance can
    serve concurrent requests. It never raises for any QuizAnswers value; an
    unanswered step simply contributes nothing.
    """

    def __init__(self, config: ScoringConfig) -> None:
        self.config = config

    # ---------- Scoring ----------

    def budget_ceiling(self, budget: Optional[BudgetBracket]) -> Optional[float]:
        if budget is None:
            return None
        return self.config.budget_ceilings.get(budget)

    def score_item(self, item: CatalogItem, answers: QuizAnswers) -> float:
        cfg = self.config
        score = 0.0

        if answers.role is not None:
            score += cfg.role_weights.get(answers.role, {}).get(item.category, 0.0)

        for goal in answers.goals:
            score += cfg.goal_weights.get(goal, {}).get(item.category, 0.0)

        if answers.technical is not None:
            for trait in cfg.technical_traits.get(answers.technical, ()):
                if trait in item.traits:
                    score += cfg.technical_trait_bonus

        if answers.workflow is not None:
            for trait in cfg.workflow_traits.get(answers.workflow, ()):
                if trait in item.traits:
                    score += cfg.workflow_trait_bonus

        ceiling = self.budget_ceiling(answers.budget)
        if ceiling is not None and item.monthly_cost > ceiling:
            score -= cfg.over_budget_penalty
        elif answers.budget == BudgetBracket.FREE and item.is_free:
            score += cfg.free_tier_bonus

        return score

    def score_items(self, answers: QuizAnswers) -> Ranked:
        """All catalog items with their scores, best first; ties keep catalog order."""
        scored = [(item, self.score_item(item, answers)) for item in self.config.catalog]
        return sorted(scored, key=lambda pair: pair[1], reverse=True)

    # ---------- Reasons ----------

    def build_reason(self, item: CatalogItem, answers: QuizAnswers) -> str:
        reasons = self.config.reasons
        fragments: List[str] = []

        if answers.role is not None and reasons.role.get(answers.role):
            fragments.append(reasons.role[answers.role])
        if answers.workflow is not None and reasons.workflow.get(answers.workflow):
            fragments.append(reasons.workflow[answers.workflow])
        if answers.budget == BudgetBracket.FREE and item.is_free and reasons.free_budget:
            fragments.append(reasons.free_budget)

        if not fragments:
            fragments.append(reasons.category.get(item.category) or reasons.default)

        return " ".join(fragments[:MAX_REASON_FRAGMENTS])

    def _recommendation(self, item: CatalogItem, score: float, answers: QuizAnswers) -> Recommendation:
        return Recommendation(slug=item.slug, score=score, reason=self.build_reason(item, answers))

    # ---------- Selection ----------

    @staticmethod
    def select_alternatives(ranked: Ranked) -> Ranked:
        """
        Pick up to MAX_ALTERNATIVES from ranked[1:], preferring MIN_DIVERSE_ALTERNATIVES
        outside the top pick's category, then filling by score.
        """
        if not ranked:
            return []
        top_category = ranked[0][0].category
        rest = ranked[1:]

        picked: Ranked = []
        for item, score in rest:
            if len(picked) >= MAX_ALTERNATIVES:
                break
            if len(picked) < MIN_DIVERSE_ALTERNATIVES and item.category == top_category:
                continue
            picked.append((item, score))

        if len(picked) < MIN_DIVERSE_ALTERNATIVES:
            chosen = {item.slug for item, _ in picked}
            for item, score in rest:
                if len(picked) >= MAX_ALTERNATIVES:
                    break
                if item.slug in chosen:
                    continue
                picked.append((item, score))
                chosen.add(item.slug)

        return picked

    def related_articles(self, answers: QuizAnswers) -> Tuple[str, ...]:
        out: List[str] = []
        candidates: List[str] = []
        for goal in answers.goals:
            candidates.extend(self.config.goal_articles.get(goal, ()))
        if answers.role is not None:
            candidates.extend(self.config.role_articles.get(answers.role, ()))
        for slug in candidates:
            if slug not in out:
                out.append(slug)
        return tuple(out[:MAX_RELATED_ARTICLES])

    # ---------- Entry point ----------

    def recommend(self, answers: QuizAnswers) -> QuizResult:
        ranked = self.score_items(answers)
        top_item, top_score = ranked[0]
        alternatives = self.select_alternatives(ranked)
        return QuizResult(
            top_pick=self._recommendation(top_item, top_score, answers),
            alternatives=tuple(self._recommendation(i, s, answers) for i, s in alternatives),
            related_article_slugs=self.related_articles(answers),
        )
