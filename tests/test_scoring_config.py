# =============================================
# File: tests/test_scoring_config.py
# Purpose: YAML loading and validation of the scoring configuration
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest
import yaml

from toolstack.services.quiz_models import CatalogItem
from toolstack.services.quiz_steps import BudgetBracket, Role, TechnicalLevel
from toolstack.services.scoring_config import (
    ScoringConfigError,
    catalog_from_data,
    catalog_to_data,
    config_from_data,
    load_scoring_config,
    read_config_data,
)

def test_packaged_config_loads():
    cfg = load_scoring_config()
    assert len(cfg.catalog) == 18
    assert cfg.catalog[0].slug == "notion"
    assert cfg.budget_ceilings[BudgetBracket.FREE] == 0
    assert cfg.budget_ceilings[BudgetBracket.NO_LIMIT] is None
    assert cfg.role_weights[Role.DESIGNER]["design-ux"] == 4
    assert "beginner-friendly" in cfg.technical_traits[TechnicalLevel.BEGINNER]
    assert cfg.technical_trait_bonus < cfg.workflow_trait_bonus
    assert set(cfg.categories) == {
        "business-productivity", "design-ux", "no-code", "ai-automation", "marketing", "developer",
    }

def test_every_option_has_weights_and_reasons():
    cfg = load_scoring_config()
    assert set(cfg.role_weights) == set(Role)
    assert set(cfg.reasons.role) == set(Role)
    assert set(cfg.budget_ceilings) == set(BudgetBracket)
    for category in cfg.categories:
        assert cfg.reasons.category[category]

def test_env_path_override(tmp_path, monkeypatch):
    data = read_config_data()
    data["catalog"] = [{"slug": "solo", "category": "developer", "traits": ["technical"], "monthly_cost": 9}]
    path = tmp_path / "scoring.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    monkeypatch.setenv("SCORING_CONFIG_PATH", str(path))

    cfg = load_scoring_config()
    assert cfg.catalog == (CatalogItem("solo", "developer", frozenset({"technical"}), 9.0),)

def test_unknown_option_key_is_rejected():
    data = read_config_data()
    data["role_weights"]["astronaut"] = {"developer": 1}
    with pytest.raises(ScoringConfigError, match="role_weights"):
        config_from_data(data)

def test_empty_catalog_is_rejected():
    data = read_config_data()
    data["catalog"] = []
    with pytest.raises(ScoringConfigError):
        config_from_data(data)

def test_duplicate_slugs_rejected():
    cfg = load_scoring_config()
    with pytest.raises(ScoringConfigError):
        cfg.with_catalog([CatalogItem("a", "x"), CatalogItem("a", "y")])

def test_trait_bonus_ordering_enforced():
    data = read_config_data()
    data["bonuses"]["technical_trait"] = 3.0
    with pytest.raises(ScoringConfigError):
        config_from_data(data)

def test_catalog_entry_requires_slug_and_category():
    with pytest.raises(ScoringConfigError):
        catalog_from_data([{"slug": "x"}])

def test_catalog_data_round_trip_keeps_order():
    items = load_scoring_config().catalog
    assert catalog_from_data(catalog_to_data(items)) == items

def test_with_catalog_keeps_weights():
    cfg = load_scoring_config()
    other = cfg.with_catalog([CatalogItem("z", "marketing")])
    assert other.role_weights == cfg.role_weights
    assert [i.slug for i in other.catalog] == ["z"]

@pytest.mark.parametrize("patch, table", [
    (lambda d: d["role_weights"]["designer"].update({"design-ux": "heavy"}), "role_weights.designer"),
    (lambda d: d["budget_ceilings"].update({"under-20": "twenty"}), "budget_ceilings.under-20"),
    (lambda d: d["bonuses"].update({"free_tier": [1]}), "bonuses.free_tier"),
    (lambda d: d["catalog"][0].update({"monthly_cost": "cheap"}), "catalog.notion.monthly_cost"),
])
def test_non_numeric_values_name_their_table(patch, table):
    data = read_config_data()
    patch(data)
    with pytest.raises(ScoringConfigError, match=table):
        config_from_data(data)
