# =============================================
# File: tests/test_refresh_mirror.py
# Purpose: Regenerating the catalog mirror from the store
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest
import yaml
from sqlmodel import Session

from toolstack.cli.refresh_mirror import main, refresh_mirror
from toolstack.db.models import Tool
from toolstack.db.repo import create_db_engine, init_db
from toolstack.db.seed import load_seed_data, seed
from toolstack.services.scoring_config import load_scoring_config, read_config_data

def _db(tmp_path, seeded=True):
    url = f"sqlite:///{tmp_path / 'store.db'}"
    engine = create_db_engine(url)
    init_db(engine)
    if seeded:
        with Session(engine) as s:
            seed(s, load_seed_data())
            s.add(Tool(name="Cal", slug="cal", category_slug="business-productivity",
                       traits=["simple", "free-tier"], monthly_cost=12))
            s.commit()
    engine.dispose()
    return url

def test_refresh_writes_loadable_mirror(tmp_path):
    url = _db(tmp_path)
    out = tmp_path / "scoring.yaml"

    n = refresh_mirror(url, None, str(out))
    assert n == 19

    cfg = load_scoring_config(out)
    assert [i.slug for i in cfg.catalog][-1] == "cal"
    cal = cfg.catalog[-1]
    assert cal.monthly_cost == 12 and cal.traits == frozenset({"simple", "free-tier"})
    # weights carried over untouched
    assert cfg.role_weights == load_scoring_config().role_weights

def test_refresh_keeps_store_values_over_old_mirror(tmp_path):
    url = _db(tmp_path)
    out = tmp_path / "scoring.yaml"
    refresh_mirror(url, None, str(out))
    data = yaml.safe_load(out.read_text(encoding="utf-8"))
    webflow = next(r for r in data["catalog"] if r["slug"] == "webflow")
    assert webflow == {
        "slug": "webflow",
        "category": "no-code",
        "monthly_cost": 18,
        "traits": ["feature-rich", "marketing", "no-code", "visual", "website-builder"],
    }

def test_cli_refuses_empty_store(tmp_path, capsys):
    url = _db(tmp_path, seeded=False)
    out = tmp_path / "scoring.yaml"
    with pytest.raises(SystemExit) as exc:
        main(["--db-url", url, "--out", str(out)])
    assert exc.value.code == 1
    assert "[ERROR]" in capsys.readouterr().err
    assert not out.exists()

def test_cli_reports_count(tmp_path, capsys):
    url = _db(tmp_path)
    out = tmp_path / "scoring.yaml"
    main(["--db-url", url, "--out", str(out)])
    assert "[OK] Mirrored 19 published tools" in capsys.readouterr().out

def test_cli_requires_out_path(tmp_path):
    url = _db(tmp_path)
    with pytest.raises(SystemExit) as exc:
        main(["--db-url", url])
    assert exc.value.code == 2

def test_cli_reports_malformed_config(tmp_path, capsys):
    url = _db(tmp_path)
    data = read_config_data()
    data["role_weights"]["developer"]["developer"] = "heavy"
    bad = tmp_path / "bad.yaml"
    bad.write_text(yaml.safe_dump(data), encoding="utf-8")
    out = tmp_path / "scoring.yaml"

    with pytest.raises(SystemExit) as exc:
        main(["--db-url", url, "--config", str(bad), "--out", str(out)])
    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "[ERROR]" in err and "role_weights.developer" in err
    assert not out.exists()
