# =============================================
# File: toolstack/cli/refresh_mirror.py
# Purpose: CLI entrypoint to regenerate the recommender's catalog mirror from the catalog store.
# Usage:
#   python -m toolstack.cli.refresh_mirror --db-url sqlite:///./toolstack.db --out scoring.generated.yaml
#   SCORING_CONFIG_PATH=scoring.generated.yaml uvicorn toolstack.main:create_app --factory
# =============================================
from __future__ import annotations
import argparse
import sys

import yaml
from dotenv import load_dotenv
from sqlmodel import Session

from toolstack.db.repo import create_db_engine, db_url_from_env, load_catalog_snapshot
from toolstack.services.scoring_config import (
    ScoringConfigError,
    catalog_to_data,
    config_from_data,
    read_config_data,
)


def refresh_mirror(db_url: str, config_path: str | None, out_path: str) -> int:
    """
    Write a copy of the scoring YAML whose catalog section lists the store's published
    tools. Returns the item count. The output is plain safe_dump text (no comments),
    so it goes to out_path rather than over the hand-edited source file.
    """
    data = read_config_data(config_path)
    engine = create_db_engine(db_url)
    try:
        with Session(engine) as session:
            items = load_catalog_snapshot(session)
    finally:
        engine.dispose()

    data["catalog"] = catalog_to_data(items)
    # refuse to write a file the app could not load
    config_from_data(data)

    with open(out_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
    return len(items)


def main(argv=None):
    load_dotenv()
    ap = argparse.ArgumentParser(description="Regenerate the recommender catalog mirror from the catalog store.")
    ap.add_argument("--db-url", default=None, help="Store URL (default: DB_URL or sqlite:///./toolstack.db)")
    ap.add_argument("--config", default=None, help="Scoring YAML to start from (default: SCORING_CONFIG_PATH or packaged file)")
    ap.add_argument("--out", required=True, help="Where to write the regenerated YAML")
    args = ap.parse_args(argv)

    try:
        n = refresh_mirror(args.db_url or db_url_from_env(), args.config, args.out)
    except ScoringConfigError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)

    print(f"[OK] Mirrored {n} published tools into {args.out}")


if __name__ == "__main__":
    main()
