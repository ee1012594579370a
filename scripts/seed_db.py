# scripts/seed_db.py
# Seed a database with starter categories, tools and posts.
# Usage:
#   python scripts/seed_db.py --db-url sqlite:///./toolstack.db
from __future__ import annotations
import argparse

from dotenv import load_dotenv
from loguru import logger
from sqlmodel import Session

from toolstack.db.repo import create_db_engine, db_url_from_env, init_db
from toolstack.db.seed import DEFAULT_SEED_PATH, load_seed_data, seed


def main(argv=None):
    load_dotenv()
    ap = argparse.ArgumentParser(description="Seed the ToolStack database.")
    ap.add_argument("--db-url", default=None, help="Store URL (default: DB_URL or sqlite:///./toolstack.db)")
    ap.add_argument("--seed", default=str(DEFAULT_SEED_PATH), help="Seed YAML file")
    args = ap.parse_args(argv)

    engine = create_db_engine(args.db_url or db_url_from_env())
    init_db(engine)
    with Session(engine) as session:
        counts = seed(session, load_seed_data(args.seed))
    engine.dispose()
    logger.info(f"[seed] inserted {counts}")


if __name__ == "__main__":
    main()
