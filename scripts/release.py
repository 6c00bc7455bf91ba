#!/usr/bin/env python3
"""
Deploy-time step run by scripts/start.py before gunicorn comes up:
bring the schema to Alembic head, then create the bootstrap admin if missing.

Usage:
    python scripts/release.py

DATABASE_URL must be set explicitly; production refuses a SQLite URL.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

PRODUCTION_ENVS = ("prod", "production")


class ReleaseError(RuntimeError):
    pass


def release_database_url(env: Mapping[str, str] = os.environ) -> str:
    url = (env.get("DATABASE_URL") or "").strip()
    if not url:
        raise ReleaseError("DATABASE_URL is not set; releases never fall back to the local SQLite file")
    stage = (env.get("ENV") or "").strip().lower()
    if stage in PRODUCTION_ENVS and url.startswith("sqlite"):
        raise ReleaseError("ENV=production needs a PostgreSQL DATABASE_URL, got sqlite")
    return url


def alembic_config(db_url: str):
    from alembic.config import Config

    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def run_release(env: Mapping[str, str] = os.environ) -> None:
    from alembic import command

    from scripts import init_db

    db_url = release_database_url(env)
    print(f"[release] migrating to head (ENV={env.get('ENV') or 'unset'})", flush=True)
    command.upgrade(alembic_config(db_url), "head")
    print("[release] ensuring bootstrap admin", flush=True)
    init_db.seed_only(database_url=db_url)
    print("[release] done", flush=True)


if __name__ == "__main__":
    try:
        run_release()
    except ReleaseError as e:
        print(f"[release] {e}", flush=True)
        sys.exit(1)
