#!/usr/bin/env python3
"""
Container entrypoint: release phase (migrations + seed), then gunicorn.

Usage:
    python scripts/start.py

Environment:
    PORT              listen port (default 8080)
    SKIP_RELEASE=1    start workers without migrating (extra replicas)
    WEB_CONCURRENCY   gunicorn workers (default 2)
    GUNICORN_TIMEOUT  worker timeout in seconds (default 60)
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

DEFAULT_PORT = 8080


def resolve_port(raw: str | None) -> int:
    raw = (raw or "").strip()
    if not raw:
        return DEFAULT_PORT
    port = int(raw)
    if not 1 <= port <= 65535:
        raise ValueError(f"PORT out of range: {port}")
    return port


def gunicorn_argv(port: int, env: Mapping[str, str] = os.environ) -> list[str]:
    return [
        "gunicorn",
        "app.wsgi:app",
        "--bind", f"0.0.0.0:{port}",
        "--workers", env.get("WEB_CONCURRENCY", "2"),
        "--timeout", env.get("GUNICORN_TIMEOUT", "60"),
        "--preload",
        "--access-logfile", "-",
        "--error-logfile", "-",
    ]


def should_release(env: Mapping[str, str] = os.environ) -> bool:
    return (env.get("SKIP_RELEASE") or "").strip().lower() not in ("1", "true", "yes")


def main() -> None:
    try:
        port = resolve_port(os.environ.get("PORT"))
    except ValueError as e:
        print(f"ERROR: invalid PORT ({e}). Must be an integer 1-65535.", flush=True)
        sys.exit(1)

    if should_release():
        from scripts.release import run_release

        try:
            run_release()
        except Exception as e:
            print(f"Release failed: {e}", flush=True)
            sys.exit(1)
    else:
        print("SKIP_RELEASE set; not running migrations", flush=True)

    print(f"=== Starting gunicorn on 0.0.0.0:{port} (health: /healthz) ===", flush=True)
    # gunicorn replaces this process
    os.execvp("gunicorn", gunicorn_argv(port))


if __name__ == "__main__":
    main()
