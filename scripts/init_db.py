"""
Seed the first administrator (and optional demo staff accounts).

Idempotent: existing users are left alone and their passwords are never overwritten.

Usage:
  python scripts/init_db.py [--demo-users]
"""
import argparse
import os
import sys
from pathlib import Path

from werkzeug.security import generate_password_hash

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.neic.constants import Role  # noqa: E402
from app.neic.models import User  # noqa: E402
from scripts._db_utils import resolve_database_url, script_session  # noqa: E402

DEMO_USERS = (
    ("management@neic.gov.bd", "Management Demo", Role.MANAGEMENT),
    ("support@neic.gov.bd", "Support Demo", Role.SUPPORT),
    ("viewer@neic.gov.bd", "Viewer Demo", Role.VIEWER),
)


def _ensure_user(s, email: str, name: str, role: Role, password: str) -> bool:
    if s.query(User).filter(User.email == email).one_or_none():
        return False
    s.add(
        User(
            email=email,
            name=name,
            password_hash=generate_password_hash(password),
            role=role.value,
            is_active=True,
            created_by="system",
            updated_by="system",
        )
    )
    return True


def seed_only(*, database_url: str | None = None, demo_users: bool = False) -> None:
    """
    Seed the admin user (and demo users when asked).
    Does NOT overwrite an existing user's password.
    """
    admin_email = (os.environ.get("ADMIN_EMAIL") or "admin@neic.gov.bd").strip().lower()
    admin_password = os.environ.get("ADMIN_PASSWORD") or "change-me"
    db_url = resolve_database_url(database_url)

    with script_session(db_url) as s:
        created = _ensure_user(s, admin_email, "Administrator", Role.ADMIN, admin_password)
        if demo_users:
            demo_password = os.environ.get("DEMO_PASSWORD") or admin_password
            for email, name, role in DEMO_USERS:
                if _ensure_user(s, email, name, role, demo_password):
                    print(f"Created demo user {email} ({role.value})")

    print("Initialized database (seed_only).")
    print(f"Admin email: {admin_email}{'' if created else ' (already existed)'}")
    print("Admin password: (from ADMIN_PASSWORD)")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed NEIC staff accounts.")
    parser.add_argument("--demo-users", action="store_true", help="also create one account per staff role")
    args = parser.parse_args()
    seed_only(database_url=None, demo_users=args.demo_users)


if __name__ == "__main__":
    main()
