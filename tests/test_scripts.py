import pytest
from sqlalchemy import create_engine
from werkzeug.security import check_password_hash

from app.neic.models import Base, User
from scripts import init_db
from scripts._db_utils import resolve_database_url, script_session
from scripts.release import ReleaseError, release_database_url
from scripts.start import gunicorn_argv, resolve_port, should_release


def _database(tmp_path) -> str:
    url = f"sqlite:///{tmp_path/'seed.db'}"
    engine = create_engine(url)
    Base.metadata.create_all(bind=engine)
    engine.dispose()
    return url


def test_resolve_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    assert resolve_database_url() == "sqlite:///neic.db"
    monkeypatch.setenv("DATABASE_URL", " postgresql://db/neic ")
    assert resolve_database_url() == "postgresql://db/neic"
    assert resolve_database_url("sqlite:///other.db") == "sqlite:///other.db"


def test_seed_creates_admin_once(tmp_path, monkeypatch):
    url = _database(tmp_path)
    monkeypatch.setenv("ADMIN_EMAIL", "Chief@Example.com")
    monkeypatch.setenv("ADMIN_PASSWORD", "first-password")
    init_db.seed_only(database_url=url)

    monkeypatch.setenv("ADMIN_PASSWORD", "second-password")
    init_db.seed_only(database_url=url)

    with script_session(url) as s:
        admin = s.query(User).one()
        assert admin.email == "chief@example.com"
        assert admin.role == "ADMIN"
        assert check_password_hash(admin.password_hash, "first-password")


def test_seed_demo_users(tmp_path, monkeypatch):
    url = _database(tmp_path)
    monkeypatch.delenv("ADMIN_EMAIL", raising=False)
    monkeypatch.setenv("DEMO_PASSWORD", "demo-password")
    init_db.seed_only(database_url=url, demo_users=True)

    with script_session(url) as s:
        roles = {u.email: u.role for u in s.query(User).all()}
    assert roles["management@neic.gov.bd"] == "MANAGEMENT"
    assert roles["support@neic.gov.bd"] == "SUPPORT"
    assert roles["viewer@neic.gov.bd"] == "VIEWER"
    assert len(roles) == 4


def test_start_port_and_gunicorn_args():
    assert resolve_port(None) == 8080
    assert resolve_port(" 5000 ") == 5000
    with pytest.raises(ValueError):
        resolve_port("70000")
    with pytest.raises(ValueError):
        resolve_port("http")

    argv = gunicorn_argv(5000, {"WEB_CONCURRENCY": "4"})
    assert argv[:2] == ["gunicorn", "app.wsgi:app"]
    assert argv[argv.index("--bind") + 1] == "0.0.0.0:5000"
    assert argv[argv.index("--workers") + 1] == "4"
    assert argv[argv.index("--timeout") + 1] == "60"

    assert should_release({}) is True
    assert should_release({"SKIP_RELEASE": "yes"}) is False


def test_release_requires_explicit_database_url():
    with pytest.raises(ReleaseError, match="DATABASE_URL"):
        release_database_url({})
    with pytest.raises(ReleaseError, match="sqlite"):
        release_database_url({"ENV": "Production", "DATABASE_URL": "sqlite:///neic.db"})

    assert release_database_url({"ENV": "dev", "DATABASE_URL": "sqlite:///neic.db"}) == "sqlite:///neic.db"
    assert release_database_url({"ENV": "prod", "DATABASE_URL": " postgresql://db/neic "}) == "postgresql://db/neic"
